"""Tests for the command line entry point."""

from __future__ import annotations

from main import build_parser, live_trading_warning

from factories import StubSwapClient, assignment_record, settings


def test_live_assignment_without_swap_client_is_flagged() -> None:
    warning = live_trading_warning(settings(), assignment_record(paper=False), None)

    assert warning is not None
    assert 'assignment-1' in warning
    assert 'no swap client' in warning


def test_paper_or_wired_assignments_are_not_flagged() -> None:
    assert live_trading_warning(settings(), assignment_record(paper=True), None) is None
    assert live_trading_warning(settings(force_paper_trading=True), assignment_record(paper=False), None) is None
    assert live_trading_warning(settings(), assignment_record(paper=False), StubSwapClient()) is None


def test_parser_subcommands() -> None:
    args = build_parser().parse_args(['run', '--cycles', '2', '--interval', '0.5'])

    assert (args.command, args.cycles, args.interval) == ('run', 2, 0.5)
