"""Swap client contract and confirmed-transaction parsing."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Protocol, Tuple

from ..core.models import SwapDetails, Token
from ..errors import SwapDetailsError

logger = logging.getLogger(__name__)

SOL_MINT = 'So11111111111111111111111111111111111111112'
LAMPORTS_PER_SOL = 1_000_000_000


class SwapClient(Protocol):
    """Blockchain swap capability supplied by the host application."""

    async def trade(self, from_token: Token, amount: float, to_token: Token) -> str:
        """Submit a swap and return its transaction hash."""

    async def get_transaction(self, tx_hash: str) -> Optional[Mapping[str, Any]]:
        """Return the confirmed transaction, or ``None`` when not yet visible."""


def _ui_amount(balance: Mapping[str, Any]) -> float:
    token_amount = balance.get('uiTokenAmount') or {}
    value = token_amount.get('uiAmount')
    if value is None:
        value = token_amount.get('uiAmountString', 0)
    return float(value or 0)


def _balances_by_mint(balances: Iterable[Mapping[str, Any]], owner: Optional[str]) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for balance in balances:
        if owner is not None and balance.get('owner') != owner:
            continue
        totals[balance['mint']] = totals.get(balance['mint'], 0.0) + _ui_amount(balance)
    return totals


def token_balance_changes(transaction: Mapping[str, Any], owner: Optional[str] = None) -> Dict[str, float]:
    """Net per-mint balance change recorded in a transaction's metadata.

    With ``owner`` set only that wallet's token accounts are counted, so pool
    vaults moving the opposite way do not cancel the wallet's own change.
    Native SOL comes from the fee payer's lamports when no wrapped SOL account
    of the wallet changed.
    """

    meta = transaction.get('meta') or {}
    before = _balances_by_mint(meta.get('preTokenBalances') or [], owner)
    after = _balances_by_mint(meta.get('postTokenBalances') or [], owner)

    changes: Dict[str, float] = {}
    for mint in list(before) + [mint for mint in after if mint not in before]:
        change = after.get(mint, 0.0) - before.get(mint, 0.0)
        if change != 0:
            changes[mint] = change

    pre_native = meta.get('preBalances') or []
    post_native = meta.get('postBalances') or []
    if SOL_MINT not in changes and pre_native and post_native and pre_native[0] != post_native[0]:
        changes[SOL_MINT] = (post_native[0] - pre_native[0]) / LAMPORTS_PER_SOL
    return changes


def _leg(changes: Mapping[str, float], mint: Optional[str], sign: int) -> Optional[Tuple[str, float]]:
    if mint is not None:
        amount = changes.get(mint, 0.0)
        return (mint, amount) if amount * sign > 0 else None
    return next(((key, amount) for key, amount in changes.items() if amount * sign > 0), None)


def extract_swap_details(
    transaction: Mapping[str, Any],
    *,
    owner: Optional[str] = None,
    input_mint: Optional[str] = None,
    output_mint: Optional[str] = None,
) -> SwapDetails:
    """Derive input/output amounts from token balance deltas.

    ``owner`` restricts the deltas to the trading wallet. When ``input_mint``
    or ``output_mint`` is given, that mint must have decreased or increased
    respectively. Raises :class:`SwapDetailsError` when the transaction failed
    on chain or either side of the swap cannot be found.
    """

    meta = transaction.get('meta') or {}
    if meta.get('err'):
        raise SwapDetailsError(f'Swap transaction failed on chain: {meta["err"]}')

    changes = token_balance_changes(transaction, owner)
    spent = _leg(changes, input_mint, -1)
    received = _leg(changes, output_mint, 1)
    if spent is None or received is None:
        logger.debug('Balance changes for %s: %s', owner or 'all accounts', changes)
        raise SwapDetailsError('Unable to determine swap input and output amounts')

    block_time = transaction.get('blockTime')
    return SwapDetails(
        input_amount=abs(spent[1]),
        output_amount=received[1],
        input_token=spent[0],
        output_token=received[0],
        block_time=None if block_time is None else int(block_time),
    )


def paper_swap_details(amount: float, source: Token, destination: Token) -> SwapDetails:
    """Simulated fill using the evaluation-time price snapshots."""

    source_price = float(getattr(source, 'price', 0.0) or 0.0)
    destination_price = float(getattr(destination, 'price', 0.0) or 0.0)
    if source_price > 0 and destination_price > 0:
        output_amount = amount * source_price / destination_price
    else:
        output_amount = amount
    return SwapDetails(
        input_amount=amount,
        output_amount=output_amount,
        input_token=source.address,
        output_token=destination.address,
    )


__all__ = [
    'SOL_MINT',
    'SwapClient',
    'token_balance_changes',
    'extract_swap_details',
    'paper_swap_details',
]
