"""Logging and narrative memory helpers."""

from .log_message import build_trading_context_log_message
from .logger import configure_logging, log_block
from .memory import DecisionSummaryThoughtGenerator, MemoryRecorder, ThoughtGenerator

__all__ = [
    'build_trading_context_log_message',
    'configure_logging',
    'log_block',
    'DecisionSummaryThoughtGenerator',
    'MemoryRecorder',
    'ThoughtGenerator',
]
