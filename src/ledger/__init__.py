"""Ledger — append-only ledger портфеля MIP65.

- LedgerEngine: мутации под ролями, valuation queries
- apply_record / replay: чистая свёртка audit log
- InMemoryAuditSink / JsonlAuditSink: append-only sinks
"""

from .config import LedgerConfig
from .engine import LedgerEngine
from .replay import apply_record, replay
from .sink import AuditSink, InMemoryAuditSink, JsonlAuditSink

__all__ = [
    "LedgerEngine",
    "LedgerConfig",
    "apply_record",
    "replay",
    "AuditSink",
    "InMemoryAuditSink",
    "JsonlAuditSink",
]
