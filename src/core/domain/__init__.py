"""
Domain models and value objects.

Contains ledger entities: Asset, LedgerState, AuditRecord variants.
"""

from src.core.domain.asset import Asset, AssetDetails
from src.core.domain.audit import (
    AssetBuy,
    AssetInit,
    AssetReset,
    AssetSell,
    AssetUpdate,
    AuditRecord,
    AuditRecordBase,
    CapitalIn,
    CapitalOut,
    EntryKind,
    Expense,
    Income,
    RecordKind,
    parse_record,
    record_to_dict,
)
from src.core.domain.ledger_state import DEFAULT_PORTFOLIO_ID, LedgerState, state_to_dict

__all__ = [
    # Asset model
    "Asset",
    "AssetDetails",
    # Ledger snapshot
    "LedgerState",
    "DEFAULT_PORTFOLIO_ID",
    "state_to_dict",
    # Audit records
    "AuditRecord",
    "AuditRecordBase",
    "RecordKind",
    "EntryKind",
    "AssetInit",
    "AssetReset",
    "AssetBuy",
    "AssetSell",
    "AssetUpdate",
    "CapitalIn",
    "CapitalOut",
    "Expense",
    "Income",
    "parse_record",
    "record_to_dict",
]
