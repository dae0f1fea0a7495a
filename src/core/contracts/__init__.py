"""
Contract Validation Module

Модуль для валидации JSON контрактов ledger (audit records, снапшоты).
"""

from .validators import (
    AuditRecordValidator,
    ContractValidator,
    LedgerStateValidator,
    SchemaLoader,
    get_schema_loader,
    validate_audit_record,
    validate_ledger_state,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "AuditRecordValidator",
    "LedgerStateValidator",
    # Functions
    "get_schema_loader",
    "validate_audit_record",
    "validate_ledger_state",
]
