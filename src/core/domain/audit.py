"""
AuditRecord — immutable записи audit log

Одна запись на каждый успешный мутирующий вызов. Вариант определяется полем
`kind` (discriminated union). Записи никогда не изменяются и не удаляются;
агрегированное состояние — детерминированная свёртка записей по seq.

Общие поля:
- seq: порядковый номер эмиссии (0, 1, 2, ...)
- caller: principal, выполнивший вызов
- ts_utc_sec: wall-clock время эмиссии (секунды), в replay не участвует
- corrects: seq записи, которую исправляет данная (информационная ссылка)
"""

from enum import Enum
from typing import Annotated, Any, ClassVar, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter


# =============================================================================
# ENUMS
# =============================================================================


class RecordKind(str, Enum):
    """Тип audit record."""

    ASSET_INIT = "AssetInit"
    ASSET_RESET = "AssetReset"
    ASSET_BUY = "AssetBuy"
    ASSET_SELL = "AssetSell"
    ASSET_UPDATE = "AssetUpdate"
    CAPITAL_IN = "CapitalIn"
    CAPITAL_OUT = "CapitalOut"
    EXPENSE = "Expense"
    INCOME = "Income"


class EntryKind(str, Enum):
    """Исходная запись или коррекция (выводится из поля corrects)."""

    ORIGINAL = "ORIGINAL"
    CORRECTION = "CORRECTION"


# =============================================================================
# BASE MODELS
# =============================================================================


class AuditRecordBase(BaseModel):
    """Общие поля всех audit records."""

    # Имена WAD-аргументов, проверяемых на int128 до создания записи
    WAD_FIELDS: ClassVar[tuple[str, ...]] = ()

    seq: int = Field(..., ge=0, description="Порядковый номер эмиссии")
    caller: str = Field(..., min_length=1, description="Principal вызова")
    ts_utc_sec: int = Field(0, ge=0, description="Время эмиссии (UTC, секунды)")
    corrects: Optional[int] = Field(None, ge=0, description="Seq исправляемой записи")

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def entry_kind(self) -> EntryKind:
        return EntryKind.ORIGINAL if self.corrects is None else EntryKind.CORRECTION


class DatedRecord(AuditRecordBase):
    """Запись с бизнес-датой (UTC midnight, секунды)."""

    date: int = Field(..., gt=0, description="Бизнес-дата (UTC midnight)")


# =============================================================================
# ASSET RECORDS
# =============================================================================


class AssetInit(AuditRecordBase):
    kind: Literal["AssetInit"] = RecordKind.ASSET_INIT.value
    asset_id: str = Field(..., min_length=1)


class AssetReset(AuditRecordBase):
    """Явное обнуление позиции и valuation существующего актива."""

    kind: Literal["AssetReset"] = RecordKind.ASSET_RESET.value
    asset_id: str = Field(..., min_length=1)


class AssetBuy(DatedRecord):
    WAD_FIELDS: ClassVar[tuple[str, ...]] = ("qty", "price")

    kind: Literal["AssetBuy"] = RecordKind.ASSET_BUY.value
    asset_id: str = Field(..., min_length=1)
    qty: int
    price: int


class AssetSell(DatedRecord):
    WAD_FIELDS: ClassVar[tuple[str, ...]] = ("qty", "price")

    kind: Literal["AssetSell"] = RecordKind.ASSET_SELL.value
    asset_id: str = Field(..., min_length=1)
    qty: int
    price: int


class AssetUpdate(DatedRecord):
    WAD_FIELDS: ClassVar[tuple[str, ...]] = ("nav", "yield_", "duration", "maturity")

    kind: Literal["AssetUpdate"] = RecordKind.ASSET_UPDATE.value
    asset_id: str = Field(..., min_length=1)
    nav: int
    yield_: int = Field(..., alias="yield")
    duration: int
    maturity: int


# =============================================================================
# CASH RECORDS
# =============================================================================


class CapitalIn(DatedRecord):
    WAD_FIELDS: ClassVar[tuple[str, ...]] = ("amount",)

    kind: Literal["CapitalIn"] = RecordKind.CAPITAL_IN.value
    amount: int


class CapitalOut(DatedRecord):
    WAD_FIELDS: ClassVar[tuple[str, ...]] = ("amount",)

    kind: Literal["CapitalOut"] = RecordKind.CAPITAL_OUT.value
    amount: int


class Expense(DatedRecord):
    WAD_FIELDS: ClassVar[tuple[str, ...]] = ("amount",)

    kind: Literal["Expense"] = RecordKind.EXPENSE.value
    amount: int
    reason: str = ""


class Income(DatedRecord):
    WAD_FIELDS: ClassVar[tuple[str, ...]] = ("amount",)

    kind: Literal["Income"] = RecordKind.INCOME.value
    amount: int
    reason: str = ""


# =============================================================================
# UNION & SERIALIZATION
# =============================================================================


AuditRecord = Annotated[
    Union[
        AssetInit,
        AssetReset,
        AssetBuy,
        AssetSell,
        AssetUpdate,
        CapitalIn,
        CapitalOut,
        Expense,
        Income,
    ],
    Field(discriminator="kind"),
]

_AUDIT_RECORD_ADAPTER: TypeAdapter = TypeAdapter(AuditRecord)


def parse_record(data: dict[str, Any]) -> AuditRecordBase:
    """
    Десериализация audit record из dict (например, строка JSONL).

    Raises:
        pydantic.ValidationError: Неизвестный kind или невалидные поля
    """
    return _AUDIT_RECORD_ADAPTER.validate_python(data)


def record_to_dict(record: AuditRecordBase) -> dict[str, Any]:
    """Сериализация в JSON-совместимый dict (поле yield — по alias)."""
    return record.model_dump(mode="json", by_alias=True)
