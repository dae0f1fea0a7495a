"""
Tests for Domain Models

Покрывает:
- Asset: создание, immutability, alias yield, market_value
- LedgerState: empty, details, value
- AuditRecord: discriminated union, entry_kind, сериализация
"""

import pytest
from pydantic import ValidationError

from src.core.domain import (
    Asset,
    AssetDetails,
    AssetInit,
    AssetSell,
    AssetUpdate,
    EntryKind,
    Expense,
    Income,
    LedgerState,
    RecordKind,
    parse_record,
    record_to_dict,
)
from src.core.math.fixed_point import WAD


# =============================================================================
# ASSET
# =============================================================================


class TestAsset:
    """Тесты модели Asset."""

    def test_defaults_are_zero(self):
        asset = Asset(name="A")
        assert asset.details() == AssetDetails(0, 0, 0, 0, 0)
        assert asset.last_update_date == 0

    def test_frozen(self):
        asset = Asset(name="A")
        with pytest.raises(ValidationError):
            asset.qty = 5

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            Asset(name="")

    def test_yield_alias(self):
        """Поле yield доступно по alias и по имени"""
        by_alias = Asset.model_validate({"name": "A", "yield": 7})
        by_name = Asset(name="A", yield_=7)

        assert by_alias == by_name
        assert by_alias.model_dump(by_alias=True)["yield"] == 7

    def test_market_value_truncates(self):
        asset = Asset(name="A", qty=-3, nav=WAD // 2)
        assert asset.market_value() == -1


# =============================================================================
# LEDGER STATE
# =============================================================================


class TestLedgerState:
    """Тесты снапшота LedgerState."""

    def test_empty(self):
        state = LedgerState.empty()
        assert state.portfolio_id == "MIP65"
        assert state.cash == 0
        assert state.asset_order == ()
        assert state.value() == 0

    def test_value_formula(self):
        """2*100 + 3*50 + 1000 = 1350"""
        state = LedgerState(
            assets={
                "A": Asset(name="A", qty=2 * WAD, nav=100 * WAD),
                "B": Asset(name="B", qty=3 * WAD, nav=50 * WAD),
            },
            asset_order=("A", "B"),
            cash=1_000 * WAD,
        )
        assert state.value() == 1_350 * WAD

    def test_details_unknown_is_zero(self):
        assert LedgerState.empty().details("ZZZ") == AssetDetails()

    def test_negative_next_seq_rejected(self):
        with pytest.raises(ValidationError):
            LedgerState(next_seq=-1)


# =============================================================================
# AUDIT RECORDS
# =============================================================================


class TestAuditRecords:
    """Тесты audit records."""

    def test_parse_dispatches_by_kind(self):
        record = parse_record(
            {"kind": "AssetSell", "seq": 4, "caller": "ops", "date": 86400,
             "asset_id": "A", "qty": WAD, "price": 2 * WAD}
        )
        assert isinstance(record, AssetSell)
        assert record.corrects is None
        assert record.entry_kind == EntryKind.ORIGINAL

    def test_parse_update_with_yield_key(self):
        record = parse_record(
            {"kind": "AssetUpdate", "seq": 0, "caller": "oracle", "date": 86400,
             "asset_id": "A", "nav": 1, "yield": 2, "duration": 3, "maturity": 4}
        )
        assert isinstance(record, AssetUpdate)
        assert record.yield_ == 2

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            parse_record({"kind": "AssetBurn", "seq": 0, "caller": "x"})

    def test_zero_date_rejected_by_model(self):
        with pytest.raises(ValidationError):
            Income(seq=0, caller="ops", date=0, amount=WAD, reason="coupon")

    def test_record_frozen(self):
        record = AssetInit(seq=0, caller="root", asset_id="A")
        with pytest.raises(ValidationError):
            record.asset_id = "B"

    def test_dict_round_trip_preserves_correction_link(self):
        record = Expense(seq=9, caller="ops", date=86400, amount=-WAD, reason="reversal", corrects=3)
        data = record_to_dict(record)

        assert data["kind"] == RecordKind.EXPENSE.value
        assert parse_record(data) == record
        assert parse_record(data).entry_kind == EntryKind.CORRECTION

    def test_wad_fields_declared(self):
        assert AssetSell.WAD_FIELDS == ("qty", "price")
        assert AssetUpdate.WAD_FIELDS == ("nav", "yield_", "duration", "maturity")
        assert AssetInit.WAD_FIELDS == ()
