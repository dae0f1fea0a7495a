"""Replay — чистая свёртка audit records в LedgerState.

apply_record — единственное место, где определена семантика мутаций.
LedgerEngine вычисляет новое состояние тем же reducer'ом, поэтому состояние
движка всегда равно replay(sink.records()).

Даты при replay повторно не валидируются: проверка "date < now" имеет смысл
только в момент вызова.
"""

import logging
from typing import Iterable, Optional

from src.core.domain.asset import Asset
from src.core.domain.audit import (
    AssetBuy,
    AssetInit,
    AssetReset,
    AssetSell,
    AssetUpdate,
    AuditRecordBase,
    CapitalIn,
    CapitalOut,
    Expense,
    Income,
)
from src.core.domain.ledger_state import DEFAULT_PORTFOLIO_ID, LedgerState
from src.core.errors import (
    AssetAlreadyExists,
    InvalidCorrection,
    ReplayError,
    UnknownAsset,
    ValueOutOfRange,
)
from src.core.math.fixed_point import is_int128, wad_mul

logger = logging.getLogger(__name__)


def _checked(name: str, value: int) -> int:
    if not is_int128(value):
        raise ValueOutOfRange(name, value, "int128")
    return value


def _require_asset(state: LedgerState, asset_id: str) -> Asset:
    asset = state.assets.get(asset_id)
    if asset is None:
        raise UnknownAsset(asset_id)
    return asset


def _with_asset(state: LedgerState, asset: Asset, **changes) -> LedgerState:
    assets = dict(state.assets)
    assets[asset.name] = asset
    return state.model_copy(update={"assets": assets, **changes})


def _trade(state: LedgerState, asset_id: str, qty: int, price: int, sign: int) -> LedgerState:
    """buy: sign=+1, sell: sign=-1. qty += sign*qty, cash -= sign*qty*price."""
    asset = _require_asset(state, asset_id)
    new_qty = _checked(f"{asset_id}.qty", asset.qty + sign * qty)
    new_cash = _checked("cash", state.cash - sign * wad_mul(qty, price))
    return _with_asset(state, asset.model_copy(update={"qty": new_qty}), cash=new_cash)


def _cash_delta(state: LedgerState, delta: int) -> LedgerState:
    return state.model_copy(update={"cash": _checked("cash", state.cash + delta)})


def apply_record(state: LedgerState, record: AuditRecordBase) -> LedgerState:
    """Применение одной audit record к снапшоту.

    Args:
        state: текущий снапшот
        record: запись с seq == state.next_seq

    Returns:
        Новый снапшот (исходный не меняется)

    Raises:
        ReplayError: seq вне порядка или неизвестный тип записи
        InvalidCorrection: corrects не ссылается на более раннюю запись
        UnknownAsset / AssetAlreadyExists / ValueOutOfRange: нарушение семантики
    """
    if record.seq != state.next_seq:
        raise ReplayError(
            f"out-of-order record: expected seq={state.next_seq}, got seq={record.seq}",
            seq=record.seq,
        )
    if record.corrects is not None and record.corrects >= record.seq:
        raise InvalidCorrection(record.corrects, record.seq)

    if isinstance(record, AssetInit):
        if state.has_asset(record.asset_id):
            raise AssetAlreadyExists(record.asset_id)
        new_state = _with_asset(
            state,
            Asset(name=record.asset_id),
            asset_order=state.asset_order + (record.asset_id,),
        )
    elif isinstance(record, AssetReset):
        _require_asset(state, record.asset_id)
        new_state = _with_asset(state, Asset(name=record.asset_id))
    elif isinstance(record, AssetBuy):
        new_state = _trade(state, record.asset_id, record.qty, record.price, sign=1)
    elif isinstance(record, AssetSell):
        new_state = _trade(state, record.asset_id, record.qty, record.price, sign=-1)
    elif isinstance(record, AssetUpdate):
        asset = _require_asset(state, record.asset_id)
        updated = asset.model_copy(
            update={
                "nav": record.nav,
                "yield_": record.yield_,
                "duration": record.duration,
                "maturity": record.maturity,
                "last_update_date": record.date,
            }
        )
        new_state = _with_asset(state, updated)
    elif isinstance(record, (CapitalIn, Income)):
        new_state = _cash_delta(state, record.amount)
    elif isinstance(record, (CapitalOut, Expense)):
        new_state = _cash_delta(state, -record.amount)
    else:
        raise ReplayError(f"unsupported record type {type(record).__name__}", seq=record.seq)

    return new_state.model_copy(update={"next_seq": state.next_seq + 1})


def replay(
    records: Iterable[AuditRecordBase],
    portfolio_id: str = DEFAULT_PORTFOLIO_ID,
    state: Optional[LedgerState] = None,
) -> LedgerState:
    """Свёртка audit records в порядке эмиссии.

    Args:
        records: записи в порядке seq
        portfolio_id: идентификатор портфеля для пустого стартового состояния
        state: стартовый снапшот (по умолчанию пустой)
    """
    current = state if state is not None else LedgerState.empty(portfolio_id)
    for record in records:
        current = apply_record(current, record)
    logger.debug(f"Replay complete: {current.next_seq} records, {len(current.asset_order)} assets")
    return current
