"""Ledger Engine — append-only ledger портфеля MIP65.

Порядок обработки мутирующего вызова (всё под одним lock):
1. Проверка роли caller через AccessControlRegistry → Unauthorized
2. Валидация даты (кроме init/reset_asset) → InvalidDate
3. Валидация диапазонов аргументов (int128) и ссылки corrects
4. Построение audit record с seq = state.next_seq
5. Вычисление нового снапшота через apply_record (тот же reducer, что и replay)
6. Append в sink
7. Атомарная замена ссылки на снапшот

Ошибка на любом шаге оставляет состояние и sink без изменений.
Queries читают текущий immutable снапшот без lock.
"""

import logging
import threading
import time
from typing import Callable, Optional, Tuple, Type

from src.access.registry import AccessControlRegistry, Role
from src.core.contracts import validate_audit_record
from src.core.domain.asset import AssetDetails
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
    record_to_dict,
)
from src.core.domain.ledger_state import LedgerState
from src.core.errors import InvalidCorrection, InvalidDate
from src.core.math.fixed_point import is_day_aligned, validate_int128, validate_uint64
from src.ledger.config import LedgerConfig
from src.ledger.replay import apply_record, replay
from src.ledger.sink import AuditSink, InMemoryAuditSink

logger = logging.getLogger(__name__)


Clock = Callable[[], float]


class LedgerEngine:
    """Ledger Engine: реестр активов, cash, мутации и valuation queries.

    Создаётся один раз (genesis) и далее меняется только через операции
    init/reset_asset/buy/sell/update/add_capital/remove_capital/expense/income.

    Коррекция ошибочной записи — новая запись с противоположным знаком
    qty/amount; опциональный corrects=<seq> связывает её с исходной.
    """

    def __init__(
        self,
        registry: AccessControlRegistry,
        sink: Optional[AuditSink] = None,
        config: Optional[LedgerConfig] = None,
        clock: Optional[Clock] = None,
        state: Optional[LedgerState] = None,
    ):
        """
        Args:
            registry: реестр ролей (capability-проверка)
            sink: append-only sink (по умолчанию в памяти)
            config: конфигурация ledger
            clock: wall clock, epoch-секунды (по умолчанию time.time)
            state: стартовый снапшот, согласованный с sink
        """
        self._registry = registry
        self._sink = sink if sink is not None else InMemoryAuditSink()
        self._config = config or LedgerConfig()
        self._clock = clock or time.time
        self._state = state if state is not None else LedgerState.empty(self._config.portfolio_id)
        self._lock = threading.Lock()

        if self._state.next_seq != len(self._sink):
            raise ValueError(
                f"state next_seq={self._state.next_seq} does not match sink length {len(self._sink)}"
            )

    @classmethod
    def from_sink(
        cls,
        registry: AccessControlRegistry,
        sink: AuditSink,
        config: Optional[LedgerConfig] = None,
        clock: Optional[Clock] = None,
    ) -> "LedgerEngine":
        """Восстановление движка replay'ем существующего audit log."""
        config = config or LedgerConfig()
        state = replay(sink.records(), portfolio_id=config.portfolio_id)
        logger.info(f"Ledger restored from sink: {state.next_seq} records")
        return cls(registry, sink=sink, config=config, clock=clock, state=state)

    # =========================================================================
    # ASSET OPERATIONS
    # =========================================================================

    def init(self, caller: str, asset_id: str, corrects: Optional[int] = None) -> AssetInit:
        """Регистрация нового актива (GUARDIAN). Повторный init → AssetAlreadyExists."""
        return self._execute(Role.GUARDIAN, caller, AssetInit, asset_id=asset_id, corrects=corrects)

    def reset_asset(self, caller: str, asset_id: str, corrects: Optional[int] = None) -> AssetReset:
        """Явное обнуление qty и valuation существующего актива (GUARDIAN)."""
        return self._execute(Role.GUARDIAN, caller, AssetReset, asset_id=asset_id, corrects=corrects)

    def buy(
        self,
        caller: str,
        asset_id: str,
        date: int,
        qty: int,
        price: int,
        corrects: Optional[int] = None,
    ) -> AssetBuy:
        """qty += qty; cash -= qty * price / 10^18 (OPS)."""
        return self._execute(
            Role.OPS, caller, AssetBuy,
            asset_id=asset_id, date=date, qty=qty, price=price, corrects=corrects,
        )

    def sell(
        self,
        caller: str,
        asset_id: str,
        date: int,
        qty: int,
        price: int,
        corrects: Optional[int] = None,
    ) -> AssetSell:
        """qty -= qty; cash += qty * price / 10^18 (OPS)."""
        return self._execute(
            Role.OPS, caller, AssetSell,
            asset_id=asset_id, date=date, qty=qty, price=price, corrects=corrects,
        )

    def update(
        self,
        caller: str,
        asset_id: str,
        date: int,
        nav: int,
        yield_: int,
        duration: int,
        maturity: int,
        corrects: Optional[int] = None,
    ) -> AssetUpdate:
        """Перезапись valuation-полей и last_update_date (DATA)."""
        return self._execute(
            Role.DATA, caller, AssetUpdate,
            asset_id=asset_id, date=date, nav=nav, yield_=yield_,
            duration=duration, maturity=maturity, corrects=corrects,
        )

    # =========================================================================
    # CASH OPERATIONS
    # =========================================================================

    def add_capital(self, caller: str, date: int, amount: int, corrects: Optional[int] = None) -> CapitalIn:
        return self._execute(Role.OPS, caller, CapitalIn, date=date, amount=amount, corrects=corrects)

    def remove_capital(self, caller: str, date: int, amount: int, corrects: Optional[int] = None) -> CapitalOut:
        return self._execute(Role.OPS, caller, CapitalOut, date=date, amount=amount, corrects=corrects)

    def expense(
        self, caller: str, date: int, amount: int, reason: str, corrects: Optional[int] = None
    ) -> Expense:
        return self._execute(
            Role.OPS, caller, Expense, date=date, amount=amount, reason=reason, corrects=corrects
        )

    def income(
        self, caller: str, date: int, amount: int, reason: str, corrects: Optional[int] = None
    ) -> Income:
        return self._execute(
            Role.OPS, caller, Income, date=date, amount=amount, reason=reason, corrects=corrects
        )

    # =========================================================================
    # QUERIES
    # =========================================================================

    def value(self) -> int:
        """NAV: cash + Σ qty * nav / 10^18 по порядку регистрации."""
        return self._state.value()

    def cash(self) -> int:
        return self._state.cash

    def assets(self) -> Tuple[str, ...]:
        return self._state.asset_order

    def details(self, asset_id: str) -> AssetDetails:
        """(qty, nav, yield, duration, maturity); нули для неизвестного asset_id."""
        return self._state.details(asset_id)

    def snapshot(self) -> LedgerState:
        return self._state

    def records(self) -> Tuple[AuditRecordBase, ...]:
        """Audit log, согласованный с текущим снапшотом.

        Sink получает запись до замены снапшота, поэтому log обрезается по
        snapshot.next_seq: replay(records()) == snapshot() в любой момент.
        """
        state = self._state
        return self._sink.records()[: state.next_seq]

    def corrections_of(self, seq: int) -> Tuple[AuditRecordBase, ...]:
        """Записи, ссылающиеся на seq через corrects."""
        return tuple(r for r in self.records() if r.corrects == seq)

    @property
    def registry(self) -> AccessControlRegistry:
        return self._registry

    @property
    def config(self) -> LedgerConfig:
        return self._config

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _validate_date(self, date: int) -> None:
        """date != 0, кратна суткам (UTC midnight), строго в прошлом.

        Монотонность между вызовами не требуется: коррекции могут
        приходить с более ранней датой.
        """
        validate_uint64(date, "date")
        if date == 0:
            raise InvalidDate(date, "zero")
        if not is_day_aligned(date, self._config.seconds_per_day):
            raise InvalidDate(date, "not_day_aligned")
        if date >= self._clock():
            raise InvalidDate(date, "not_in_past")

    def _execute(
        self,
        role: Role,
        caller: str,
        record_cls: Type[AuditRecordBase],
        corrects: Optional[int] = None,
        **fields,
    ) -> AuditRecordBase:
        op = record_cls.__name__
        with self._lock:
            self._registry.require_role(role, caller, action=op)

            state = self._state
            try:
                if "date" in fields:
                    self._validate_date(fields["date"])
                for name in record_cls.WAD_FIELDS:
                    validate_int128(fields[name], name)
                if corrects is not None and not 0 <= corrects < state.next_seq:
                    raise InvalidCorrection(corrects, state.next_seq)
            except (InvalidDate, InvalidCorrection) as e:
                logger.warning(f"{op} rejected for {caller}: {e}")
                raise

            record = record_cls(
                seq=state.next_seq,
                caller=caller,
                ts_utc_sec=int(self._clock()),
                corrects=corrects,
                **fields,
            )
            new_state = apply_record(state, record)
            if self._config.validate_contracts:
                validate_audit_record(record_to_dict(record))
            self._sink.append(record)
            self._state = new_state

        logger.info(
            f"{op} #{record.seq} by {caller}: cash={new_state.cash}"
            + (f" (corrects #{corrects})" if corrects is not None else "")
        )
        return record
