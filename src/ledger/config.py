"""Конфигурация Ledger Engine."""

from dataclasses import dataclass

from src.core.domain.ledger_state import DEFAULT_PORTFOLIO_ID
from src.core.math.fixed_point import SECONDS_PER_DAY


@dataclass(frozen=True)
class LedgerConfig:
    """Конфигурация ledger.

    - portfolio_id: идентификатор портфеля в снапшоте
    - seconds_per_day: шаг выравнивания дат (UTC midnight)
    - validate_contracts: проверять каждую запись JSON Schema контрактом
      до передачи в sink
    """
    portfolio_id: str = DEFAULT_PORTFOLIO_ID
    seconds_per_day: int = SECONDS_PER_DAY
    validate_contracts: bool = False

    def __post_init__(self):
        if not self.portfolio_id:
            raise ValueError("portfolio_id must be non-empty")
        if self.seconds_per_day <= 0:
            raise ValueError(f"seconds_per_day must be positive, got {self.seconds_per_day}")
