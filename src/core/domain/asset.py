"""
Asset — Модель позиции по активу в ledger

Immutable Pydantic модель. Все числовые поля — WAD (int, 18 неявных знаков).
Любое изменение создаёт новый экземпляр через model_copy.

- qty меняется только через buy/sell
- nav/yield/duration/maturity/last_update_date — только через update (last-write-wins)
"""

from typing import NamedTuple

from pydantic import BaseModel, Field

from src.core.math.fixed_point import wad_mul


# =============================================================================
# DETAILS TUPLE
# =============================================================================


class AssetDetails(NamedTuple):
    """Ответ query details(asset_id): (qty, nav, yield, duration, maturity)."""

    qty: int = 0
    nav: int = 0
    yield_: int = 0
    duration: int = 0
    maturity: int = 0


# =============================================================================
# ASSET MODEL
# =============================================================================


class Asset(BaseModel):
    """
    Модель актива портфеля.

    Поле `yield` — зарезервированное слово Python, поэтому атрибут называется
    `yield_`, а в JSON сериализуется как "yield" (by_alias=True).
    """

    name: str = Field(..., min_length=1, description="Asset ID (== name)")
    qty: int = Field(0, description="Количество (WAD, может быть отрицательным после коррекций)")
    last_update_date: int = Field(0, ge=0, description="Дата последнего update (UTC midnight, сек)")
    nav: int = Field(0, description="NAV за единицу (WAD)")
    yield_: int = Field(0, alias="yield", description="Доходность (WAD)")
    duration: int = Field(0, description="Дюрация (WAD)")
    maturity: int = Field(0, description="Срок погашения (WAD)")

    model_config = {"frozen": True, "populate_by_name": True}

    def details(self) -> AssetDetails:
        return AssetDetails(
            qty=self.qty,
            nav=self.nav,
            yield_=self.yield_,
            duration=self.duration,
            maturity=self.maturity,
        )

    def market_value(self) -> int:
        """qty * nav / 10^18 (усечение к нулю)."""
        return wad_mul(self.qty, self.nav)
