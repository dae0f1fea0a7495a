"""
LedgerState — снапшот агрегированного состояния ledger

Immutable Pydantic модель. Производный кэш над audit log: полностью
восстанавливается replay всех записей в порядке seq. Движок держит ссылку на
текущий снапшот и атомарно заменяет её после каждой мутации, поэтому читатели
никогда не видят частично применённую операцию.
"""

from pydantic import BaseModel, Field

from src.core.math.fixed_point import validate_int128

from .asset import Asset, AssetDetails


DEFAULT_PORTFOLIO_ID = "MIP65"


class LedgerState(BaseModel):
    """
    Снапшот состояния ledger.

    - assets: asset_id → Asset
    - asset_order: порядок init (append-only, определяет порядок enumeration)
    - cash: денежный баланс (WAD, знаковый)
    - next_seq: seq следующей audit record
    """

    portfolio_id: str = Field(DEFAULT_PORTFOLIO_ID, min_length=1, description="Идентификатор портфеля")
    assets: dict[str, Asset] = Field(default_factory=dict, description="Реестр активов")
    asset_order: tuple[str, ...] = Field(default=(), description="Порядок регистрации активов")
    cash: int = Field(0, description="Денежный баланс (WAD)")
    next_seq: int = Field(0, ge=0, description="Seq следующей audit record")

    model_config = {"frozen": True}

    @classmethod
    def empty(cls, portfolio_id: str = DEFAULT_PORTFOLIO_ID) -> "LedgerState":
        return cls(portfolio_id=portfolio_id)

    def has_asset(self, asset_id: str) -> bool:
        return asset_id in self.assets

    def details(self, asset_id: str) -> AssetDetails:
        """Нулевой кортеж для неизвестного asset_id (мягкий отказ, не ошибка)."""
        asset = self.assets.get(asset_id)
        if asset is None:
            return AssetDetails()
        return asset.details()

    def value(self) -> int:
        """
        NAV портфеля: cash + Σ qty * nav / 10^18 по asset_order.

        Каждое слагаемое усекается отдельно, как при последовательном
        накоплении. Результат — int128.

        Raises:
            ValueOutOfRange: Если сумма выходит за int128
        """
        total = self.cash
        for asset_id in self.asset_order:
            total += self.assets[asset_id].market_value()
        return validate_int128(total, "value")


def state_to_dict(state: LedgerState) -> dict:
    """Сериализация снапшота в JSON-совместимый dict (ключ "yield", не "yield_")."""
    return state.model_dump(mode="json", by_alias=True)
