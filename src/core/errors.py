"""
Ledger Errors — иерархия исключений ядра

Все ошибки терминальны для вызова: состояние не меняется, audit record не
создаётся, исключение пробрасывается вызывающему как есть. Повторов внутри
ядра нет.
"""

from typing import Optional


class LedgerError(Exception):
    """Базовая ошибка ledger-ядра."""


class Unauthorized(LedgerError):
    """Вызывающий не обладает требуемой ролью."""

    def __init__(self, role, principal: str, action: str = ""):
        self.role = role
        self.principal = principal
        self.action = action
        role_name = getattr(role, "value", role)
        suffix = f" for {action}" if action else ""
        super().__init__(f"principal {principal!r} lacks role {role_name}{suffix}")


class InvalidDate(LedgerError):
    """
    Дата не прошла валидацию.

    reason:
    - "zero": date == 0
    - "not_day_aligned": date не кратна суткам (UTC midnight)
    - "not_in_past": date >= текущего времени
    """

    def __init__(self, date: int, reason: str):
        self.date = date
        self.reason = reason
        super().__init__(f"invalid date {date}: {reason}")


class UnknownAsset(LedgerError):
    """Мутация по незарегистрированному asset ID."""

    def __init__(self, asset_id: str):
        self.asset_id = asset_id
        super().__init__(f"unknown asset {asset_id!r}")


class AssetAlreadyExists(LedgerError):
    """Повторный init уже зарегистрированного asset ID."""

    def __init__(self, asset_id: str):
        self.asset_id = asset_id
        super().__init__(
            f"asset {asset_id!r} already exists (use reset_asset to zero it explicitly)"
        )


class ValueOutOfRange(LedgerError, ValueError):
    """Значение не помещается в int128/uint64."""

    def __init__(self, name: str, value: int, bounds: str):
        self.name = name
        self.value = value
        super().__init__(f"{name}={value} out of range {bounds}")


class InvalidCorrection(LedgerError):
    """Ссылка corrects указывает на несуществующую запись."""

    def __init__(self, corrects: int, next_seq: int):
        self.corrects = corrects
        self.next_seq = next_seq
        super().__init__(
            f"corrects={corrects} does not reference an existing record (next_seq={next_seq})"
        )


class ReplayError(LedgerError):
    """Нарушен порядок audit log при replay."""

    def __init__(self, message: str, seq: Optional[int] = None):
        self.seq = seq
        super().__init__(message)
