"""
Fixed Point — 18-decimal арифметика ledger

Все количества, цены, суммы и valuation-поля хранятся как int с 18 неявными
десятичными знаками (WAD). Умножение двух WAD-значений делится на 10^18 с
усечением к нулю. Усечение — принятый источник ошибки округления.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Никаких float внутри ядра — только int
2. wad_mul симметрично относительно знака: wad_mul(-a, b) == -wad_mul(a, b)
3. Значения состояния и аргументов помещаются в int128, даты — в uint64
"""

from decimal import Decimal, localcontext
from typing import Final, Union

from src.core.errors import ValueOutOfRange

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Количество неявных десятичных знаков
WAD_DECIMALS: Final[int] = 18

# Масштаб 10^18
WAD: Final[int] = 10**WAD_DECIMALS

INT128_MIN: Final[int] = -(2**127)
INT128_MAX: Final[int] = 2**127 - 1
UINT64_MAX: Final[int] = 2**64 - 1

SECONDS_PER_DAY: Final[int] = 24 * 3600

# Точность Decimal для конверсий (int128 имеет 39 знаков)
_DECIMAL_PREC: Final[int] = 80


# =============================================================================
# АРИФМЕТИКА
# =============================================================================


def wad_mul(a: int, b: int) -> int:
    """
    Умножение двух WAD-значений с ренормализацией к 18 знакам.

    Усечение к нулю (как целочисленное деление со знаком), а не floor:
    Python `//` округляет к минус бесконечности, поэтому делим модуль.

    Examples:
        >>> wad_mul(2 * WAD, 100 * WAD) == 200 * WAD
        True
        >>> wad_mul(-1, WAD // 2)
        0
    """
    product = a * b
    quotient = abs(product) // WAD
    return quotient if product >= 0 else -quotient


def to_wad(value: Union[int, str, Decimal]) -> int:
    """
    Конверсия человекочитаемого числа в WAD (усечение к нулю).

    float намеренно не принимается: двоичное представление искажает
    десятичные цены.

    Examples:
        >>> to_wad("1.5") == 15 * 10**17
        True
    """
    if isinstance(value, float):
        raise TypeError("to_wad does not accept float, pass str or Decimal")
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PREC
        return int(Decimal(value) * WAD)


def from_wad(value: int) -> Decimal:
    """Конверсия WAD → Decimal (точная)."""
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PREC
        return Decimal(value).scaleb(-WAD_DECIMALS)


# =============================================================================
# ВАЛИДАЦИЯ ДИАПАЗОНОВ
# =============================================================================


def _require_int(value: int, name: str) -> None:
    # bool — подкласс int, но в ledger не допускается
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be int, got {type(value).__name__}")


def is_int128(value: int) -> bool:
    return INT128_MIN <= value <= INT128_MAX


def validate_int128(value: int, name: str = "value") -> int:
    """
    Проверка, что значение — int в диапазоне int128.

    Raises:
        TypeError: Если значение не int (или bool)
        ValueOutOfRange: Если значение вне int128
    """
    _require_int(value, name)
    if not is_int128(value):
        raise ValueOutOfRange(name, value, "int128")
    return value


def validate_uint64(value: int, name: str = "value") -> int:
    """
    Проверка, что значение — int в диапазоне uint64.

    Raises:
        TypeError: Если значение не int (или bool)
        ValueOutOfRange: Если значение вне uint64
    """
    _require_int(value, name)
    if not 0 <= value <= UINT64_MAX:
        raise ValueOutOfRange(name, value, "uint64")
    return value


# =============================================================================
# ДАТЫ
# =============================================================================


def is_day_aligned(ts: int, seconds_per_day: int = SECONDS_PER_DAY) -> bool:
    """True если ts — ровно полночь UTC (ts % 86400 == 0)."""
    return ts % seconds_per_day == 0
