"""
Core math modules для ledger

18-decimal fixed-point арифметика и проверки диапазонов.
"""

from src.core.math.fixed_point import (
    INT128_MAX,
    INT128_MIN,
    SECONDS_PER_DAY,
    UINT64_MAX,
    WAD,
    WAD_DECIMALS,
    from_wad,
    is_day_aligned,
    is_int128,
    to_wad,
    validate_int128,
    validate_uint64,
    wad_mul,
)

__all__ = [
    # Constants
    "WAD",
    "WAD_DECIMALS",
    "INT128_MIN",
    "INT128_MAX",
    "UINT64_MAX",
    "SECONDS_PER_DAY",
    # Arithmetic
    "wad_mul",
    "to_wad",
    "from_wad",
    # Validation
    "is_int128",
    "validate_int128",
    "validate_uint64",
    # Dates
    "is_day_aligned",
]
