"""Checked u64 arithmetic for lamport and token amounts.

Python ints never overflow, so every result is range-checked against
[0, U64_MAX] to mirror the program's checked_* semantics. Multiplications
that precede a division are done on the unbounded intermediate and only
the final quotient is narrowed.
"""

from src.launchpad.constants import BPS_DENOMINATOR, U64_MAX
from src.launchpad.errors import DivisionByZeroError, MathOverflowError


def to_u64(value: int) -> int:
    """Narrow an intermediate to u64, raising on under/overflow."""
    if value < 0 or value > U64_MAX:
        raise MathOverflowError(f"{value} outside u64 range")
    return value


def checked_add(a: int, b: int) -> int:
    return to_u64(a + b)


def checked_sub(a: int, b: int) -> int:
    return to_u64(a - b)


def checked_mul(a: int, b: int) -> int:
    return to_u64(a * b)


def checked_div(a: int, b: int) -> int:
    """Floor division of u64 values."""
    if b == 0:
        raise DivisionByZeroError(f"{a} / 0")
    return to_u64(a // b)


def mul_div_floor(a: int, b: int, denominator: int) -> int:
    """Compute floor(a * b / denominator) with a widened intermediate."""
    if denominator == 0:
        raise DivisionByZeroError(f"{a} * {b} / 0")
    to_u64(a)
    to_u64(b)
    return to_u64((a * b) // denominator)


def apply_bps(value: int, bps: int) -> int:
    """Scale value by basis points, rounding down.

    Rounding always favours the treasury: the trader never receives the
    fractional lamport.
    """
    return mul_div_floor(value, bps, BPS_DENOMINATOR)
