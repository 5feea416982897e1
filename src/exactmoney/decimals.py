"""
decimals.py — Decimal engine for monetary arithmetic

================================================================================
CONTRACT
================================================================================

Thin layer over the standard ``decimal`` module that makes precision an
explicit argument of every operation instead of a property of a (mutable,
thread-local) context.

1. INPUT
   str, int and Decimal are accepted. float is rejected with
   FloatAmountError: by the time a value is a float it has already lost
   precision, and silently "fixing" it via str() hides the bug.

2. EXACTNESS
   add/sub/mul run in a private context with maximal precision, so they are
   exact. Division never uses Decimal division: it is computed on Fraction
   and truncated to the requested places.

3. PLACES
   truncate() always drops digits toward zero.
   round_to() uses ROUND_HALF_EVEN (banker's rounding, decimal's default).

4. NO NEGATIVE ZERO
   Results that are zero are returned as +0 so "-0.00" never leaks into
   string output.

================================================================================
"""

from __future__ import annotations

from decimal import (
    MAX_EMAX,
    MAX_PREC,
    MIN_EMIN,
    ROUND_DOWN,
    ROUND_HALF_EVEN,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)
from fractions import Fraction
from typing import Iterable, Union

from .errors import FloatAmountError, InvalidAmount

DecimalLike = Union[Decimal, str, int]
RatioLike = Union[Decimal, str, int, Fraction]

ROUNDING = ROUND_HALF_EVEN

# Largest decimal exponent (either sign) accepted on input
MAX_EXPONENT = 10_000

# Exact context: add/sub/mul never round. Never use it for division.
EXACT = Context(
    prec=MAX_PREC,
    Emax=MAX_EMAX,
    Emin=MIN_EMIN,
    rounding=ROUNDING,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)


def _no_negative_zero(value: Decimal) -> Decimal:
    return value.copy_abs() if value.is_zero() else value


# ==============================================================================
# COERCION
# ==============================================================================

def to_decimal(value: DecimalLike) -> Decimal:
    """
    Convert a decimal-safe scalar into a finite Decimal.

    Raises:
        FloatAmountError: value is a float
        InvalidAmount: unparsable string, bool, NaN, infinity, or an
            exponent beyond MAX_EXPONENT
        TypeError: any other type
    """
    if isinstance(value, bool):
        raise InvalidAmount(value, "booleans are not amounts")
    if isinstance(value, float):
        raise FloatAmountError(value)

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, str):
        try:
            result = EXACT.create_decimal(value.strip())
        except InvalidOperation as e:
            raise InvalidAmount(value, "not a decimal number") from e
    else:
        raise TypeError(
            f"Cannot convert {type(value).__name__} to a decimal amount; "
            f"use str, int or Decimal"
        )

    if not result.is_finite():
        raise InvalidAmount(value, "not a finite decimal number")
    if abs(result.adjusted()) > MAX_EXPONENT or -result.as_tuple().exponent > MAX_EXPONENT:
        raise InvalidAmount(value, "exponent out of range")
    return result


def to_fraction(value: RatioLike) -> Fraction:
    """Exact rational value of a ratio or factor. Fractions pass through."""
    if isinstance(value, Fraction):
        return value
    return Fraction(to_decimal(value))


# ==============================================================================
# PRECISION
# ==============================================================================

def quantum(places: int) -> Decimal:
    """``10 ** -places`` as a Decimal, e.g. 2 -> Decimal('0.01')."""
    if places < 0:
        raise ValueError(f"places must be >= 0, got {places}")
    return Decimal(1).scaleb(-places)


def smallest_unit(places: int) -> Decimal:
    """Smallest positive amount representable at ``places`` (0.01 for 2, 1 for 0)."""
    return quantum(places)


def truncate(value: Union[Decimal, Fraction], places: int) -> Decimal:
    """Drop every digit beyond ``places``, toward zero. Exact for Fractions too."""
    if isinstance(value, Fraction):
        scaled = abs(value.numerator) * 10 ** places // value.denominator
        if value < 0:
            scaled = -scaled
        result = Decimal(scaled).scaleb(-places, EXACT)
        return _no_negative_zero(result.quantize(quantum(places), context=EXACT))
    return _no_negative_zero(value.quantize(quantum(places), rounding=ROUND_DOWN, context=EXACT))


def round_to(value: Decimal, places: int) -> Decimal:
    """Round to ``places`` with ROUND_HALF_EVEN."""
    return _no_negative_zero(value.quantize(quantum(places), rounding=ROUNDING, context=EXACT))


# ==============================================================================
# ARITHMETIC
# ==============================================================================

def add(a: Decimal, b: Decimal) -> Decimal:
    return EXACT.add(a, b)


def sub(a: Decimal, b: Decimal) -> Decimal:
    return EXACT.subtract(a, b)


def mul(a: Decimal, b: Decimal) -> Decimal:
    return EXACT.multiply(a, b)


def total(values: Iterable[Decimal]) -> Decimal:
    """Exact sum of ``values``; Decimal(0) when empty."""
    result = Decimal(0)
    for value in values:
        result = EXACT.add(result, value)
    return result


def divide(a: Decimal, b: Decimal, places: int) -> Decimal:
    """
    ``a / b`` truncated to ``places``.

    Raises:
        ZeroDivisionError: b is zero
    """
    if b.is_zero():
        raise ZeroDivisionError(f"Cannot divide {a} by zero")
    return truncate(Fraction(a) / Fraction(b), places)
