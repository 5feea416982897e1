"""
errors.py — Typed errors for money and currency operations.

Every error is a caller contract violation: raised where it is detected,
never retried. Each one also subclasses the closest builtin so existing
``except LookupError`` / ``except ValueError`` code keeps working.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional


class MoneyError(Exception):
    """Root of all exactmoney errors."""

    error_code: str = "MONEY_ERROR"

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.detail = detail or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "detail": self.detail,
        }


class UnknownCurrency(MoneyError, LookupError):
    error_code = "UNKNOWN_CURRENCY"

    def __init__(self, code: Any, known: Iterable[str] = ()) -> None:
        self.code = code
        known = sorted(known)
        super().__init__(
            message=(
                f"The currency specified, {code!r}, is not a valid currency. "
                f"Must be one of: {', '.join(known)}."
            ),
            detail={"code": code, "known": known},
        )


class UnknownField(MoneyError, LookupError):
    error_code = "UNKNOWN_FIELD"

    def __init__(self, field: Any, allowed: Iterable[str]) -> None:
        self.field = field
        allowed = list(allowed)
        super().__init__(
            message=(
                f"The field specified, {field!r}, is not valid. "
                f"Must be one of: {', '.join(allowed)}."
            ),
            detail={"field": field, "allowed": allowed},
        )


class NoDefaultCurrency(MoneyError, LookupError):
    error_code = "NO_DEFAULT_CURRENCY"

    def __init__(self) -> None:
        super().__init__("No currency was specified and no default currency has been set")


class InvalidRatioSum(MoneyError, ValueError):
    error_code = "INVALID_RATIO_SUM"

    def __init__(self, ratios: Iterable[Any]) -> None:
        self.ratios = [str(r) for r in ratios]
        super().__init__(
            message=f"The ratios specified ({', '.join(self.ratios)}) combined are not equal to 1",
            detail={"ratios": self.ratios},
        )


class FloatAmountError(MoneyError, TypeError):
    """A binary float reached the value path."""

    error_code = "FLOAT_AMOUNT"

    def __init__(self, value: float) -> None:
        super().__init__(
            message=(
                f"Floats are imprecise and not accepted as monetary values: {value!r}. "
                f"Pass a str, int or Decimal instead."
            ),
            detail={"value": repr(value)},
        )


class InvalidAmount(MoneyError, ValueError):
    error_code = "INVALID_AMOUNT"

    def __init__(self, value: Any, reason: str = "not a finite decimal number") -> None:
        super().__init__(
            message=f"Invalid amount {value!r}: {reason}",
            detail={"value": repr(value), "reason": reason},
        )


class RegistryFrozen(MoneyError, RuntimeError):
    error_code = "REGISTRY_FROZEN"

    def __init__(self, operation: str) -> None:
        super().__init__(
            message=f"Cannot {operation}: the currency registry is frozen",
            detail={"operation": operation},
        )
