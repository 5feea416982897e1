"""
exactmoney — Currency-aware monetary values that never lose a cent

Amounts are Decimals with one guard digit beyond the currency precision;
floats are rejected at the boundary. Currencies live in a registry that
also carries a reference value per currency, used for conversion.

================================================================================
QUICK START
================================================================================

Basic usage:

    from fractions import Fraction
    from exactmoney import Money, get_registry

    registry = get_registry()
    registry.register("EUR", "Euro", "€", 2, "1.17647059")
    registry.set_default("USD")

    price = Money("100.00")                     # USD, the default
    parts = price.allocate([Fraction(1, 3)] * 3)
    # [33.34, 33.33, 33.33] -- always sums to exactly 100.00

    price.convert("EUR")                        # via reference values
    Money("1234567.891", "USD").format()        # '$1,234,567.89'

Isolated registry (tests, multi-tenant hosts):

    from exactmoney import CurrencyRegistry, Money

    registry = CurrencyRegistry()
    registry.register("JPY", "Japanese Yen", "¥", 0, "0.00680000")
    registry.freeze()
    Money("1500", "JPY", registry=registry)

Configuration from the environment (see exactmoney.config):

    EXACTMONEY_DEFAULT_CURRENCY=USD
    EXACTMONEY_CURRENCIES='{"EUR": {...}}'

================================================================================
"""

from .config import (
    CurrencyConfig,
    MoneySettings,
    build_registry,
    get_registry,
    get_settings,
)
from .core import Money
from .currency import (
    FIELDS,
    USD,
    CurrencyDescriptor,
    CurrencyRegistry,
)
from .errors import (
    FloatAmountError,
    InvalidAmount,
    InvalidRatioSum,
    MoneyError,
    NoDefaultCurrency,
    RegistryFrozen,
    UnknownCurrency,
    UnknownField,
)
from .formatting import FormatHook

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Core
    "Money",
    # Currencies
    "CurrencyDescriptor",
    "CurrencyRegistry",
    "FIELDS",
    "USD",
    "FormatHook",
    # Configuration
    "CurrencyConfig",
    "MoneySettings",
    "build_registry",
    "get_registry",
    "get_settings",
    # Errors
    "MoneyError",
    "UnknownCurrency",
    "UnknownField",
    "NoDefaultCurrency",
    "InvalidRatioSum",
    "FloatAmountError",
    "InvalidAmount",
    "RegistryFrozen",
]
