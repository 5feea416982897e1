"""
currency.py — Currency descriptors and the registry that resolves them

================================================================================
LIFECYCLE
================================================================================

A registry starts with one built-in currency (USD) and is filled during
application start-up:

    registry = CurrencyRegistry()
    registry.register("EUR", "Euro", "€", 2, "1.17647059")
    registry.set_default("EUR")
    registry.freeze()

Re-registering a code overwrites it (last write wins). Currencies are never
removed. After freeze() every mutation raises RegistryFrozen, so Money values
built on the registry can be shared across threads without surprises.

Reads and writes are serialized by a re-entrant lock; freezing is still the
supported way to share a registry between threads.

================================================================================
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional, Union

from .decimals import DecimalLike, to_decimal
from .errors import RegistryFrozen, UnknownCurrency, UnknownField
from .formatting import FormatHook

logger = logging.getLogger(__name__)

FIELDS = ("name", "symbol", "precision", "reference_value")


@dataclass(frozen=True, slots=True)
class CurrencyDescriptor:
    """
    Registered metadata for one currency code.

    precision: digits after the decimal separator (USD=2, JPY=0, KWD=3)
    reference_value: value of one unit relative to a unit of account shared
        by every currency; conversion goes through it, never through pairwise
        rates.
    """
    code: str
    name: str
    symbol: str
    precision: int
    reference_value: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.code, str) or not self.code:
            raise ValueError(f"code must be a non-empty string, got {self.code!r}")
        if isinstance(self.precision, bool) or not isinstance(self.precision, int) or self.precision < 0:
            raise ValueError(f"precision must be an integer >= 0, got {self.precision!r}")

        reference_value = to_decimal(self.reference_value)
        if reference_value <= 0:
            raise ValueError(f"reference_value must be > 0, got {reference_value}")
        object.__setattr__(self, "reference_value", reference_value)


USD = CurrencyDescriptor(
    code="USD",
    name="United States Dollar",
    symbol="$",
    precision=2,
    reference_value=Decimal("1.00000000"),
)


class CurrencyRegistry:
    """Mapping of currency code -> CurrencyDescriptor, plus default and format hook."""

    def __init__(self, include_builtin: bool = True):
        self._lock = threading.RLock()
        self._currencies: Dict[str, CurrencyDescriptor] = {}
        self._default: Optional[str] = None
        self._format_hook: Optional[FormatHook] = None
        self._frozen = False
        if include_builtin:
            self._currencies[USD.code] = USD

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def register(
        self,
        code: str,
        name: str,
        symbol: str,
        precision: int,
        reference_value: DecimalLike,
    ) -> CurrencyDescriptor:
        """Add a currency or overwrite an existing one. Returns the stored descriptor."""
        descriptor = CurrencyDescriptor(code, name, symbol, precision, reference_value)
        with self._lock:
            self._check_mutable("register a currency")
            previous = self._currencies.get(code)
            self._currencies[code] = descriptor

        if previous is not None and previous != descriptor:
            logger.info(f"Currency '{code}' redefined: {previous} -> {descriptor}")
        else:
            logger.debug(f"Registered currency {descriptor}")
        return descriptor

    def set_default(self, code: str) -> None:
        with self._lock:
            self._check_mutable("set the default currency")
            self._require(code)
            self._default = code
        logger.debug(f"Default currency set to '{code}'")

    def register_format_hook(self, hook: Optional[FormatHook]) -> None:
        """Route every Money.format() through ``hook``. None restores built-in formatting."""
        if hook is not None and not callable(hook):
            raise TypeError(f"format hook must be callable, got {hook!r}")
        with self._lock:
            self._check_mutable("register a format hook")
            self._format_hook = hook
        logger.debug(f"Format hook set to {hook!r}")

    def freeze(self) -> None:
        with self._lock:
            self._frozen = True
        logger.debug(f"Currency registry frozen with {len(self._currencies)} currencies")

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def lookup(
        self, code: str, field: Optional[str] = None
    ) -> Union[CurrencyDescriptor, str, int, Decimal]:
        """
        Return the descriptor for ``code``, or one of its FIELDS.

        Raises:
            UnknownCurrency: code is not registered
            UnknownField: field is not one of FIELDS
        """
        with self._lock:
            descriptor = self._require(code)
        if field is None:
            return descriptor
        if field not in FIELDS:
            raise UnknownField(field, FIELDS)
        return getattr(descriptor, field)

    def codes(self) -> List[str]:
        with self._lock:
            return list(self._currencies)

    @property
    def default(self) -> Optional[str]:
        return self._default

    @property
    def format_hook(self) -> Optional[FormatHook]:
        return self._format_hook

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, code: object) -> bool:
        with self._lock:
            return code in self._currencies

    def __len__(self) -> int:
        with self._lock:
            return len(self._currencies)

    def __repr__(self) -> str:
        return (
            f"CurrencyRegistry(codes={self.codes()}, default={self._default!r}, "
            f"frozen={self._frozen})"
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require(self, code: str) -> CurrencyDescriptor:
        try:
            return self._currencies[code]
        except (KeyError, TypeError):
            raise UnknownCurrency(code, self._currencies) from None

    def _check_mutable(self, operation: str) -> None:
        if self._frozen:
            raise RegistryFrozen(operation)
