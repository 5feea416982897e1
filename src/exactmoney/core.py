"""
core.py — Money, a currency-aware monetary value

================================================================================
DESIGN PRINCIPLES
================================================================================

1. INTERNAL REPRESENTATION
   A Decimal carrying exactly one digit more than the currency's precision
   (the guard digit), plus the currency code. Never a float.

2. ROUNDING ONLY ON READ
   Arithmetic keeps the guard digit. str(), format() and every comparison
   round to the currency's precision first, so 10.004 and 10.005 USD are
   equal (both round half-even to 10.00).

3. CURRENCY NORMALIZATION
   Binary operations convert the right-hand operand into the left-hand
   currency before doing anything else. The result is always in the
   receiver's currency.

4. IMMUTABILITY
   Frozen dataclass. Every operation returns a new instance; convert() to the
   same currency returns the receiver itself.

5. EXACT ALLOCATION
   allocate() guarantees sum(parts) == round(self), to the last minor unit,
   with a deterministic remainder order.

================================================================================
CONVERSION
================================================================================

Each currency has a reference value relative to one unit of account. Rates
are never stored per pair:

    new = truncate(amount * source.reference_value, 8) / target.reference_value

with the division truncated at the target's guard precision. Each hop
truncates, so A -> B -> C is not guaranteed to equal A -> C to the last guard
digit. Stored data depends on this exact two-step chain; do not "improve" it.

================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import List, Optional, Sequence, Tuple

from . import decimals
from .config import get_registry
from .currency import CurrencyDescriptor, CurrencyRegistry
from .decimals import DecimalLike, RatioLike
from .errors import InvalidRatioSum, NoDefaultCurrency
from .formatting import FormatHook, format_amount

# Extra digits kept beyond the currency precision
GUARD_DIGITS = 1

# Places kept for amount * source reference value during conversion
CONVERSION_PLACES = 8

# Places at which allocation ratios must add up to exactly 1
RATIO_PLACES = 10


@dataclass(frozen=True, slots=True, init=False, eq=False, repr=False)
class Money:
    """
    Immutable monetary amount in a registered currency.

    INVARIANTS:
    1. _amount has exactly precision + GUARD_DIGITS decimal places
    2. _currency resolved in _registry when the value was built
    3. no float ever enters or leaves the value path

    USAGE:
        price = Money("19.99", "USD")
        total = price.multiply(3).add(Money("5", "USD"))
        parts = total.allocate([Fraction(1, 3)] * 3)

    Money is unhashable: equality rounds and converts across currencies, so
    no hash can be consistent with it.

    Comparing, ``==`` included, converts the other value with its own
    registry. When that registry does not know this value's currency the
    comparison raises UnknownCurrency instead of returning False, and so do
    ``in`` and ``list.index`` over such values.
    """
    _amount: Decimal
    _currency: str
    _registry: CurrencyRegistry

    __hash__ = None

    # Maximum parts for distribute() (DoS protection)
    MAX_DISTRIBUTION_PARTS = 10_000

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    def __init__(
        self,
        amount: DecimalLike,
        currency: Optional[str] = None,
        *,
        registry: Optional[CurrencyRegistry] = None,
    ):
        """
        Args:
            amount: str, int or Decimal. Floats raise FloatAmountError.
            currency: registered code; the registry default when omitted
            registry: registry to resolve currencies in; the process-wide
                one from get_registry() when omitted

        Raises:
            NoDefaultCurrency: currency omitted and no default set
            UnknownCurrency: currency is not registered
        """
        registry = registry if registry is not None else get_registry()
        if currency is None:
            currency = registry.default
            if currency is None:
                raise NoDefaultCurrency()

        precision = registry.lookup(currency, "precision")
        value = decimals.truncate(decimals.to_decimal(amount), precision + GUARD_DIGITS)

        object.__setattr__(self, "_amount", value)
        object.__setattr__(self, "_currency", currency)
        object.__setattr__(self, "_registry", registry)

    @classmethod
    def zero(
        cls, currency: Optional[str] = None, *, registry: Optional[CurrencyRegistry] = None
    ) -> Money:
        """Zero in a currency. Useful as the start value for sum()."""
        return cls(0, currency, registry=registry)

    def _new(self, amount: Decimal, currency: Optional[str] = None) -> Money:
        return Money(amount, currency or self._currency, registry=self._registry)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def amount(self) -> Decimal:
        """Stored amount, guard digit included."""
        return self._amount

    @property
    def currency(self) -> str:
        return self._currency

    @property
    def registry(self) -> CurrencyRegistry:
        return self._registry

    @property
    def descriptor(self) -> CurrencyDescriptor:
        return self._registry.lookup(self._currency)

    @property
    def precision(self) -> int:
        return self.descriptor.precision

    def is_zero(self) -> bool:
        return self._round().is_zero()

    def is_positive(self) -> bool:
        return self._round() > 0

    def is_negative(self) -> bool:
        return self._round() < 0

    # -------------------------------------------------------------------------
    # Rounding
    # -------------------------------------------------------------------------

    def _round(self) -> Decimal:
        """Stored amount rounded to the currency precision. Never mutates."""
        return decimals.round_to(self._amount, self.precision)

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def convert(self, new_currency: str) -> Money:
        """
        This amount expressed in ``new_currency``.

        Raises:
            UnknownCurrency: new_currency is not registered
        """
        if new_currency == self._currency:
            return self

        target = self._registry.lookup(new_currency)
        source = self.descriptor

        in_reference = decimals.truncate(
            decimals.mul(self._amount, source.reference_value), CONVERSION_PLACES
        )
        new_amount = decimals.divide(
            in_reference, target.reference_value, target.precision + GUARD_DIGITS
        )
        return self._new(new_amount, new_currency)

    def _normalize(self, other: Money, operation: str) -> Money:
        if not isinstance(other, Money):
            raise TypeError(
                f"Cannot {operation} Money and {type(other).__name__}. "
                f"Wrap the value in Money first."
            )
        return other.convert(self._currency)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def add(self, addend: Money) -> Money:
        """Sum in this currency; ``addend`` is converted first."""
        converted = self._normalize(addend, "add")
        return self._new(decimals.add(self._amount, converted._amount))

    def subtract(self, subtrahend: Money) -> Money:
        """Difference in this currency; ``subtrahend`` is converted first."""
        converted = self._normalize(subtrahend, "subtract")
        return self._new(decimals.sub(self._amount, converted._amount))

    def multiply(self, multiplicand: RatioLike) -> Money:
        """
        Product with a scalar (str, int, Decimal or Fraction).

        Only the guard-digit truncation applies here; rounding to the
        currency precision happens on read.
        """
        if isinstance(multiplicand, Money):
            raise TypeError("Money can only be multiplied by a number, not by Money")
        product = Fraction(self._amount) * decimals.to_fraction(multiplicand)
        return self._new(decimals.truncate(product, self.precision + GUARD_DIGITS))

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, factor: RatioLike) -> Money:
        if isinstance(factor, Money):
            return NotImplemented
        return self.multiply(factor)

    def __rmul__(self, factor: RatioLike) -> Money:
        return self.__mul__(factor)

    def __neg__(self) -> Money:
        return self._new(self._amount.copy_negate())

    def __abs__(self) -> Money:
        return self._new(self._amount.copy_abs())

    # -------------------------------------------------------------------------
    # Allocation
    # -------------------------------------------------------------------------

    def allocate(self, ratios: Sequence[RatioLike]) -> List[Money]:
        """
        Split into ``len(ratios)`` parts whose sum is exactly round(self).

        ALGORITHM:
        1. ratios must add up to 1 (checked at RATIO_PLACES)
        2. each part = truncate(amount * ratio, precision); truncation never
           over-allocates for positive amounts
        3. the shortfall, a whole number of smallest units, is handed out one
           unit at a time round-robin in ratio order (taken back the same way
           when negative amounts leave the parts too large)

        Earlier ratios get remainder units first, whatever their size; a ratio
        of 0 can still receive a unit.

        Args:
            ratios: at least two str, int, Decimal or Fraction values.
                Fraction(1, 3) is exact where "0.3333333333" is not.

        Raises:
            ValueError: fewer than two ratios
            InvalidRatioSum: ratios do not add up to 1
            FloatAmountError: a ratio is a float
        """
        ratios = list(ratios)
        if len(ratios) < 2:
            raise ValueError(f"allocate needs at least 2 ratios, got {len(ratios)}")

        exact_ratios = [decimals.to_fraction(r) for r in ratios]
        if decimals.truncate(sum(exact_ratios, Fraction(0)), RATIO_PLACES) != 1:
            raise InvalidRatioSum(ratios)

        precision = self.precision
        unit = decimals.smallest_unit(precision)
        amount = Fraction(self._amount)

        parts = [decimals.truncate(amount * r, precision) for r in exact_ratios]

        shortfall = decimals.sub(self._round(), decimals.total(parts))
        shortfall_units = int(shortfall.scaleb(precision, decimals.EXACT))

        step = unit if shortfall_units >= 0 else -unit
        full_rounds, extra = divmod(abs(shortfall_units), len(parts))
        for i in range(len(parts)):
            units = full_rounds + (1 if i < extra else 0)
            if units:
                parts[i] = decimals.add(parts[i], decimals.mul(step, Decimal(units)))

        return [self._new(part) for part in parts]

    def distribute(self, n: int) -> List[Money]:
        """
        Split into ``n`` equal parts (up to one smallest unit apart).

        Raises:
            ValueError: n <= 0 or n > MAX_DISTRIBUTION_PARTS
        """
        if isinstance(n, bool) or not isinstance(n, int):
            raise TypeError(f"n must be an int, got {type(n).__name__}")
        if n <= 0:
            raise ValueError(f"n must be > 0, got {n}")
        if n > self.MAX_DISTRIBUTION_PARTS:
            raise ValueError(f"n exceeds the limit of {self.MAX_DISTRIBUTION_PARTS}")

        if n == 1:
            return [self._new(self._round())]
        return self.allocate([Fraction(1, n)] * n)

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def _rounded_pair(self, other: Money) -> Tuple[Decimal, Decimal]:
        converted = self._normalize(other, "compare")
        return self._round(), converted._round()

    def eq(self, other: Money) -> bool:
        mine, theirs = self._rounded_pair(other)
        return mine == theirs

    def lt(self, other: Money) -> bool:
        mine, theirs = self._rounded_pair(other)
        return mine < theirs

    def lte(self, other: Money) -> bool:
        mine, theirs = self._rounded_pair(other)
        return mine <= theirs

    def gt(self, other: Money) -> bool:
        mine, theirs = self._rounded_pair(other)
        return mine > theirs

    def gte(self, other: Money) -> bool:
        mine, theirs = self._rounded_pair(other)
        return mine >= theirs

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.eq(other)

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.lt(other)

    def __le__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.lte(other)

    def __gt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.gt(other)

    def __ge__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.gte(other)

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def format(self, hook: Optional[FormatHook] = None) -> str:
        """
        Display string such as ``$1,234.50``.

        ``hook`` (or the registry's format hook when not given) receives the
        stored amount and currency code and its result is returned as is.
        """
        hook = hook if hook is not None else self._registry.format_hook
        if hook is not None:
            return hook(self._amount, self._currency)
        return format_amount(self._round(), self.descriptor.symbol)

    def __str__(self) -> str:
        """Rounded amount without symbol or separators, e.g. '2000.12'."""
        return f"{self._round():f}"

    def __repr__(self) -> str:
        return f"Money('{self._amount:f}', '{self._currency}')"
