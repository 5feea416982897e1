"""Display formatting for rounded decimal amounts."""

from __future__ import annotations

from decimal import Decimal
from typing import Callable

# (amount, currency code) -> display string
FormatHook = Callable[[Decimal, str], str]


def group_thousands(integer: str, separator: str = ",") -> str:
    """Insert ``separator`` every three digits from the right: '1234567' -> '1,234,567'."""
    head = len(integer) % 3 or 3
    sections = [integer[:head]]
    sections.extend(integer[i:i + 3] for i in range(head, len(integer), 3))
    return separator.join(sections)


def format_amount(rounded: Decimal, symbol: str) -> str:
    """
    Render a rounded amount as ``symbol + sign + grouped integer + fraction``.

    Works on the string form only: the value may be far outside the range a
    float can hold exactly.
    """
    number = f"{rounded:f}"
    integer, _, fraction = number.partition(".")

    sign = ""
    if integer.startswith("-"):
        sign = "-"
        integer = integer[1:]

    fraction = f".{fraction}" if fraction else ""
    return f"{symbol}{sign}{group_thousands(integer)}{fraction}"
