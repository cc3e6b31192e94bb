"""
Exact quantity/unit algebra for the amounts written in recipe yields and
ingredient lists.

Amounts are written in the form ``NUMBER[-NUMBER][ UNIT]``, for example
``250 g``, ``1,5 kg``, ``2-4 apples`` or ``1/2 cup``. Numbers may use either
``.`` or ``,`` as their decimal separator and may also be simple or mixed
fractions. All arithmetic is carried out on :py:class:`~fractions.Fraction`
values: rounding only happens when a value is formatted for display by
:py:func:`format_decimal`.

.. autofunction:: split_amount_unit

.. autofunction:: split_amount

.. autofunction:: multiply_amount

.. autofunction:: split_amount_list

Internally, amounts are parsed into :py:class:`Amount` objects:

.. autoclass:: Amount
    :members:

.. autofunction:: parse_amount
"""

from typing import List, Optional, Tuple, Union

import math

import re

from fractions import Fraction

from dataclasses import dataclass

from recipe_web.number_parser import number

Number = Union[int, float, Fraction]


__all__ = [
    "TRACK_SEPARATOR",
    "Amount",
    "parse_amount",
    "split_amount_unit",
    "split_amount",
    "multiply_amount",
    "split_amount_list",
    "format_decimal",
    "to_fraction",
]


TRACK_SEPARATOR = "|"
"""Separates the yield tracks within a recipe's yields field."""

number_pattern = re.compile(
    r"(?:(?:[0-9]+[ \t]+)?[0-9]+[ \t]*/[ \t]*[0-9]+|[0-9]*[.,]?[0-9]+)"
)
"""Matches a single (unsigned) number: a fraction, mixed fraction or decimal."""

range_pattern = re.compile(
    r"(?P<low>"
    + number_pattern.pattern
    + r")(?:[ \t]*-[ \t]*(?P<high>"
    + number_pattern.pattern
    + r"))?"
)
"""Matches a number or a hyphen-separated range of two numbers."""

amount_pattern = re.compile(
    range_pattern.pattern + r"(?P<separator>\s*)(?P<unit>.*?)\s*", re.DOTALL
)
"""Matches a complete amount: a number or range followed by an optional unit."""


def to_fraction(value: Number) -> Fraction:
    """
    Convert a multiplier into an exact :py:class:`~fractions.Fraction`.

    Floats are converted via their shortest decimal representation so that,
    for example, ``0.1`` becomes exactly 1/10 rather than the nearest binary
    fraction.
    """
    if isinstance(value, float):
        return Fraction(repr(value))
    return Fraction(value)


def format_decimal(value: Fraction) -> str:
    """
    Format a value with at most two fractional digits.

    The value is rounded (half away from zero) to two decimal places, trailing
    zeros are dropped and integral values are shown without a decimal point.
    The decimal separator is always a point.

        >>> format_decimal(Fraction(1, 3))
        '0.33'
        >>> format_decimal(Fraction(5, 2))
        '2.5'
        >>> format_decimal(Fraction(500))
        '500'
    """
    value = Fraction(value)
    hundredths = math.floor(abs(value) * 100 + Fraction(1, 2))
    sign = "-" if value < 0 and hundredths != 0 else ""
    integer, fractional = divmod(hundredths, 100)
    if fractional == 0:
        return f"{sign}{integer}"
    return f"{sign}{integer}.{fractional:02d}".rstrip("0")


@dataclass(frozen=True)
class Amount:
    """
    A parsed amount: an exact value, or range of values, plus a unit.
    """

    low: Fraction
    """The amount, or the lower end of a range."""

    high: Optional[Fraction] = None
    """The upper end of a range, or None for a single value."""

    unit: str = ""
    """The unit (everything following the number), possibly empty."""

    separator: str = " "
    """The whitespace which separated the number from the unit."""

    @property
    def is_range(self) -> bool:
        return self.high is not None

    @property
    def values(self) -> Tuple[Fraction, ...]:
        """The value or the two ends of the range."""
        if self.high is None:
            return (self.low,)
        else:
            return (self.low, self.high)

    def scale(self, multiplier: Number) -> "Amount":
        """Return a copy of this amount with every value multiplied."""
        multiplier = to_fraction(multiplier)
        return Amount(
            low=self.low * multiplier,
            high=self.high * multiplier if self.high is not None else None,
            unit=self.unit,
            separator=self.separator,
        )

    def format_value(self) -> str:
        """Format the value (or range) without the unit, e.g. '2-4'."""
        return "-".join(format_decimal(value) for value in self.values)

    def format(self) -> str:
        """Format the complete amount, e.g. '2-4 apples'."""
        if self.unit:
            return f"{self.format_value()}{self.separator}{self.unit}"
        else:
            return self.format_value()

    def __str__(self) -> str:
        return self.format()


def _parse_range(match: "re.Match[str]") -> Tuple[Fraction, Optional[Fraction]]:
    low = number(match["low"])
    high = number(match["high"]) if match["high"] is not None else None
    return low, high


def parse_amount(text: str) -> Optional[Amount]:
    """
    Parse an amount-unit string into an :py:class:`Amount`. Returns None if
    the text does not start with a number.
    """
    match = amount_pattern.fullmatch(text.strip())
    if match is None:
        return None
    try:
        low, high = _parse_range(match)
    except ValueError:
        return None
    return Amount(
        low=low,
        high=high,
        unit=match["unit"],
        separator=match["separator"] if match["unit"] else "",
    )


def split_amount_unit(text: str) -> Tuple[str, str]:
    """
    Split an amount-unit string into its numeric part (a number or range) and
    its unit. When there is no unit, the unit is an empty string.

    Text which does not start with a number is returned whole as the numeric
    part, for example ``"to taste"`` becomes ``("to taste", "")``.

        >>> split_amount_unit("2-4 apples")
        ('2-4', 'apples')
    """
    text = text.strip()
    match = amount_pattern.fullmatch(text)
    if match is None:
        return (text, "")
    numeric_end = match.end("high" if match["high"] is not None else "low")
    return (text[:numeric_end], match["unit"])


def split_amount(numeric_part: str) -> Fraction:
    """
    Parse the first value of a numeric part (i.e. the part before any range
    hyphen) as an exact fraction.

    Values which cannot be parsed (e.g. "to taste") are treated as 1.
    """
    try:
        return number(numeric_part.split("-")[0])
    except ValueError:
        return Fraction(1)


def multiply_amount(text: str, multiplier: Number) -> str:
    """
    Multiply the number (or both ends of a range) in an amount-unit string,
    leaving the unit unchanged.

        >>> multiply_amount("2-4 apples", 2)
        '4-8 apples'
        >>> multiply_amount("250 g", Fraction(1, 3))
        '83.33 g'

    Text without a leading number is returned unchanged.
    """
    amount = parse_amount(text)
    if amount is None:
        return text
    return amount.scale(multiplier).format()


def split_amount_list(yields: str) -> List[str]:
    """
    Split a yields field into its individual yield tracks, e.g.
    ``"4 servings | 2 kg dough"`` becomes ``["4 servings", "2 kg dough"]``.
    Empty tracks are kept, so an empty field gives a single empty track.
    """
    return [track.strip() for track in yields.split(TRACK_SEPARATOR)]
