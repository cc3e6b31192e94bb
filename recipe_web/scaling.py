"""
The controls used to pick the multiplier a recipe is scaled by.

Every yield track of a recipe (see
:py:func:`~recipe_web.quantity.split_amount_list`) acts as a control: entering
a new amount for a track sets the multiplier to the new amount divided by the
track's original (base) amount. For example, with yields
``"4 servings | 2 kg dough"``, entering ``6`` for the first track or ``3``
for the second both give a multiplier of 3/2.

When no track has a base amount of exactly one, an additional plain
multiplier control is shown (see :py:func:`needs_multiplier_control`).

.. autofunction:: yield_tracks

.. autoclass:: YieldTrack
    :members:

.. autofunction:: adjust_multiplier

.. autofunction:: increase_multiplier

.. autofunction:: decrease_multiplier
"""

from typing import List

import re

from fractions import Fraction

from dataclasses import dataclass

from recipe_web.number_parser import number
from recipe_web.quantity import (
    Number,
    format_decimal,
    multiply_amount,
    parse_amount,
    split_amount,
    split_amount_list,
    split_amount_unit,
    to_fraction,
)


__all__ = [
    "YieldTrack",
    "yield_tracks",
    "needs_multiplier_control",
    "adjust_multiplier",
    "increase_multiplier",
    "decrease_multiplier",
]


@dataclass(frozen=True)
class YieldTrack:
    """A single (scaled) yield track, ready for display."""

    amounts: List[str]
    """
    The formatted amount, or the two formatted ends of a range. The first
    entry is the editable value of the control.
    """

    unit: str
    """The unit following the amount, possibly empty."""

    base: Fraction
    """
    The unscaled amount (the lower end of a range) which entered amounts are
    divided by to obtain a multiplier.
    """


def _base(track: str) -> Fraction:
    numeric_part, _unit = split_amount_unit(track)
    return split_amount(numeric_part)


def yield_tracks(yields: str, multiplier: Number = 1) -> List[YieldTrack]:
    """
    Split a recipe's yields into tracks scaled by the given multiplier.

    Tracks which don't start with a number (e.g. "a big bowl") can't be
    scaled: they are shown as an amount of "1" with the whole text as the
    unit and a base of 1.
    """
    tracks = []
    for track in split_amount_list(yields):
        amount = parse_amount(multiply_amount(track, multiplier))
        if amount is None:
            tracks.append(YieldTrack(amounts=["1"], unit=track, base=Fraction(1)))
        else:
            tracks.append(
                YieldTrack(
                    amounts=[format_decimal(value) for value in amount.values],
                    unit=amount.unit,
                    base=_base(track),
                )
            )
    return tracks


def needs_multiplier_control(yields: str) -> bool:
    """
    Is a separate multiplier control required? Not if some yield track has a
    base amount of exactly one since that track's control already shows the
    multiplier.
    """
    return all(_base(track) != 1 for track in split_amount_list(yields))


def adjust_multiplier(value: str, divisor: Number = 1) -> Fraction:
    """
    Compute the multiplier resulting from entering ``value`` into a control
    whose base amount is ``divisor``.

    Leading zeros are ignored. Empty, negative and unparseable values give a
    multiplier of zero. A divisor of zero is treated as one.
    """
    value = re.sub(r"^0*", "", value.strip())
    if value == "" or value.startswith("-"):
        return Fraction(0)
    try:
        amount = number(value)
    except ValueError:
        return Fraction(0)

    divisor = to_fraction(divisor)
    if divisor == 0:
        divisor = Fraction(1)
    return amount / divisor


def increase_multiplier(multiplier: Number, divisor: Number = 1) -> Fraction:
    """
    Step a multiplier up for a control with the given base amount. Below one
    step (``1/divisor``) the multiplier doubles, otherwise one step is added.
    """
    multiplier = to_fraction(multiplier)
    step = _step(divisor)
    if multiplier < step:
        return multiplier * 2
    return multiplier + step


def decrease_multiplier(multiplier: Number, divisor: Number = 1) -> Fraction:
    """
    Step a multiplier down for a control with the given base amount. At or
    below one step (``1/divisor``) the multiplier halves, otherwise one step
    is subtracted.
    """
    multiplier = to_fraction(multiplier)
    step = _step(divisor)
    if multiplier <= step:
        return multiplier / 2
    return multiplier - step


def _step(divisor: Number) -> Fraction:
    divisor = to_fraction(divisor)
    if divisor == 0:
        return Fraction(1)
    return 1 / divisor
