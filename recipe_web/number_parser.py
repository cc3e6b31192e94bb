import re

from fractions import Fraction


fraction_pattern = re.compile(
    r"((?P<integer>[0-9]+)[ \t]+)?(?P<numerator>[0-9]+)[ \t]*/[ \t]*(?P<denominator>[0-9]+)"
)


def number(value: str) -> Fraction:
    """
    Parse a number formatted as a fraction (e.g. 9 3/4), a decimal using
    either a point or a comma as the decimal separator (e.g. 3.14 or 3,14) or
    an integer (e.g. 123) into an exact :py:class:`~fractions.Fraction`.
    Throws a :py:exc:`ValueError` if this fails.
    """
    value = value.strip()
    match = fraction_pattern.fullmatch(value)
    if match is not None:
        integer = int(match["integer"]) if match["integer"] is not None else 0
        numerator = int(match["numerator"])
        denominator = int(match["denominator"])
        if denominator == 0:
            raise ValueError(f"Zero denominator in {value!r}")
        return integer + Fraction(numerator, denominator)
    else:
        return Fraction(value.replace(",", "."))
