"""Length token parsing and formatting.

Parses raw CSS length literals (``12px``, ``-0.5rem``, ``50%``) into a
``Length`` and converts between pixel space and font-relative units.
"""

import math
import re
from dataclasses import dataclass

from .constants import EPSILON

LENGTH_RE = re.compile(r"^(-?(?:\d+|\d*\.\d+))(?:([a-zA-Z%]+))?$")


@dataclass(frozen=True)
class Length:
    """A parsed length literal.

    ``unit`` is lowercase, or an empty string for unitless numbers.
    """

    number: float
    unit: str
    raw: str

    @property
    def is_negative(self) -> bool:
        return self.number < 0

    @property
    def magnitude(self) -> float:
        return abs(self.number)


def parse_length_token(raw_value: object) -> Length | None:
    """Parse a raw value into a Length.

    Args:
        raw_value: Candidate token, usually a value-node word.

    Returns:
        Parsed Length, or None if the value is not a plain length literal.
    """
    if not isinstance(raw_value, str):
        return None

    value = raw_value.strip()
    match = LENGTH_RE.match(value)
    if not match:
        return None

    number = float(match.group(1))
    if not math.isfinite(number):
        return None

    return Length(number=number, unit=(match.group(2) or "").lower(), raw=value)


def to_px(number: float, unit: str, base_font_size: float) -> float | None:
    """Convert a number in ``unit`` to pixels, or None if not convertible."""
    if unit in ("", "px"):
        return number
    if unit in ("rem", "em"):
        return number * base_font_size
    return None


def from_px(px_value: float, unit: str, base_font_size: float) -> float | None:
    """Convert a pixel value back into ``unit``, or None if not convertible."""
    if unit in ("", "px"):
        return px_value
    if unit in ("rem", "em"):
        return px_value / base_font_size
    return None


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from negative infinity, like JavaScript's Math.round."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def format_number(value: float) -> str:
    """Format a number with at most four decimals and no trailing zeros."""
    if abs(value) < EPSILON:
        return "0"

    text = f"{round_half_up(value, 4):.4f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_length(number: float, unit: str) -> str:
    """Format a number and unit back into a length literal.

    Zero keeps ``px`` but drops ``rem``, ``em`` and the unitless marker.
    """
    if number == 0:
        if unit == "px":
            return "0px"
        if unit in ("rem", "em", ""):
            return "0"

    return f"{format_number(number)}{unit}"


def numbers_equal(a: float, b: float) -> bool:
    return abs(a - b) < EPSILON
