"""Scale normalization and nearest-value matching."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .constants import EPSILON
from .length import parse_length_token, to_px

ScaleEntry = int | float | str


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _dedupe_sorted(values: Iterable[float]) -> list[float]:
    """Sort ascending and collapse members closer than EPSILON."""
    result: list[float] = []
    for value in sorted(values):
        if result and abs(value - result[-1]) < EPSILON:
            continue
        result.append(value)
    return result


def normalize_scale(scale: Iterable[ScaleEntry], base_font_size: float) -> list[float]:
    """Project a raw scale into pixel space.

    Numbers are taken as pixels. Strings are parsed and converted when their
    unit is px, rem, em or unitless; other units are dropped.

    Args:
        scale: Raw scale entries.
        base_font_size: Pixel size of one rem/em.

    Returns:
        Sorted, deduplicated pixel values.
    """
    normalized: list[float] = []

    for entry in scale:
        if _is_number(entry):
            normalized.append(float(entry))
            continue

        parsed = parse_length_token(str(entry))
        if parsed is None:
            continue

        px = to_px(parsed.number, parsed.unit, base_font_size)
        if px is not None:
            normalized.append(px)

    return _dedupe_sorted(normalized)


def normalize_scale_by_unit(scale: Iterable[ScaleEntry]) -> dict[str, list[float]]:
    """Bucket a raw scale by literal unit.

    Untagged numbers and unitless strings land in the ``px`` bucket.
    """
    by_unit: dict[str, list[float]] = {}

    for entry in scale:
        if _is_number(entry):
            by_unit.setdefault("px", []).append(float(entry))
            continue

        parsed = parse_length_token(str(entry))
        if parsed is None:
            continue

        by_unit.setdefault(parsed.unit or "px", []).append(parsed.number)

    return {unit: _dedupe_sorted(values) for unit, values in by_unit.items()}


@dataclass(frozen=True)
class NearestValues:
    """Bounding scale members around a target and the chosen nearest one."""

    lower: float
    upper: float
    nearest: float


def nearest_scale_values(target: float, scale: Sequence[float]) -> NearestValues | None:
    """Find the scale members bounding ``target``.

    ``lower`` is the largest member <= target and ``upper`` the first member
    >= target; both clamp to the scale ends. On an exact midpoint the lower
    member wins.

    Args:
        target: Magnitude to place on the scale.
        scale: Sorted ascending scale.

    Returns:
        NearestValues, or None if the scale is empty.
    """
    if not scale:
        return None

    lower = scale[0]
    upper = scale[-1]

    for value in scale:
        if value <= target:
            lower = value
        if value >= target:
            upper = value
            break

    nearest = lower if abs(target - lower) <= abs(upper - target) else upper
    return NearestValues(lower=lower, upper=upper, nearest=nearest)


def is_on_scale(value: float, scale: Iterable[float]) -> bool:
    return any(abs(entry - value) < EPSILON for entry in scale)
