"""Scale matching shared by the scale conformance rules."""

import re
from collections.abc import Collection, Sequence
from dataclasses import dataclass

from ..length import Length, format_length, from_px, to_px
from ..options import ScaleOptions
from ..properties import resolve_property_scale
from ..scales import (
    NearestValues,
    ScaleEntry,
    is_on_scale,
    nearest_scale_values,
    normalize_scale,
    normalize_scale_by_unit,
)
from ..stylesheet import Declaration
from ..value_parser import ValueNode
from ..walker import (
    WalkContext,
    is_keyword,
    is_math_function,
    is_token_function,
    should_lint_math_argument,
    walk_root_value_nodes,
    walk_transform_translate_nodes,
)


def invalid_preset_message(preset_name: str, preset_names: Sequence[str]) -> str:
    return (
        f'Unknown scale preset "{preset_name}". '
        f"Available presets: {', '.join(preset_names)}."
    )


@dataclass
class ScaleState:
    """Normalized forms of the scale applying to one property."""

    scale_px: list[float]
    scale_by_unit: dict[str, list[float]]


class ScaleStateCache:
    """Per-pass cache of normalized scales keyed by property name."""

    def __init__(self, options: ScaleOptions, default_scale: Sequence[ScaleEntry]):
        self.options = options
        self.default_scale = default_scale
        self.overrides = options.property_scale_overrides()
        self._cache: dict[str, ScaleState] = {}

    def get(self, prop: str) -> ScaleState:
        cached = self._cache.get(prop)
        if cached is not None:
            return cached

        selected = resolve_property_scale(prop, self.overrides, self.default_scale)
        state = ScaleState(
            scale_px=normalize_scale(selected, self.options.base_font_size),
            scale_by_unit=normalize_scale_by_unit(selected),
        )
        self._cache[prop] = state
        return state


@dataclass
class ScaleMatch:
    """An off-scale value with its bounding scale members.

    ``unit`` is the unit the bounds are expressed in: the literal unit under
    the exact strategy, ``px`` under convert.
    """

    nearest: NearestValues
    unit: str

    @property
    def lower_text(self) -> str:
        return format_length(self.nearest.lower, self.unit)

    @property
    def upper_text(self) -> str:
        return format_length(self.nearest.upper, self.unit)


def is_unit_in_scope(length: Length, units: Collection[str]) -> bool:
    """Percentages and listed units are in scope; other units pass through."""
    return not length.unit or length.unit == "%" or length.unit in units


def match_scale(length: Length, options: ScaleOptions, state: ScaleState) -> ScaleMatch | None:
    """Locate an off-scale length on the scale.

    Args:
        length: Parsed non-zero length.
        options: Rule options (unit strategy and base font size).
        state: Normalized scale for the property.

    Returns:
        ScaleMatch if the magnitude is off-scale, None if it is on-scale or
        cannot be compared.
    """
    if options.unit_strategy == "exact":
        unit = length.unit or "px"
        unit_scale = state.scale_by_unit.get(unit)
        if not unit_scale or is_on_scale(length.magnitude, unit_scale):
            return None
        nearest = nearest_scale_values(length.magnitude, unit_scale)
        return ScaleMatch(nearest=nearest, unit=unit) if nearest else None

    px = to_px(length.magnitude, length.unit, options.base_font_size)
    if px is None or is_on_scale(px, state.scale_px):
        return None
    nearest = nearest_scale_values(px, state.scale_px)
    return ScaleMatch(nearest=nearest, unit="px") if nearest else None


def is_numeric_on_scale(length: Length, options: ScaleOptions, state: ScaleState) -> bool:
    if options.unit_strategy == "exact":
        unit_scale = state.scale_by_unit.get(length.unit or "px")
        return bool(unit_scale) and is_on_scale(length.magnitude, unit_scale)

    px = to_px(length.magnitude, length.unit, options.base_font_size)
    return px is not None and is_on_scale(px, state.scale_px)


def get_fixed_value(length: Length, nearest: float, options: ScaleOptions) -> str | None:
    """Format the nearest scale member in the source value's unit and sign.

    Returns None for percentages and units outside ``options.units``.
    """
    unit = length.unit or "px"
    if unit == "%" or unit not in options.units:
        return None

    signed = -abs(nearest) if length.is_negative else nearest

    if options.unit_strategy == "exact":
        return format_length(signed, unit)

    converted = from_px(signed, unit, options.base_font_size)
    if converted is None:
        return None
    return format_length(converted, unit)


def collect_candidate_nodes(
    decl: Declaration,
    options: ScaleOptions,
    token_functions: Collection[str] = (),
    token_regex: re.Pattern | None = None,
    ignore_values: Collection[str] = (),
) -> list[tuple[ValueNode, WalkContext]]:
    """Collect the word nodes of a declaration eligible for scale checks.

    ``transform`` values only contribute translate-function arguments. Token
    functions (when a token pattern is given) and, unless enforced, math
    functions are not descended into.
    """
    candidates: list[tuple[ValueNode, WalkContext]] = []
    math_kwargs = options.should_lint_math_kwargs()

    def visit(node: ValueNode, context: WalkContext) -> bool:
        if node.type == "function":
            if token_regex is not None and is_token_function(
                node, token_functions, token_regex
            ):
                return True
            return is_math_function(node.value) and not options.enforce_inside_math_functions

        if is_keyword(node.value, ignore_values):
            return False
        if should_lint_math_argument(context, **math_kwargs):
            candidates.append((node, context))
        return False

    if decl.prop.lower() == "transform":
        walk_transform_translate_nodes(decl.parsed, visit)
    else:
        walk_root_value_nodes(decl.parsed, visit)
    return candidates
