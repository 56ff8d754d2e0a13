"""Token map building and token replacement lookup.

The effective token map merges four sources in order, later sources
overriding earlier ones on key collision:

1. the explicit ``tokenMap`` option
2. the ``tokenMapFile`` JSON file
3. custom properties declared in the linted stylesheet
4. the Tailwind spacing scale
"""

import re
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .constants import TOKEN_REFERENCE_PREFIXES
from .guard_logging import get_logger
from .length import Length, format_length, format_number, parse_length_token, to_px
from .stylesheet import Stylesheet
from .token_adapters import SpacingConfigLoader, load_token_map_file

if TYPE_CHECKING:
    from .options import PreferTokenOptions

logger = get_logger()

TokenMap = dict[str, str]


def pixel_key(px: float) -> str:
    return f"{format_number(px)}px"


def normalize_token_reference(token_reference: object) -> str | None:
    """Normalize a token name into a usable reference.

    ``var(``, ``theme(``, ``token(``, ``$`` and ``@`` references are kept;
    ``--name`` and bare ``name`` become ``var(--name)``.
    """
    if not isinstance(token_reference, str):
        return None

    trimmed = token_reference.strip()
    if not trimmed:
        return None
    if trimmed.startswith(TOKEN_REFERENCE_PREFIXES):
        return trimmed
    if trimmed.startswith("--"):
        return f"var({trimmed})"
    return f"var(--{trimmed})"


def add_length_value_mapping(
    token_map: TokenMap, raw_length: object, token_reference: object, base_font_size: float
) -> None:
    """Index a token under both its literal-unit and pixel-equivalent keys."""
    if not isinstance(raw_length, str):
        return

    parsed = parse_length_token(raw_length)
    if parsed is None:
        return

    token = normalize_token_reference(token_reference)
    if token is None:
        return

    absolute = abs(parsed.number)
    token_map[format_length(absolute, parsed.unit or "px")] = token

    px = to_px(absolute, parsed.unit, base_font_size)
    if px is not None:
        token_map[pixel_key(px)] = token


def merge_explicit_token_map(target: TokenMap, source: Mapping[str, Any] | None) -> TokenMap:
    for raw, token_reference in (source or {}).items():
        if isinstance(token_reference, str):
            target[raw] = token_reference
    return target


def merge_token_map_from_file(
    current_map: TokenMap, token_map_file: Path, base_font_size: float
) -> TokenMap:
    """Merge entries from a token-map JSON file.

    Accepted entry shapes:
    - ``"12px": "var(--space-3)"``: the key is a length, copied verbatim
    - ``"--space-3": "12px"``: string length value, key is the token
    - ``"space-3": 12``: number of pixels
    - ``"space-3": {"value": "12px"}``: design-token object
    """
    data = load_token_map_file(token_map_file)
    if data is None:
        return current_map

    next_map = dict(current_map)
    for entry_key, entry_value in data.items():
        if isinstance(entry_value, str):
            if parse_length_token(entry_key):
                next_map[entry_key] = entry_value
            elif parse_length_token(entry_value):
                add_length_value_mapping(next_map, entry_value, entry_key, base_font_size)
        elif isinstance(entry_value, (int, float)) and not isinstance(entry_value, bool):
            add_length_value_mapping(
                next_map, f"{format_number(entry_value)}px", entry_key, base_font_size
            )
        elif isinstance(entry_value, dict) and isinstance(entry_value.get("value"), str):
            add_length_value_mapping(next_map, entry_value["value"], entry_key, base_font_size)

    return next_map


def merge_token_map_from_custom_properties(
    current_map: TokenMap,
    stylesheet: Stylesheet,
    token_regex: re.Pattern,
    base_font_size: float,
) -> TokenMap:
    """Map non-zero custom property lengths matching the token pattern to ``var()``."""
    next_map = dict(current_map)
    for decl in stylesheet.walk_decls():
        prop = decl.prop.lower()
        if not prop.startswith("--") or not token_regex.search(prop):
            continue

        parsed = parse_length_token(decl.value)
        if parsed is None or parsed.number == 0:
            continue

        add_length_value_mapping(next_map, decl.value, f"var({decl.prop})", base_font_size)

    return next_map


def merge_token_map_from_spacing_config(
    current_map: TokenMap, config_path: Path, loader: SpacingConfigLoader
) -> TokenMap:
    """Map Tailwind spacing values to ``theme(spacing.<key>)``."""
    if not config_path.exists():
        logger.debug(f"Spacing config not found: {config_path}")
        return current_map

    spacing = loader.load(config_path)
    if not spacing:
        return current_map

    next_map = dict(current_map)
    for key, value in spacing.items():
        if not isinstance(value, str):
            continue

        parsed = parse_length_token(value)
        if parsed is None or parsed.number == 0:
            continue

        next_map[format_length(abs(parsed.number), parsed.unit or "px")] = (
            f"theme(spacing.{key})"
        )

    return next_map


def build_effective_token_map(
    options: "PreferTokenOptions",
    stylesheet: Stylesheet,
    token_regex: re.Pattern,
    cwd: Path,
    loader: SpacingConfigLoader,
) -> TokenMap:
    """Build the merged token map for one lint pass.

    Args:
        options: Validated prefer-token options.
        stylesheet: Stylesheet being linted, for in-document custom properties.
        token_regex: Compiled token-name pattern.
        cwd: Directory that relative file options resolve against.
        loader: Spacing config loader (owns the per-path cache).

    Returns:
        Mapping from normalized raw length to token reference.
    """
    token_map = merge_explicit_token_map({}, options.token_map)

    if options.token_map_file:
        token_map = merge_token_map_from_file(
            token_map, (cwd / options.token_map_file).resolve(), options.base_font_size
        )

    if options.token_map_from_css_custom_properties:
        token_map = merge_token_map_from_custom_properties(
            token_map, stylesheet, token_regex, options.base_font_size
        )

    if options.token_map_from_tailwind_spacing and options.tailwind_config_path:
        token_map = merge_token_map_from_spacing_config(
            token_map, (cwd / options.tailwind_config_path).resolve(), loader
        )

    return token_map


def apply_negative_token(replacement: str | None, length: Length) -> str | None:
    """Carry a negative source value's sign onto its token replacement.

    References with a native negation form get a ``-`` prefix; anything
    else is wrapped as ``calc(<ref> * -1)``.
    """
    if not replacement or length.number >= 0:
        return replacement
    if replacement.startswith("-"):
        return replacement
    if replacement.startswith(TOKEN_REFERENCE_PREFIXES):
        return f"-{replacement}"
    return f"calc({replacement} * -1)"


def resolve_token_replacement(
    token_map: Mapping[str, str],
    raw: str,
    length: Length,
    unit_strategy: str,
    base_font_size: float,
) -> str | None:
    """Find the token replacing a raw length.

    Tries the literal raw text, then the absolute normalized form, then
    (under the ``convert`` strategy) the pixel-equivalent key.
    """
    if raw in token_map:
        return apply_negative_token(token_map[raw], length)

    absolute_raw = format_length(length.magnitude, length.unit or "px")
    if absolute_raw in token_map:
        return apply_negative_token(token_map[absolute_raw], length)

    if unit_strategy == "convert":
        px = to_px(length.magnitude, length.unit, base_font_size)
        if px is not None and pixel_key(px) in token_map:
            return apply_negative_token(token_map[pixel_key(px)], length)

    return None
