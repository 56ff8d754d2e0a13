"""Property scoping: literal names, patterns, groups and per-property scales."""

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from .constants import DEFAULT_PROPERTY_GROUPS, PROPERTY_GROUP_PATTERNS
from .guard_logging import get_logger
from .scales import ScaleEntry

logger = get_logger()

PropertyMatcher = str | re.Pattern

_REGEX_LITERAL_RE = re.compile(r"^/(.+)/([a-z]*)$", re.DOTALL)

# Flags understood by the textual /body/flags form. Stateful g and y are dropped.
_FLAG_MAP = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "u": 0,
    "g": 0,
    "y": 0,
}


def is_regex_literal(value: str) -> bool:
    return bool(_REGEX_LITERAL_RE.match(value.strip()))


def compile_property_pattern(entry: object) -> re.Pattern | None:
    """Compile a property pattern.

    Accepts a compiled pattern or a ``"/body/flags"`` string.

    Args:
        entry: Pattern object or textual regex literal.

    Returns:
        Compiled pattern, or None if the entry cannot be compiled.
    """
    if isinstance(entry, re.Pattern):
        return entry
    if not isinstance(entry, str):
        return None

    match = _REGEX_LITERAL_RE.match(entry.strip())
    if not match:
        return None

    body, flag_text = match.groups()
    flags = 0
    for flag in flag_text:
        if flag not in _FLAG_MAP:
            return None
        flags |= _FLAG_MAP[flag]

    try:
        return re.compile(body, flags)
    except re.error as e:
        logger.debug(f"Unparsable property pattern {entry!r}: {e}")
        return None


def to_property_matcher(entry: object) -> PropertyMatcher | None:
    """Turn a configured property entry into a matcher.

    Regex literals compile to patterns; other strings become lowercase
    literal names.
    """
    if isinstance(entry, re.Pattern):
        return entry
    if not isinstance(entry, str) or not entry.strip():
        return None
    if is_regex_literal(entry):
        return compile_property_pattern(entry)
    return entry.strip().lower()


def build_property_matchers(
    properties: Iterable[object] | None = None,
    property_groups: Iterable[str] | None = None,
) -> list[PropertyMatcher]:
    """Build the matcher list from explicit properties and groups.

    Explicit properties and group patterns are unioned. With neither,
    the spacing group applies.

    Args:
        properties: Literal names or patterns.
        property_groups: Names of property groups.

    Returns:
        Ordered list of matchers.
    """
    if properties is None and property_groups is None:
        property_groups = DEFAULT_PROPERTY_GROUPS

    matchers: list[PropertyMatcher] = []
    for entry in properties or []:
        matcher = to_property_matcher(entry)
        if matcher is not None:
            matchers.append(matcher)

    for group in property_groups or []:
        matchers.extend(PROPERTY_GROUP_PATTERNS.get(group.strip().lower(), ()))

    return matchers


def property_matches(prop: str, matchers: Iterable[PropertyMatcher]) -> bool:
    normalized = prop.lower()
    for matcher in matchers:
        if isinstance(matcher, re.Pattern):
            if matcher.search(normalized):
                return True
        elif matcher.lower() == normalized:
            return True
    return False


def is_known_property(name: str) -> bool:
    """Check whether a literal property belongs to any property group."""
    normalized = name.strip().lower()
    return any(
        pattern.search(normalized)
        for patterns in PROPERTY_GROUP_PATTERNS.values()
        for pattern in patterns
    )


@dataclass(frozen=True)
class PropertyScale:
    """A scale override applied to properties matching ``matcher``."""

    matcher: PropertyMatcher
    scale: tuple[ScaleEntry, ...]


def build_property_scales(
    property_scales: Mapping[str, Sequence[ScaleEntry]] | None,
) -> list[PropertyScale]:
    """Compile per-property scale overrides, keeping declaration order."""
    overrides: list[PropertyScale] = []
    for key, scale in (property_scales or {}).items():
        matcher = to_property_matcher(key)
        if matcher is None:
            logger.debug(f"Ignoring property scale with unusable key {key!r}")
            continue
        overrides.append(PropertyScale(matcher=matcher, scale=tuple(scale)))
    return overrides


def resolve_property_scale(
    prop: str,
    overrides: Iterable[PropertyScale],
    default_scale: Sequence[ScaleEntry],
) -> Sequence[ScaleEntry]:
    """Return the first override scale matching ``prop``, else the default."""
    for override in overrides:
        if property_matches(prop, [override.matcher]):
            return override.scale
    return default_scale
