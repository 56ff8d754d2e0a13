"""Shared constants for scale conformance checking."""

import re

# Floating point tolerance used for every scale comparison
EPSILON = 0.0001

PROPERTY_GROUP_PATTERNS: dict[str, tuple[re.Pattern, ...]] = {
    "spacing": (
        re.compile(r"^margin(?:-.+)?$"),
        re.compile(r"^padding(?:-.+)?$"),
        re.compile(r"^gap$"),
        re.compile(r"^row-gap$"),
        re.compile(r"^column-gap$"),
        re.compile(r"^inset(?:-.+)?$"),
        re.compile(r"^scroll-margin(?:-.+)?$"),
        re.compile(r"^scroll-padding(?:-.+)?$"),
        re.compile(r"^translate$"),
        re.compile(r"^translate-[xyz]$"),
        re.compile(r"^transform$"),
    ),
    "radius": (
        re.compile(r"^border-radius$"),
        re.compile(r"^border-(?:top|right|bottom|left)-(?:left|right)-radius$"),
        re.compile(r"^border-(?:start|end)-(?:start|end)-radius$"),
        re.compile(r"^outline-offset$"),
    ),
    "size": (
        re.compile(r"^inline-size$"),
        re.compile(r"^block-size$"),
        re.compile(r"^min-inline-size$"),
        re.compile(r"^min-block-size$"),
        re.compile(r"^max-inline-size$"),
        re.compile(r"^max-block-size$"),
        re.compile(r"^(?:min-|max-)?(?:width|height)$"),
    ),
    "typography": (
        re.compile(r"^font-size$"),
        re.compile(r"^line-height$"),
        re.compile(r"^letter-spacing$"),
        re.compile(r"^word-spacing$"),
    ),
}

PROPERTY_GROUP_NAMES = tuple(PROPERTY_GROUP_PATTERNS)
DEFAULT_PROPERTY_GROUPS = ("spacing",)

DEFAULT_IGNORE_KEYWORDS = (
    "auto",
    "inherit",
    "initial",
    "unset",
    "revert",
    "revert-layer",
)

DEFAULT_TOKEN_FUNCTIONS = ("var", "theme", "token")
DEFAULT_TOKEN_PATTERN = "^--space-"
DEFAULT_UNITS = ("px", "rem", "em")
DEFAULT_BASE_FONT_SIZE = 16.0
DEFAULT_PRESET = "rhythmic-4"

TRANSLATE_FUNCTIONS = frozenset(
    {"translate", "translatex", "translatey", "translatez", "translate3d"}
)

MATH_FUNCTIONS = frozenset({"calc", "clamp", "min", "max"})

# Prefixes of references that already carry a native negation form
TOKEN_REFERENCE_PREFIXES = ("var(", "theme(", "token(", "$", "@")

SUPPORTED_SCALE_UNITS = frozenset(
    {
        "px",
        "rem",
        "em",
        "%",
        "vh",
        "vw",
        "vi",
        "vb",
        "vmin",
        "vmax",
        "svh",
        "svw",
        "svi",
        "svb",
        "lvh",
        "lvw",
        "lvi",
        "lvb",
        "dvh",
        "dvw",
        "dvi",
        "dvb",
        "cqh",
        "cqw",
        "cqi",
        "cqb",
        "cqmin",
        "cqmax",
        "ch",
        "ex",
    }
)

# Seconds allowed for the node subprocess that evaluates spacing configs
SPACING_LOADER_TIMEOUT = 5.0
