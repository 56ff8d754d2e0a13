"""rhythmguard - scale conformance linting for stylesheets.

Checks spacing-like declaration values against a spacing scale, steers
raw lengths toward design tokens and keeps transform translations on the
scale. The three rules share a length parser, scale matcher, property
resolver, value walker and token map builder.
"""

__version__ = "0.1.0"

from .length import Length, parse_length_token
from .models import Finding, FindingKind, LintResult, Severity
from .presets import (
    get_community_scale_metadata,
    get_scale_preset,
    list_community_scale_preset_names,
    list_scale_preset_names,
)
from .rules import (
    BaseRule,
    NoOffscaleTransformRule,
    PreferTokenRule,
    RuleEngine,
    UseScaleRule,
    create_rule_engine,
)

__all__ = [
    "__version__",
    "BaseRule",
    "Finding",
    "FindingKind",
    "Length",
    "LintResult",
    "NoOffscaleTransformRule",
    "PreferTokenRule",
    "RuleEngine",
    "Severity",
    "UseScaleRule",
    "create_rule_engine",
    "get_community_scale_metadata",
    "get_scale_preset",
    "list_community_scale_preset_names",
    "list_scale_preset_names",
    "parse_length_token",
]
