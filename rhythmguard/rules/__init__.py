"""Scale conformance rules package.

This package provides the rule engine and the built-in rules:
- rhythmguard/use-scale
- rhythmguard/prefer-token
- rhythmguard/no-offscale-transform
"""

from .base import BaseRule, RuleContext, RuleResult
from .engine import (
    RuleEngine,
    RuleEngineConfig,
    RuleSetting,
    create_rule_engine,
    parse_rule_setting,
)
from .no_offscale_transform import NoOffscaleTransformRule
from .prefer_token import PreferTokenRule
from .use_scale import UseScaleRule

__all__ = [
    # Base classes
    "BaseRule",
    "RuleContext",
    "RuleResult",
    # Engine
    "RuleEngine",
    "RuleEngineConfig",
    "RuleSetting",
    "create_rule_engine",
    "parse_rule_setting",
    # Rules
    "NoOffscaleTransformRule",
    "PreferTokenRule",
    "UseScaleRule",
]
