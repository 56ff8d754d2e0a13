"""
Shared fixtures for the rhythmguard test suite.

Provides test fixtures for:
- A rule engine that never shells out to node
- A one-call lint helper returning LintResult
- Temporary project directories with token and Tailwind config files
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from rhythmguard.models import LintResult
from rhythmguard.rules import RuleEngine, create_rule_engine
from rhythmguard.token_adapters import SpacingConfigLoader, StaticTailwindSpacingSource


@pytest.fixture()
def engine() -> RuleEngine:
    """Rule engine with default rules and a static-only spacing loader."""
    loader = SpacingConfigLoader(sources=[StaticTailwindSpacingSource()])
    return create_rule_engine(spacing_loader=loader)


@pytest.fixture()
def lint(engine: RuleEngine, tmp_path: Path) -> Callable[..., LintResult]:
    """Lint CSS with a single rule.

    Usage: ``lint(code, "rhythmguard/use-scale", {"scale": [0, 4]}, fix=True)``.
    Relative option paths resolve against ``tmp_path`` unless ``cwd`` is given.
    """

    def run(
        code: str,
        rule_id: str,
        options: Any = None,
        fix: bool = False,
        cwd: Path | None = None,
    ) -> LintResult:
        setting: Any = True if options is None else [True, options]
        return engine.lint(code, {rule_id: setting}, fix=fix, cwd=cwd or tmp_path)

    return run


@pytest.fixture()
def tailwind_cjs_config(tmp_path: Path) -> Path:
    """CommonJS Tailwind config with base and extended spacing."""
    path = tmp_path / "tailwind.config.cjs"
    path.write_text(
        """// Tailwind config
module.exports = {
  content: ["./src/**/*.html"],
  theme: {
    spacing: {
      1: '4px',
      2: '8px',
      3: '12px',
    },
    extend: {
      spacing: {
        'gutter': '20px',
      },
    },
  },
};
""",
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def tailwind_esm_config(tmp_path: Path) -> Path:
    """ES module Tailwind config with only extended spacing."""
    path = tmp_path / "tailwind.config.mjs"
    path.write_text(
        """export default {
  theme: {
    extend: {
      spacing: {
        "4.5": "18px",
        /* large */
        "18": "72px",
      },
    },
  },
};
""",
        encoding="utf-8",
    )
    return path
