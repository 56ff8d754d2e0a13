"""Rule engine for scale conformance linting.

This module provides the RuleEngine class that manages rule registration,
validates per-rule configuration, runs rules over a stylesheet and applies
fixes.
"""

import time
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..guard_logging import get_logger
from ..models import Finding, FindingKind, LintResult, Severity
from ..options import stringify_option_value, validate_rule_options
from ..stylesheet import Stylesheet
from ..token_adapters import SpacingConfigLoader
from .base import BaseRule, RuleContext, RuleResult

logger = get_logger()


@dataclass
class RuleEngineConfig:
    """Configuration for the rule engine."""

    # Whether to continue on rule errors
    continue_on_error: bool = True


@dataclass
class RuleSetting:
    """A rule's enablement and secondary options from configuration."""

    enabled: bool
    options: Any = None
    error: str | None = None


def parse_rule_setting(rule_id: str, setting: Any) -> RuleSetting:
    """Interpret a rule entry from a ``rules`` mapping.

    Accepted forms are ``true``, ``false``/``null`` (disabled), an options
    object, and ``[true, options]``.
    """
    if setting is None or setting is False:
        return RuleSetting(enabled=False)
    if setting is True:
        return RuleSetting(enabled=True)
    if isinstance(setting, Mapping):
        return RuleSetting(enabled=True, options=setting)
    if isinstance(setting, (list, tuple)) and 1 <= len(setting) <= 2:
        primary = setting[0]
        options = setting[1] if len(setting) == 2 else None
        if primary is None or primary is False:
            return RuleSetting(enabled=False)
        if primary is True:
            return RuleSetting(enabled=True, options=options)
        setting = primary

    return RuleSetting(
        enabled=False,
        error=(
            f"Invalid option value {stringify_option_value(setting)} "
            f'for rule "{rule_id}"'
        ),
    )


class RuleEngine:
    """Engine for running scale conformance rules.

    Manages rule registration, execution, and result aggregation. One
    engine owns one spacing-config cache; use separate engines for
    concurrent lint runs.
    """

    def __init__(
        self,
        engine_config: RuleEngineConfig | None = None,
        spacing_loader: SpacingConfigLoader | None = None,
    ):
        """Initialize the rule engine.

        Args:
            engine_config: Optional engine-specific configuration.
            spacing_loader: Loader for Tailwind spacing configs. A new one
                (with its own cache) is created when omitted.
        """
        self.engine_config = engine_config or RuleEngineConfig()
        self.spacing_loader = spacing_loader or SpacingConfigLoader()
        self._rules: dict[str, BaseRule] = {}

    def register(self, rule: BaseRule) -> None:
        """Add a rule under its ``rule_id``.

        Raises:
            ValueError: If the ID is taken.
        """
        if rule.rule_id in self._rules:
            raise ValueError(f"Rule {rule.rule_id} is already registered")
        self._rules[rule.rule_id] = rule

    def unregister(self, rule_id: str) -> None:
        """Remove a rule; unknown IDs are ignored."""
        self._rules.pop(rule_id, None)

    def get_rule(self, rule_id: str) -> BaseRule | None:
        return self._rules.get(rule_id)

    def get_all_rules(self) -> list[BaseRule]:
        """Get all registered rules."""
        return list(self._rules.values())

    @property
    def rule_count(self) -> int:
        """Number of registered rules."""
        return len(self._rules)

    def lint(
        self,
        code: str,
        rules: Mapping[str, Any],
        fix: bool = False,
        file_path: Path | None = None,
        cwd: Path | None = None,
    ) -> LintResult:
        """Lint stylesheet source with the configured rules.

        Args:
            code: Stylesheet source.
            rules: Mapping of rule ID to setting (see parse_rule_setting).
            fix: Apply fixes and return the rewritten source in the result.
            file_path: Source path, recorded on findings.
            cwd: Directory that relative option paths resolve against.
                Defaults to the current working directory.

        Returns:
            LintResult with all findings and the (possibly fixed) source.
        """
        start_time = time.time()
        stylesheet = Stylesheet.parse(code)
        findings: list[Finding] = []
        rule_errors: dict[str, str] = {}
        shown_path = str(file_path) if file_path else None

        for rule_id, raw_setting in rules.items():
            rule = self._rules.get(rule_id)
            if rule is None:
                findings.append(
                    self._configuration_finding(rule_id, f'Unknown rule "{rule_id}"', shown_path)
                )
                continue

            setting = parse_rule_setting(rule_id, raw_setting)
            if setting.error:
                findings.append(self._configuration_finding(rule_id, setting.error, shown_path))
                continue
            if not setting.enabled:
                continue

            options, messages = validate_rule_options(
                rule.options_model, rule_id, setting.options
            )
            for message in messages:
                findings.append(self._configuration_finding(rule_id, message, shown_path))

            context = RuleContext(
                stylesheet=stylesheet,
                options=options,
                cwd=cwd or Path.cwd(),
                file_path=file_path,
                spacing_loader=self.spacing_loader,
            )
            result = self._execute_rule(rule, context)
            if not result.success:
                rule_errors[rule_id] = result.error or "unknown error"
                continue

            if fix:
                for finding in result.findings:
                    finding.fix()

            logger.debug(
                f"{rule_id} produced {result.finding_count} findings",
                extra={
                    "rule_id": rule_id,
                    "finding_count": result.finding_count,
                    "duration_ms": result.execution_time_ms,
                },
            )
            findings.extend(result.findings)

        return LintResult(
            findings=findings,
            code=stylesheet.to_string() if fix else code,
            file_path=shown_path,
            rule_errors=rule_errors,
            analysis_time_ms=(time.time() - start_time) * 1000,
        )

    def _configuration_finding(
        self, rule_id: str, message: str, file_path: str | None
    ) -> Finding:
        return Finding(
            rule_id=rule_id,
            message=message,
            kind=FindingKind.CONFIGURATION,
            severity=Severity.FAIL,
            file_path=file_path,
        )

    def _execute_rule(self, rule: BaseRule, context: RuleContext) -> RuleResult:
        """Run one rule, timing it and capturing failures in the result.

        Exceptions are re-raised when ``continue_on_error`` is off.
        """
        start_time = time.time()

        try:
            findings = rule.check(context)
            return RuleResult(
                rule_id=rule.rule_id,
                findings=findings,
                execution_time_ms=(time.time() - start_time) * 1000,
            )
        except Exception as e:
            if not self.engine_config.continue_on_error:
                raise

            logger.error(f"Rule {rule.rule_id} failed: {e}", exc_info=True)
            return RuleResult(
                rule_id=rule.rule_id,
                findings=[],
                execution_time_ms=(time.time() - start_time) * 1000,
                error=str(e),
            )

    def register_default_rules(self) -> None:
        """Register the built-in rules."""
        from .no_offscale_transform import NoOffscaleTransformRule
        from .prefer_token import PreferTokenRule
        from .use_scale import UseScaleRule

        for rule_class in [UseScaleRule, PreferTokenRule, NoOffscaleTransformRule]:
            rule = rule_class()
            if rule.rule_id not in self._rules:
                self.register(rule)


def create_rule_engine(
    engine_config: RuleEngineConfig | None = None,
    spacing_loader: SpacingConfigLoader | None = None,
    register_defaults: bool = True,
) -> RuleEngine:
    """Create a rule engine, by default with the built-in rules registered.

    Args:
        engine_config: Optional engine-specific configuration.
        spacing_loader: Optional spacing config loader.
        register_defaults: Register the three built-in rules.

    Returns:
        Configured RuleEngine instance.
    """
    engine = RuleEngine(engine_config, spacing_loader)
    if register_defaults:
        engine.register_default_rules()
    return engine
