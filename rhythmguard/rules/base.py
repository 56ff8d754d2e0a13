"""Base rule class for scale conformance checking.

This module defines the abstract base class for all rules, providing a
standard interface for rule evaluation and finding generation.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from ..models import Finding, FindingKind, Severity
from ..options import RuleOptions
from ..stylesheet import Declaration, Stylesheet
from ..token_adapters import SpacingConfigLoader
from ..value_parser import ValueNode


@dataclass
class RuleResult:
    """Result of a single rule evaluation.

    Contains findings, timing information, and any errors encountered.
    """

    rule_id: str
    findings: list[Finding] = field(default_factory=list)
    execution_time_ms: float = 0.0
    error: str | None = None

    @property
    def success(self) -> bool:
        """Check if rule executed without errors."""
        return self.error is None

    @property
    def finding_count(self) -> int:
        """Number of findings produced."""
        return len(self.findings)


@dataclass
class RuleContext:
    """Context passed to rules for evaluation.

    Holds the stylesheet, the validated options for the rule being run and
    the collaborators needed to resolve external token sources.
    """

    stylesheet: Stylesheet
    options: RuleOptions
    cwd: Path = field(default_factory=Path.cwd)
    file_path: Path | None = None
    spacing_loader: SpacingConfigLoader = field(default_factory=SpacingConfigLoader)


class BaseRule(ABC):
    """Abstract base class for scale conformance rules.

    All rules must inherit from this class and implement the required
    abstract members. Rules are responsible for:
    - Defining their unique identifier and options model
    - Walking declarations and producing findings
    - Attaching fixes to findings that can be rewritten safely
    """

    @property
    @abstractmethod
    def rule_id(self) -> str:
        """Unique rule identifier.

        Format: rhythmguard/<name> (e.g., 'rhythmguard/use-scale')
        """

    @property
    @abstractmethod
    def options_model(self) -> type[RuleOptions]:
        """Pydantic model validating this rule's secondary options."""

    @property
    def default_severity(self) -> Severity:
        return Severity.FAIL

    @property
    def description(self) -> str:
        """Human-readable description of what this rule checks."""
        return f"Rule {self.rule_id}"

    @property
    def fixable(self) -> bool:
        return True

    @abstractmethod
    def check(self, context: RuleContext) -> list[Finding]:
        """Evaluate the rule and return findings.

        Args:
            context: RuleContext containing the stylesheet and options.

        Returns:
            List of Finding objects for any violations detected.
        """

    def get_severity(self, options: RuleOptions) -> Severity:
        if options.severity == "warning":
            return Severity.WARN
        return self.default_severity

    def _create_finding(
        self,
        context: RuleContext,
        message: str,
        decl: Declaration,
        node: ValueNode,
        replacement: str | None = None,
    ) -> Finding:
        """Create a value finding located at ``node`` within ``decl``.

        When a replacement is given, the finding's fix rewrites the node in
        place and re-serializes the declaration.

        Args:
            context: Current rule context.
            message: Human-readable description of the issue.
            decl: Declaration holding the node.
            node: Offending value node.
            replacement: Text to substitute for the node value.

        Returns:
            Properly structured Finding object.
        """
        start = decl.value_start + node.source_index
        line, column = context.stylesheet.line_column(start)

        fix_callback: Callable[[], bool] | None = None
        if replacement:

            def apply_fix() -> bool:
                node.value = replacement
                decl.commit()
                return True

            fix_callback = apply_fix

        return Finding(
            rule_id=self.rule_id,
            message=message,
            kind=FindingKind.VALUE,
            severity=self.get_severity(context.options),
            start_offset=start,
            end_offset=start + len(node.value),
            line=line,
            column=column,
            replacement=replacement,
            file_path=str(context.file_path) if context.file_path else None,
            fix_callback=fix_callback,
        )

    def _create_configuration_finding(self, context: RuleContext, message: str) -> Finding:
        return Finding(
            rule_id=self.rule_id,
            message=message,
            kind=FindingKind.CONFIGURATION,
            severity=Severity.FAIL,
            file_path=str(context.file_path) if context.file_path else None,
        )

    def __repr__(self) -> str:
        """String representation of the rule."""
        return f"<{self.__class__.__name__} {self.rule_id}>"
