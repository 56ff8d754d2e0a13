"""Data models for lint findings and results."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(Enum):
    """Severity levels for findings."""

    FAIL = "fail"  # Fails the lint run
    WARN = "warn"  # Reported but does not fail on its own
    INFO = "info"  # Informational only


class FindingKind(Enum):
    """Whether a finding concerns a stylesheet value or rule configuration."""

    VALUE = "value"
    CONFIGURATION = "configuration"


@dataclass
class Finding:
    """A single lint diagnostic.

    Value findings point at a ``[start_offset, end_offset)`` range in the
    stylesheet and may carry a ``replacement`` applied by ``fix()``.
    Configuration findings have no location.
    """

    rule_id: str
    message: str
    kind: FindingKind = FindingKind.VALUE
    severity: Severity = Severity.FAIL
    start_offset: int | None = None
    end_offset: int | None = None
    line: int | None = None
    column: int | None = None
    replacement: str | None = None
    file_path: str | None = None
    fixed: bool = False
    fix_callback: Callable[[], bool] | None = field(
        default=None, repr=False, compare=False
    )

    @property
    def fixable(self) -> bool:
        return self.fix_callback is not None and not self.fixed

    def fix(self) -> bool:
        """Apply the replacement in place.

        Returns:
            True if the value node was rewritten.
        """
        if not self.fixable:
            return False
        self.fixed = bool(self.fix_callback())
        return self.fixed

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "rule_id": self.rule_id,
            "kind": self.kind.value,
            "severity": self.severity.value,
            "message": self.message,
        }
        if self.start_offset is not None:
            result["start_offset"] = self.start_offset
            result["end_offset"] = self.end_offset
            result["line"] = self.line
            result["column"] = self.column
        if self.replacement is not None:
            result["replacement"] = self.replacement
        if self.file_path:
            result["file_path"] = self.file_path
        if self.fixed:
            result["fixed"] = True
        return result

    def __str__(self) -> str:
        """Return file:line:column format for easy navigation."""
        location = ""
        if self.line is not None:
            location = f"{self.line}:{self.column} "
        if self.file_path:
            location = f"{self.file_path}:{location or ' '}"
        return f"{location}{self.message} ({self.rule_id})"


@dataclass
class LintResult:
    """Aggregated result of linting one stylesheet."""

    findings: list[Finding] = field(default_factory=list)
    code: str = ""
    file_path: str | None = None
    rule_errors: dict[str, str] = field(default_factory=dict)
    analysis_time_ms: float = 0.0

    @property
    def warnings(self) -> list[Finding]:
        """Value findings that were not fixed."""
        return [
            f for f in self.findings if f.kind == FindingKind.VALUE and not f.fixed
        ]

    @property
    def invalid_option_warnings(self) -> list[Finding]:
        return [f for f in self.findings if f.kind == FindingKind.CONFIGURATION]

    @property
    def fixed_findings(self) -> list[Finding]:
        return [f for f in self.findings if f.fixed]

    @property
    def errored(self) -> bool:
        """True if configuration was invalid or an unfixed FAIL finding remains."""
        if self.invalid_option_warnings or self.rule_errors:
            return True
        return any(f.severity == Severity.FAIL for f in self.warnings)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "file_path": self.file_path,
            "errored": self.errored,
            "findings": [f.to_dict() for f in self.findings],
            "rule_errors": self.rule_errors,
            "analysis_time_ms": round(self.analysis_time_ms, 2),
        }
