"""Advisory validation results.

Advisories never block an edit: a result is always valid and only carries
warnings and informational notes for display.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(str, Enum):
    """Severity level of an advisory."""

    WARNING = "warning"
    INFO = "info"


@dataclass
class ValidationWarning:
    """A single advisory."""

    code: str
    message: str
    severity: Severity
    task: str | None = None
    affected_tasks: list[str] = field(default_factory=list)
    suggestion: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        location = f" [{self.task}]" if self.task else ""
        return f"{self.severity.value.upper()}: {self.code}{location} - {self.message}"


@dataclass
class ValidationResult:
    """Advisories collected for one check; always valid.

    `issues` keeps insertion order, so the first entry is the one a UI shows.
    """

    issues: list[ValidationWarning] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return True

    @property
    def warnings(self) -> list[ValidationWarning]:
        return self._of(Severity.WARNING)

    @property
    def infos(self) -> list[ValidationWarning]:
        return self._of(Severity.INFO)

    @property
    def has_warnings(self) -> bool:
        """True when any advisory was collected, notes included.

        Counts advisories of both severities, as the UI feedback summary does;
        use `warnings` for warning-level entries only.
        """
        return bool(self.issues)

    @property
    def warning_count(self) -> int:
        """Number of advisories of both severities, notes included."""
        return len(self.issues)

    @property
    def primary(self) -> ValidationWarning | None:
        return next(iter(self.issues), None)

    def _of(self, severity: Severity) -> list[ValidationWarning]:
        return [i for i in self.issues if i.severity == severity]

    def add_issue(self, issue: ValidationWarning | None) -> None:
        """Append an advisory built elsewhere; None is skipped."""
        if issue is not None:
            self.issues.append(issue)

    def add_warning(self, code: str, message: str, **kwargs: Any) -> None:
        """Append a warning. See `_add` for the accepted keywords."""
        self._add(Severity.WARNING, code, message, **kwargs)

    def add_info(self, code: str, message: str, **kwargs: Any) -> None:
        self._add(Severity.INFO, code, message, **kwargs)

    def _add(
        self,
        severity: Severity,
        code: str,
        message: str,
        task: str | None = None,
        affected_tasks: list[str] | None = None,
        suggestion: str | None = None,
        **details: Any,
    ) -> None:
        self.issues.append(
            ValidationWarning(
                code,
                message,
                severity,
                task=task,
                affected_tasks=list(affected_tasks or []),
                suggestion=suggestion,
                details=details,
            )
        )

    def merge(self, other: "ValidationResult") -> None:
        self.issues += other.issues

    def summary(self) -> dict[str, Any]:
        """`{valid, has_warnings, warning_count}` for UI feedback."""
        return {
            "valid": self.valid,
            "has_warnings": self.has_warnings,
            "warning_count": self.warning_count,
        }
