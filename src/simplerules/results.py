"""Validation results for single entities and whole batches."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .annotations import Severity


class ValidationStatus(str, Enum):
    """Overall status of an entity or batch."""
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


@dataclass(frozen=True)
class RuleFailure:
    """A single failed rule."""
    message: str
    severity: Severity

    def __str__(self) -> str:
        return f"[{self.severity.value.upper()}] {self.message}"


@dataclass
class ValidationResult:
    """Outcome of validating one entity."""
    key: Any = None
    failures: list[RuleFailure] = field(default_factory=list)

    def add(self, message: str, severity: Severity) -> None:
        """Record a failed rule."""
        self.failures.append(RuleFailure(message, severity))

    @property
    def is_valid(self) -> bool:
        return not self.failures

    @property
    def errors(self) -> list[RuleFailure]:
        return [f for f in self.failures if f.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[RuleFailure]:
        return [f for f in self.failures if f.severity == Severity.WARNING]

    @property
    def status(self) -> ValidationStatus:
        if self.errors:
            return ValidationStatus.FAIL
        if self.failures:
            return ValidationStatus.WARN
        return ValidationStatus.PASS

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "key": self.key,
            "status": self.status.value,
            "failures": [
                {"message": failure.message, "severity": failure.severity.value}
                for failure in self.failures
            ],
        }


@dataclass
class ValidationReport:
    """Aggregated results of a validated batch."""
    results: list[ValidationResult] = field(default_factory=list)

    @property
    def status(self) -> ValidationStatus:
        """fail > warn > pass across all results."""
        statuses = {result.status for result in self.results}
        if ValidationStatus.FAIL in statuses:
            return ValidationStatus.FAIL
        if ValidationStatus.WARN in statuses:
            return ValidationStatus.WARN
        return ValidationStatus.PASS

    @property
    def exit_code(self) -> int:
        """Exit code for CI: 0 = pass/warn, 1 = fail."""
        return 0 if self.status != ValidationStatus.FAIL else 1

    @property
    def counters(self) -> dict[str, int]:
        return {
            "entities": len(self.results),
            "valid": sum(1 for result in self.results if result.is_valid),
            "errors": sum(len(result.errors) for result in self.results),
            "warnings": sum(len(result.warnings) for result in self.results),
        }

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "status": self.status.value,
            "exit_code": self.exit_code,
            "counters": self.counters,
            "results": [result.to_dict() for result in self.results],
        }
