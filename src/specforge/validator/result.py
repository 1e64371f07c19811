"""Diagnostics and validation results."""

from dataclasses import dataclass, field, replace
from typing import Any

from .codes import DiagnosticCode


@dataclass(frozen=True)
class Diagnostic:
    """One error or warning, addressed by a dot/bracket path into the spec."""

    path: str
    code: DiagnosticCode
    message: str
    suggestion: str | None = None

    def with_prefix(self, prefix: str) -> "Diagnostic":
        """Re-address the diagnostic under an enclosing document."""
        return replace(self, path=f"{prefix}{self.path}" if self.path else prefix.rstrip("."))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "path": self.path,
            "code": self.code.value,
            "message": self.message,
        }
        if self.suggestion is not None:
            data["suggestion"] = self.suggestion
        return data


@dataclass
class ValidationResult:
    """Outcome of one validation run. Only errors affect ``valid``."""

    errors: list[Diagnostic] = field(default_factory=list)
    warnings: list[Diagnostic] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def codes(self) -> set[DiagnosticCode]:
        """Every code present (errors and warnings)."""
        return {d.code for d in self.errors} | {d.code for d in self.warnings}

    def error_codes(self) -> set[DiagnosticCode]:
        return {d.code for d in self.errors}

    def warning_codes(self) -> set[DiagnosticCode]:
        return {d.code for d in self.warnings}

    def to_dict(self) -> dict[str, Any]:
        """JSON-shaped result: ``{valid, errors, warnings}``."""
        return {
            "valid": self.valid,
            "errors": [d.to_dict() for d in self.errors],
            "warnings": [d.to_dict() for d in self.warnings],
        }


class Report:
    """Collector the rule functions append to."""

    def __init__(self) -> None:
        self.result = ValidationResult()

    def error(self, path: str, code: DiagnosticCode, message: str) -> None:
        self.result.errors.append(Diagnostic(path, code, message))

    def warn(
        self,
        path: str,
        code: DiagnosticCode,
        message: str,
        suggestion: str | None = None,
    ) -> None:
        self.result.warnings.append(Diagnostic(path, code, message, suggestion))
