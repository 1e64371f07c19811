"""Spec validation entry points."""

from typing import Any

from ..core.logging_config import get_logger
from ..spec.models import Spec
from . import rules
from .codes import DiagnosticCode
from .result import Report, ValidationResult

logger = get_logger(__name__)


def validate(spec: Any) -> ValidationResult:
    """
    Validate a spec and return every diagnostic found.

    Pure and total: never raises, never stops at the first failure and never
    mutates its input.

    Args:
        spec: Raw JSON-shaped mapping or a :class:`Spec` model

    Returns:
        ValidationResult with errors (blocking) and warnings (advisory)
    """
    if isinstance(spec, Spec):
        spec = spec.to_json_dict()

    report = Report()
    if not isinstance(spec, dict):
        report.error("", DiagnosticCode.INVALID_ROOT, "SpecJSON must be a non-null object")
        return report.result

    rules.check_required_fields(spec, report)
    rules.check_field_types(spec, report)
    rules.check_id(spec, report)
    rules.check_version(spec, report)
    rules.check_category(spec, report)

    state, actions = spec.get("state"), spec.get("actions")

    if isinstance(spec.get("visual"), dict):
        rules.check_visual(spec["visual"], report)
    if isinstance(state, dict):
        rules.check_state(state, report)
    if isinstance(spec.get("events"), dict):
        rules.check_events(spec["events"], actions, report)
    if isinstance(actions, dict):
        rules.check_actions(actions, state, report)
    if isinstance(spec.get("api"), dict):
        rules.check_api(spec["api"], actions, report)
    if isinstance(spec.get("permissions"), dict):
        rules.check_permissions(spec["permissions"], report)
    if isinstance(spec.get("size"), dict):
        rules.check_size(spec["size"], report)
    if isinstance(spec.get("tags"), list):
        rules.check_tags(spec["tags"], report)
    if isinstance(spec.get("moddlets"), list):
        rules.check_moddlets(spec["moddlets"], report)
    if isinstance(spec.get("ai"), dict):
        rules.check_ai(spec["ai"], report)
    if report.result.valid:
        rules.check_model_shape(spec, report)

    result = report.result
    logger.debug(
        "spec_validated",
        spec_id=spec.get("id") if isinstance(spec.get("id"), str) else None,
        valid=result.valid,
        errors=len(result.errors),
        warnings=len(result.warnings),
    )
    return result


def is_valid_spec(spec: Any) -> bool:
    """Quick check: True when the spec has no errors."""
    return validate(spec).valid


def format_validation_result(result: ValidationResult) -> str:
    """
    Render a human-readable report.

    Examples:
        >>> print(format_validation_result(validate(spec)))
        ✓ SpecJSON validation passed
    """
    lines = ["✓ SpecJSON validation passed" if result.valid else "✗ SpecJSON validation failed"]

    if result.errors:
        lines.append("")
        lines.append(f"Errors ({len(result.errors)}):")
        for error in result.errors:
            lines.append(f"  • [{error.code.value}] {error.path}: {error.message}")

    if result.warnings:
        lines.append("")
        lines.append(f"Warnings ({len(result.warnings)}):")
        for warning in result.warnings:
            line = f"  ⚠ [{warning.code.value}] {warning.path}: {warning.message}"
            if warning.suggestion:
                line += f" ({warning.suggestion})"
            lines.append(line)

    return "\n".join(lines)
