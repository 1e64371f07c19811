"""Spec validator: structural and cross-reference checks with stable codes."""

from .codes import DiagnosticCode
from .result import Diagnostic, ValidationResult
from .core import validate, is_valid_spec, format_validation_result
from .workspace import validate_workspace_manifest, MAX_WORKSPACE_WIDGETS

__all__ = [
    "DiagnosticCode",
    "Diagnostic",
    "ValidationResult",
    "validate",
    "is_valid_spec",
    "format_validation_result",
    "validate_workspace_manifest",
    "MAX_WORKSPACE_WIDGETS",
]
