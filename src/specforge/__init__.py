"""
specforge: SpecJSON widget compiler.

Validates declarative widget specs, generates deterministic self-contained
widget packages and provides the runtime protocol (reference widget and host)
those packages speak.
"""

from .core.validate import SpecforgeError, SpecLoadError
from .spec import Spec, GeneratedPackage, load_spec, parse_spec
from .validator import DiagnosticCode, ValidationResult, validate, is_valid_spec
from .generator import GenerateOptions, GenerationError, WidgetCompiler, generate
from .runtime import WidgetHost, WidgetRuntime, Phase

__version__ = "2.0.0"

__all__ = [
    "__version__",
    "SpecforgeError",
    "SpecLoadError",
    "Spec",
    "GeneratedPackage",
    "load_spec",
    "parse_spec",
    "DiagnosticCode",
    "ValidationResult",
    "validate",
    "is_valid_spec",
    "GenerateOptions",
    "GenerationError",
    "WidgetCompiler",
    "generate",
    "WidgetHost",
    "WidgetRuntime",
    "Phase",
]
