"""Code generator: valid spec to deterministic widget package."""

from .versions import TEMPLATE_ENGINE_VERSION, PROTOCOL_VERSION
from .engine import (
    GenerateOptions,
    GenerationError,
    TargetFormat,
    generate,
    try_generate,
)
from .program import WidgetProgram, CompiledAction, Guard, compile_program, check_guard
from .service import WidgetCompiler

__all__ = [
    "TEMPLATE_ENGINE_VERSION",
    "PROTOCOL_VERSION",
    "GenerateOptions",
    "GenerationError",
    "TargetFormat",
    "generate",
    "try_generate",
    "WidgetProgram",
    "CompiledAction",
    "Guard",
    "compile_program",
    "check_guard",
    "WidgetCompiler",
]
