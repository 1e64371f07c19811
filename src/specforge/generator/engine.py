"""Code generation: valid spec to immutable widget package."""

import time
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from returns.result import Result, Success, Failure

from ..core.config import Settings
from ..core.id import new_generation_id
from ..core.logging_config import LogContext, get_logger
from ..core.validate import SpecforgeError
from ..spec.loader import parse_spec
from ..spec.models import FileKind, GeneratedFile, GeneratedPackage, Spec
from ..validator import ValidationResult, validate
from .emitters import (
    emit_actions,
    emit_entry,
    emit_manifest,
    emit_state,
    emit_styles,
    emit_tests,
    test_file_name,
)
from .program import WidgetProgram, compile_program
from .versions import TEMPLATE_ENGINE_VERSION

logger = get_logger(__name__)


class TargetFormat(str, Enum):
    """Output shape of the package."""
    HTML = "html"
    REACT = "react"  # reserved


class GenerateOptions(BaseModel):
    """Generation flags."""

    model_config = ConfigDict(frozen=True)

    minify: bool = False
    include_tests: bool = True
    include_comments: bool = True
    target_format: TargetFormat = TargetFormat.HTML

    @classmethod
    def from_settings(cls, settings: Settings) -> "GenerateOptions":
        return cls(
            minify=settings.minify,
            include_tests=settings.include_tests,
            include_comments=settings.include_comments,
        )

    def cache_key(self) -> str:
        return self.model_dump_json()


class GenerationError(SpecforgeError):
    """Generation was refused; no package was produced."""

    def __init__(self, message: str, result: ValidationResult | None = None) -> None:
        super().__init__(message)
        self.result = result

    @classmethod
    def from_result(cls, result: ValidationResult) -> "GenerationError":
        details = "; ".join(f"[{e.code.value}] {e.path}: {e.message}" for e in result.errors)
        return cls(f"Invalid SpecJSON ({len(result.errors)} errors): {details}", result)


def as_raw(spec: Spec | Mapping[str, Any]) -> Any:
    return spec.to_json_dict() if isinstance(spec, Spec) else spec


def prepare(spec: Spec | Mapping[str, Any]) -> tuple[Spec, WidgetProgram]:
    """
    Validate, parse and compile.

    Raises:
        GenerationError: If the spec has any error-level diagnostic
    """
    result = validate(as_raw(spec))
    if not result.valid:
        logger.info("generation_refused", errors=len(result.errors))
        raise GenerationError.from_result(result)

    try:
        model = parse_spec(spec)
    except PydanticValidationError as e:
        raise GenerationError(f"Invalid SpecJSON: {e}", result) from e

    return model, compile_program(model)


def generate(
    spec: Spec | Mapping[str, Any],
    options: GenerateOptions | None = None,
) -> GeneratedPackage:
    """
    Generate a widget package.

    File contents depend only on the spec and the generator version; the
    package timestamp is the only field that varies between calls.

    Args:
        spec: Raw spec mapping or Spec model (never mutated)
        options: Generation flags (defaults: no minify, tests and comments on)

    Returns:
        Immutable GeneratedPackage

    Raises:
        GenerationError: If the spec is invalid or the target is unsupported
    """
    options = options or GenerateOptions()
    if options.target_format != TargetFormat.HTML:
        raise GenerationError(f"Target format '{options.target_format.value}' is not supported")

    with LogContext(generation_id=new_generation_id()):
        model, program = prepare(spec)
        files = build_files(model, program, options)
        logger.info("package_generated", widget_id=model.id, files=len(files), minify=options.minify)

    return GeneratedPackage(
        id=model.id,
        spec=model,
        files=files,
        generated_at=int(time.time() * 1000),
        template_version=TEMPLATE_ENGINE_VERSION,
    )


def build_files(model: Spec, program: WidgetProgram, options: GenerateOptions) -> tuple[GeneratedFile, ...]:
    """Emit every package file, in package order."""
    comments = options.include_comments
    files = [
        GeneratedFile(path="manifest.json", content=emit_manifest(model), type=FileKind.MANIFEST),
        GeneratedFile(
            path="index.html",
            content=emit_entry(model, program, comments, options.minify),
            type=FileKind.INDEX,
        ),
        GeneratedFile(path="state.ts", content=emit_state(program, comments), type=FileKind.STATE),
        GeneratedFile(path="actions.ts", content=emit_actions(program, comments), type=FileKind.ACTIONS),
        GeneratedFile(path="styles.css", content=emit_styles(model, comments), type=FileKind.STYLES),
    ]
    if options.include_tests:
        files.append(
            GeneratedFile(path=test_file_name(program), content=emit_tests(program, comments), type=FileKind.TEST)
        )
    return tuple(files)


def try_generate(
    spec: Spec | Mapping[str, Any],
    options: GenerateOptions | None = None,
) -> Result[GeneratedPackage, GenerationError]:
    """Result-pattern version of :func:`generate`."""
    try:
        return Success(generate(spec, options))
    except GenerationError as e:
        return Failure(e)
