"""Payload guards and the exception hierarchy shared by all packages."""

from typing import Any

from .json import JSONParseError, validate_json_depth, validate_json_size


# Payload limits
MAX_SPEC_SIZE = 512 * 1024  # 512KB
MAX_SPEC_DEPTH = 20


class SpecforgeError(Exception):
    """Base class for errors raised by specforge."""

    pass


class SpecLoadError(SpecforgeError):
    """Spec text could not be turned into a JSON object."""

    pass


def guard_spec_payload(
    text: str,
    obj: Any,
    max_size: int = MAX_SPEC_SIZE,
    max_depth: int = MAX_SPEC_DEPTH,
) -> None:
    """
    Reject spec payloads that are too large or too deeply nested.

    Args:
        text: Raw JSON text the object was decoded from
        obj: Decoded object
        max_size: Maximum allowed size in bytes
        max_depth: Maximum allowed nesting depth

    Raises:
        SpecLoadError: If a limit is exceeded
    """
    try:
        validate_json_size(text, max_size, "Spec")
        validate_json_depth(obj, max_depth)
    except JSONParseError as e:
        raise SpecLoadError(str(e)) from e
