"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .validate import (
    MAX_SPEC_DEPTH,
    MAX_SPEC_SIZE,
    SpecforgeError,
    SpecLoadError,
    guard_spec_payload,
)
from .logging_config import configure_logging, get_logger, LogContext
from .json import (
    extract_json,
    safe_json_dumps,
    JSONParseError,
    validate_json_size,
    validate_json_depth,
)
from .hash import Algorithm, hash_string, hash_fields
from .cache import LRUCache, Stats
from .id import InstanceID, GenerationID, new_instance_id, new_generation_id


def create_container(settings: Settings | None = None):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(settings)


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors and payload guards
    "SpecforgeError",
    "SpecLoadError",
    "MAX_SPEC_SIZE",
    "MAX_SPEC_DEPTH",
    "guard_spec_payload",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # JSON
    "extract_json",
    "safe_json_dumps",
    "JSONParseError",
    "validate_json_size",
    "validate_json_depth",
    # DI
    "create_container",
    # Hashing
    "Algorithm",
    "hash_string",
    "hash_fields",
    # Caching
    "LRUCache",
    "Stats",
    # IDs
    "InstanceID",
    "GenerationID",
    "new_instance_id",
    "new_generation_id",
]
