"""Hashing for cache keys and content fingerprints.

xxhash64 keys the package cache; SHA-256 is available where a digest must
stay stable across xxhash releases.
"""

import hashlib
from enum import Enum
from typing import assert_never

import xxhash

FIELD_SEPARATOR = "\x00"


class Algorithm(str, Enum):
    """Supported hash algorithms."""

    XXHASH64 = "xxhash64"  # cache keys
    SHA256 = "sha256"      # stable fingerprints


def digest(data: bytes, algorithm: Algorithm = Algorithm.XXHASH64) -> str:
    """Hex digest of raw bytes."""
    match algorithm:
        case Algorithm.XXHASH64:
            return xxhash.xxh64(data).hexdigest()
        case Algorithm.SHA256:
            return hashlib.sha256(data).hexdigest()
        case _:
            assert_never(algorithm)


def hash_string(
    text: str,
    algorithm: Algorithm = Algorithm.XXHASH64,
    truncate: int | None = None
) -> str:
    """
    Hash string to hex digest.

    Args:
        text: String to hash
        algorithm: Hash algorithm (default: xxhash64 for speed)
        truncate: Optional length to truncate digest

    Returns:
        Hex digest string
    """
    value = digest(text.encode("utf-8"), algorithm)
    return value[:truncate] if truncate else value


def hash_fields(*fields: str, algorithm: Algorithm = Algorithm.XXHASH64) -> str:
    """
    Hash multiple fields together (order-sensitive).

    Examples:
        >>> hash_fields(spec_fingerprint, "2.0.0")
        'b4f3c2...'
    """
    return hash_string(FIELD_SEPARATOR.join(fields), algorithm)



__all__ = [
    "Algorithm",
    "digest",
    "hash_string",
    "hash_fields",
]
