"""ID Generation System.

ULID-based ids for widget instances and generation runs.

Features:
- ULIDs: Lexicographically sortable, timestamp-based
- Type-safe: NewType wrappers for different ID categories
- Prefixed: Type-specific prefixes for debugging (wgt_*, gen_*)
"""

from typing import NewType
from ulid import ULID

# ============================================================================
# Type-Safe ID Wrappers
# ============================================================================

InstanceID = NewType("InstanceID", str)
"""Live widget instance identifier (one per host session)"""

GenerationID = NewType("GenerationID", str)
"""Package generation run identifier"""

# ============================================================================
# ID Prefixes (for debugging and type identification)
# ============================================================================


class Prefix:
    """ID prefix constants."""

    INSTANCE = "wgt"
    GENERATION = "gen"


# ============================================================================
# ULID Generator
# ============================================================================


class Generator:
    """ULID generator with optional type prefixes."""

    def generate(self) -> str:
        """Generate a new ULID."""
        return str(ULID())

    def generate_with_prefix(self, prefix: str) -> str:
        """Generate ULID with type prefix."""
        return f"{prefix}_{self.generate()}"


# Singleton instance
_generator = Generator()


def new_instance_id() -> InstanceID:
    """Generate new widget instance ID."""
    return InstanceID(_generator.generate_with_prefix(Prefix.INSTANCE))


def new_generation_id() -> GenerationID:
    """Generate new generation run ID."""
    return GenerationID(_generator.generate_with_prefix(Prefix.GENERATION))


__all__ = [
    "InstanceID",
    "GenerationID",
    "Prefix",
    "new_instance_id",
    "new_generation_id",
]
