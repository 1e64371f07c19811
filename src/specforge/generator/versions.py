"""Generator and protocol version tags."""

# Bump when any emitted byte changes for an unchanged spec
TEMPLATE_ENGINE_VERSION = "2.0.0"

PROTOCOL_VERSION = "3.0"
