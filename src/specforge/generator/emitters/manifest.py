"""manifest.json emitter: the shape the host's widget registry loads."""

from typing import Any

from ...core.json import safe_json_dumps
from ...spec.models import Spec, VisualType
from ..versions import PROTOCOL_VERSION

ENTRY_FILE = "index.html"
IO_PREFIX = "custom."
HYBRID_VISUALS = frozenset({VisualType.LOTTIE, VisualType.CANVAS})


def widget_kind(visual_type: VisualType) -> str:
    """Coarse registry kind: canvas/animation-backed visuals are hybrid."""
    return "hybrid" if visual_type in HYBRID_VISUALS else "2d"


def compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop absent (None) entries, keeping order."""
    return {key: value for key, value in data.items() if value is not None}


def build_manifest(spec: Spec) -> dict[str, Any]:
    """Translate a spec into the registry manifest (ordered, None-free)."""
    inputs = {}
    for port in spec.api.inputs:
        schema = compact({
            "type": port.type,
            "description": port.description,
            "required": port.required,
        })
        if port.default is not None:
            schema["default"] = port.default
        inputs[port.id] = schema

    outputs = {
        port.id: compact({"type": port.type, "description": port.description})
        for port in spec.api.outputs
    }

    skin = None
    if spec.visual.skins:
        skin = {
            "slots": [],
            "themeable": True,
            "usesVariables": [var.name for var in spec.visual.css_variables],
        }

    size = None
    if spec.size is not None:
        size = spec.size.model_dump(mode="json", by_alias=True, exclude_none=True)

    return compact({
        "id": spec.id,
        "name": spec.display_name,
        "version": spec.version,
        "kind": widget_kind(spec.visual.type),
        "entry": ENTRY_FILE,
        "description": spec.description,
        "author": spec.author,
        "tags": spec.tags,
        "inputs": inputs,
        "outputs": outputs,
        "capabilities": {"draggable": True, "resizable": True, "rotatable": False},
        "io": {
            "inputs": [f"{IO_PREFIX}{port.id}" for port in spec.api.inputs],
            "outputs": [f"{IO_PREFIX}{port.id}" for port in spec.api.outputs],
        },
        "assets": [spec.visual.default_asset] if spec.visual.default_asset else [],
        "sandbox": True,
        "skin": skin,
        "events": {
            "emits": [b.event for b in spec.events.broadcasts],
            "listens": [s.event for s in spec.events.subscriptions],
        },
        "size": size,
        "protocolVersion": PROTOCOL_VERSION,
    })


def emit_manifest(spec: Spec) -> str:
    return safe_json_dumps(build_manifest(spec), indent=2)
