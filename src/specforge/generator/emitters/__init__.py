"""Per-concept file emitters."""

from .manifest import emit_manifest, build_manifest, widget_kind
from .entry import emit_entry
from .state import emit_state
from .actions import emit_actions
from .styles import emit_styles
from .tests import emit_tests, test_file_name

__all__ = [
    "emit_manifest",
    "build_manifest",
    "widget_kind",
    "emit_entry",
    "emit_state",
    "emit_actions",
    "emit_styles",
    "emit_tests",
    "test_file_name",
]
