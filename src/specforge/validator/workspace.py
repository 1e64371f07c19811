"""Batch validation of a workspace manifest (several widgets at once)."""

from typing import Any

from .codes import DiagnosticCode as C
from .core import validate
from .result import Report, ValidationResult

MAX_WORKSPACE_WIDGETS = 5


def validate_workspace_manifest(workspace: Any) -> ValidationResult:
    """
    Validate ``{id, name, widgets: [{spec, folderName}]}``.

    Each widget spec is validated in full; its diagnostics are re-addressed
    under ``widgets[i].spec.``.
    """
    report = Report()
    if not isinstance(workspace, dict):
        report.error("", C.INVALID_ROOT, "WorkspaceManifest must be a non-null object")
        return report.result

    if not isinstance(workspace.get("id"), str) or not workspace["id"]:
        report.error("id", C.REQUIRED_FIELD_MISSING, "Workspace ID is required")
    if not isinstance(workspace.get("name"), str) or not workspace["name"]:
        report.error("name", C.REQUIRED_FIELD_MISSING, "Workspace name is required")

    widgets = workspace.get("widgets")
    if not isinstance(widgets, list):
        report.error("widgets", C.REQUIRED_FIELD_MISSING, "Widgets array is required")
        return report.result

    seen_ids: set[str] = set()
    seen_folders: set[str] = set()

    for idx, entry in enumerate(widgets):
        prefix = f"widgets[{idx}]"
        if not isinstance(entry, dict):
            report.error(prefix, C.INVALID_WIDGET_ENTRY, "Widget entry must be an object")
            continue

        spec = entry.get("spec")
        if not isinstance(spec, dict):
            report.error(f"{prefix}.spec", C.INVALID_WIDGET_ENTRY, "Widget entry must have a spec")
        else:
            nested = validate(spec)
            report.result.errors.extend(d.with_prefix(f"{prefix}.spec.") for d in nested.errors)
            report.result.warnings.extend(d.with_prefix(f"{prefix}.spec.") for d in nested.warnings)

            spec_id = spec.get("id")
            if isinstance(spec_id, str):
                if spec_id in seen_ids:
                    report.error(
                        f"{prefix}.spec.id",
                        C.DUPLICATE_WIDGET_ID,
                        f"Widget ID '{spec_id}' is already used in this workspace",
                    )
                seen_ids.add(spec_id)

        folder = entry.get("folderName")
        if not isinstance(folder, str) or not folder:
            report.error(f"{prefix}.folderName", C.REQUIRED_FIELD_MISSING, "Widget folder name is required")
        else:
            if folder in seen_folders:
                report.error(
                    f"{prefix}.folderName", C.DUPLICATE_FOLDER_NAME, f"Folder name '{folder}' is already used"
                )
            seen_folders.add(folder)

    if len(widgets) > MAX_WORKSPACE_WIDGETS:
        report.error("widgets", C.TOO_MANY_WIDGETS, f"Maximum of {MAX_WORKSPACE_WIDGETS} widgets per workspace")

    return report.result
