"""Tests for workspace manifest validation."""

import pytest

from specforge.spec import create_default_spec
from specforge.validator import MAX_WORKSPACE_WIDGETS, DiagnosticCode as C, validate_workspace_manifest


def workspace(*specs, folders=None):
    folders = folders or [f"widget-{i}" for i in range(len(specs))]
    return {
        "id": "ws-1",
        "name": "Workspace",
        "widgets": [{"spec": spec, "folderName": folder} for spec, folder in zip(specs, folders)],
    }


@pytest.mark.unit
def test_valid_workspace(counter_spec, minimal_spec):
    assert validate_workspace_manifest(workspace(counter_spec, minimal_spec)).valid


@pytest.mark.unit
def test_nested_diagnostics_are_prefixed(minimal_spec):
    minimal_spec["id"] = "Bad"
    result = validate_workspace_manifest(workspace(minimal_spec))

    assert [e.path for e in result.errors] == ["widgets[0].spec.id"]
    assert result.errors[0].code == C.INVALID_ID_FORMAT


@pytest.mark.unit
def test_duplicate_ids_and_folders(minimal_spec):
    result = validate_workspace_manifest(workspace(minimal_spec, minimal_spec, folders=["a", "a"]))

    assert C.DUPLICATE_WIDGET_ID in result.error_codes()
    assert C.DUPLICATE_FOLDER_NAME in result.error_codes()


@pytest.mark.unit
def test_too_many_widgets():
    specs = [create_default_spec(id=f"widget-{i}") for i in range(MAX_WORKSPACE_WIDGETS + 1)]
    result = validate_workspace_manifest(workspace(*specs))

    assert result.error_codes() == {C.TOO_MANY_WIDGETS}


@pytest.mark.unit
@pytest.mark.parametrize("value", [None, [], "ws"])
def test_invalid_root(value):
    assert validate_workspace_manifest(value).error_codes() == {C.INVALID_ROOT}


@pytest.mark.unit
def test_missing_fields():
    result = validate_workspace_manifest({"widgets": [{"spec": None}]})
    paths = {e.path for e in result.errors}

    assert {"id", "name", "widgets[0].spec", "widgets[0].folderName"} <= paths
