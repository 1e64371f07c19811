"""Stable diagnostic codes."""

from enum import Enum


class DiagnosticCode(str, Enum):
    """Code attached to every error and warning.

    Callers branch on these values, so existing members never change.
    """

    # Root and shared
    INVALID_ROOT = "INVALID_ROOT"
    REQUIRED_FIELD_MISSING = "REQUIRED_FIELD_MISSING"
    INVALID_FIELD_TYPE = "INVALID_FIELD_TYPE"

    # Identity
    INVALID_ID_FORMAT = "INVALID_ID_FORMAT"
    ID_TOO_SHORT = "ID_TOO_SHORT"
    ID_TOO_LONG = "ID_TOO_LONG"
    DOUBLE_HYPHEN = "DOUBLE_HYPHEN"
    INVALID_VERSION_FORMAT = "INVALID_VERSION_FORMAT"
    INVALID_CATEGORY = "INVALID_CATEGORY"

    # Visual
    INVALID_VISUAL_TYPE = "INVALID_VISUAL_TYPE"
    INVALID_SKIN = "INVALID_SKIN"
    INVALID_SKIN_ID = "INVALID_SKIN_ID"
    INVALID_SKIN_NAME = "INVALID_SKIN_NAME"
    INVALID_CSS_VAR_NAME = "INVALID_CSS_VAR_NAME"
    INVALID_BACKGROUND = "INVALID_BACKGROUND"
    MISSING_DEFAULT_ASSET = "MISSING_DEFAULT_ASSET"

    # State
    INVALID_STATE_FIELD = "INVALID_STATE_FIELD"
    INVALID_STATE_TYPE = "INVALID_STATE_TYPE"
    INVALID_STATE_VALIDATION = "INVALID_STATE_VALIDATION"
    MISSING_DEFAULT_VALUE = "MISSING_DEFAULT_VALUE"
    DEFAULT_VIOLATES_VALIDATION = "DEFAULT_VIOLATES_VALIDATION"

    # Events
    UNKNOWN_EVENT_TRIGGER = "UNKNOWN_EVENT_TRIGGER"
    INVALID_TRIGGER_ACTIONS = "INVALID_TRIGGER_ACTIONS"
    ACTION_NOT_FOUND = "ACTION_NOT_FOUND"
    INVALID_SUBSCRIPTION = "INVALID_SUBSCRIPTION"
    HANDLER_NOT_FOUND = "HANDLER_NOT_FOUND"
    INVALID_EVENT_DECLARATION = "INVALID_EVENT_DECLARATION"

    # Actions
    INVALID_ACTION = "INVALID_ACTION"
    INVALID_ACTION_TYPE = "INVALID_ACTION_TYPE"
    INVALID_ACTION_PARAM = "INVALID_ACTION_PARAM"
    STATE_KEY_NOT_FOUND = "STATE_KEY_NOT_FOUND"
    INVALID_CONDITION = "INVALID_CONDITION"
    CIRCULAR_ACTION_REFERENCE = "CIRCULAR_ACTION_REFERENCE"
    MISSING_DESCRIPTION = "MISSING_DESCRIPTION"
    EMPTY_ACTION_LIST = "EMPTY_ACTION_LIST"

    # API
    INVALID_PORT = "INVALID_PORT"
    DUPLICATE_PORT_ID = "DUPLICATE_PORT_ID"
    INVALID_METHOD = "INVALID_METHOD"
    NO_IO_PORTS = "NO_IO_PORTS"

    # Permissions
    INVALID_REVENUE_SHARE = "INVALID_REVENUE_SHARE"
    REVENUE_SHARE_EXCEEDS_100 = "REVENUE_SHARE_EXCEEDS_100"
    MISSING_REVENUE_SHARE = "MISSING_REVENUE_SHARE"
    UNKNOWN_LICENSE = "UNKNOWN_LICENSE"

    # Size
    INVALID_SIZE = "INVALID_SIZE"
    INVALID_SIZE_CONSTRAINTS = "INVALID_SIZE_CONSTRAINTS"
    LARGE_WIDGET = "LARGE_WIDGET"

    # Tags
    TOO_MANY_TAGS = "TOO_MANY_TAGS"
    INVALID_TAG = "INVALID_TAG"
    INVALID_TAG_FORMAT = "INVALID_TAG_FORMAT"
    TAG_TOO_LONG = "TAG_TOO_LONG"
    DUPLICATE_TAG = "DUPLICATE_TAG"

    # Moddlets
    INVALID_MODDLET = "INVALID_MODDLET"
    INVALID_MODDLET_TYPE = "INVALID_MODDLET_TYPE"

    # Workspace
    INVALID_WIDGET_ENTRY = "INVALID_WIDGET_ENTRY"
    DUPLICATE_WIDGET_ID = "DUPLICATE_WIDGET_ID"
    DUPLICATE_FOLDER_NAME = "DUPLICATE_FOLDER_NAME"
    TOO_MANY_WIDGETS = "TOO_MANY_WIDGETS"
