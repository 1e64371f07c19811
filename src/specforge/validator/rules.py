"""Validation rules, one function per spec section.

Every rule reads the raw JSON-shaped mapping, never raises and appends to
the shared :class:`Report`. Rules are independent of each other.
"""

import math
import re
from typing import Any, Iterable, Iterator

from pydantic import ValidationError as PydanticValidationError

from ..spec.models import (
    ActionKind,
    BackgroundType,
    ConditionType,
    EventTrigger,
    LicenseType,
    ModdletType,
    Spec,
    StateValueType,
    VisualType,
    WidgetCategory,
)
from .codes import DiagnosticCode as C
from .result import Report


ID_PATTERN = re.compile(r"^[a-z][a-z0-9-]*$")
VERSION_PATTERN = re.compile(r"^\d+\.\d+\.\d+(-[a-zA-Z0-9.]+)?$")
CSS_VAR_PATTERN = re.compile(r"^--[a-z][a-z0-9-]*$")
TAG_PATTERN = re.compile(r"^[a-z0-9-]+$")

ID_MIN_LENGTH = 2
ID_MAX_LENGTH = 64
MAX_TAGS = 10
MAX_TAG_LENGTH = 32
LARGE_WIDGET_PX = 2000
REVENUE_TOLERANCE = 0.001

# Value a state field starts from when it declares no default
ZERO_VALUES: dict[str, Any] = {
    StateValueType.STRING.value: "",
    StateValueType.NUMBER.value: 0,
    StateValueType.BOOLEAN.value: False,
    StateValueType.OBJECT.value: {},
    StateValueType.ARRAY.value: [],
}

REQUIRED_FIELDS = (
    "id", "version", "displayName", "category", "description",
    "visual", "state", "events", "actions", "api", "permissions",
)

# Top-level field -> expected JSON type
FIELD_TYPES: dict[str, type] = {
    "id": str,
    "version": str,
    "displayName": str,
    "category": str,
    "description": str,
    "author": str,
    "visual": dict,
    "state": dict,
    "events": dict,
    "actions": dict,
    "api": dict,
    "permissions": dict,
    "dependencies": dict,
    "ai": dict,
    "size": dict,
    "tags": list,
    "moddlets": list,
}

TYPE_NAMES = {str: "string", dict: "object", list: "array"}

API_LISTS = ("exposes", "accepts", "inputs", "outputs")
PERMISSION_FLAGS = ("allowPipelineUse", "allowForking", "allowMarketplace")

# Kinds whose target field is mandatory
STATE_TARGETS: dict[str, tuple[str, ...]] = {
    ActionKind.SET_STATE.value: ("stateKey",),
    ActionKind.TOGGLE_STATE.value: ("toggleKey", "stateKey"),
    ActionKind.INCREMENT_STATE.value: ("stateKey",),
    ActionKind.DECREMENT_STATE.value: ("stateKey",),
}
EVENT_TARGETS: dict[str, str] = {
    ActionKind.EMIT.value: "eventType",
    ActionKind.BROADCAST.value: "broadcastEvent",
}
COMPOSITE_KINDS = frozenset({
    ActionKind.SEQUENCE.value,
    ActionKind.PARALLEL.value,
    ActionKind.CONDITIONAL.value,
})
ASSETLESS_VISUALS = frozenset({VisualType.HTML.value, VisualType.CSS.value})


# ============================================================================
# Helpers
# ============================================================================


def values_of(enum_cls: Any) -> tuple[str, ...]:
    return tuple(member.value for member in enum_cls)


def is_member(value: Any, enum_cls: Any) -> bool:
    """Membership test that tolerates unhashable and non-string values."""
    return isinstance(value, str) and value in values_of(enum_cls)


def is_number(value: Any) -> bool:
    """JSON number check: bool is not a number, NaN is not a number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def is_present(mapping: dict[str, Any], key: str) -> bool:
    """Absent and null are treated the same."""
    return mapping.get(key) is not None


def non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def enumerate_dicts(
    items: list[Any], path: str, report: Report, code: C, what: str
) -> Iterator[tuple[int, dict[str, Any]]]:
    """Yield (index, item) for mapping items, reporting the rest."""
    for idx, item in enumerate(items):
        if isinstance(item, dict):
            yield idx, item
        else:
            report.error(f"{path}[{idx}]", code, f"{what} must be an object")


def choices(enum_cls: Any) -> str:
    return ", ".join(values_of(enum_cls))


# ============================================================================
# Root
# ============================================================================


def check_required_fields(spec: dict[str, Any], report: Report) -> None:
    for field in REQUIRED_FIELDS:
        if not is_present(spec, field):
            report.error(field, C.REQUIRED_FIELD_MISSING, f"Required field '{field}' is missing")


def check_field_types(spec: dict[str, Any], report: Report) -> None:
    for field, expected in FIELD_TYPES.items():
        value = spec.get(field)
        if value is not None and not isinstance(value, expected):
            report.error(
                field,
                C.INVALID_FIELD_TYPE,
                f"Field '{field}' must be a {TYPE_NAMES[expected]}, got {type(value).__name__}",
            )


def check_id(spec: dict[str, Any], report: Report) -> None:
    widget_id = spec.get("id")
    if not isinstance(widget_id, str):
        return

    if not ID_PATTERN.fullmatch(widget_id):
        report.error(
            "id",
            C.INVALID_ID_FORMAT,
            f"ID '{widget_id}' must be kebab-case (lowercase letters, numbers, hyphens, starting with a letter)",
        )
    if len(widget_id) < ID_MIN_LENGTH:
        report.error("id", C.ID_TOO_SHORT, f"ID must be at least {ID_MIN_LENGTH} characters long")
    if len(widget_id) > ID_MAX_LENGTH:
        report.error("id", C.ID_TOO_LONG, f"ID must be at most {ID_MAX_LENGTH} characters long")
    if "--" in widget_id:
        report.warn(
            "id",
            C.DOUBLE_HYPHEN,
            "ID contains double hyphens which may be confusing",
            "Use single hyphens to separate words",
        )


def check_version(spec: dict[str, Any], report: Report) -> None:
    version = spec.get("version")
    if isinstance(version, str) and not VERSION_PATTERN.fullmatch(version):
        report.error(
            "version",
            C.INVALID_VERSION_FORMAT,
            f"Version '{version}' must be semantic (e.g., 1.0.0 or 1.0.0-beta.1)",
        )


def check_category(spec: dict[str, Any], report: Report) -> None:
    category = spec.get("category")
    if isinstance(category, str) and not is_member(category, WidgetCategory):
        report.error(
            "category",
            C.INVALID_CATEGORY,
            f"Category '{category}' is not valid. Must be one of: {choices(WidgetCategory)}",
        )


# ============================================================================
# Visual
# ============================================================================


def check_visual(visual: dict[str, Any], report: Report) -> None:
    visual_type = visual.get("type")
    if visual_type is None:
        report.error("visual.type", C.REQUIRED_FIELD_MISSING, "Visual type is required")
    elif not is_member(visual_type, VisualType):
        report.error(
            "visual.type",
            C.INVALID_VISUAL_TYPE,
            f"Visual type '{visual_type}' is not valid. Must be one of: {choices(VisualType)}",
        )

    skins = visual.get("skins")
    if not isinstance(skins, list):
        report.error("visual.skins", C.REQUIRED_FIELD_MISSING, "Visual skins array is required (can be empty)")
    else:
        for idx, skin in enumerate_dicts(skins, "visual.skins", report, C.INVALID_SKIN, "Skin"):
            if not non_empty_str(skin.get("id")):
                report.error(f"visual.skins[{idx}].id", C.INVALID_SKIN_ID, "Skin ID is required and must be a string")
            if not non_empty_str(skin.get("name")):
                report.error(
                    f"visual.skins[{idx}].name", C.INVALID_SKIN_NAME, "Skin name is required and must be a string"
                )

    css_variables = visual.get("cssVariables")
    if css_variables is not None:
        if not isinstance(css_variables, list):
            report.error("visual.cssVariables", C.INVALID_FIELD_TYPE, "Visual cssVariables must be an array")
        else:
            for idx, css_var in enumerate_dicts(
                css_variables, "visual.cssVariables", report, C.INVALID_CSS_VAR_NAME, "CSS variable"
            ):
                name = css_var.get("name")
                if not isinstance(name, str) or not CSS_VAR_PATTERN.fullmatch(name):
                    report.error(
                        f"visual.cssVariables[{idx}].name",
                        C.INVALID_CSS_VAR_NAME,
                        f"CSS variable name '{name}' must start with '--' followed by lowercase letters/numbers/hyphens",
                    )

    background = visual.get("background")
    if background is not None:
        if not isinstance(background, dict) or not is_member(background.get("type"), BackgroundType):
            report.error(
                "visual.background",
                C.INVALID_BACKGROUND,
                f"Background must be an object with type one of: {choices(BackgroundType)}",
            )

    if is_member(visual_type, VisualType) and visual_type not in ASSETLESS_VISUALS:
        if not visual.get("defaultAsset"):
            report.warn(
                "visual.defaultAsset",
                C.MISSING_DEFAULT_ASSET,
                "No default asset specified",
                "Consider adding a default asset for visual preview",
            )


# ============================================================================
# State
# ============================================================================


def check_state(state: dict[str, Any], report: Report) -> None:
    for key, value in state.items():
        if not isinstance(value, dict):
            report.error(
                f"state.{key}", C.INVALID_STATE_FIELD, f"State field '{key}' must be an object with type definition"
            )
            continue

        field_type = value.get("type")
        if field_type is None:
            report.error(f"state.{key}.type", C.REQUIRED_FIELD_MISSING, f"State field '{key}' must have a type")
        elif not is_member(field_type, StateValueType):
            report.error(
                f"state.{key}.type",
                C.INVALID_STATE_TYPE,
                f"State type '{field_type}' is not valid. Must be one of: {choices(StateValueType)}",
            )

        if "validate" in value and value["validate"] is not None:
            check_state_rule(key, value["validate"], report)
            check_default_against_rule(key, value, report)

        if "default" not in value:
            report.warn(
                f"state.{key}.default",
                C.MISSING_DEFAULT_VALUE,
                f"State field '{key}' has no default value",
                "Consider adding a default value to ensure consistent initial state",
            )


def check_state_rule(key: str, rule: Any, report: Report) -> None:
    path = f"state.{key}.validate"
    if not isinstance(rule, dict):
        report.error(path, C.INVALID_STATE_VALIDATION, f"Validation rule for '{key}' must be an object")
        return

    for bound in ("min", "max"):
        if rule.get(bound) is not None and not is_number(rule[bound]):
            report.error(f"{path}.{bound}", C.INVALID_STATE_VALIDATION, f"'{bound}' must be a number")

    low, high = rule.get("min"), rule.get("max")
    if is_number(low) and is_number(high) and low > high:
        report.error(path, C.INVALID_STATE_VALIDATION, f"'min' ({low}) cannot be greater than 'max' ({high})")

    pattern = rule.get("pattern")
    if pattern is not None:
        if not isinstance(pattern, str):
            report.error(f"{path}.pattern", C.INVALID_STATE_VALIDATION, "'pattern' must be a string")
        else:
            try:
                re.compile(pattern)
            except re.error as e:
                report.error(f"{path}.pattern", C.INVALID_STATE_VALIDATION, f"Invalid pattern '{pattern}': {e}")

    if rule.get("enum") is not None and not isinstance(rule["enum"], list):
        report.error(f"{path}.enum", C.INVALID_STATE_VALIDATION, "'enum' must be an array")

    if rule.get("required") is not None and not isinstance(rule["required"], bool):
        report.error(f"{path}.required", C.INVALID_STATE_VALIDATION, "'required' must be a boolean")



def resolved_default(field: dict[str, Any]) -> Any:
    """Default the generated state starts from (the type's zero value when absent)."""
    if field.get("default") is not None:
        return field["default"]
    field_type = field.get("type")
    return ZERO_VALUES.get(field_type) if isinstance(field_type, str) else None


def check_default_against_rule(key: str, field: dict[str, Any], report: Report) -> None:
    rule = field["validate"]
    if not isinstance(rule, dict):
        return

    value = resolved_default(field)
    problems = []
    if value is None:
        if rule.get("required") is True:
            problems.append("is required but has no default")
    else:
        low, high = rule.get("min"), rule.get("max")
        if is_number(low) and not (is_number(value) and value >= low):
            problems.append(f"default {value!r} does not satisfy min {low}")
        if is_number(high) and not (is_number(value) and value <= high):
            problems.append(f"default {value!r} does not satisfy max {high}")

    for problem in problems:
        report.warn(
            f"state.{key}.default",
            C.DEFAULT_VIOLATES_VALIDATION,
            f"State field '{key}' {problem}",
            "Choose a default that satisfies the field's validation rule",
        )


# ============================================================================
# Events
# ============================================================================


def check_events(events: dict[str, Any], actions: Any, report: Report) -> None:
    action_ids = set(actions) if isinstance(actions, dict) else None

    triggers = events.get("triggers")
    if not isinstance(triggers, dict):
        report.error("events.triggers", C.REQUIRED_FIELD_MISSING, "Events triggers object is required")
    else:
        for trigger, action_list in triggers.items():
            check_trigger(str(trigger), action_list, action_ids, report)

    subscriptions = events.get("subscriptions")
    if subscriptions is not None:
        if not isinstance(subscriptions, list):
            report.error("events.subscriptions", C.INVALID_SUBSCRIPTION, "Subscriptions must be an array")
        else:
            for idx, sub in enumerate_dicts(
                subscriptions, "events.subscriptions", report, C.INVALID_SUBSCRIPTION, "Subscription"
            ):
                path = f"events.subscriptions[{idx}]"
                if not non_empty_str(sub.get("event")):
                    report.error(f"{path}.event", C.INVALID_SUBSCRIPTION, "Subscription event must be a string")
                handler = sub.get("handler")
                if not non_empty_str(handler):
                    report.error(f"{path}.handler", C.INVALID_SUBSCRIPTION, "Subscription handler must be a string")
                elif action_ids is not None and handler not in action_ids:
                    report.error(
                        f"{path}.handler", C.HANDLER_NOT_FOUND, f"Handler '{handler}' is not defined in actions"
                    )

    check_event_declarations(events, "custom", "id", report)
    check_event_declarations(events, "broadcasts", "event", report)


def check_trigger(trigger: str, action_list: Any, action_ids: set[str] | None, report: Report) -> None:
    path = f"events.triggers.{trigger}"
    if not is_member(trigger, EventTrigger):
        report.warn(
            path,
            C.UNKNOWN_EVENT_TRIGGER,
            f"Event trigger '{trigger}' is not a standard trigger",
            f"Valid triggers: {', '.join(values_of(EventTrigger)[:5])}, ...",
        )

    if not isinstance(action_list, list):
        report.error(path, C.INVALID_TRIGGER_ACTIONS, f"Trigger '{trigger}' must map to an array of action IDs")
        return

    if not action_list:
        report.warn(path, C.EMPTY_ACTION_LIST, f"Trigger '{trigger}' has no actions", "Remove the empty trigger")

    for idx, action_id in enumerate(action_list):
        if not isinstance(action_id, str):
            report.error(f"{path}[{idx}]", C.INVALID_TRIGGER_ACTIONS, "Action reference must be a string")
        elif action_ids is not None and action_id not in action_ids:
            report.error(
                f"{path}[{idx}]",
                C.ACTION_NOT_FOUND,
                f"Action '{action_id}' referenced in trigger '{trigger}' is not defined in actions",
            )


def check_event_declarations(events: dict[str, Any], field: str, key: str, report: Report) -> None:
    declarations = events.get(field)
    if declarations is None:
        return
    path = f"events.{field}"
    if not isinstance(declarations, list):
        report.error(path, C.INVALID_EVENT_DECLARATION, f"Events {field} must be an array")
        return
    for idx, decl in enumerate_dicts(declarations, path, report, C.INVALID_EVENT_DECLARATION, "Event declaration"):
        if not non_empty_str(decl.get(key)):
            report.error(f"{path}[{idx}].{key}", C.INVALID_EVENT_DECLARATION, f"Event declaration needs a string '{key}'")


# ============================================================================
# Actions
# ============================================================================


def check_actions(actions: dict[str, Any], state: Any, report: Report) -> None:
    state_keys = set(state) if isinstance(state, dict) else None
    action_ids = set(actions)

    for action_id, definition in actions.items():
        path = f"actions.{action_id}"
        if not isinstance(definition, dict):
            report.error(path, C.INVALID_ACTION, f"Action '{action_id}' must be an object")
            continue

        kind = definition.get("type")
        if kind is None:
            report.error(f"{path}.type", C.REQUIRED_FIELD_MISSING, f"Action '{action_id}' must have a type")
        elif not is_member(kind, ActionKind):
            report.error(
                f"{path}.type",
                C.INVALID_ACTION_TYPE,
                f"Action type '{kind}' is not valid. Must be one of: {choices(ActionKind)}",
            )

        params = definition.get("params")
        if params is None:
            params = {}
        elif not isinstance(params, dict):
            report.error(f"{path}.params", C.INVALID_ACTION_PARAM, f"Params of action '{action_id}' must be an object")
            params = {}

        check_action_params(action_id, kind, params, state_keys, action_ids, report)

        if definition.get("condition") is not None:
            check_condition(action_id, definition["condition"], state_keys, report)

        if not definition.get("description"):
            report.warn(
                f"{path}.description",
                C.MISSING_DESCRIPTION,
                f"Action '{action_id}' has no description",
                "Add a description to help users understand what this action does",
            )

    check_action_cycles(actions, report)


def check_action_params(
    action_id: str,
    kind: Any,
    params: dict[str, Any],
    state_keys: set[str] | None,
    action_ids: set[str],
    report: Report,
) -> None:
    path = f"actions.{action_id}.params"

    for key_field in ("stateKey", "toggleKey"):
        ref = params.get(key_field)
        if ref is None:
            continue
        if not isinstance(ref, str):
            report.error(f"{path}.{key_field}", C.INVALID_ACTION_PARAM, f"'{key_field}' must be a string")
        elif state_keys is not None and ref not in state_keys:
            label = "State key" if key_field == "stateKey" else "Toggle key"
            report.error(
                f"{path}.{key_field}",
                C.STATE_KEY_NOT_FOUND,
                f"{label} '{ref}' referenced in action '{action_id}' is not defined in state",
            )

    if isinstance(kind, str) and kind in STATE_TARGETS:
        targets = STATE_TARGETS[kind]
        if not any(non_empty_str(params.get(t)) for t in targets):
            report.error(
                f"{path}.{targets[0]}",
                C.REQUIRED_FIELD_MISSING,
                f"Action '{action_id}' of type '{kind}' needs '{targets[0]}'",
            )

    if isinstance(kind, str) and kind in EVENT_TARGETS:
        target = EVENT_TARGETS[kind]
        if not non_empty_str(params.get(target)):
            report.error(
                f"{path}.{target}", C.REQUIRED_FIELD_MISSING, f"Action '{action_id}' of type '{kind}' needs '{target}'"
            )

    for numeric in ("amount", "duration"):
        if params.get(numeric) is not None and not is_number(params[numeric]):
            report.error(f"{path}.{numeric}", C.INVALID_ACTION_PARAM, f"'{numeric}' must be a number")

    members = params.get("actions")
    if members is not None:
        if not isinstance(members, list):
            report.error(f"{path}.actions", C.INVALID_ACTION_PARAM, "'actions' must be an array of action IDs")
            members = None
        else:
            for idx, member in enumerate(members):
                if not isinstance(member, str):
                    report.error(f"{path}.actions[{idx}]", C.INVALID_ACTION_PARAM, "Action reference must be a string")
                elif member not in action_ids:
                    report.error(
                        f"{path}.actions[{idx}]",
                        C.ACTION_NOT_FOUND,
                        f"Action '{member}' referenced in '{action_id}' is not defined",
                    )

    if isinstance(kind, str) and kind in COMPOSITE_KINDS and not members:
        report.warn(
            f"{path}.actions",
            C.EMPTY_ACTION_LIST,
            f"Action '{action_id}' of type '{kind}' runs no actions",
            "List the action IDs to run in 'params.actions'",
        )


def check_condition(action_id: str, condition: Any, state_keys: set[str] | None, report: Report) -> None:
    path = f"actions.{action_id}.condition"
    if not isinstance(condition, dict):
        report.error(path, C.INVALID_CONDITION, f"Condition of action '{action_id}' must be an object")
        return

    condition_type = condition.get("type")
    if not is_member(condition_type, ConditionType):
        report.error(
            f"{path}.type",
            C.INVALID_CONDITION,
            f"Condition type '{condition_type}' is not valid. Must be one of: {choices(ConditionType)}",
        )
        return

    state_key = condition.get("stateKey")
    if condition_type == ConditionType.CUSTOM.value:
        if state_key is None and not isinstance(condition.get("expression"), str):
            report.error(f"{path}.expression", C.INVALID_CONDITION, "Custom condition needs an expression")
        return

    if not non_empty_str(state_key):
        report.error(f"{path}.stateKey", C.INVALID_CONDITION, f"Condition '{condition_type}' needs a stateKey")
    elif state_keys is not None and state_key not in state_keys:
        report.error(
            f"{path}.stateKey",
            C.STATE_KEY_NOT_FOUND,
            f"State key '{state_key}' referenced in condition of '{action_id}' is not defined in state",
        )


def composite_members(definition: Any) -> list[str]:
    if not isinstance(definition, dict):
        return []
    params = definition.get("params")
    if not isinstance(params, dict) or not isinstance(params.get("actions"), list):
        return []
    return [m for m in params["actions"] if isinstance(m, str)]


def check_action_cycles(actions: dict[str, Any], report: Report) -> None:
    graph = {action_id: composite_members(d) for action_id, d in actions.items()}

    for action_id in graph:
        if reaches(graph, graph[action_id], action_id):
            report.error(
                f"actions.{action_id}.params.actions",
                C.CIRCULAR_ACTION_REFERENCE,
                f"Action '{action_id}' eventually runs itself",
            )


def reaches(graph: dict[str, list[str]], start: Iterable[str], target: str) -> bool:
    seen: set[str] = set()
    stack = list(start)
    while stack:
        node = stack.pop()
        if node == target:
            return True
        if node in seen or node not in graph:
            continue
        seen.add(node)
        stack.extend(graph[node])
    return False


# ============================================================================
# API
# ============================================================================


def check_api(api: dict[str, Any], actions: Any, report: Report) -> None:
    for field in API_LISTS:
        if not isinstance(api.get(field), list):
            report.error(f"api.{field}", C.REQUIRED_FIELD_MISSING, f"API {field} must be an array")

    seen_ports: set[str] = set()
    for field in ("inputs", "outputs"):
        ports = api.get(field)
        if not isinstance(ports, list):
            continue
        for idx, port in enumerate_dicts(ports, f"api.{field}", report, C.INVALID_PORT, "Port"):
            port_id = port.get("id")
            if not non_empty_str(port_id):
                report.error(f"api.{field}[{idx}].id", C.INVALID_PORT, "Port ID is required and must be a string")
                continue
            if port_id in seen_ports:
                report.error(f"api.{field}[{idx}].id", C.DUPLICATE_PORT_ID, f"Port ID '{port_id}' is already used")
            seen_ports.add(port_id)

    action_ids = set(actions) if isinstance(actions, dict) else None

    exposes = api.get("exposes")
    if isinstance(exposes, list):
        for idx, method in enumerate_dicts(exposes, "api.exposes", report, C.INVALID_METHOD, "Exposed method"):
            if not non_empty_str(method.get("id")):
                report.error(f"api.exposes[{idx}].id", C.INVALID_METHOD, "Exposed method ID must be a string")

    accepts = api.get("accepts")
    if isinstance(accepts, list):
        for idx, method in enumerate_dicts(accepts, "api.accepts", report, C.INVALID_METHOD, "Accepted method"):
            if not non_empty_str(method.get("id")):
                report.error(f"api.accepts[{idx}].id", C.INVALID_METHOD, "Accepted method ID must be a string")
            handler = method.get("handler")
            if not non_empty_str(handler):
                report.error(f"api.accepts[{idx}].handler", C.INVALID_METHOD, "Accepted method needs a handler")
            elif action_ids is not None and handler not in action_ids:
                report.error(
                    f"api.accepts[{idx}].handler", C.HANDLER_NOT_FOUND, f"Handler '{handler}' is not defined in actions"
                )

    inputs, outputs = api.get("inputs"), api.get("outputs")
    if isinstance(inputs, list) and isinstance(outputs, list) and not inputs and not outputs:
        report.warn(
            "api",
            C.NO_IO_PORTS,
            "Widget has no input or output ports",
            "Consider adding ports to enable pipeline connectivity",
        )


# ============================================================================
# Permissions
# ============================================================================


def check_permissions(permissions: dict[str, Any], report: Report) -> None:
    for field in PERMISSION_FLAGS:
        if not isinstance(permissions.get(field), bool):
            report.error(f"permissions.{field}", C.REQUIRED_FIELD_MISSING, f"Permission '{field}' must be a boolean")

    share = permissions.get("revenueShare")
    if share is not None:
        check_revenue_share(share, report)
    elif permissions.get("allowMarketplace") is True:
        report.warn(
            "permissions.revenueShare",
            C.MISSING_REVENUE_SHARE,
            "Marketplace enabled but no revenue share configured",
            "Add revenue share configuration for marketplace listing",
        )

    license_tag = permissions.get("license")
    if license_tag is not None and not is_member(license_tag, LicenseType):
        report.warn(
            "permissions.license",
            C.UNKNOWN_LICENSE,
            f"License '{license_tag}' is not a known license tag",
            f"Known licenses: {choices(LicenseType)}",
        )


def check_revenue_share(share: Any, report: Report) -> None:
    if not isinstance(share, dict):
        report.error("permissions.revenueShare", C.INVALID_REVENUE_SHARE, "Revenue share must be an object")
        return

    total = 0.0
    for party, required in (("creator", True), ("platform", True), ("referrer", False)):
        fraction = share.get(party)
        if fraction is None and not required:
            continue
        if not is_number(fraction) or not 0 <= fraction <= 1:
            report.error(
                f"permissions.revenueShare.{party}",
                C.INVALID_REVENUE_SHARE,
                f"{party.capitalize()} revenue share must be a number between 0 and 1",
            )
            continue
        total += fraction

    if total > 1 + REVENUE_TOLERANCE:
        report.error(
            "permissions.revenueShare",
            C.REVENUE_SHARE_EXCEEDS_100,
            f"Total revenue share ({total * 100:.1f}%) exceeds 100%",
        )


# ============================================================================
# Size, tags, extras
# ============================================================================


def check_size(size: dict[str, Any], report: Report) -> None:
    for axis in ("width", "height"):
        value = size.get(axis)
        if not is_number(value) or value < 1:
            report.error(f"size.{axis}", C.INVALID_SIZE, f"{axis.capitalize()} must be a positive number")

    for bound in ("minWidth", "minHeight", "maxWidth", "maxHeight", "aspectRatio"):
        if size.get(bound) is not None and not is_number(size[bound]):
            report.error(f"size.{bound}", C.INVALID_SIZE, f"'{bound}' must be a number")

    for low, high in (("minWidth", "maxWidth"), ("minHeight", "maxHeight")):
        lo, hi = size.get(low), size.get(high)
        if is_number(lo) and is_number(hi) and lo > hi:
            report.error("size", C.INVALID_SIZE_CONSTRAINTS, f"{low} cannot be greater than {high}")

    width, height = size.get("width"), size.get("height")
    if (is_number(width) and width > LARGE_WIDGET_PX) or (is_number(height) and height > LARGE_WIDGET_PX):
        report.warn(
            "size",
            C.LARGE_WIDGET,
            f"Widget dimensions exceed {LARGE_WIDGET_PX}px",
            "Consider if such large dimensions are necessary for the widget",
        )


def check_tags(tags: list[Any], report: Report) -> None:
    if len(tags) > MAX_TAGS:
        report.error("tags", C.TOO_MANY_TAGS, f"Maximum of {MAX_TAGS} tags allowed")

    seen: set[str] = set()
    for idx, tag in enumerate(tags):
        path = f"tags[{idx}]"
        if not isinstance(tag, str):
            report.error(path, C.INVALID_TAG, "Tag must be a string")
            continue
        if not TAG_PATTERN.fullmatch(tag):
            report.error(path, C.INVALID_TAG_FORMAT, f"Tag '{tag}' must be lowercase letters, numbers, and hyphens only")
        if len(tag) > MAX_TAG_LENGTH:
            report.error(path, C.TAG_TOO_LONG, f"Tag '{tag}' exceeds maximum length of {MAX_TAG_LENGTH} characters")
        if tag in seen:
            report.warn(path, C.DUPLICATE_TAG, f"Tag '{tag}' is duplicated", "Remove duplicate tags")
        seen.add(tag)


def check_moddlets(moddlets: list[Any], report: Report) -> None:
    for idx, moddlet in enumerate_dicts(moddlets, "moddlets", report, C.INVALID_MODDLET, "Moddlet"):
        path = f"moddlets[{idx}]"
        for field in ("id", "name", "target"):
            if not non_empty_str(moddlet.get(field)):
                report.error(f"{path}.{field}", C.INVALID_MODDLET, f"Moddlet '{field}' must be a string")
        if not is_member(moddlet.get("type"), ModdletType):
            report.error(
                f"{path}.type",
                C.INVALID_MODDLET_TYPE,
                f"Moddlet type '{moddlet.get('type')}' is not valid. Must be one of: {choices(ModdletType)}",
            )


def check_ai(ai: dict[str, Any], report: Report) -> None:
    if not isinstance(ai.get("enabled"), bool):
        report.error("ai.enabled", C.REQUIRED_FIELD_MISSING, "AI 'enabled' must be a boolean")


# ============================================================================
# Model shape
# ============================================================================


def format_loc(loc: Iterable[Any]) -> str:
    """('visual', 'cssVariables', 0, 'type') -> 'visual.cssVariables[0].type'"""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path


def check_model_shape(spec: dict[str, Any], report: Report) -> None:
    """
    Catch anything the typed model rejects that no rule above reports.

    Runs last, and only on otherwise valid specs, so a valid result always
    parses into a :class:`Spec`.
    """
    try:
        Spec.model_validate(spec)
    except PydanticValidationError as e:
        for error in e.errors():
            code = C.REQUIRED_FIELD_MISSING if error["type"] == "missing" else C.INVALID_FIELD_TYPE
            report.error(format_loc(error["loc"]), code, error["msg"])
