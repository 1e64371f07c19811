"""Identifier, literal and markup helpers shared by the emitters."""

import re
from typing import Any, Iterable

from ..core.json import safe_json_dumps
from ..spec.models import StateValueType

_WORD_SPLIT = re.compile(r"[^A-Za-z0-9]+")
_COMMENT_LINE = re.compile(r"^<!--.*-->$")
_TAG_GAP = re.compile(r">\n<")


def pascal_case(text: str) -> str:
    """``click-counter`` -> ``ClickCounter``; inner capitals are kept."""
    words = [w for w in _WORD_SPLIT.split(text) if w]
    return "".join(w[0].upper() + w[1:] for w in words)


def camel_case(text: str) -> str:
    pascal = pascal_case(text)
    return pascal[:1].lower() + pascal[1:]


def function_names(action_ids: Iterable[str]) -> dict[str, str]:
    """
    Map action ids to unique JavaScript function names.

    Examples:
        >>> function_names(["inc", "reset-all", "9lives"])
        {'inc': 'incAction', 'reset-all': 'resetAllAction', '9lives': 'a9livesAction'}
    """
    names: dict[str, str] = {}
    used: set[str] = set()
    for action_id in action_ids:
        base = camel_case(action_id) or "anonymous"
        if base[0].isdigit():
            base = f"a{base}"
        name = f"{base}Action"
        suffix = 2
        while name in used:
            name = f"{base}Action{suffix}"
            suffix += 1
        used.add(name)
        names[action_id] = name
    return names


TS_TYPES = {
    StateValueType.STRING.value: "string",
    StateValueType.NUMBER.value: "number",
    StateValueType.BOOLEAN.value: "boolean",
    StateValueType.OBJECT.value: "Record<string, unknown>",
    StateValueType.ARRAY.value: "unknown[]",
}


def type_name(value_type: StateValueType | str) -> str:
    """TypeScript type for a state/port value type (``unknown`` otherwise)."""
    key = value_type.value if isinstance(value_type, StateValueType) else value_type
    return TS_TYPES.get(key, "unknown")


def zero_value(value_type: StateValueType) -> Any:
    """Value used when a state field declares no default."""
    match value_type:
        case StateValueType.STRING:
            return ""
        case StateValueType.NUMBER:
            return 0
        case StateValueType.BOOLEAN:
            return False
        case StateValueType.OBJECT:
            return {}
        case StateValueType.ARRAY:
            return []
        case _:
            return None


def js_literal(value: Any) -> str:
    """
    Encode a value as a JavaScript literal safe to embed in a script element.

    Output is compact JSON with ``</`` and the two JavaScript line
    terminators escaped.
    """
    return (
        safe_json_dumps(value)
        .replace("</", "<\\/")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )


_CSS_ESCAPES = {"<": "\\3c ", "{": "\\7b ", "}": "\\7d ", ";": "\\3b "}


def css_value(text: str) -> str:
    """
    Make a spec value safe as a CSS declaration value.

    Characters that could end the declaration, the rule or the enclosing
    style element are written as CSS escapes.

    Examples:
        >>> css_value("red}</style>")
        'red\\7d \\3c /style>'
    """
    flat = " ".join(text.split())
    return "".join(_CSS_ESCAPES.get(ch, ch) for ch in flat)


def css_string(text: str) -> str:
    """Quote text as a CSS string literal."""
    escaped = css_value(text.replace("\\", "\\\\").replace('"', '\\"'))
    return f'"{escaped}"'


def comment_text(text: str) -> str:
    """Make text safe inside a ``/* */`` comment."""
    return " ".join(text.replace("*/", "* /").replace("</", "<\\/").split())


def indent(lines: Iterable[str], depth: int) -> list[str]:
    pad = "  " * depth
    return [f"{pad}{line}" if line else "" for line in lines]


def minify_markup(document: str) -> str:
    """
    Collapse generated markup.

    Strips indentation, drops blank lines and markup comments and joins
    adjacent tags. Script lines stay on their own lines, so statement
    boundaries survive.
    """
    lines = []
    for line in document.splitlines():
        stripped = line.strip()
        if not stripped or _COMMENT_LINE.match(stripped):
            continue
        lines.append(stripped)
    return _TAG_GAP.sub("><", "\n".join(lines))
