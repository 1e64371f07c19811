"""styles.css emitter."""

from ...spec.models import BackgroundType, Spec
from ..naming import css_string, css_value
from ..versions import TEMPLATE_ENGINE_VERSION

FONT_STACK = "-apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif"
DEFAULT_GRADIENT = "linear-gradient(135deg, #667eea 0%, #764ba2 100%)"


def theme_variables(spec: Spec) -> list[str]:
    variables = spec.visual.css_variables
    if not variables:
        return []
    lines = [":root {"]
    lines.extend(f"  {var.name}: {css_value(var.default_value)};" for var in variables)
    lines.append("}")
    return lines


def background_rule(spec: Spec) -> list[str]:
    background = spec.visual.background
    if background is None:
        return []

    match background.type:
        case BackgroundType.COLOR:
            declaration = f"background-color: {css_value(background.value or '#ffffff')};"
        case BackgroundType.GRADIENT:
            declaration = f"background: {css_value(background.value or DEFAULT_GRADIENT)};"
        case BackgroundType.IMAGE:
            if not background.value:
                return []
            declaration = f"background: url({css_string(background.value)}) center / cover no-repeat;"
        case BackgroundType.TRANSPARENT:
            declaration = "background: transparent;"

    return [".widget-container {", f"  {declaration}", "}"]


def stylesheet_rules(spec: Spec, include_comments: bool = True) -> list[str]:
    """Rules shared by styles.css and the inline style block of the entry."""
    lines = [
        "* {",
        "  margin: 0;",
        "  padding: 0;",
        "  box-sizing: border-box;",
        "}",
        "",
        "html, body {",
        "  width: 100%;",
        "  height: 100%;",
        "  overflow: hidden;",
        "}",
        "",
    ]

    theme = theme_variables(spec)
    if theme:
        if include_comments:
            lines.append("/* Theme variables */")
        lines.extend(theme)
        lines.append("")

    lines.extend([
        ".widget-container {",
        "  width: 100%;",
        "  height: 100%;",
        "  display: flex;",
        "  align-items: center;",
        "  justify-content: center;",
        "  position: relative;",
        f"  font-family: {FONT_STACK};",
        "}",
        "",
    ])

    background = background_rule(spec)
    if background:
        lines.extend(background)
        lines.append("")

    lines.extend([
        ".widget-content {",
        "  display: flex;",
        "  flex-direction: column;",
        "  align-items: center;",
        "  justify-content: center;",
        "  gap: 12px;",
        "  padding: 16px;",
        "  transition: all 0.2s ease;",
        "}",
        "",
    ])

    if include_comments:
        lines.append("/* State-based styles */")
    lines.extend([
        ".widget-content[data-state=\"disabled\"] {",
        "  opacity: 0.5;",
        "  pointer-events: none;",
        "}",
        "",
    ])

    if include_comments:
        lines.append("/* Responsive styles */")
    lines.extend([
        "@media (max-width: 200px) {",
        "  .widget-content {",
        "    padding: 8px;",
        "    font-size: 14px;",
        "  }",
        "}",
    ])
    return lines


def emit_styles(spec: Spec, include_comments: bool = True) -> str:
    header = []
    if include_comments:
        header = [
            "/**",
            f" * Styles for {spec.id}",
            f" * Generated by specforge {TEMPLATE_ENGINE_VERSION}",
            " */",
            "",
        ]
    return "\n".join(header + stylesheet_rules(spec, include_comments)) + "\n"
