"""index.html emitter: the self-contained widget document.

The script holds the protocol state machine as an explicit ``phase`` value
(Loading, AwaitingInit, Active, Destroyed) and talks to its host only
through ``{type, payload}`` envelopes posted to the parent window.
"""

from html import escape

from ...spec.models import EventTrigger, Spec, VisualType
from ..naming import comment_text, indent, js_literal, minify_markup
from ..program import INTERVAL_MS, ROUTABLE_TRIGGERS, WidgetProgram, display_value
from ..versions import PROTOCOL_VERSION, TEMPLATE_ENGINE_VERSION
from .actions import SCRIPT_HELPERS, action_body, strip_types
from .styles import stylesheet_rules


def visual_content(spec: Spec, program: WidgetProgram) -> list[str]:
    """Markup inside the widget root for the visual's rendering mode."""
    name = escape(spec.display_name)

    match spec.visual.type:
        case VisualType.HTML:
            lines = [
                '<div class="widget-content" id="content">',
                f"  <h3>{name}</h3>",
                f'  <p class="description">{escape(spec.description)}</p>',
            ]
            if program.rendered_fields:
                lines.append('  <div class="state-display">')
                for key in program.rendered_fields:
                    attr = escape(key)
                    lines.extend([
                        f'    <span class="state-item" data-key="{attr}">',
                        f'      <span class="state-label">{attr}:</span>',
                        f'      <span class="state-value" data-state-value="{attr}">'
                        f"{escape(display_value(program.initial_state[key]))}</span>",
                        "    </span>",
                    ])
                lines.append("  </div>")
            lines.append("</div>")
            return lines
        case VisualType.SVG:
            return [
                '<div class="widget-content" id="content">',
                '  <svg id="widget-svg" width="100%" height="100%" viewBox="0 0 100 100">',
                '    <circle cx="50" cy="50" r="40" fill="var(--primary-color, #667eea)" />',
                "  </svg>",
                "</div>",
            ]
        case VisualType.CANVAS:
            return [
                '<div class="widget-content" id="content">',
                '  <canvas id="widget-canvas" width="200" height="200"></canvas>',
                "</div>",
            ]
        case VisualType.LOTTIE:
            return [
                '<div class="widget-content" id="content">',
                '  <div id="lottie-container" style="width: 100%; height: 100%;"></div>',
                "</div>",
            ]
        case VisualType.PNG | VisualType.CSS:
            lines = ['<div class="widget-content" id="content">']
            if spec.visual.default_asset:
                lines.append(f'  <img src="{escape(spec.visual.default_asset)}" alt="{name}" class="widget-image" />')
            lines.append(f'  <span class="widget-label">{name}</span>')
            lines.append("</div>")
            return lines


class ScriptWriter:
    """Accumulates script lines; banners only when comments are enabled."""

    def __init__(self, include_comments: bool) -> None:
        self.include_comments = include_comments
        self.lines: list[str] = []

    def banner(self, title: str) -> None:
        if self.include_comments:
            self.lines.extend(["", f"/* ===== {title} ===== */"])
        else:
            self.lines.append("")

    def add(self, *lines: str) -> None:
        self.lines.extend(lines)


def listener_lines(program: WidgetProgram) -> list[str]:
    lines = ["function bindListeners() {", '  var root = document.getElementById("widget-root");']
    for target, event, trigger in program.dom_bindings():
        element = "root" if target == "root" else "document"
        lines.append(f"  {element}.addEventListener({js_literal(event)}, function (e) {{")
        if trigger == EventTrigger.ON_CONTEXT_MENU.value:
            lines.append("    e.preventDefault();")
        lines.append(f"    if (phase === \"Active\") runTrigger({js_literal(trigger)});")
        lines.append("  });")
    if program.has_interval:
        lines.append("  timers.push(setInterval(function () {")
        lines.append(f"    if (phase === \"Active\") runTrigger({js_literal(EventTrigger.ON_INTERVAL.value)});")
        lines.append(f"  }}, {INTERVAL_MS}));")
    lines.append("}")
    return lines


def script_lines(program: WidgetProgram, include_comments: bool) -> list[str]:
    w = ScriptWriter(include_comments)
    dom_events = {event: trigger for _, event, trigger in program.dom_bindings()}

    w.add(
        "(function () {",
        '  "use strict";',
    )
    body = ScriptWriter(include_comments)
    if include_comments:
        body.add(f"/* Widget protocol v{PROTOCOL_VERSION} */")
    body.add(
        f"var WIDGET_ID = {js_literal(program.widget_id)};",
        f"var WIDGET_VERSION = {js_literal(program.version)};",
        f"var PROTOCOL_VERSION = {js_literal(PROTOCOL_VERSION)};",
    )

    body.banner("State")
    body.add(
        f"var state = {js_literal(program.initial_state)};",
        f"var STATE_FIELDS = {js_literal(list(program.field_types))};",
        'var phase = "Loading";',
        "var initialized = false;",
        "var pendingInit = null;",
        "var notifying = false;",
        "var timers = [];",
        "",
        "function post(type, payload) {",
        "  var message = payload === undefined ? { type: type } : { type: type, payload: payload };",
        '  window.parent.postMessage(message, "*");',
        "}",
        "",
        "function getState() {",
        "  return Object.assign({}, state);",
        "}",
        "",
        "function setState(patch) {",
        '  if (!patch || typeof patch !== "object" || Array.isArray(patch)) return;',
        "  var changed = {};",
        "  var dirty = false;",
        "  Object.keys(patch).forEach(function (key) {",
        "    if (!Object.prototype.hasOwnProperty.call(state, key) || !sameValue(state[key], patch[key])) {",
        "      state[key] = patch[key];",
        "      changed[key] = patch[key];",
        "      dirty = true;",
        "    }",
        "  });",
        "  if (!dirty) return;",
        '  post("STATE_PATCH", changed);',
        "  render();",
        "  if (notifying) return;",
        "  notifying = true;",
        "  try {",
        f"    runTrigger({js_literal(EventTrigger.ON_STATE_CHANGE.value)});",
        "  } finally {",
        "    notifying = false;",
        "  }",
        "}",
        "",
    )
    body.add(*strip_types(SCRIPT_HELPERS))

    body.banner("Action context")
    body.add(
        "var ctx = {",
        "  getState: getState,",
        "  setState: setState,",
        "  emit: function (type, payload) {",
        '    post("widget:emit", { type: type, payload: payload === undefined ? {} : payload });',
        "  },",
        "  broadcast: function (event, payload) {",
        '    post("widget:broadcast", { event: event, payload: payload === undefined ? {} : payload });',
        "  },",
        "  emitOutput: function (portName, value) {",
        '    post("widget:output", { portName: portName, value: value });',
        "  },",
        "  animate: function (duration) {",
        '    var root = document.getElementById("widget-root");',
        "    if (root && root.animate) {",
        '      root.animate([{ transform: "scale(1)" }, { transform: "scale(1.1)" }, { transform: "scale(1)" }],',
        '        { duration: duration, easing: "ease-in-out" });',
        "    }",
        "  }",
        "};",
    )

    body.banner("Actions")
    for action in program.actions.values():
        if include_comments and action.description:
            body.add(f"/* {comment_text(action.description)} */")
        body.add(f"function {action.function_name}(ctx) {{")
        body.add(*indent(action_body(action, program), 1))
        body.add("}", "")
    body.add("var ACTIONS = {")
    body.add(*(f"  {js_literal(a.action_id)}: {a.function_name}," for a in program.actions.values()))
    body.add(
        "};",
        "",
        "function runAction(id) {",
        "  var fn = Object.prototype.hasOwnProperty.call(ACTIONS, id) ? ACTIONS[id] : null;",
        "  if (fn) fn(ctx);",
        "}",
    )

    body.banner("Triggers")
    body.add(
        f"var TRIGGERS = {js_literal({k: list(v) for k, v in program.triggers.items()})};",
        f"var DOM_TRIGGERS = {js_literal(dom_events)};",
        f"var ROUTABLE_TRIGGERS = {js_literal(list(ROUTABLE_TRIGGERS))};",
        f"var SUBSCRIPTIONS = {js_literal([list(s) for s in program.subscriptions])};",
        f"var ACCEPTS = {js_literal([list(a) for a in program.accepted])};",
        "",
        "function runTrigger(name) {",
        "  var ids = Object.prototype.hasOwnProperty.call(TRIGGERS, name) ? TRIGGERS[name] : [];",
        "  ids.forEach(runAction);",
        "}",
        "",
        "function resolveTrigger(type) {",
        "  if (Object.prototype.hasOwnProperty.call(DOM_TRIGGERS, type)) return DOM_TRIGGERS[type];",
        "  if (ROUTABLE_TRIGGERS.indexOf(type) >= 0) return type;",
        "  return null;",
        "}",
        "",
    )
    body.add(*listener_lines(program))

    body.banner("Pipeline I/O")
    body.add(
        f"var INPUT_PORTS = {js_literal(list(program.input_ports))};",
        "",
        "function handlePipelineInput(payload) {",
        '  if (!payload || typeof payload.portName !== "string") return;',
        "  var port = payload.portName;",
        "  if (INPUT_PORTS.indexOf(port) < 0) return;",
        "  if (STATE_FIELDS.indexOf(port) >= 0) {",
        "    var patch = {};",
        "    patch[port] = payload.value;",
        "    setState(patch);",
        "  }",
        "  runAction(port);",
        f"  runTrigger({js_literal(EventTrigger.ON_INPUT.value)});",
        "}",
    )

    body.banner("Exposed API")
    body.add(
        f"var EXPOSED = {js_literal(list(program.exposed))};",
        "",
        "function handleInvoke(payload) {",
        '  if (!payload || typeof payload.method !== "string") return;',
        "  if (EXPOSED.indexOf(payload.method) < 0) return;",
        "  runAction(payload.method);",
        "}",
    )

    body.banner("Protocol")
    body.add(
        "function handleInit(payload) {",
        "  if (initialized) return;",
        "  initialized = true;",
        '  if (payload && payload.state && typeof payload.state === "object" && !Array.isArray(payload.state)) {',
        "    Object.assign(state, payload.state);",
        "  }",
        f"  runTrigger({js_literal(EventTrigger.ON_MOUNT.value)});",
        '  phase = "Active";',
        "  render();",
        "}",
        "",
        "function handleWidgetEvent(payload) {",
        '  if (!payload || typeof payload.type !== "string") return;',
        "  var type = payload.type;",
        "  var trigger = resolveTrigger(type);",
        "  if (trigger) runTrigger(trigger);",
        "  SUBSCRIPTIONS.forEach(function (sub) {",
        "    if (sub[0] === type) runAction(sub[1]);",
        "  });",
        "  ACCEPTS.forEach(function (method) {",
        "    if (method[0] === type) runAction(method[1]);",
        "  });",
        "}",
        "",
        "function handleResize() {",
        f"  runTrigger({js_literal(EventTrigger.ON_RESIZE.value)});",
        "  render();",
        "}",
        "",
        "function handleDestroy() {",
        f'  if (phase === "Active") runTrigger({js_literal(EventTrigger.ON_UNMOUNT.value)});',
        "  timers.forEach(clearInterval);",
        "  timers = [];",
        '  phase = "Destroyed";',
        "}",
        "",
        "function handleMessage(data) {",
        '  if (!data || typeof data !== "object" || typeof data.type !== "string") return;',
        "  var type = data.type;",
        "  var payload = data.payload;",
        '  if (phase === "Destroyed") return;',
        '  if (phase === "Loading") {',
        '    if (type === "INIT" && pendingInit === null) pendingInit = { payload: payload };',
        '    if (type === "DESTROY") handleDestroy();',
        "    return;",
        "  }",
        '  if (type === "INIT") return handleInit(payload);',
        '  if (type === "DESTROY") return handleDestroy();',
        '  if (phase !== "Active") return;',
        "  switch (type) {",
        '    case "widget:event":',
        "      handleWidgetEvent(payload);",
        "      break;",
        '    case "pipeline:input":',
        "      handlePipelineInput(payload);",
        "      break;",
        '    case "widget:invoke":',
        "      handleInvoke(payload);",
        "      break;",
        '    case "STATE_UPDATE":',
        "      setState(payload);",
        "      break;",
        '    case "SETTINGS_UPDATE":',
        "      break;",
        '    case "RESIZE":',
        "      handleResize();",
        "      break;",
        "    default:",
        "      break;",
        "  }",
        "}",
        "",
        'window.addEventListener("message", function (event) {',
        "  try {",
        "    handleMessage(event.data);",
        "  } catch (err) {",
        '    if (window.console) window.console.warn("widget message dropped", err);',
        "  }",
        "});",
    )

    body.banner("Render")
    body.add(
        "function display(value) {",
        '  if (value === undefined) return "";',
        '  return typeof value === "string" ? value : JSON.stringify(value);',
        "}",
        "",
        "function render() {",
        '  var nodes = document.querySelectorAll("[data-state-value]");',
        "  Array.prototype.forEach.call(nodes, function (node) {",
        '    node.textContent = display(state[node.getAttribute("data-state-value")]);',
        "  });",
        "}",
    )

    body.banner("Boot")
    body.add(
        "function boot() {",
        "  bindListeners();",
        "  render();",
        '  phase = "AwaitingInit";',
        '  post("READY", { widgetId: WIDGET_ID, version: WIDGET_VERSION, protocolVersion: PROTOCOL_VERSION });',
        "  if (pendingInit !== null) {",
        "    var queued = pendingInit;",
        "    pendingInit = null;",
        "    handleInit(queued.payload);",
        "  }",
        "}",
        "",
        'if (document.readyState === "loading") {',
        '  document.addEventListener("DOMContentLoaded", boot);',
        "} else {",
        "  boot();",
        "}",
    )

    w.add(*indent(body.lines, 1))
    w.add("})();")
    return w.lines


def emit_entry(spec: Spec, program: WidgetProgram, include_comments: bool = True, minify: bool = False) -> str:
    """Render index.html."""
    lines = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '  <meta charset="UTF-8">',
        '  <meta name="viewport" content="width=device-width, initial-scale=1.0">',
        f'  <meta name="widget-id" content="{escape(spec.id)}">',
        f'  <meta name="widget-version" content="{escape(spec.version)}">',
        f'  <meta name="generator" content="specforge {TEMPLATE_ENGINE_VERSION}">',
        f"  <title>{escape(spec.display_name)}</title>",
        "  <style>",
    ]
    lines.extend(indent(stylesheet_rules(spec, include_comments), 2))
    lines.extend(["  </style>", "</head>", "<body>"])
    if include_comments:
        lines.append("  <!-- Widget root -->")
    lines.append('  <div id="widget-root" class="widget-container">')
    lines.extend(indent(visual_content(spec, program), 2))
    lines.append("  </div>")
    lines.append("  <script>")
    lines.extend(indent(script_lines(program, include_comments), 2))
    lines.extend(["  </script>", "</body>", "</html>"])

    document = "\n".join(lines) + "\n"
    return minify_markup(document) if minify else document
