"""SpecJSON Data Models.

The declarative widget specification. JSON keys are camelCase; Python
attributes are snake_case and both are accepted on input.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class SpecModel(BaseModel):
    """Base model with camelCase aliases.

    JSON nulls are read as absent, so a null default falls back to the
    type's zero value.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


# ============================================================================
# Closed sets
# ============================================================================


class WidgetCategory(str, Enum):
    """Widget category for organization."""
    PRODUCTIVITY = "productivity"
    CREATIVITY = "creativity"
    SOCIAL = "social"
    GAMES = "games"
    MEDIA = "media"
    DATA = "data"
    UTILITY = "utility"
    EDUCATION = "education"
    BUSINESS = "business"
    LIFESTYLE = "lifestyle"
    DEVELOPER = "developer"
    AI = "ai"
    INTEGRATION = "integration"
    CUSTOM = "custom"


class VisualType(str, Enum):
    """Primary rendering mode."""
    PNG = "png"          # image
    SVG = "svg"          # vector
    LOTTIE = "lottie"    # animation
    CSS = "css"          # stylesheet-only
    CANVAS = "canvas"    # procedural canvas
    HTML = "html"        # markup


class StateValueType(str, Enum):
    """Value type of a state field or port."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    ANY = "any"


class EventTrigger(str, Enum):
    """Named occasion that fires an ordered list of actions."""
    ON_CLICK = "onClick"
    ON_DOUBLE_CLICK = "onDoubleClick"
    ON_HOVER = "onHover"
    ON_HOVER_END = "onHoverEnd"
    ON_MOUNT = "onMount"
    ON_UNMOUNT = "onUnmount"
    ON_RESIZE = "onResize"
    ON_FOCUS = "onFocus"
    ON_BLUR = "onBlur"
    ON_KEY_DOWN = "onKeyDown"
    ON_KEY_UP = "onKeyUp"
    ON_DRAG_START = "onDragStart"
    ON_DRAG = "onDrag"
    ON_DRAG_END = "onDragEnd"
    ON_DROP = "onDrop"
    ON_CONTEXT_MENU = "onContextMenu"
    ON_WHEEL = "onWheel"
    ON_TOUCH_START = "onTouchStart"
    ON_TOUCH_MOVE = "onTouchMove"
    ON_TOUCH_END = "onTouchEnd"
    ON_ANIMATION_END = "onAnimationEnd"
    ON_TRANSITION_END = "onTransitionEnd"
    ON_INTERVAL = "onInterval"
    ON_TIMEOUT = "onTimeout"
    ON_IDLE = "onIdle"
    ON_VISIBILITY_CHANGE = "onVisibilityChange"
    ON_STATE_CHANGE = "onStateChange"
    ON_INPUT = "onInput"
    ON_OUTPUT = "onOutput"
    ON_ERROR = "onError"


class ActionKind(str, Enum):
    """State, communication and control primitives."""
    SET_STATE = "setState"
    TOGGLE_STATE = "toggleState"
    INCREMENT_STATE = "incrementState"
    DECREMENT_STATE = "decrementState"
    RESET_STATE = "resetState"
    EMIT = "emit"
    BROADCAST = "broadcast"
    ANIMATE = "animate"
    PLAY_SOUND = "playSound"
    NAVIGATE = "navigate"
    FETCH = "fetch"
    CUSTOM = "custom"
    CONDITIONAL = "conditional"
    SEQUENCE = "sequence"
    PARALLEL = "parallel"


class ConditionType(str, Enum):
    """Comparison applied by an action guard."""
    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    GREATER_THAN = "greaterThan"
    LESS_THAN = "lessThan"
    CONTAINS = "contains"
    CUSTOM = "custom"


class CSSVariableType(str, Enum):
    COLOR = "color"
    SIZE = "size"
    FONT = "font"
    NUMBER = "number"
    STRING = "string"


class BackgroundType(str, Enum):
    COLOR = "color"
    GRADIENT = "gradient"
    IMAGE = "image"
    TRANSPARENT = "transparent"


class LicenseType(str, Enum):
    MIT = "MIT"
    APACHE_2 = "Apache-2.0"
    GPL_3 = "GPL-3.0"
    BSD_3_CLAUSE = "BSD-3-Clause"
    PROPRIETARY = "proprietary"
    CUSTOM = "custom"


class ModdletType(str, Enum):
    SKIN = "skin"
    BEHAVIOR = "behavior"
    ACTION = "action"
    EVENT = "event"
    STATE = "state"


class ScaleMode(str, Enum):
    CROP = "crop"
    SCALE = "scale"
    STRETCH = "stretch"
    CONTAIN = "contain"


# ============================================================================
# Visual
# ============================================================================


class SkinSpec(SpecModel):
    id: str
    name: str
    preview_asset: str | None = None
    css_variables: dict[str, str] | None = None
    assets: list[str] | None = None


class SpriteAnimation(SpecModel):
    start: int
    end: int
    loop: bool | None = None


class SpriteSheetSpec(SpecModel):
    asset: str
    frame_width: int | float
    frame_height: int | float
    frame_count: int
    fps: int | float | None = None
    animations: dict[str, SpriteAnimation] | None = None


class LottieSpec(SpecModel):
    asset: str
    autoplay: bool | None = None
    loop: bool | None = None
    speed: int | float | None = None
    segments: dict[str, tuple[int | float, int | float]] | None = None


class CSSVariableSpec(SpecModel):
    name: str
    default_value: str = ""
    description: str | None = None
    type: CSSVariableType | None = None


class BackgroundSpec(SpecModel):
    type: BackgroundType
    value: str | None = None


class VisualSpec(SpecModel):
    type: VisualType
    default_asset: str | None = None
    skins: list[SkinSpec] = Field(default_factory=list)
    sprite_sheet: SpriteSheetSpec | None = None
    lottie: LottieSpec | None = None
    css_variables: list[CSSVariableSpec] = Field(default_factory=list)
    background: BackgroundSpec | None = None


# ============================================================================
# State
# ============================================================================


class StateValidation(SpecModel):
    min: int | float | None = None
    max: int | float | None = None
    pattern: str | None = None
    enum: list[Any] | None = None
    required: bool | None = None


class StateFieldSpec(SpecModel):
    type: StateValueType
    default: Any = None
    description: str | None = None
    persist: bool | None = None
    rule: StateValidation | None = Field(default=None, alias="validate")


# ============================================================================
# Events
# ============================================================================


class CustomEventSpec(SpecModel):
    id: str
    name: str = ""
    description: str | None = None
    payload: dict[str, StateValueType] | None = None


class BroadcastSpec(SpecModel):
    event: str
    description: str | None = None
    payload: dict[str, StateValueType] | None = None


class SubscriptionSpec(SpecModel):
    event: str
    handler: str


class EventSpec(SpecModel):
    # Keyed by trigger name; unknown names are tolerated
    triggers: dict[str, list[str]] = Field(default_factory=dict)
    custom: list[CustomEventSpec] = Field(default_factory=list)
    broadcasts: list[BroadcastSpec] = Field(default_factory=list)
    subscriptions: list[SubscriptionSpec] = Field(default_factory=list)


# ============================================================================
# Actions
# ============================================================================


class ActionParams(SpecModel):
    """Free-form parameters; the known keys are typed."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    state_key: str | None = None
    value: Any = None
    toggle_key: str | None = None
    amount: int | float | None = None
    event_type: str | None = None
    event_payload: Any = None
    broadcast_event: str | None = None
    animation: str | None = None
    duration: int | float | None = None
    sound: str | None = None
    url: str | None = None
    endpoint: str | None = None
    method: str | None = None
    custom_handler: str | None = None
    actions: list[str] | None = None


class ActionCondition(SpecModel):
    type: ConditionType
    state_key: str | None = None
    value: Any = None
    expression: str | None = None


class ActionDefinition(SpecModel):
    type: ActionKind
    description: str | None = None
    params: ActionParams = Field(default_factory=ActionParams)
    condition: ActionCondition | None = None


# ============================================================================
# API
# ============================================================================


class ExposedMethodSpec(SpecModel):
    id: str
    name: str = ""
    description: str | None = None
    params: dict[str, StateValueType] | None = None
    returns: StateValueType | None = None


class AcceptedMethodSpec(SpecModel):
    id: str
    description: str | None = None
    handler: str


class PortSpec(SpecModel):
    id: str
    name: str = ""
    # Hosts also use pipeline-only types such as "event" or "trigger"
    type: str = StateValueType.ANY.value
    description: str | None = None
    required: bool | None = None
    default: Any = None


class APISpec(SpecModel):
    exposes: list[ExposedMethodSpec] = Field(default_factory=list)
    accepts: list[AcceptedMethodSpec] = Field(default_factory=list)
    inputs: list[PortSpec] = Field(default_factory=list)
    outputs: list[PortSpec] = Field(default_factory=list)


# ============================================================================
# Dependencies, permissions, extras
# ============================================================================


class CDNDependency(SpecModel):
    name: str
    url: str
    integrity: str | None = None
    global_name: str | None = Field(default=None, alias="global")


class DependencySpec(SpecModel):
    npm: dict[str, str] | None = None
    cdn: list[CDNDependency] | None = None
    widgets: list[str] | None = None
    browser_apis: list[str] | None = Field(default=None, alias="browserAPIs")


class RevenueShareSpec(SpecModel):
    creator: int | float
    platform: int | float
    referrer: int | float | None = None


class TrackingSpec(SpecModel):
    track_usage: bool
    track_revenue: bool
    anonymize_data: bool | None = None


class PermissionSpec(SpecModel):
    allow_pipeline_use: bool
    allow_forking: bool
    allow_marketplace: bool
    revenue_share: RevenueShareSpec | None = None
    license: str | None = None
    required_capabilities: list[str] | None = None
    tracking: TrackingSpec | None = None


class ModdletSpec(SpecModel):
    id: str
    name: str
    description: str | None = None
    type: ModdletType
    target: str
    modification: Any = None


class AISuggestionSpec(SpecModel):
    enable_auto_complete: bool | None = None
    enable_smart_connections: bool | None = None
    context_keywords: list[str] | None = None


class AIBehaviorSpec(SpecModel):
    personality: str | None = None
    response_style: str | None = None
    adapt_to_user: bool | None = None


class AIContentSpec(SpecModel):
    allow_text_generation: bool | None = None
    allow_image_generation: bool | None = None
    allow_code_generation: bool | None = None


class AISpec(SpecModel):
    enabled: bool
    suggestions: AISuggestionSpec | None = None
    behavior: AIBehaviorSpec | None = None
    content_generation: AIContentSpec | None = None


class SizeSpec(SpecModel):
    width: int | float
    height: int | float
    min_width: int | float | None = None
    min_height: int | float | None = None
    max_width: int | float | None = None
    max_height: int | float | None = None
    aspect_ratio: int | float | None = None
    lock_aspect_ratio: bool | None = None
    scale_mode: ScaleMode | None = None


# ============================================================================
# Spec
# ============================================================================


class Spec(SpecModel):
    """Complete widget specification (the compiler's sole input)."""

    id: str
    version: str
    display_name: str
    category: WidgetCategory
    description: str
    visual: VisualSpec
    state: dict[str, StateFieldSpec] = Field(default_factory=dict)
    events: EventSpec = Field(default_factory=EventSpec)
    actions: dict[str, ActionDefinition] = Field(default_factory=dict)
    api: APISpec = Field(default_factory=APISpec)
    dependencies: DependencySpec | None = None
    permissions: PermissionSpec
    moddlets: list[ModdletSpec] | None = None
    ai: AISpec | None = None
    size: SizeSpec | None = None
    tags: list[str] | None = None
    author: str | None = None

    def to_json_dict(self) -> dict[str, Any]:
        """Dump back to the JSON shape; absent optional fields stay absent."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ============================================================================
# Generated package
# ============================================================================


class FileKind(str, Enum):
    """Kind of generated file."""
    MANIFEST = "manifest"
    INDEX = "index"
    STATE = "state"
    ACTIONS = "actions"
    STYLES = "styles"
    TEST = "test"
    ASSET = "asset"


class GeneratedFile(SpecModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    path: str
    content: str
    type: FileKind


class GeneratedPackage(SpecModel):
    """Output of one generation call; immutable."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    spec: Spec
    files: tuple[GeneratedFile, ...]
    generated_at: int
    template_version: str

    def file(self, kind: FileKind) -> GeneratedFile | None:
        """First file of the given kind, if any."""
        for generated in self.files:
            if generated.type == kind:
                return generated
        return None

    def contents(self) -> dict[str, str]:
        """Map of path to content (everything except the timestamp)."""
        return {generated.path: generated.content for generated in self.files}

    def to_json_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "spec": self.spec.to_json_dict(),
            "files": [f.model_dump(mode="json", by_alias=True) for f in self.files],
            "generatedAt": self.generated_at,
            "templateVersion": self.template_version,
        }
