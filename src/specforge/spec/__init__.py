"""SpecJSON model, loading and example specs."""

from .models import (
    Spec,
    WidgetCategory,
    VisualType,
    StateValueType,
    EventTrigger,
    ActionKind,
    ConditionType,
    CSSVariableType,
    BackgroundType,
    LicenseType,
    ModdletType,
    ScaleMode,
    VisualSpec,
    StateFieldSpec,
    StateValidation,
    EventSpec,
    ActionDefinition,
    ActionParams,
    ActionCondition,
    APISpec,
    PortSpec,
    PermissionSpec,
    RevenueShareSpec,
    SizeSpec,
    FileKind,
    GeneratedFile,
    GeneratedPackage,
)
from .loader import load_spec, parse_spec, try_load_spec, try_parse_spec
from .examples import create_default_spec, example_counter_spec

__all__ = [
    "Spec",
    "WidgetCategory",
    "VisualType",
    "StateValueType",
    "EventTrigger",
    "ActionKind",
    "ConditionType",
    "CSSVariableType",
    "BackgroundType",
    "LicenseType",
    "ModdletType",
    "ScaleMode",
    "VisualSpec",
    "StateFieldSpec",
    "StateValidation",
    "EventSpec",
    "ActionDefinition",
    "ActionParams",
    "ActionCondition",
    "APISpec",
    "PortSpec",
    "PermissionSpec",
    "RevenueShareSpec",
    "SizeSpec",
    "FileKind",
    "GeneratedFile",
    "GeneratedPackage",
    "load_spec",
    "parse_spec",
    "try_load_spec",
    "try_parse_spec",
    "create_default_spec",
    "example_counter_spec",
]
