"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from .config import Settings, get_settings
from ..generator.service import WidgetCompiler
from ..runtime.host import WidgetHost


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        """Provide settings (explicit, else environment-derived)."""
        return self.settings or get_settings()

    @singleton
    @provider
    def provide_compiler(self, settings: Settings) -> WidgetCompiler:
        """Provide the caching compiler service."""
        return WidgetCompiler(settings)

    @singleton
    @provider
    def provide_host(self) -> WidgetHost:
        """Provide the widget host."""
        return WidgetHost()


def create_container(settings: Settings | None = None) -> Injector:
    """Create configured injector."""
    return Injector([CoreModule(settings)])
