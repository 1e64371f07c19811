"""Compiler service: validation plus cached package generation."""

from typing import Any, Mapping

from ..core.cache import LRUCache, Stats
from ..core.config import Settings
from ..core.json import safe_json_dumps
from ..core.logging_config import get_logger
from ..spec.models import GeneratedPackage, Spec
from ..validator import ValidationResult, validate
from .engine import GenerateOptions, as_raw, generate
from .versions import TEMPLATE_ENGINE_VERSION

logger = get_logger(__name__)


class WidgetCompiler:
    """
    Validates and generates widget packages, caching packages by
    (spec content, generator version, options).

    Examples:
        >>> compiler = WidgetCompiler(get_settings())
        >>> package = compiler.compile(spec)
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.default_options = GenerateOptions.from_settings(settings)
        self.cache: LRUCache[GeneratedPackage] | None = None
        if settings.enable_cache:
            self.cache = LRUCache(max_size=settings.cache_size, ttl_seconds=settings.cache_ttl)

    def validate(self, spec: Spec | Mapping[str, Any]) -> ValidationResult:
        return validate(as_raw(spec))

    def compile(
        self,
        spec: Spec | Mapping[str, Any],
        options: GenerateOptions | None = None,
    ) -> GeneratedPackage:
        """
        Generate (or fetch) the package for a spec.

        Raises:
            GenerationError: If the spec is invalid
        """
        options = options or self.default_options
        if self.cache is None:
            return generate(spec, options)

        # Insertion order matters: state order shapes the emitted files
        parts = (
            safe_json_dumps(as_raw(spec)),
            TEMPLATE_ENGINE_VERSION,
            options.cache_key(),
        )
        hits = self.cache.stats.hits
        package = self.cache.get_or_create(parts, lambda: generate(spec, options))
        if self.cache.stats.hits > hits:
            logger.debug("package_cache_hit", widget_id=package.id)
        return package

    @property
    def stats(self) -> Stats | None:
        return self.cache.stats if self.cache is not None else None

    def clear_cache(self) -> None:
        if self.cache is not None:
            self.cache.clear()
