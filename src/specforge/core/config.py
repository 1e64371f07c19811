"""Configuration Management."""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Compiler settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="SPECFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Package cache
    enable_cache: bool = Field(default=True, description="Cache generated packages")
    cache_size: int = Field(default=128, gt=0, description="Cache max size")
    cache_ttl: int = Field(default=3600, gt=0, description="Cache TTL (seconds)")

    # Spec payload limits
    max_spec_size: int = Field(default=512 * 1024, gt=0, description="Max spec JSON size (bytes)")
    max_spec_depth: int = Field(default=20, gt=0, description="Max spec JSON nesting depth")
    repair_json: bool = Field(default=True, description="Attempt to repair malformed spec JSON")

    # Generation defaults
    minify: bool = Field(default=False, description="Collapse generated markup whitespace")
    include_tests: bool = Field(default=True, description="Emit a test scaffold file")
    include_comments: bool = Field(default=True, description="Emit section banners and comments")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
