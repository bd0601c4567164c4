"""Configuration module for toolwright using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class ToolwrightSettings(BaseSettings):
    """Configuration settings for toolwright.

    All settings can be overridden via environment variables with the
    TOOLWRIGHT_ prefix. For example, TOOLWRIGHT_ENFORCE_REQUIRED=true
    makes binds reject inputs that lack required names.
    """

    # Logging
    log_level: str = "INFO"
    log_arguments: bool = False

    # Binding
    enforce_required: bool = False

    model_config = SettingsConfigDict(env_prefix="TOOLWRIGHT_")


@lru_cache
def get_settings() -> ToolwrightSettings:
    """Get the process-wide settings instance.

    Cached so that environment variables are read once.

    Returns:
        ToolwrightSettings: The configuration loaded from the environment.
    """
    return ToolwrightSettings()
