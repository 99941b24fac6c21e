"""Environment-driven defaults for the command line."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class BuildSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ARTICLE_BUILDER_", case_sensitive=False)

    log_level: str = "INFO"
    log_format: str = "[%(levelname)s] %(message)s"
