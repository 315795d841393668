"""
Configuration settings using Pydantic Settings.

All configuration is loaded from environment variables (or a local .env).
Every key has a working default, so the engine runs with no environment set.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Ensure .env values take precedence over system environment variables.
    # Order: init kwargs > .env (dotenv) > env vars > file secrets
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ):
        return (
            init_settings,
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )

    # Perk asset catalog (Community Dragon)
    perk_catalog_url: str = Field(
        "https://raw.communitydragon.org/latest/plugins/rcp-be-lol-game-data/global/default/v1/perks.json",
        alias="PERK_CATALOG_URL",
    )
    perk_icon_base_url: str = Field(
        "https://ddragon.leagueoflegends.com/cdn/img/", alias="PERK_ICON_BASE_URL"
    )
    asset_http_timeout_seconds: float = Field(5.0, gt=0, alias="ASSET_HTTP_TIMEOUT_SECONDS")

    # Request coalescing window for per-ID asset lookups
    asset_debounce_ms: int = Field(50, ge=0, alias="ASSET_DEBOUNCE_MS")

    # Scoring
    scoring_victory_bonus: float = Field(10.0, ge=0, le=20, alias="SCORING_VICTORY_BONUS")

    # Application Configuration
    app_env: str = Field("development", alias="APP_ENV")
    app_log_level: str = Field("INFO", alias="APP_LOG_LEVEL")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @property
    def asset_debounce_seconds(self) -> float:
        return self.asset_debounce_ms / 1000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide settings instance.

    This function provides dependency injection support for settings; call
    ``get_settings.cache_clear()`` to reload after changing the environment.
    """
    return Settings()
