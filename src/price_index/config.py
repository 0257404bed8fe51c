"""Configuration module using pydantic-settings for type-safe env variable loading."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Uses pydantic-settings for type-safe configuration with validation.
    Automatically loads from .env file if present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Gemini Configuration
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("gemini_api_key", "GEMINI_API_KEY", "API_KEY"),
        description="Gemini API key used for grounded price searches",
    )
    gemini_model: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model name (must support Google Maps grounding)",
    )
    request_timeout_seconds: int = Field(
        default=60,
        ge=1,
        le=600,
        description="Timeout in seconds for a single grounded search call",
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    use_mock: bool = Field(
        default=False,
        description="Use the canned grounding service instead of calling Gemini",
    )

    # Geolocation Configuration
    geolocation_enabled: bool = Field(
        default=True,
        description="Attempt a best-effort location lookup when the UI starts",
    )
    geolocation_url: str = Field(
        default="https://ipapi.co/json/",
        description="IP geolocation endpoint returning latitude/longitude JSON",
    )
    geolocation_timeout_seconds: int = Field(
        default=5,
        ge=1,
        le=60,
        description="Timeout in seconds for the geolocation lookup",
    )
    default_latitude: float | None = Field(
        default=None,
        ge=-90.0,
        le=90.0,
        description="Fixed latitude; skips the network lookup when set with longitude",
    )
    default_longitude: float | None = Field(
        default=None,
        ge=-180.0,
        le=180.0,
        description="Fixed longitude; skips the network lookup when set with latitude",
    )

    # UI Configuration
    example_queries: list[str] = Field(
        default=["NMF Lip balm", "Organic Coffee", "CeraVe Lotion", "Sony Headphones"],
        description="Example product searches offered on the empty screen",
    )


# Global settings instance
settings = Settings()
