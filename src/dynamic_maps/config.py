"""Application configuration and settings management."""

from typing import Annotated, Any

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="DYNAMIC_MAPS_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Dynamic Maps API"
    api_prefix: str = "/api"
    map_id_prefix: str = Field(default="map", description="Prefix for generated map container IDs.")
    map_id_length: int = Field(default=6, ge=1, description="Length of the random token in generated IDs.")
    container_class: str = Field(default="gm-map", description="CSS class the JS runtime looks for.")
    loading_text: str = Field(default="Loading map...", description="Placeholder shown until the map renders.")
    js_api_bundle: str = Field(
        default="google-maps/js-api",
        description="Asset bundle holding the map JavaScript API and runtime.",
    )
    dev_mode: bool = Field(default=False, description="Enable verbose logging in the JS runtime.")
    frontend_allowed_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            # Try comma-separated
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            # Single value
            if value.strip():
                return (value.strip(),)
        # Return empty tuple if value is None or empty
        return tuple()


settings = Settings()
