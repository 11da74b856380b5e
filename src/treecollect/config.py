"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="TCR_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Tree Collection Route Planner API"
    api_prefix: str = "/api"
    osrm_base_url: str = Field(
        default="https://router.project-osrm.org",
        description="Base URL for the OSRM routing service (trip and route endpoints).",
    )
    osrm_profile: Literal["driving", "car", "bike", "foot"] = Field(
        default="driving",
        description="OSRM profile used for trip ordering and route geometry.",
    )
    trip_max_stops: int = Field(
        default=100,
        ge=2,
        description="Stop count at which the OSRM trip solver is skipped in favour of the local heuristic.",
    )
    trip_timeout_seconds: float = Field(default=3.0, ge=0.5, le=5.0)
    route_timeout_seconds: float = Field(default=5.0, ge=0.5, le=5.0)
    two_opt_max_passes: int = Field(
        default=50,
        ge=1,
        description="Upper bound on full 2-opt improvement passes.",
    )
    bulk_delay_seconds: float = Field(
        default=1.5,
        ge=0.0,
        description="Pause between territories in bulk runs to stay under OSRM rate limits.",
    )
    log_buffer_size: int = Field(default=200, ge=1)
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("osrm_base_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
