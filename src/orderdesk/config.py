"""Application configuration and settings management."""

from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_VEHICLES: tuple[str, ...] = (
    "A - (Ponnani / Valancheri)",
    "B - (Thirur / Cheruppalasery)",
    "C - (Nilambur / Areekod)",
    "D - (Karuvarakundu / Calicut)",
    "E - (Pandikad+Mannarkad / Malappuram+Chelary)",
)


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ORDERDESK_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "OrderDesk API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root logging level applied by create_app().")
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
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

    vehicles: tuple[str, ...] = Field(
        default=DEFAULT_VEHICLES,
        description="Fixed set of delivery vehicles an order may be assigned to.",
    )
    default_page_size: int = Field(default=50, ge=1)
    max_page_size: int = Field(default=500, ge=1)
    import_error_limit: int = Field(
        default=10,
        ge=1,
        description="Maximum number of row errors returned from a customer import.",
    )
    old_orders_days: int = Field(default=7, ge=0)
    recent_orders_days: int = Field(default=30, ge=0)
    propagation_workers: int = Field(
        default=2,
        ge=1,
        description="Worker threads used for customer -> order field propagation.",
    )

    @field_validator("frontend_allowed_origins", "vehicles", mode="before")
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
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
