"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="DRIVELESS_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "DriveLess Core API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root logging level name.")
    data_root: Path = Field(default=Path("data"), description="Root directory for local store files.")
    store_backend: Literal["memory", "file", "supabase"] = Field(
        default="file",
        description="Persistent record store used for admin state and route history.",
    )
    store_file: str = Field(default="driveless_store.json", description="File name of the JSON store under data_root.")
    identity_backend: Literal["header", "supabase"] = Field(
        default="header",
        description="How the caller identity is resolved for each request.",
    )

    # Admin gate. The passphrase is a shared client secret kept for compatibility with
    # existing app builds; it grants a permanent admin entry per identity.
    admin_passphrase: str = Field(default="", description="Shared admin passphrase. Empty disables admin login.")
    allow_anonymous_admin: bool = Field(
        default=True,
        description="Grant admin mode without recording an identity when no user is signed in.",
    )
    admin_users_key: str = "driveless_admin_users"
    admin_mode_key: str = "driveless_admin_mode"
    admin_login_time_key: str = "driveless_admin_login_time"

    saved_routes_collection: str = "saved_routes"
    history_fetch_limit: int = Field(default=50, ge=1)

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

    @field_validator("data_root", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

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

    @property
    def store_path(self) -> Path:
        return self.data_root / self.store_file


settings = Settings()
