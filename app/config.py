"""Application configuration loaded from config.yaml + environment variables."""

from __future__ import annotations

import yaml
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml() -> dict:
    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    return {}


_yaml = _load_yaml()


class PhotoStoreConfig(BaseSettings):
    base_dir: str = "data/storage"
    bucket: str = "issue-photos"
    public_base_url: str = "http://localhost:8000/storage"
    max_photos: int = 5


class EmailConfig(BaseSettings):
    from_address: str = "Golf Chariots <onboarding@resend.dev>"
    website_from_address: str = "Golf Chariots Website <onboarding@resend.dev>"
    operator_address: str = "info@golfchariots.com.au"


class SessionConfig(BaseSettings):
    cookie_name: str = "session_token"
    max_age_days: int = 7


class BootstrapConfig(BaseSettings):
    enabled: bool = True


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///data/fleet.db"
    app_url: str = "http://localhost:5173"
    log_level: str = "INFO"
    resend_api_key: str = ""
    photo_store: PhotoStoreConfig = Field(default_factory=PhotoStoreConfig)
    email: EmailConfig = Field(default_factory=EmailConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    bootstrap: BootstrapConfig = Field(default_factory=BootstrapConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


def get_settings() -> Settings:
    """Build Settings by merging YAML defaults with env overrides.

    Top-level scalars from the YAML file are only passed through when present,
    so DATABASE_URL / APP_URL / RESEND_API_KEY from the environment still win
    when the file leaves them out.
    """
    y = _yaml
    overrides = {
        key: y[key]
        for key in ("database_url", "app_url", "log_level")
        if key in y
    }
    return Settings(
        photo_store=PhotoStoreConfig(**y.get("photo_store", {})),
        email=EmailConfig(**y.get("email", {})),
        session=SessionConfig(**y.get("session", {})),
        bootstrap=BootstrapConfig(**y.get("bootstrap", {})),
        **overrides,
    )
