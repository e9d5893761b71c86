from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class ViewerSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SSC_", extra="ignore")

    refresh_hz: float = 5.0
    progress_sub: str = "tcp://127.0.0.1:7799"  # capture's progress_bind
    stale_after_s: float = 10.0
