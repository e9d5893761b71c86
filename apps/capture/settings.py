from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DetectorSettings(BaseModel):
    # empirically tuned starting values; validate against real content
    min_height: int = Field(default=40, ge=1)
    strip_height: int = Field(default=40, ge=1)
    search_ceiling: int = Field(default=300, ge=1)
    min_delta: int = Field(default=10, ge=1)
    coarse_step: int = Field(default=8, ge=1)
    refine_radius: int = Field(default=8, ge=0)
    column_step: int = Field(default=2, ge=1)
    identical_threshold: float = 5.0
    improvement_ratio: float = 2.0
    match_ceiling: float = 30.0
    verify_ceiling: float = 40.0
    kernel: Literal["sad", "ncc"] = "sad"


class TriggerSettings(BaseModel):
    debounce_ms: int = Field(default=80, ge=0)
    discrete_threshold: float = 1.0
    continuous_threshold: float = 2.5
    hint_scale: float = 20.0
    hint_min: int = 24
    hint_max: int = 200
    # pixels per wheel click; 0 lets the detector search its full range
    notch_pixels: float = Field(default=0.0, ge=0.0)
    notch_hint_max: int = 400


class CaptureSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SSC_", extra="ignore")

    region: tuple[int, int, int, int] | None = None  # x, y, w, h (logical px)
    frame_source: Literal["mss", "fake"] = "mss"
    monitor: int = 1
    scale: float = Field(default=1.0, gt=0.0)

    min_stable_delta: int = 10
    preview_max_height: int = Field(default=600, ge=1)
    preview_quality: int = Field(default=90, ge=1, le=100)

    # choose progress transport
    progress_impl: Literal["log", "zmq"] = "log"
    progress_bind: str = "tcp://127.0.0.1:7799"

    output_dir: Path = Path("captures")
    poll_interval_ms: int = Field(default=250, ge=10)

    detector: DetectorSettings = DetectorSettings()
    trigger: TriggerSettings = TriggerSettings()

    @field_validator("region")
    @classmethod
    def _positive_size(
        cls, v: tuple[int, int, int, int] | None
    ) -> tuple[int, int, int, int] | None:
        if v is not None and (v[2] <= 0 or v[3] <= 0):
            raise ValueError("region width/height must be positive")
        return v
