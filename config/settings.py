from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from models.session import OutputFormat


class RecapSettings(BaseSettings):
    # Настройки читаются один раз при старте; в пайплайн уходит
    # только снапшот EnhancementConfig (см. build_enhancement_config).

    # Recording / output
    output_format: OutputFormat = Field(OutputFormat.GIF, description="gif or mp4 (raw copy)")
    capture_frame_rate: int = Field(30, gt=0)
    gif_frame_rate: int = Field(12, gt=0, description="Output GIF frames per second")
    max_output_width: int = Field(960, gt=0, description="Output width cap, never upscaled")
    max_gif_duration: float = Field(30.0, gt=0)
    limit_output_duration: bool = Field(False, description="Stop decoding after max_gif_duration")

    # Auto-enhancement
    speed_up_inactivity: bool = Field(True)
    inactivity_threshold: float = Field(1.5, gt=0)
    inactivity_speed_multiplier: float = Field(4.0, gt=0)
    highlight_clicks: bool = Field(True)
    annotate_steps: bool = Field(False)
    step_merge_threshold: float = Field(0.5, gt=0)
    auto_zoom_on_clicks: bool = Field(False, description="Experimental cursor-follow zoom overlay")
    zoom_factor: float = Field(1.5, ge=1.0)

    model_config = SettingsConfigDict(
        env_prefix="RECAP_",
        env_file="sample.env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@dataclass(frozen=True, slots=True)
class EnhancementConfig:
    """Иммутабельный снапшот конфигурации на один прогон пайплайна."""
    capture_frame_rate: int = 30
    output_frame_rate: int = 12
    output_format: OutputFormat = OutputFormat.GIF
    max_output_width: int = 960
    speed_up_inactivity: bool = True
    inactivity_threshold_seconds: float = 1.5
    inactivity_speed_multiplier: float = 4.0
    highlight_clicks: bool = True
    annotate_steps: bool = False
    step_merge_threshold_seconds: float = 0.5
    auto_zoom_on_clicks: bool = False
    zoom_factor: float = 1.5
    max_output_duration_seconds: Optional[float] = None

    def __post_init__(self) -> None:
        if self.capture_frame_rate <= 0 or self.output_frame_rate <= 0:
            raise ValueError("Frame rates must be positive")
        if self.max_output_width <= 0:
            raise ValueError("max_output_width must be positive")
        if self.inactivity_threshold_seconds <= 0:
            raise ValueError("inactivity_threshold_seconds must be positive")
        if self.inactivity_speed_multiplier <= 0:
            raise ValueError("inactivity_speed_multiplier must be positive")
        if self.step_merge_threshold_seconds <= 0:
            raise ValueError("step_merge_threshold_seconds must be positive")
        if self.zoom_factor < 1.0:
            raise ValueError("zoom_factor must be >= 1.0")
        if self.max_output_duration_seconds is not None and self.max_output_duration_seconds <= 0:
            raise ValueError("max_output_duration_seconds must be positive")

    @property
    def base_frame_delay(self) -> float:
        return 1.0 / self.output_frame_rate


def build_enhancement_config(settings: RecapSettings) -> EnhancementConfig:
    return EnhancementConfig(
        capture_frame_rate=settings.capture_frame_rate,
        output_frame_rate=settings.gif_frame_rate,
        output_format=OutputFormat(settings.output_format),
        max_output_width=settings.max_output_width,
        speed_up_inactivity=settings.speed_up_inactivity,
        inactivity_threshold_seconds=settings.inactivity_threshold,
        inactivity_speed_multiplier=settings.inactivity_speed_multiplier,
        highlight_clicks=settings.highlight_clicks,
        annotate_steps=settings.annotate_steps,
        step_merge_threshold_seconds=settings.step_merge_threshold,
        auto_zoom_on_clicks=settings.auto_zoom_on_clicks,
        zoom_factor=settings.zoom_factor,
        max_output_duration_seconds=(
            settings.max_gif_duration if settings.limit_output_duration else None
        ),
    )
