from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from .timeline import PointerEvent


class OutputFormat(str, Enum):
    """Формат итогового артефакта."""
    GIF = "gif"
    MP4 = "mp4"

    @property
    def display_name(self) -> str:
        return self.value.upper()

    @property
    def file_extension(self) -> str:
        return self.value


@dataclass
class RecordingSession:
    """Одна запись экрана: сырое видео + лог событий указателя.

    Пайплайн только читает поля сессии; единственная запись -
    output_path после успешного прогона.
    """
    raw_video_path: Optional[str]
    duration: float
    pointer_events: tuple[PointerEvent, ...] = ()
    frame_count: int = 0
    # размер экрана (точки), в котором записаны координаты событий
    display_size: Optional[tuple[float, float]] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    started_at: datetime = field(default_factory=datetime.now)
    output_path: Optional[str] = None

    def __post_init__(self) -> None:
        self.pointer_events = tuple(self.pointer_events)
        if self.display_size is not None:
            width, height = self.display_size
            if width <= 0 or height <= 0:
                raise ValueError(f"display_size must be positive, got {self.display_size}")
            self.display_size = (float(width), float(height))

    @property
    def formatted_duration(self) -> str:
        minutes = int(self.duration) // 60
        seconds = int(self.duration) % 60
        tenths = int((self.duration - int(self.duration)) * 10)
        return f"{minutes}:{seconds:02d}.{tenths}"

    @property
    def display_name(self) -> str:
        return f"Recap {self.started_at.strftime('%Y-%m-%d %H.%M.%S')}"

    @property
    def click_count(self) -> int:
        return sum(1 for e in self.pointer_events if e.is_click)
