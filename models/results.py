"""
Enhancement Result - то, что пайплайн отдаёт вызывающей стороне.

Путь к артефакту + метаданные (размер, длительность, кадры) для
истории/шаринга. Сам пайплайн clipboard/save-dialog не трогает.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .session import OutputFormat
from .timeline import SpeedMap, WalkthroughStep


@dataclass
class EnhancementResult:
    output_path: str
    output_format: OutputFormat
    size_bytes: int
    duration_seconds: float
    frame_count: int
    frame_delays: list[float] = field(default_factory=list)
    speed_map: SpeedMap = field(default_factory=SpeedMap)
    steps: list[WalkthroughStep] = field(default_factory=list)
    source_duration_seconds: Optional[float] = None
    processing_time_seconds: float = 0.0

    @property
    def size_mb(self) -> float:
        return self.size_bytes / 1024 / 1024

    def to_dict(self) -> dict[str, Any]:
        return {
            "output_path": self.output_path,
            "output_format": self.output_format.value,
            "size_bytes": self.size_bytes,
            "duration_seconds": round(self.duration_seconds, 3),
            "frame_count": self.frame_count,
            "frame_delays": [round(d, 4) for d in self.frame_delays],
            "speed_map": self.speed_map.to_dict(),
            "steps": [s.to_dict() for s in self.steps],
            "source_duration_seconds": self.source_duration_seconds,
            "processing_time_seconds": round(self.processing_time_seconds, 3),
        }
