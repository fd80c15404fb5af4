from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np


@dataclass(frozen=True, slots=True)
class VideoMeta:
    path: str
    duration_seconds: float
    fps: float
    frame_count: int
    width: int
    height: int
    has_video: bool = True
    codec: Optional[str] = None

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "duration_seconds": self.duration_seconds,
            "fps": self.fps,
            "frame_count": self.frame_count,
            "width": self.width,
            "height": self.height,
            "has_video": self.has_video,
            "codec": self.codec,
        }


@dataclass(slots=True)
class Frame:
    """Декодированный кадр: BGR uint8 [H, W, 3] + presentation time (сек)."""
    image: np.ndarray
    timestamp: float

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])
