"""
FrameSource - ленивое декодирование записи с прореживанием до целевого fps.

Кадр принимается, только если его presentation time отстоит от последнего
принятого хотя бы на 0.9 / target_rate: при источнике 30 fps и цели 12 fps
почти-дубликаты не попадают в GIF. Итерация одноразовая.
"""
from __future__ import annotations

from typing import Iterator, Optional

import cv2
import numpy as np

from core.errors import DecodeStartFailedError, InvalidSourceError, NoVideoTrackError
from features.media.video_meta import read_video_meta
from models.media import Frame, VideoMeta

SAMPLING_TOLERANCE = 0.9


def output_size(native_width: int, native_height: int, max_width: int) -> tuple[int, int]:
    """Ширина <= max_width, высота пропорционально; апскейла нет."""
    scale = min(1.0, max_width / native_width)
    return max(1, int(native_width * scale)), max(1, int(native_height * scale))


class FrameSource:
    """Iterable[Frame]: декодирует видео и отдаёт кадры в порядке времени."""

    def __init__(
        self,
        video_path: str,
        target_rate: float,
        max_width: int,
        meta: Optional[VideoMeta] = None,
        max_duration: Optional[float] = None,
    ) -> None:
        if target_rate <= 0:
            raise ValueError("target_rate must be positive")
        self.video_path = video_path
        self.target_rate = float(target_rate)
        self.max_width = int(max_width)
        self.max_duration = max_duration
        self.meta = meta if meta is not None else read_video_meta(video_path)

        if not self.meta.has_video or self.meta.width <= 0:
            raise NoVideoTrackError(f"No video track found in {video_path}")
        if self.meta.duration_seconds <= 0:
            raise InvalidSourceError(f"Invalid video duration: {video_path}")

        self.output_width, self.output_height = output_size(*self.meta.size, self.max_width)
        self.decoded_frames = 0
        self.accepted_frames = 0
        self._started = False

    @property
    def frame_interval(self) -> float:
        return 1.0 / self.target_rate

    def __iter__(self) -> Iterator[Frame]:
        if self._started:
            raise RuntimeError("FrameSource is forward-only; create a new one to decode again")
        self._started = True
        return self._frames()

    def _frames(self) -> Iterator[Frame]:
        cap = cv2.VideoCapture(self.video_path)
        if not cap.isOpened():
            cap.release()
            raise DecodeStartFailedError(f"Asset reader failed: cannot open {self.video_path}")

        fps = self.meta.fps if self.meta.fps > 0 else 30.0
        min_gap = self.frame_interval * SAMPLING_TOLERANCE
        last_sample_time = -self.frame_interval
        last_pts = -1.0
        index = -1

        try:
            while True:
                ok, image = cap.read()
                if not ok:
                    break
                index += 1
                self.decoded_frames += 1

                pts = self._presentation_time(cap, index, fps, last_pts)
                last_pts = pts

                if self.max_duration is not None and pts > self.max_duration:
                    break
                if pts - last_sample_time < min_gap:
                    continue
                last_sample_time = pts

                self.accepted_frames += 1
                yield Frame(image=self._scale(image), timestamp=pts)
        finally:
            cap.release()

    @staticmethod
    def _presentation_time(cap: cv2.VideoCapture, index: int, fps: float, last_pts: float) -> float:
        """PTS кадра из контейнера; если backend его не отдаёт - index / fps."""
        msec = cap.get(cv2.CAP_PROP_POS_MSEC)
        if np.isfinite(msec) and (msec > 0 or index == 0):
            pts = msec / 1000.0
            if pts > last_pts:
                return pts
        return max(index / fps, last_pts + 1e-6)

    def _scale(self, image: np.ndarray) -> np.ndarray:
        height, width = image.shape[:2]
        if (width, height) == (self.output_width, self.output_height):
            return image
        return cv2.resize(
            image,
            (self.output_width, self.output_height),
            interpolation=cv2.INTER_AREA,
        )
