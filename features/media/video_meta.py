"""
VideoMetaHandler - извлекает метаданные сырой записи.

Extractor: использует ffprobe (предпочтительно) или OpenCV для получения
duration, fps, frame_count, width, height. Падает с InvalidSourceError /
NoVideoTrackError / DecodeStartFailedError - дальше пайплайн не идёт.
"""
from __future__ import annotations

import json
import subprocess
from functools import lru_cache
from typing import Any, ClassVar, FrozenSet

import cv2
import numpy as np

from core.base_handler import ExtractorHandler
from core.errors import DecodeStartFailedError, InvalidSourceError, NoVideoTrackError
from models.keys import Key
from models.media import VideoMeta


@lru_cache(maxsize=1)
def ffprobe_available() -> bool:
    """Проверяет доступность ffprobe."""
    try:
        subprocess.run(["ffprobe", "-version"], capture_output=True, check=True)
        return True
    except (FileNotFoundError, subprocess.CalledProcessError):
        return False


def _parse_rate(rate: str | None, default: float) -> float:
    if not rate:
        return default
    if "/" in rate:
        num, den = map(float, rate.split("/"))
        return num / den if den > 0 else default
    value = float(rate)
    return value if value > 0 else default


def read_meta_ffprobe(video_path: str) -> VideoMeta:
    """Метаданные через ffprobe (точнее для VFR записей экрана)."""
    cmd = [
        "ffprobe",
        "-v", "quiet",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        video_path,
    ]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=True)
    except subprocess.CalledProcessError as e:
        raise InvalidSourceError(f"Invalid video file: {video_path}") from e

    data = json.loads(result.stdout or "{}")
    video_stream = next(
        (s for s in data.get("streams", []) if s.get("codec_type") == "video"),
        None,
    )
    if video_stream is None:
        raise NoVideoTrackError(f"No video track found in {video_path}")

    format_info = data.get("format", {})
    duration = float(format_info.get("duration", 0) or 0)
    if duration == 0:
        duration = float(video_stream.get("duration", 0) or 0)

    fps = _parse_rate(video_stream.get("avg_frame_rate"), 0.0)
    if fps <= 0:
        fps = _parse_rate(video_stream.get("r_frame_rate"), 30.0)

    frame_count = int(video_stream.get("nb_frames", 0) or 0)
    if frame_count == 0 and duration > 0:
        frame_count = int(duration * fps)

    return VideoMeta(
        path=video_path,
        duration_seconds=duration,
        fps=fps,
        frame_count=frame_count,
        width=int(video_stream.get("width", 0) or 0),
        height=int(video_stream.get("height", 0) or 0),
        has_video=True,
        codec=video_stream.get("codec_name"),
    )


def read_meta_opencv(video_path: str) -> VideoMeta:
    """Метаданные через OpenCV (fallback без ffprobe)."""
    cap = cv2.VideoCapture(video_path)
    if not cap.isOpened():
        raise DecodeStartFailedError(f"Cannot open video: {video_path}")

    try:
        fps = float(cap.get(cv2.CAP_PROP_FPS))
        if not np.isfinite(fps) or fps <= 0:
            fps = 30.0

        frame_count_raw = cap.get(cv2.CAP_PROP_FRAME_COUNT)
        frame_count = int(frame_count_raw) if np.isfinite(frame_count_raw) and frame_count_raw > 0 else 0

        width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))

        return VideoMeta(
            path=video_path,
            duration_seconds=frame_count / fps if frame_count else 0.0,
            fps=fps,
            frame_count=frame_count,
            width=width,
            height=height,
            has_video=width > 0 and height > 0,
            codec=None,
        )
    finally:
        cap.release()


def read_video_meta(video_path: str, prefer_ffprobe: bool = True) -> VideoMeta:
    if prefer_ffprobe and ffprobe_available():
        meta = read_meta_ffprobe(video_path)
    else:
        meta = read_meta_opencv(video_path)

    if not meta.has_video or meta.width <= 0 or meta.height <= 0:
        raise NoVideoTrackError(f"No video track found in {video_path}")
    if meta.duration_seconds <= 0:
        raise InvalidSourceError(f"Invalid video duration ({meta.duration_seconds:.3f}s): {video_path}")
    return meta


class VideoMetaHandler(ExtractorHandler):
    """Handler для извлечения метаданных записи.

    Provides:
    - VIDEO_META: VideoMeta
    - DURATION_SECONDS: длительность видео (если не задана сессией)
    - DISPLAY_SIZE: размер кадра (если сессия не знает размер экрана)
    """

    requires: ClassVar[FrozenSet[Key]] = frozenset({Key.VIDEO_PATH})
    provides: ClassVar[FrozenSet[Key]] = frozenset({
        Key.VIDEO_META,
        Key.DURATION_SECONDS,
        Key.DISPLAY_SIZE,
    })

    def __init__(self, prefer_ffprobe: bool = True, verbose: bool = True) -> None:
        self.prefer_ffprobe = prefer_ffprobe
        self.verbose = verbose

    def handle(self, context: dict[str, Any]) -> dict[str, Any]:
        if self.verbose:
            print("[1] VideoMetaHandler")

        meta = read_video_meta(context[Key.VIDEO_PATH.value], prefer_ffprobe=self.prefer_ffprobe)

        context[Key.VIDEO_META.value] = meta
        # без валидного размера экрана координаты событий считаются пикселями записи
        display_size = context.get(Key.DISPLAY_SIZE.value)
        if not display_size or min(display_size) <= 0:
            context[Key.DISPLAY_SIZE.value] = (float(meta.width), float(meta.height))
        # длительность из сессии (время захвата) приоритетнее контейнерной
        if not context.get(Key.DURATION_SECONDS.value):
            context[Key.DURATION_SECONDS.value] = meta.duration_seconds

        if self.verbose:
            print(
                f"✓ Video meta: {meta.fps:.1f} fps, "
                f"{meta.duration_seconds:.1f}s, "
                f"{meta.width}x{meta.height}"
            )

        return context
