"""Pytest configuration and fixtures."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import cv2
import numpy as np
import pytest

# Добавляем корень проекта в path
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def _synthetic_frame(index: int, width: int, height: int) -> np.ndarray:
    """Кадр, уникальный для каждого index: фон + двигающийся квадрат."""
    frame = np.zeros((height, width, 3), dtype=np.uint8)
    frame[:, :] = ((index * 7) % 200 + 20, (index * 13) % 200 + 20, 60)
    size = max(4, width // 8)
    x = (index * 3) % max(1, width - size)
    y = (index * 2) % max(1, height - size)
    frame[y:y + size, x:x + size] = (255, 255, 255)
    return frame


@pytest.fixture
def make_video(tmp_path: Path) -> Callable[..., str]:
    """Factory: пишет MJPG/AVI с заданными fps, числом кадров и размером."""

    def _make(
        name: str = "recording.avi",
        fps: float = 10.0,
        frames: int = 20,
        width: int = 160,
        height: int = 120,
    ) -> str:
        path = tmp_path / name
        writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), fps, (width, height))
        assert writer.isOpened(), "cv2.VideoWriter could not open MJPG writer"
        try:
            for i in range(frames):
                writer.write(_synthetic_frame(i, width, height))
        finally:
            writer.release()
        return str(path)

    return _make


@pytest.fixture
def sample_events() -> list:
    """Pointer events: активность в начале, пауза, клики в конце."""
    from models.timeline import PointerEvent, PointerEventKind

    return [
        PointerEvent(0.0, 10.0, 10.0, PointerEventKind.MOVE),
        PointerEvent(0.5, 40.0, 60.0, PointerEventKind.CLICK),
        PointerEvent(5.0, 80.0, 40.0, PointerEventKind.CLICK),
        PointerEvent(5.2, 82.0, 42.0, PointerEventKind.CLICK),
    ]


@pytest.fixture
def quiet_config():
    """Config без оверлеев и ускорения."""
    from config.settings import EnhancementConfig

    return EnhancementConfig(
        output_frame_rate=10,
        speed_up_inactivity=False,
        highlight_clicks=False,
        annotate_steps=False,
    )
