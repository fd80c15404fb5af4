"""
GifEncoder - анимированный GIF с per-frame задержкой.

Кадр квантуется в палитру (1 байт на пиксель) прямо в append(), BGR буфер
кадра освобождается сразу. finalize() пишет контейнер с loop=0
(бесконечный повтор) во временный файл рядом с целевым и атомарно
переименовывает его.

Задержки хранятся в сотых долях секунды (разрешение GIF), не меньше 20ms:
браузеры показывают кадры с delay 0-1cs примерно за 100ms.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import cv2
import numpy as np
from PIL import Image

from core.errors import FinalizeFailedError, NoFramesEncodedError
from models.timeline import SpeedMap

GIF_PALETTE_COLORS = 256
MIN_GIF_DELAY_CENTISECONDS = 2


def compute_frame_delay(timestamp: float, base_delay: float, speed_map: Optional[SpeedMap]) -> float:
    """base_delay, делённый на множитель интервала SpeedMap, содержащего кадр."""
    if not speed_map:
        return base_delay
    multiplier = speed_map.multiplier_at(timestamp)
    if multiplier is None:
        return base_delay
    return base_delay / multiplier


def gif_frame_delay(delay: float) -> float:
    """Задержка в том виде, в каком она попадёт в файл (секунды, шаг 10ms)."""
    centiseconds = max(MIN_GIF_DELAY_CENTISECONDS, int(round(delay * 100)))
    return centiseconds / 100


class GifEncoder:
    """Encoder: append(image, delay) ... finalize()."""

    def __init__(self, output_path: str, optimize: bool = False) -> None:
        self.output_path = Path(output_path)
        self.optimize = optimize
        self._frames: list[Image.Image] = []
        self._delays: list[float] = []
        self._finalized = False

    @property
    def frame_count(self) -> int:
        return len(self._delays)

    @property
    def frame_delays(self) -> list[float]:
        """Задержки кадров так, как они записаны в GIF."""
        return list(self._delays)

    @property
    def duration_seconds(self) -> float:
        return float(sum(self._delays))

    def append(self, image: np.ndarray, delay: float) -> None:
        """Добавляет BGR кадр с задержкой показа delay (секунды)."""
        if self._finalized:
            raise RuntimeError("GifEncoder already finalized")
        if delay <= 0:
            raise ValueError(f"Frame delay must be positive, got {delay}")
        rgb = Image.fromarray(cv2.cvtColor(image, cv2.COLOR_BGR2RGB))
        try:
            self._frames.append(rgb.quantize(colors=GIF_PALETTE_COLORS))
        finally:
            rgb.close()
        self._delays.append(gif_frame_delay(delay))

    def finalize(self) -> Path:
        if not self._frames:
            raise NoFramesEncodedError()

        tmp_path = self.output_path.with_name(self.output_path.name + ".part")
        durations_ms = [int(round(d * 100)) * 10 for d in self._delays]

        try:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            first, rest = self._frames[0], self._frames[1:]
            first.save(
                tmp_path,
                format="GIF",
                save_all=True,
                append_images=rest,
                duration=durations_ms,
                loop=0,
                optimize=self.optimize,
            )
            os.replace(tmp_path, self.output_path)
        except (OSError, ValueError) as e:
            if tmp_path.exists():
                tmp_path.unlink()
            raise FinalizeFailedError(f"Failed to finalize GIF: {e}") from e
        finally:
            self.close()

        self._finalized = True
        return self.output_path

    def close(self) -> None:
        """Освобождает накопленные кадры. Задержки остаются для отчёта."""
        for frame in self._frames:
            frame.close()
        self._frames.clear()
