"""
FrameOverlay - стратегия оверлея: composite(image, timestamp) -> image.

Пайплайн держит список стратегий (0..N) и применяет их по порядку через
compose_overlays; ветвления на "есть/нет оверлея" в цикле кадров нет.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import cv2
import numpy as np


@dataclass(frozen=True, slots=True)
class ScreenMapping:
    """Экранные координаты (origin снизу слева) -> пиксели кадра (origin сверху слева)."""
    display_width: float
    display_height: float

    def to_image(self, x: float, y: float, image_width: int, image_height: int) -> tuple[float, float]:
        scale_x = image_width / self.display_width
        scale_y = image_height / self.display_height
        return (x * scale_x, image_height - y * scale_y)

    def scale(self, image_width: int, image_height: int) -> tuple[float, float]:
        return (image_width / self.display_width, image_height / self.display_height)


class FrameOverlay(ABC):
    """Overlay strategy: чистая функция от (кадр, время)."""

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @abstractmethod
    def composite(self, image: np.ndarray, timestamp: float) -> np.ndarray:
        """Рисует оверлей поверх кадра. Может менять image in-place."""
        raise NotImplementedError


def blend_layer(image: np.ndarray, layer: np.ndarray, alpha: float) -> np.ndarray:
    """Альфа-композит layer поверх image (in-place в image)."""
    alpha = min(1.0, max(0.0, float(alpha)))
    if alpha <= 0.0:
        return image
    cv2.addWeighted(layer, alpha, image, 1.0 - alpha, 0.0, dst=image)
    return image


def draw_with_alpha(
    image: np.ndarray,
    alpha: float,
    draw: Callable[[np.ndarray], None],
) -> np.ndarray:
    """Рисует draw() на копии кадра и смешивает её с кадром с заданной альфой."""
    if alpha <= 0.0:
        return image
    layer = image.copy()
    draw(layer)
    return blend_layer(image, layer, alpha)


def compose_overlays(
    image: np.ndarray,
    timestamp: float,
    overlays: Sequence[FrameOverlay],
    on_error: Optional[Callable[[FrameOverlay, Exception], None]] = None,
) -> np.ndarray:
    """Применяет оверлеи по порядку.

    Ошибка одного оверлея не фатальна: кадр идёт дальше без него.
    """
    for overlay in overlays:
        try:
            image = overlay.composite(image.copy(), timestamp)
        except Exception as e:
            if on_error is not None:
                on_error(overlay, e)
            else:
                print(f"[WARNING] {overlay.name} failed at t={timestamp:.3f}s: {e}")
    return image
