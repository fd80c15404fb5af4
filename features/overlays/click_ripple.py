from __future__ import annotations

from typing import Sequence

import cv2
import numpy as np

from features.overlays.base import FrameOverlay, ScreenMapping, draw_with_alpha
from models.timeline import ClickHighlight

# BGR для (R 1.0, G 0.3, B 0.3)
RIPPLE_COLOR = (77, 77, 255)
RIPPLE_MAX_RADIUS = 40.0
RIPPLE_DOT_RADIUS = 4


def render_click_ripple(
    image: np.ndarray,
    center: tuple[float, float],
    progress: float,
    color: tuple[int, int, int] = RIPPLE_COLOR,
) -> np.ndarray:
    """Расширяющееся кольцо + гаснущая точка в центре.

    progress в [0, 1]: радиус кольца 40*progress, альфа кольца (1-p)*0.6,
    альфа точки (1-2p)*0.8 (гаснет вдвое быстрее).
    """
    cx, cy = int(round(center[0])), int(round(center[1]))

    radius = int(round(RIPPLE_MAX_RADIUS * progress))
    ring_alpha = max(0.0, 1.0 - progress) * 0.6
    thickness = max(1, int(round(3.0 * (1.0 - progress * 0.5))))
    if radius >= 1 and ring_alpha > 0:
        draw_with_alpha(
            image,
            ring_alpha,
            lambda layer: cv2.circle(layer, (cx, cy), radius, color, thickness, lineType=cv2.LINE_AA),
        )

    dot_alpha = max(0.0, 1.0 - progress * 2.0) * 0.8
    if dot_alpha > 0:
        draw_with_alpha(
            image,
            dot_alpha,
            lambda layer: cv2.circle(layer, (cx, cy), RIPPLE_DOT_RADIUS, color, -1, lineType=cv2.LINE_AA),
        )

    return image


class ClickRippleOverlay(FrameOverlay):
    """Ripple на каждый клик в окне [t0, t0 + duration]."""

    def __init__(self, highlights: Sequence[ClickHighlight], mapping: ScreenMapping) -> None:
        self.highlights = list(highlights)
        self.mapping = mapping

    def active_at(self, timestamp: float) -> list[tuple[ClickHighlight, float]]:
        active = []
        for h in self.highlights:
            elapsed = timestamp - h.timestamp
            if 0.0 <= elapsed <= h.duration:
                active.append((h, elapsed / h.duration))
        return active

    def composite(self, image: np.ndarray, timestamp: float) -> np.ndarray:
        height, width = image.shape[:2]
        # порядок событий сохраняется: поздние ripple рисуются поверх ранних
        for highlight, progress in self.active_at(timestamp):
            center = self.mapping.to_image(highlight.x, highlight.y, width, height)
            image = render_click_ripple(image, center, progress)
        return image
