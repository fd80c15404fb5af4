from __future__ import annotations

from typing import Sequence

import cv2
import numpy as np

from features.overlays.base import FrameOverlay, ScreenMapping, draw_with_alpha
from models.timeline import WalkthroughStep

# BGR для (R 0.9, G 0.2, B 0.2)
BADGE_COLOR = (51, 51, 230)
BADGE_TEXT_COLOR = (255, 255, 255)
BADGE_SIZE = 28
BADGE_OFFSET = 20
BADGE_FONT = cv2.FONT_HERSHEY_DUPLEX
BADGE_FONT_SCALE = 0.55
BADGE_FONT_THICKNESS = 2

FADE_FRACTION = 0.1


def badge_alpha(progress: float) -> float:
    """Fade-in на первых 10% окна, fade-out на последних 10%."""
    if progress < FADE_FRACTION:
        alpha = progress / FADE_FRACTION
    elif progress > 1.0 - FADE_FRACTION:
        alpha = (1.0 - progress) / FADE_FRACTION
    else:
        alpha = 1.0
    return min(1.0, max(0.0, alpha))


def render_step_badge(
    image: np.ndarray,
    center: tuple[float, float],
    number: int,
    alpha: float,
) -> np.ndarray:
    """Красный круглый бейдж с белым номером шага по центру."""
    if alpha <= 0:
        return image

    cx, cy = int(round(center[0])), int(round(center[1]))
    text = str(number)
    (text_w, text_h), _ = cv2.getTextSize(text, BADGE_FONT, BADGE_FONT_SCALE, BADGE_FONT_THICKNESS)
    origin = (cx - text_w // 2, cy + text_h // 2)

    def draw(layer: np.ndarray) -> None:
        cv2.circle(layer, (cx, cy), BADGE_SIZE // 2, BADGE_COLOR, -1, lineType=cv2.LINE_AA)
        cv2.putText(
            layer,
            text,
            origin,
            BADGE_FONT,
            BADGE_FONT_SCALE,
            BADGE_TEXT_COLOR,
            BADGE_FONT_THICKNESS,
            lineType=cv2.LINE_AA,
        )

    return draw_with_alpha(image, alpha, draw)


class StepBadgeOverlay(FrameOverlay):
    """Бейдж с номером шага рядом с центроидом кликов шага."""

    def __init__(self, steps: Sequence[WalkthroughStep], mapping: ScreenMapping) -> None:
        self.steps = list(steps)
        self.mapping = mapping

    def active_at(self, timestamp: float) -> list[tuple[WalkthroughStep, float]]:
        active = []
        for step in self.steps:
            start, end = step.window
            if start <= timestamp <= end:
                active.append((step, (timestamp - step.timestamp) / step.duration))
        return active

    def composite(self, image: np.ndarray, timestamp: float) -> np.ndarray:
        height, width = image.shape[:2]
        for step, progress in self.active_at(timestamp):
            x, y = self.mapping.to_image(step.x, step.y, width, height)
            center = (x + BADGE_OFFSET, y - BADGE_OFFSET)
            image = render_step_badge(image, center, step.number, badge_alpha(progress))
        return image
