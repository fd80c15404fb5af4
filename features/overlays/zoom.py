from __future__ import annotations

from typing import Optional, Sequence

import cv2
import numpy as np

from features.overlays.base import FrameOverlay, ScreenMapping
from models.timeline import ZoomRegion


class AutoZoomOverlay(FrameOverlay):
    """Экспериментальный зум: кроп активного ZoomRegion, растянутый на весь кадр.

    Применяется последним в цепочке, чтобы ripple/бейджи зумились вместе с кадром.
    """

    def __init__(self, regions: Sequence[ZoomRegion], mapping: ScreenMapping) -> None:
        self.regions = list(regions)
        self.mapping = mapping

    def region_at(self, timestamp: float) -> Optional[ZoomRegion]:
        for region in self.regions:
            if region.is_active(timestamp):
                return region
        return None

    def crop_box(self, region: ZoomRegion, width: int, height: int) -> tuple[int, int, int, int]:
        """source_rect (экран, origin снизу) -> (x0, y0, x1, y1) в пикселях кадра."""
        rx, ry, rw, rh = region.source_rect
        scale_x, scale_y = self.mapping.scale(width, height)
        x0 = int(round(rx * scale_x))
        x1 = int(round((rx + rw) * scale_x))
        # верхняя граница прямоугольника на экране - нижняя в кадре
        y0 = int(round(height - (ry + rh) * scale_y))
        y1 = int(round(height - ry * scale_y))
        x0, x1 = max(0, x0), min(width, x1)
        y0, y1 = max(0, y0), min(height, y1)
        return x0, y0, x1, y1

    def composite(self, image: np.ndarray, timestamp: float) -> np.ndarray:
        region = self.region_at(timestamp)
        if region is None:
            return image

        height, width = image.shape[:2]
        x0, y0, x1, y1 = self.crop_box(region, width, height)
        if x1 - x0 < 2 or y1 - y0 < 2:
            return image

        crop = image[y0:y1, x0:x1]
        return cv2.resize(crop, (width, height), interpolation=cv2.INTER_LINEAR)
