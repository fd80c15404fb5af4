"""Overlay strategies for decoded frames.

Экспортирует:
- FrameOverlay, ScreenMapping, compose_overlays: базовый контракт и композиция
- ClickRippleOverlay, StepBadgeOverlay, AutoZoomOverlay: конкретные оверлеи
- build_overlays: сборка цепочки по конфигурации
"""
from __future__ import annotations

from typing import Optional, Sequence

from features.overlays.base import FrameOverlay, ScreenMapping, compose_overlays
from features.overlays.click_ripple import ClickRippleOverlay
from features.overlays.step_badge import StepBadgeOverlay
from features.overlays.zoom import AutoZoomOverlay
from models.timeline import ClickHighlight, WalkthroughStep, ZoomRegion


def build_overlays(
    mapping: ScreenMapping,
    highlights: Optional[Sequence[ClickHighlight]] = None,
    steps: Optional[Sequence[WalkthroughStep]] = None,
    zoom_regions: Optional[Sequence[ZoomRegion]] = None,
) -> list[FrameOverlay]:
    """Порядок фиксирован: ripple -> бейджи -> зум. Пустые входы пропускаются."""
    overlays: list[FrameOverlay] = []
    if highlights:
        overlays.append(ClickRippleOverlay(highlights, mapping))
    if steps:
        overlays.append(StepBadgeOverlay(steps, mapping))
    if zoom_regions:
        overlays.append(AutoZoomOverlay(zoom_regions, mapping))
    return overlays


__all__ = [
    "FrameOverlay",
    "ScreenMapping",
    "compose_overlays",
    "ClickRippleOverlay",
    "StepBadgeOverlay",
    "AutoZoomOverlay",
    "build_overlays",
]
