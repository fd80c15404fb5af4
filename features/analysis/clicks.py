"""
ClickAnalysisHandler - производные от кликов подсказки для оверлеев.

- ClickHighlight: 1:1 из каждого клика (ripple)
- ZoomRegion: окно зума вокруг клика до следующего клика (экспериментально)
"""
from __future__ import annotations

from typing import Any, ClassVar, FrozenSet, Optional, Sequence

from core.base_handler import AnalyzerHandler
from models.keys import Key
from models.timeline import ClickHighlight, PointerEvent, ZoomRegion, sort_events

RIPPLE_RADIUS = 30.0
RIPPLE_DURATION_SECONDS = 0.4

ZOOM_LEAD_SECONDS = 0.3
ZOOM_LAST_CLICK_HOLD_SECONDS = 2.0


def extract_click_highlights(events: Sequence[PointerEvent]) -> list[ClickHighlight]:
    return [
        ClickHighlight(
            timestamp=e.timestamp,
            x=e.x,
            y=e.y,
            radius=RIPPLE_RADIUS,
            duration=RIPPLE_DURATION_SECONDS,
        )
        for e in events
        if e.is_click
    ]


def compute_zoom_regions(
    events: Sequence[PointerEvent],
    display_size: tuple[float, float],
    zoom_factor: float = 1.5,
) -> list[ZoomRegion]:
    """Окна зума: от клика до следующего клика, со сдвигом на 0.3s раньше.

    Центр окна клампится так, чтобы прямоугольник целиком лежал на экране.
    Нужно минимум два клика.
    """
    clicks = sort_events(e for e in events if e.is_click)
    if len(clicks) < 2:
        return []

    display_w, display_h = display_size
    zoom_w = display_w / zoom_factor
    zoom_h = display_h / zoom_factor

    regions: list[ZoomRegion] = []
    for i, click in enumerate(clicks):
        if i + 1 < len(clicks):
            next_time = clicks[i + 1].timestamp
        else:
            next_time = click.timestamp + ZOOM_LAST_CLICK_HOLD_SECONDS

        start = click.timestamp - ZOOM_LEAD_SECONDS
        end = next_time - ZOOM_LEAD_SECONDS
        if end <= start:
            continue

        center_x = max(zoom_w / 2, min(click.x, display_w - zoom_w / 2))
        center_y = max(zoom_h / 2, min(click.y, display_h - zoom_h / 2))

        regions.append(ZoomRegion(
            start_time=start,
            end_time=end,
            source_rect=(center_x - zoom_w / 2, center_y - zoom_h / 2, zoom_w, zoom_h),
            zoom_factor=zoom_factor,
        ))

    return regions


class ClickAnalysisHandler(AnalyzerHandler):
    """Handler для click highlights и zoom regions.

    Provides:
    - CLICK_HIGHLIGHTS
    - ZOOM_REGIONS (пусто без display_size или при выключенном зуме)
    """

    requires: ClassVar[FrozenSet[Key]] = frozenset({Key.POINTER_EVENTS})
    provides: ClassVar[FrozenSet[Key]] = frozenset({Key.CLICK_HIGHLIGHTS, Key.ZOOM_REGIONS})

    def __init__(
        self,
        highlight_clicks: bool = True,
        auto_zoom: bool = False,
        zoom_factor: float = 1.5,
    ) -> None:
        self.highlight_clicks = highlight_clicks
        self.auto_zoom = auto_zoom
        self.zoom_factor = zoom_factor

    def handle(self, context: dict[str, Any]) -> dict[str, Any]:
        events = context[Key.POINTER_EVENTS.value]
        display_size: Optional[tuple[float, float]] = context.get(Key.DISPLAY_SIZE.value)

        context[Key.CLICK_HIGHLIGHTS.value] = (
            extract_click_highlights(events) if self.highlight_clicks else []
        )
        if self.auto_zoom and display_size:
            context[Key.ZOOM_REGIONS.value] = compute_zoom_regions(
                events, display_size, self.zoom_factor
            )
        else:
            context[Key.ZOOM_REGIONS.value] = []

        return context
