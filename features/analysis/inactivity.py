"""
InactivityAnalysisHandler - находит "мёртвое" время между событиями указателя.

Analyzer: по паузам между событиями строит SpeedMap (интервал -> множитель),
который энкодер использует для ускорения неактивных участков.
"""
from __future__ import annotations

from typing import Any, ClassVar, FrozenSet, Sequence

from core.base_handler import AnalyzerHandler
from models.keys import Key
from models.timeline import (
    MIN_SPEED_RANGE_SECONDS,
    PointerEvent,
    SpeedMap,
    TimeRange,
    sort_events,
)

GAP_GUARD_SECONDS = 0.2
TAIL_GUARD_SECONDS = 0.1


def _guarded_range(start: float, end: float) -> TimeRange | None:
    if end - start <= MIN_SPEED_RANGE_SECONDS:
        return None
    return TimeRange(start, end)


def analyze_inactivity(
    events: Sequence[PointerEvent],
    total_duration: float,
    threshold: float,
    multiplier: float,
) -> SpeedMap:
    """Строит SpeedMap по паузам длиннее threshold.

    Каждая пауза сужается guard-полосой (0.2s с обеих сторон, 0.1s в хвосте),
    чтобы оставить видимыми подход к действию и уход от него. Интервалы
    короче 0.5s отбрасываются. Меньше двух событий - пустая карта.
    """
    if len(events) < 2:
        return SpeedMap()

    ranges: list[tuple[TimeRange, float]] = []
    last_event_time = 0.0

    for event in sort_events(events):
        gap = event.timestamp - last_event_time
        if gap > threshold:
            candidate = _guarded_range(
                last_event_time + GAP_GUARD_SECONDS,
                event.timestamp - GAP_GUARD_SECONDS,
            )
            if candidate is not None:
                ranges.append((candidate, multiplier))
        last_event_time = event.timestamp

    trailing_gap = total_duration - last_event_time
    if trailing_gap > threshold:
        candidate = _guarded_range(
            last_event_time + GAP_GUARD_SECONDS,
            total_duration - TAIL_GUARD_SECONDS,
        )
        if candidate is not None:
            ranges.append((candidate, multiplier))

    return SpeedMap(ranges)


class InactivityAnalysisHandler(AnalyzerHandler):
    """Handler для сжатия dead time.

    Provides:
    - SPEED_MAP: пустая карта, если анализ выключен или пауз нет
    """

    requires: ClassVar[FrozenSet[Key]] = frozenset({Key.POINTER_EVENTS, Key.DURATION_SECONDS})
    provides: ClassVar[FrozenSet[Key]] = frozenset({Key.SPEED_MAP})

    def __init__(
        self,
        threshold: float = 1.5,
        multiplier: float = 4.0,
        enabled: bool = True,
        verbose: bool = True,
    ) -> None:
        self.threshold = float(threshold)
        self.multiplier = float(multiplier)
        self.enabled = enabled
        self.verbose = verbose

    def handle(self, context: dict[str, Any]) -> dict[str, Any]:
        if not self.enabled:
            context[Key.SPEED_MAP.value] = SpeedMap()
            return context

        speed_map = analyze_inactivity(
            context[Key.POINTER_EVENTS.value],
            total_duration=float(context[Key.DURATION_SECONDS.value]),
            threshold=self.threshold,
            multiplier=self.multiplier,
        )
        context[Key.SPEED_MAP.value] = speed_map

        if self.verbose:
            dead = sum(r.duration for r in speed_map.ranges)
            print(f"✓ Inactivity: {len(speed_map)} ranges, {dead:.1f}s dead time x{self.multiplier:g}")

        return context
