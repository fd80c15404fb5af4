"""
Timeline Model - value types для событий указателя и производных сущностей.

- PointerEvent: событие мыши (move / click / drag) с временем и позицией
- TimeRange: полуинтервал времени [start, end], равенство по паре
- SpeedMap: непересекающиеся TimeRange -> множитель скорости
- WalkthroughStep: шаг walkthrough'а (кластер кликов)
- ClickHighlight / ZoomRegion: подсказки для рендеринга оверлеев
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Mapping, Optional


MIN_SPEED_RANGE_SECONDS = 0.5


class PointerEventKind(str, Enum):
    """Тип события указателя."""
    MOVE = "move"
    CLICK = "click"
    DRAG = "drag"


@dataclass(frozen=True, slots=True)
class PointerEvent:
    timestamp: float  # секунды от начала записи
    x: float  # экранные координаты (origin снизу слева)
    y: float
    kind: PointerEventKind = PointerEventKind.MOVE

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    @property
    def is_click(self) -> bool:
        return self.kind == PointerEventKind.CLICK

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "x": self.x,
            "y": self.y,
            "kind": self.kind.value,
        }


def sort_events(events: Iterable[PointerEvent]) -> list[PointerEvent]:
    """Стабильная сортировка по timestamp (равные сохраняют исходный порядок)."""
    return sorted(events, key=lambda e: e.timestamp)


@dataclass(frozen=True, slots=True)
class TimeRange:
    start: float
    end: float

    def __post_init__(self) -> None:
        if not self.start < self.end:
            raise ValueError(f"TimeRange start must be < end, got [{self.start}, {self.end}]")

    @property
    def duration(self) -> float:
        return self.end - self.start

    def contains(self, t: float) -> bool:
        return self.start <= t <= self.end

    def overlaps(self, other: TimeRange) -> bool:
        return self.start <= other.end and other.start <= self.end

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end}


class SpeedMap:
    """Непересекающиеся интервалы времени -> множитель воспроизведения.

    Инварианты:
    - интервалы не пересекаются (overlap -> ValueError)
    - каждый интервал длиннее MIN_SPEED_RANGE_SECONDS, короткие отбрасываются
    - множитель > 0 (> 1 означает "быстрее")
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[Mapping[TimeRange, float] | Iterable[tuple[TimeRange, float]]] = None) -> None:
        self._entries: list[tuple[TimeRange, float]] = []
        if entries is None:
            return
        items = entries.items() if isinstance(entries, Mapping) else entries
        for time_range, multiplier in items:
            self._add(time_range, multiplier)
        self._entries.sort(key=lambda item: item[0].start)

    def _add(self, time_range: TimeRange, multiplier: float) -> None:
        if multiplier <= 0:
            raise ValueError(f"Speed multiplier must be positive, got {multiplier}")
        if time_range.duration <= MIN_SPEED_RANGE_SECONDS:
            return
        for existing, _ in self._entries:
            if existing.overlaps(time_range):
                raise ValueError(
                    f"Overlapping speed ranges: [{existing.start}, {existing.end}] "
                    f"and [{time_range.start}, {time_range.end}]"
                )
        self._entries.append((time_range, float(multiplier)))

    def multiplier_at(self, t: float) -> Optional[float]:
        """Множитель интервала, содержащего t (первое совпадение), иначе None."""
        for time_range, multiplier in self._entries:
            if time_range.contains(t):
                return multiplier
        return None

    @property
    def ranges(self) -> list[TimeRange]:
        return [r for r, _ in self._entries]

    def items(self) -> list[tuple[TimeRange, float]]:
        return list(self._entries)

    @property
    def is_empty(self) -> bool:
        return not self._entries

    def compressed_duration(self, total_duration: float) -> float:
        """Длительность воспроизведения после ускорения dead time."""
        saved = sum(r.duration - r.duration / m for r, m in self._entries)
        return max(0.0, total_duration - saved)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __iter__(self) -> Iterator[TimeRange]:
        return iter(self.ranges)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SpeedMap):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        inner = ", ".join(f"[{r.start:.2f}, {r.end:.2f}]x{m:g}" for r, m in self._entries)
        return f"SpeedMap({inner})"

    def to_dict(self) -> dict:
        return {
            "ranges": [
                {"start": r.start, "end": r.end, "multiplier": m}
                for r, m in self._entries
            ]
        }


@dataclass(frozen=True, slots=True)
class WalkthroughStep:
    number: int  # 1-based
    timestamp: float  # время первого клика в кластере
    x: float  # центроид кликов
    y: float
    duration: float  # длина окна отображения

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    @property
    def window(self) -> tuple[float, float]:
        return (self.timestamp - 0.1, self.timestamp + self.duration)

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "timestamp": self.timestamp,
            "x": self.x,
            "y": self.y,
            "duration": self.duration,
        }


@dataclass(frozen=True, slots=True)
class ClickHighlight:
    timestamp: float
    x: float
    y: float
    radius: float = 30.0
    duration: float = 0.4

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True, slots=True)
class ZoomRegion:
    start_time: float
    end_time: float
    # source rect в экранных координатах: (x, y, width, height)
    source_rect: tuple[float, float, float, float]
    zoom_factor: float

    def is_active(self, t: float) -> bool:
        return self.start_time <= t <= self.end_time
