"""
Event log - загрузка лога событий указателя и сборка RecordingSession.

Формат: JSON-массив или JSON lines, по записи на событие:
    {"timestamp": 1.25, "x": 640, "y": 400, "kind": "click"}
Битые строки пропускаются с предупреждением.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Optional

from features.media.video_meta import read_video_meta
from models.session import RecordingSession
from models.timeline import PointerEvent, PointerEventKind


def parse_pointer_event(record: dict[str, Any]) -> PointerEvent:
    kind = PointerEventKind(str(record.get("kind", "move")).lower())
    timestamp = float(record["timestamp"])
    if timestamp < 0:
        raise ValueError(f"negative timestamp {timestamp}")
    return PointerEvent(
        timestamp=timestamp,
        x=float(record["x"]),
        y=float(record["y"]),
        kind=kind,
    )


def _records(text: str) -> Iterable[tuple[int, Any]]:
    stripped = text.lstrip()
    if stripped.startswith("["):
        for i, record in enumerate(json.loads(stripped), start=1):
            yield i, record
        return

    for i, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            yield i, json.loads(line)
        except json.JSONDecodeError as e:
            print(f"[WARNING] Failed to parse event log line {i}: {e}")


def load_pointer_events(events_path: str) -> list[PointerEvent]:
    """Читает события в порядке записи (сортировка - забота пайплайна)."""
    path = Path(events_path)
    if not path.exists():
        print(f"[WARNING] No event log found at {events_path}")
        return []

    events: list[PointerEvent] = []
    for line_no, record in _records(path.read_text(encoding="utf-8")):
        try:
            events.append(parse_pointer_event(record))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            print(f"[WARNING] Skipping event #{line_no}: {e}")
    return events


def load_session(
    video_path: str,
    events_path: Optional[str] = None,
    display_size: Optional[tuple[float, float]] = None,
    prefer_ffprobe: bool = True,
) -> RecordingSession:
    meta = read_video_meta(video_path, prefer_ffprobe=prefer_ffprobe)
    events = load_pointer_events(events_path) if events_path else []
    return RecordingSession(
        raw_video_path=str(Path(video_path).resolve()),
        duration=meta.duration_seconds,
        frame_count=meta.frame_count,
        pointer_events=tuple(events),
        display_size=display_size,
    )
