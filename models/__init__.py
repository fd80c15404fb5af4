"""
Models package for recap enhancer.

Экспортирует типизированные модели пайплайна:
- Keys: перечень ключей для контрактов handler'ов
- Timeline: PointerEvent, TimeRange, SpeedMap, WalkthroughStep, ...
- Session / Media: RecordingSession, VideoMeta, Frame
- State / Results: PipelineState, ProgressUpdate, EnhancementResult
"""

# Keys
from .keys import Key

# Timeline
from .timeline import (
    PointerEventKind,
    PointerEvent,
    TimeRange,
    SpeedMap,
    WalkthroughStep,
    ClickHighlight,
    ZoomRegion,
    sort_events,
)

# Session / Media
from .session import OutputFormat, RecordingSession
from .media import VideoMeta, Frame

# State / Results
from .state import PipelinePhase, PipelineState, ProgressUpdate
from .results import EnhancementResult
from .serde import to_jsonable

__all__ = [
    # Keys
    "Key",
    # Timeline
    "PointerEventKind",
    "PointerEvent",
    "TimeRange",
    "SpeedMap",
    "WalkthroughStep",
    "ClickHighlight",
    "ZoomRegion",
    "sort_events",
    # Session / Media
    "OutputFormat",
    "RecordingSession",
    "VideoMeta",
    "Frame",
    # State / Results
    "PipelinePhase",
    "PipelineState",
    "ProgressUpdate",
    "EnhancementResult",
    "to_jsonable",
]
