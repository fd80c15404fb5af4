"""
Pipeline Keys - перечень ключей контекста для requires/provides контрактов.

Handler'ы обмениваются данными через dict-контекст; ключи здесь
единственный источник правды для их имён.
"""
from __future__ import annotations

from enum import Enum


class Key(str, Enum):
    """Ключи контекста пайплайна."""

    # === Inputs ===
    CONFIG = "config"
    SESSION = "session"
    VIDEO_PATH = "video_path"
    POINTER_EVENTS = "pointer_events"  # отсортированные по timestamp
    DISPLAY_SIZE = "display_size"

    # === Extractors ===
    VIDEO_META = "video_meta"
    DURATION_SECONDS = "duration_seconds"

    # === Analyzers ===
    SPEED_MAP = "speed_map"
    STEPS = "steps"
    CLICK_HIGHLIGHTS = "click_highlights"
    ZOOM_REGIONS = "zoom_regions"
