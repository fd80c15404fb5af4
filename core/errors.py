"""
Ошибки пайплайна улучшения записи.

Все ошибки терминальны для текущего прогона: внутри пайплайна ничего
не ретраится, повтор - ответственность вызывающей стороны.
"""
from __future__ import annotations


class EnhancementError(Exception):
    """Base error for the enhancement pipeline."""

    default_reason = "Processing failed"

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason or self.default_reason
        super().__init__(self.reason)


class InvalidSourceError(EnhancementError):
    default_reason = "Invalid video file"


class NoVideoTrackError(EnhancementError):
    default_reason = "No video track found"


class DecodeStartFailedError(EnhancementError):
    default_reason = "Video reader failed to start"


class NoFramesEncodedError(EnhancementError):
    default_reason = "No frames were encoded"


class FinalizeFailedError(EnhancementError):
    default_reason = "Failed to finalize GIF"


class MissingRawVideoError(EnhancementError):
    default_reason = "No raw video file found"


class CancelledError(EnhancementError):
    default_reason = "Cancelled"


class ProcessingFailedError(EnhancementError):
    """Обёртка для неожиданных исключений компонентов."""
