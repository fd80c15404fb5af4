from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class PipelinePhase(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    ENCODING = "encoding"
    FINALIZING = "finalizing"
    COMPLETE = "complete"
    FAILED = "failed"


_TERMINAL_PHASES = frozenset({PipelinePhase.COMPLETE, PipelinePhase.FAILED})


@dataclass(frozen=True, slots=True)
class ProgressUpdate:
    phase: PipelinePhase
    progress: float  # [0, 1], монотонно не убывает
    status: str


@dataclass
class PipelineState:
    """Состояние одного прогона EnhancementPipeline."""
    phase: PipelinePhase = PipelinePhase.IDLE
    progress: float = 0.0
    status: str = ""
    error: Optional[str] = None
    output_path: Optional[str] = None

    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None
    phase_timings: dict[str, float] = field(default_factory=dict)
    _phase_started_at: float = field(default_factory=time.monotonic, repr=False)

    @property
    def is_terminal(self) -> bool:
        return self.phase in _TERMINAL_PHASES

    def enter_phase(self, phase: PipelinePhase, status: str) -> None:
        if self.is_terminal:
            raise RuntimeError(f"Pipeline already finished with phase '{self.phase.value}'")
        now = time.monotonic()
        if self.phase != PipelinePhase.IDLE:
            self.phase_timings[self.phase.value] = now - self._phase_started_at
        self._phase_started_at = now
        self.phase = phase
        self.status = status

    def report_progress(self, progress: float, status: Optional[str] = None) -> ProgressUpdate:
        """Обновляет прогресс. Значение клампится в [текущий, 1] - прогресс не откатывается."""
        self.progress = min(1.0, max(self.progress, float(progress)))
        if status is not None:
            self.status = status
        return ProgressUpdate(phase=self.phase, progress=self.progress, status=self.status)

    def mark_completed(self, output_path: str) -> None:
        self.enter_phase(PipelinePhase.COMPLETE, "Complete")
        self.progress = 1.0
        self.output_path = output_path
        self.end_time = time.time()

    def mark_failed(self, error: str) -> None:
        if self.phase != PipelinePhase.IDLE:
            self.phase_timings[self.phase.value] = time.monotonic() - self._phase_started_at
        self.phase = PipelinePhase.FAILED
        self.status = f"Failed: {error}"
        self.error = error
        self.output_path = None
        self.end_time = time.time()

