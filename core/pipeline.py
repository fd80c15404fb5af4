"""
EnhancementPipeline - оркестратор: анализ -> кодирование -> финализация.

Состояния: IDLE -> ANALYZING -> ENCODING -> FINALIZING -> COMPLETE,
либо FAILED(reason) из любого состояния. При ошибке или отмене
частично записанный артефакт удаляется.
"""
from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Sequence

from config.settings import EnhancementConfig
from core.base_handler import BaseHandler
from core.cancellation import CancellationToken
from core.errors import EnhancementError, MissingRawVideoError, ProcessingFailedError
from features.analysis.clicks import ClickAnalysisHandler
from features.analysis.inactivity import InactivityAnalysisHandler
from features.analysis.steps import StepDetectionHandler
from features.media.frame_source import FrameSource
from features.media.gif_encoder import GifEncoder, compute_frame_delay
from features.media.video_meta import VideoMetaHandler
from features.media.raw_copy import export_raw_copy
from features.overlays import FrameOverlay, ScreenMapping, build_overlays, compose_overlays
from models.keys import Key
from models.results import EnhancementResult
from models.session import OutputFormat, RecordingSession
from models.state import PipelinePhase, PipelineState, ProgressUpdate
from models.timeline import SpeedMap, sort_events

ProgressCallback = Callable[[ProgressUpdate], None]

ANALYSIS_START = 0.1
ENCODE_START = 0.3
ENCODE_END = 0.9
PROGRESS_REPORT_STEP = 0.01


def run_pipeline(context: dict[str, Any], handlers: Iterable[BaseHandler]) -> dict[str, Any]:
    for h in handlers:
        context = h(context)
    return context


class EnhancementPipeline:
    """Один прогон = один экземпляр. Конфигурация фиксируется в конструкторе."""

    def __init__(
        self,
        config: EnhancementConfig,
        on_progress: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
        extra_overlays: Sequence[FrameOverlay] = (),
        prefer_ffprobe: bool = True,
        verbose: bool = True,
    ) -> None:
        self.config = config
        self.on_progress = on_progress
        self.cancel_token = cancel_token or CancellationToken()
        self.extra_overlays = list(extra_overlays)
        self.prefer_ffprobe = prefer_ffprobe
        self.verbose = verbose
        self.state = PipelineState()
        self._last_reported = -1.0

    # === Progress ===

    def _report(self, progress: float, status: Optional[str] = None, force: bool = False) -> None:
        update = self.state.report_progress(progress, status)
        if self.on_progress is None:
            return
        if force or update.progress - self._last_reported >= PROGRESS_REPORT_STEP:
            self._last_reported = update.progress
            self.on_progress(update)

    def _enter(self, phase: PipelinePhase, status: str, progress: float) -> None:
        self.state.enter_phase(phase, status)
        if self.verbose:
            print(f"[{phase.value}] {status}")
        self._report(progress, status, force=True)

    # === Stages ===

    def build_analysis_handlers(self) -> list[BaseHandler]:
        config = self.config
        return [
            VideoMetaHandler(prefer_ffprobe=self.prefer_ffprobe, verbose=self.verbose),
            InactivityAnalysisHandler(
                threshold=config.inactivity_threshold_seconds,
                multiplier=config.inactivity_speed_multiplier,
                enabled=config.speed_up_inactivity,
                verbose=self.verbose,
            ),
            StepDetectionHandler(
                merge_threshold=config.step_merge_threshold_seconds,
                enabled=config.annotate_steps,
                verbose=self.verbose,
            ),
            ClickAnalysisHandler(
                highlight_clicks=config.highlight_clicks,
                auto_zoom=config.auto_zoom_on_clicks,
                zoom_factor=config.zoom_factor,
            ),
        ]

    def _require_raw_video(self, session: RecordingSession) -> str:
        raw = session.raw_video_path
        if not raw or not Path(raw).is_file():
            raise MissingRawVideoError()
        return str(raw)

    def _analyze(self, session: RecordingSession, raw_path: str) -> dict[str, Any]:
        context: dict[str, Any] = {
            Key.CONFIG.value: self.config,
            Key.SESSION.value: session,
            Key.VIDEO_PATH.value: raw_path,
            Key.POINTER_EVENTS.value: sort_events(session.pointer_events),
            Key.DISPLAY_SIZE.value: session.display_size,
            Key.DURATION_SECONDS.value: session.duration if session.duration > 0 else None,
        }
        return run_pipeline(context, self.build_analysis_handlers())

    def _overlays_for(self, context: dict[str, Any]) -> list[FrameOverlay]:
        display_w, display_h = context[Key.DISPLAY_SIZE.value]
        overlays = build_overlays(
            ScreenMapping(display_w, display_h),
            highlights=context.get(Key.CLICK_HIGHLIGHTS.value),
            steps=context.get(Key.STEPS.value),
            zoom_regions=context.get(Key.ZOOM_REGIONS.value),
        )
        return overlays + self.extra_overlays

    def _encode_gif(self, context: dict[str, Any], encoder: GifEncoder) -> None:
        meta = context[Key.VIDEO_META.value]
        speed_map: SpeedMap = context[Key.SPEED_MAP.value]
        overlays = self._overlays_for(context)
        base_delay = self.config.base_frame_delay
        duration = meta.duration_seconds

        source = FrameSource(
            context[Key.VIDEO_PATH.value],
            target_rate=self.config.output_frame_rate,
            max_width=self.config.max_output_width,
            meta=meta,
            max_duration=self.config.max_output_duration_seconds,
        )

        frames = iter(source)
        try:
            for frame in frames:
                self.cancel_token.raise_if_cancelled()

                image = frame.image
                if overlays:
                    image = compose_overlays(image, frame.timestamp, overlays)

                encoder.append(image, compute_frame_delay(frame.timestamp, base_delay, speed_map))

                fraction = min(1.0, frame.timestamp / duration)
                self._report(ENCODE_START + (ENCODE_END - ENCODE_START) * fraction)
        finally:
            frames.close()

        if self.verbose:
            print(
                f"✓ Encoded {encoder.frame_count} frames "
                f"({source.decoded_frames} decoded, {source.output_width}x{source.output_height})"
            )

    # === Run ===

    def run(self, session: RecordingSession, output_path: str) -> EnhancementResult:
        if self.state.phase != PipelinePhase.IDLE:
            raise RuntimeError("EnhancementPipeline instance can only be run once")

        target = Path(output_path)
        output_format = self.config.output_format
        start = time.monotonic()
        encoder: Optional[GifEncoder] = None
        # target трогается этим прогоном только после старта копии или os.replace в finalize
        target_written = False

        try:
            self._report(0.0, "Preparing...", force=True)
            raw_path = self._require_raw_video(session)

            self._enter(PipelinePhase.ANALYZING, "Analyzing recording...", ANALYSIS_START)
            context = self._analyze(session, raw_path)
            self.cancel_token.raise_if_cancelled()

            verb = "Encoding" if output_format == OutputFormat.GIF else "Copying"
            self._enter(PipelinePhase.ENCODING, f"{verb} {output_format.display_name}...", ENCODE_START)
            if output_format == OutputFormat.GIF:
                encoder = GifEncoder(str(target))
                self._encode_gif(context, encoder)
            else:
                target_written = True
                export_raw_copy(raw_path, str(target))
            self.cancel_token.raise_if_cancelled()

            self._enter(PipelinePhase.FINALIZING, "Finalizing...", ENCODE_END)
            if encoder is not None:
                encoder.finalize()
                target_written = True

            result = self._build_result(context, target, encoder, time.monotonic() - start)
            session.output_path = str(target)
            self.state.mark_completed(str(target))
            self._report(1.0, "Complete", force=True)

            if self.verbose:
                print(f"✓ {output_format.display_name} saved: {target} ({result.size_mb:.2f} MB)")
            return result

        except Exception as e:
            error = e if isinstance(e, EnhancementError) else ProcessingFailedError(f"Processing failed: {e}")
            if encoder is not None:
                encoder.close()
            self._remove_partial_output(target, target_written)
            self.state.mark_failed(error.reason)
            if self.on_progress is not None:
                self.on_progress(ProgressUpdate(self.state.phase, self.state.progress, self.state.status))
            if self.verbose:
                print(f"\nPipeline failed: {error.reason}")
            if error is e:
                raise
            raise error from e

    def _remove_partial_output(self, target: Path, target_written: bool) -> None:
        """Удаляет только то, что записал этот прогон: .part всегда, target - если он уже перезаписан."""
        paths = [target.with_name(target.name + ".part")]
        if target_written:
            paths.append(target)
        for path in paths:
            if path.exists():
                path.unlink()

    def _build_result(
        self,
        context: dict[str, Any],
        target: Path,
        encoder: Optional[GifEncoder],
        elapsed: float,
    ) -> EnhancementResult:
        meta = context[Key.VIDEO_META.value]
        if encoder is not None:
            duration = encoder.duration_seconds
            frame_count = encoder.frame_count
            delays = encoder.frame_delays
        else:
            duration = meta.duration_seconds
            frame_count = meta.frame_count
            delays = []

        return EnhancementResult(
            output_path=str(target),
            output_format=self.config.output_format,
            size_bytes=target.stat().st_size,
            duration_seconds=duration,
            frame_count=frame_count,
            frame_delays=delays,
            speed_map=context[Key.SPEED_MAP.value],
            steps=list(context.get(Key.STEPS.value, [])),
            source_duration_seconds=meta.duration_seconds,
            processing_time_seconds=elapsed,
        )
