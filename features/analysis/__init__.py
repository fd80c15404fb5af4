"""Pointer event analysis handlers."""

from features.analysis.inactivity import InactivityAnalysisHandler, analyze_inactivity
from features.analysis.steps import StepDetectionHandler, detect_steps
from features.analysis.clicks import ClickAnalysisHandler, compute_zoom_regions, extract_click_highlights

__all__ = [
    "InactivityAnalysisHandler",
    "StepDetectionHandler",
    "ClickAnalysisHandler",
    "analyze_inactivity",
    "detect_steps",
    "extract_click_highlights",
    "compute_zoom_regions",
]
