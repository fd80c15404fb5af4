"""Tests for pointer event analysis: inactivity, steps, clicks."""
from __future__ import annotations

import random

import pytest

from features.analysis.clicks import ClickAnalysisHandler, compute_zoom_regions, extract_click_highlights
from features.analysis.inactivity import InactivityAnalysisHandler, analyze_inactivity
from features.analysis.steps import StepDetectionHandler, detect_steps
from models.keys import Key
from models.timeline import PointerEvent, PointerEventKind, SpeedMap


def click(t: float, x: float = 0.0, y: float = 0.0) -> PointerEvent:
    return PointerEvent(t, x, y, PointerEventKind.CLICK)


def move(t: float, x: float = 0.0, y: float = 0.0) -> PointerEvent:
    return PointerEvent(t, x, y, PointerEventKind.MOVE)


class TestInactivityAnalysis:
    """Tests for analyze_inactivity."""

    def test_single_gap(self) -> None:
        """Test that a 4.5s pause becomes one guarded range."""
        events = [move(0.0), click(0.5), click(5.0)]
        speed_map = analyze_inactivity(events, total_duration=6.0, threshold=1.5, multiplier=4.0)

        assert len(speed_map) == 1
        (time_range, multiplier), = speed_map.items()
        assert time_range.start == pytest.approx(0.7)
        assert time_range.end == pytest.approx(4.8)
        assert multiplier == 4.0
        # хвост 1.0s < threshold
        assert speed_map.multiplier_at(5.5) is None

    def test_trailing_gap(self) -> None:
        """Test that inactivity after the last event uses the tail guard."""
        events = [move(0.0), move(1.0)]
        speed_map = analyze_inactivity(events, total_duration=5.0, threshold=1.5, multiplier=3.0)

        assert len(speed_map) == 1
        time_range = speed_map.ranges[0]
        assert time_range.start == pytest.approx(1.2)
        assert time_range.end == pytest.approx(4.9)

    def test_short_candidate_discarded(self) -> None:
        """Test that a gap just above threshold shrinks below 0.5s and is dropped."""
        # gap 0.8 -> [0.2, 0.6] = 0.4s
        events = [move(0.0), move(0.8), move(1.0)]
        speed_map = analyze_inactivity(events, total_duration=1.0, threshold=0.7, multiplier=4.0)
        assert speed_map.is_empty

    def test_fewer_than_two_events(self) -> None:
        """Test that 0 or 1 events give an empty map."""
        assert analyze_inactivity([], 10.0, 1.5, 4.0).is_empty
        assert analyze_inactivity([move(1.0)], 10.0, 1.5, 4.0).is_empty

    def test_unsorted_input(self) -> None:
        """Test that input order does not matter."""
        ordered = [move(0.0), click(0.5), click(5.0)]
        shuffled = [click(5.0), move(0.0), click(0.5)]
        assert analyze_inactivity(ordered, 6.0, 1.5, 4.0) == analyze_inactivity(shuffled, 6.0, 1.5, 4.0)

    def test_random_logs_keep_invariants(self) -> None:
        """Test disjoint, long enough ranges for random event logs."""
        rng = random.Random(42)
        for _ in range(50):
            events = [move(rng.uniform(0.0, 30.0)) for _ in range(rng.randint(2, 25))]
            total = max(e.timestamp for e in events) + rng.uniform(0.0, 5.0)
            speed_map = analyze_inactivity(events, total, threshold=1.0, multiplier=2.0)

            ranges = speed_map.ranges
            for r in ranges:
                assert r.duration > 0.5
                assert 0.0 <= r.start < r.end <= total
            for a, b in zip(ranges, ranges[1:]):
                assert a.end < b.start


class TestInactivityHandler:
    """Tests for InactivityAnalysisHandler."""

    def test_disabled_gives_empty_map(self) -> None:
        """Test that disabled analysis still provides SPEED_MAP."""
        handler = InactivityAnalysisHandler(enabled=False, verbose=False)
        context = handler({
            Key.POINTER_EVENTS.value: [move(0.0), move(10.0)],
            Key.DURATION_SECONDS.value: 12.0,
        })
        assert context[Key.SPEED_MAP.value] == SpeedMap()

    def test_missing_requirement(self) -> None:
        """Test that the requires contract is checked before handle()."""
        handler = InactivityAnalysisHandler(verbose=False)
        with pytest.raises(ValueError, match="duration_seconds"):
            handler({Key.POINTER_EVENTS.value: []})

    def test_provides_speed_map(self) -> None:
        """Test handler output."""
        handler = InactivityAnalysisHandler(threshold=1.5, multiplier=4.0, verbose=False)
        context = handler({
            Key.POINTER_EVENTS.value: [move(0.0), click(0.5), click(5.0)],
            Key.DURATION_SECONDS.value: 6.0,
        })
        speed_map = context[Key.SPEED_MAP.value]
        assert len(speed_map) == 1
        assert speed_map.ranges[0].start == pytest.approx(0.7)
        assert speed_map.multiplier_at(2.0) == 4.0


class TestStepDetection:
    """Tests for detect_steps."""

    def test_clusters(self) -> None:
        """Test that close clicks merge and distant clicks start a new step."""
        events = [click(0.0, 10, 10), click(0.3, 20, 30), click(1.2, 100, 100), click(1.4, 110, 100)]
        steps = detect_steps(events, merge_threshold=0.5)

        assert [s.number for s in steps] == [1, 2]
        assert [s.timestamp for s in steps] == [0.0, 1.2]
        assert steps[0].position == (15.0, 20.0)
        assert steps[1].position == (105.0, 100.0)
        assert steps[0].duration == pytest.approx(0.3 + 0.5)
        assert steps[1].duration == pytest.approx(0.2 + 0.5)

    def test_single_click_step(self) -> None:
        """Test that a lone click gets the padding duration."""
        steps = detect_steps([click(2.0, 5, 6)])
        assert len(steps) == 1
        assert steps[0].duration == pytest.approx(0.5)
        assert steps[0].window == pytest.approx((1.9, 2.5))

    def test_no_clicks(self) -> None:
        """Test empty and move-only inputs."""
        assert detect_steps([]) == []
        assert detect_steps([move(0.0), move(1.0)]) == []

    def test_non_clicks_ignored(self) -> None:
        """Test that moves between clicks do not split a cluster."""
        events = [click(0.0), move(0.1), PointerEvent(0.2, 0, 0, PointerEventKind.DRAG), click(0.3)]
        steps = detect_steps(events)
        assert len(steps) == 1

    def test_unsorted_input(self) -> None:
        """Test that clicks are sorted before clustering."""
        steps = detect_steps([click(1.2), click(0.0), click(0.3)])
        assert [s.timestamp for s in steps] == [0.0, 1.2]

    def test_threshold_is_strict(self) -> None:
        """Test that a gap equal to the threshold starts a new step."""
        steps = detect_steps([click(0.0), click(0.5)], merge_threshold=0.5)
        assert len(steps) == 2

    def test_handler_disabled(self) -> None:
        """Test that annotate_steps off yields no steps."""
        handler = StepDetectionHandler(enabled=False, verbose=False)
        context = handler({Key.POINTER_EVENTS.value: [click(0.0)]})
        assert context[Key.STEPS.value] == []


class TestClickAnalysis:
    """Tests for click highlights and zoom regions."""

    def test_highlights_from_clicks_only(self) -> None:
        """Test one highlight per click."""
        highlights = extract_click_highlights([move(0.0), click(0.5, 3, 4), click(1.0, 5, 6)])
        assert [(h.timestamp, h.x, h.y) for h in highlights] == [(0.5, 3, 4), (1.0, 5, 6)]
        assert all(h.radius == 30.0 and h.duration == 0.4 for h in highlights)

    def test_zoom_regions(self) -> None:
        """Test zoom windows and clamped source rects."""
        regions = compute_zoom_regions(
            [click(1.0, 10, 10), click(3.0, 500, 300)],
            display_size=(1000, 600),
            zoom_factor=2.0,
        )
        assert len(regions) == 2

        first, second = regions
        assert first.start_time == pytest.approx(0.7)
        assert first.end_time == pytest.approx(2.7)
        assert first.source_rect == pytest.approx((0.0, 0.0, 500.0, 300.0))

        assert second.start_time == pytest.approx(2.7)
        assert second.end_time == pytest.approx(4.7)
        assert second.source_rect == pytest.approx((250.0, 150.0, 500.0, 300.0))

    def test_zoom_needs_two_clicks(self) -> None:
        """Test that a single click gives no zoom regions."""
        assert compute_zoom_regions([click(1.0)], (100, 100)) == []

    def test_handler_zoom_disabled_by_default(self) -> None:
        """Test default handler output."""
        handler = ClickAnalysisHandler()
        context = handler({
            Key.POINTER_EVENTS.value: [click(1.0), click(3.0)],
            Key.DISPLAY_SIZE.value: (100.0, 100.0),
        })
        assert len(context[Key.CLICK_HIGHLIGHTS.value]) == 2
        assert context[Key.ZOOM_REGIONS.value] == []

    def test_handler_highlights_disabled(self) -> None:
        """Test that highlight_clicks off yields no highlights."""
        handler = ClickAnalysisHandler(highlight_clicks=False, auto_zoom=True)
        context = handler({
            Key.POINTER_EVENTS.value: [click(1.0), click(3.0)],
            Key.DISPLAY_SIZE.value: (100.0, 100.0),
        })
        assert context[Key.CLICK_HIGHLIGHTS.value] == []
        assert len(context[Key.ZOOM_REGIONS.value]) == 2
