"""Tests for frame overlays."""
from __future__ import annotations

import numpy as np
import pytest

from features.overlays import (
    AutoZoomOverlay,
    ClickRippleOverlay,
    FrameOverlay,
    ScreenMapping,
    StepBadgeOverlay,
    build_overlays,
    compose_overlays,
)
from features.overlays.click_ripple import render_click_ripple
from features.overlays.step_badge import BADGE_COLOR, BADGE_OFFSET, badge_alpha
from models.timeline import ClickHighlight, WalkthroughStep, ZoomRegion


def blank(width: int = 200, height: int = 100) -> np.ndarray:
    return np.full((height, width, 3), 40, dtype=np.uint8)


class FailingOverlay(FrameOverlay):
    def composite(self, image: np.ndarray, timestamp: float) -> np.ndarray:
        raise RuntimeError("boom")


class FillOverlay(FrameOverlay):
    def __init__(self, value: int) -> None:
        self.value = value

    def composite(self, image: np.ndarray, timestamp: float) -> np.ndarray:
        image[:, :] = self.value
        return image


class TestScreenMapping:
    """Tests for ScreenMapping."""

    def test_flip_and_scale(self) -> None:
        """Test bottom-left screen origin to top-left pixel origin."""
        mapping = ScreenMapping(100, 50)
        assert mapping.to_image(10, 5, 200, 100) == pytest.approx((20.0, 90.0))
        assert mapping.to_image(0, 0, 200, 100) == pytest.approx((0.0, 100.0))


class TestClickRipple:
    """Tests for the click ripple overlay."""

    def test_active_window(self) -> None:
        """Test that a ripple is visible only during [t0, t0 + 0.4]."""
        overlay = ClickRippleOverlay([ClickHighlight(1.0, 50, 25)], ScreenMapping(100, 50))
        assert overlay.active_at(0.99) == []
        assert overlay.active_at(1.0)[0][1] == pytest.approx(0.0)
        assert overlay.active_at(1.2)[0][1] == pytest.approx(0.5)
        assert overlay.active_at(1.4)[0][1] == pytest.approx(1.0)
        assert overlay.active_at(1.41) == []

    def test_draws_during_window(self) -> None:
        """Test that the frame changes while the ripple is active."""
        overlay = ClickRippleOverlay([ClickHighlight(1.0, 50, 25)], ScreenMapping(100, 50))
        image = blank()
        out = overlay.composite(image.copy(), 1.1)
        assert not np.array_equal(out, image)
        # точка в центре красноватая (BGR: R канал выше B)
        cx, cy = 100, 50
        assert out[cy, cx, 2] > out[cy, cx, 0]

    def test_outside_window_unchanged(self) -> None:
        """Test that frames outside every window are untouched."""
        overlay = ClickRippleOverlay([ClickHighlight(1.0, 50, 25)], ScreenMapping(100, 50))
        image = blank()
        assert np.array_equal(overlay.composite(image.copy(), 3.0), image)

    def test_fully_faded(self) -> None:
        """Test that progress 1.0 draws nothing."""
        image = blank()
        out = render_click_ripple(image.copy(), (100, 50), 1.0)
        assert np.array_equal(out, image)


class TestStepBadge:
    """Tests for the step badge overlay."""

    def test_badge_alpha_fades(self) -> None:
        """Test fade-in and fade-out over the first and last 10%."""
        assert badge_alpha(0.0) == 0.0
        assert badge_alpha(0.05) == pytest.approx(0.5)
        assert badge_alpha(0.5) == 1.0
        assert badge_alpha(0.95) == pytest.approx(0.5)
        assert badge_alpha(1.0) == 0.0
        assert badge_alpha(-0.2) == 0.0
        assert badge_alpha(1.5) == 0.0

    def test_badge_drawn_next_to_step(self) -> None:
        """Test that the badge circle is painted at the offset position."""
        mapping = ScreenMapping(200, 100)
        step = WalkthroughStep(number=1, timestamp=1.0, x=60, y=60, duration=1.0)
        overlay = StepBadgeOverlay([step], mapping)
        image = blank()

        out = overlay.composite(image.copy(), 1.5)
        x, y = mapping.to_image(60, 60, 200, 100)
        # край круга: внутри бейджа, но вне белого текста
        px, py = int(x + BADGE_OFFSET), int(y - BADGE_OFFSET) + 11
        assert tuple(int(v) for v in out[py, px]) == pytest.approx(BADGE_COLOR, abs=2)

    def test_window_includes_lead_in(self) -> None:
        """Test that the badge window starts 0.1s before the first click."""
        overlay = StepBadgeOverlay([WalkthroughStep(1, 1.0, 0, 0, 0.5)], ScreenMapping(10, 10))
        assert overlay.active_at(0.95)
        assert not overlay.active_at(0.85)
        assert not overlay.active_at(1.6)


class TestAutoZoom:
    """Tests for the experimental zoom overlay."""

    def test_zoom_into_quadrant(self) -> None:
        """Test that the bottom-left screen quadrant fills the frame."""
        image = np.zeros((100, 200, 3), dtype=np.uint8)
        # нижний левый квадрант экрана = нижний левый в кадре
        image[50:, :100] = (0, 255, 0)
        region = ZoomRegion(0.0, 1.0, source_rect=(0, 0, 50, 25), zoom_factor=2.0)
        overlay = AutoZoomOverlay([region], ScreenMapping(100, 50))

        assert overlay.crop_box(region, 200, 100) == (0, 50, 100, 100)
        out = overlay.composite(image.copy(), 0.5)
        assert out.shape == image.shape
        assert (out[:, :, 1] == 255).all()

    def test_inactive_region(self) -> None:
        """Test that frames outside regions are unchanged."""
        region = ZoomRegion(0.0, 1.0, source_rect=(0, 0, 50, 25), zoom_factor=2.0)
        overlay = AutoZoomOverlay([region], ScreenMapping(100, 50))
        image = blank()
        assert np.array_equal(overlay.composite(image.copy(), 2.0), image)


class TestCompose:
    """Tests for overlay composition."""

    def test_no_overlays_is_identity(self) -> None:
        """Test that an empty chain returns the frame unchanged."""
        image = blank()
        assert np.array_equal(compose_overlays(image, 0.0, []), image)

    def test_order(self) -> None:
        """Test that later overlays draw on top."""
        out = compose_overlays(blank(), 0.0, [FillOverlay(10), FillOverlay(200)])
        assert (out == 200).all()

    def test_failing_overlay_is_skipped(self) -> None:
        """Test that one failing overlay leaves the rest of the chain working."""
        errors = []
        out = compose_overlays(
            blank(),
            0.0,
            [FillOverlay(90), FailingOverlay()],
            on_error=lambda overlay, exc: errors.append((overlay.name, str(exc))),
        )
        assert (out == 90).all()
        assert errors == [("FailingOverlay", "boom")]

    def test_failing_overlay_does_not_leak_partial_draw(self) -> None:
        """Test that the input frame is not mutated by overlays."""
        image = blank()
        compose_overlays(image, 0.0, [FillOverlay(7)])
        assert (image == 40).all()

    def test_build_overlays_skips_empty(self) -> None:
        """Test that empty inputs produce no strategies."""
        mapping = ScreenMapping(100, 50)
        assert build_overlays(mapping) == []
        overlays = build_overlays(
            mapping,
            highlights=[ClickHighlight(1.0, 1, 1)],
            steps=[WalkthroughStep(1, 1.0, 1, 1, 0.5)],
        )
        assert [type(o) for o in overlays] == [ClickRippleOverlay, StepBadgeOverlay]
