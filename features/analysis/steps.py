"""
StepDetectionHandler - выделяет шаги walkthrough'а из кликов.

Клики, идущие друг за другом быстрее merge_threshold, сливаются в один шаг
(двойной клик, клик + подтверждение). Шаг получает номер, время первого
клика и центроид позиций.
"""
from __future__ import annotations

from typing import Any, ClassVar, FrozenSet, Sequence

from core.base_handler import AnalyzerHandler
from models.keys import Key
from models.timeline import PointerEvent, WalkthroughStep, sort_events

STEP_DISPLAY_PADDING_SECONDS = 0.5


def _make_step(group: list[PointerEvent], number: int) -> WalkthroughStep:
    first = group[0].timestamp
    last = group[-1].timestamp
    return WalkthroughStep(
        number=number,
        timestamp=first,
        x=sum(e.x for e in group) / len(group),
        y=sum(e.y for e in group) / len(group),
        duration=(last - first) + STEP_DISPLAY_PADDING_SECONDS,
    )


def detect_steps(
    events: Sequence[PointerEvent],
    merge_threshold: float = 0.5,
) -> list[WalkthroughStep]:
    """Single pass по отсортированным кликам, O(n)."""
    clicks = sort_events(e for e in events if e.is_click)
    if not clicks:
        return []

    steps: list[WalkthroughStep] = []
    group: list[PointerEvent] = [clicks[0]]

    for prev, click in zip(clicks, clicks[1:]):
        if click.timestamp - prev.timestamp < merge_threshold:
            group.append(click)
        else:
            steps.append(_make_step(group, number=len(steps) + 1))
            group = [click]

    steps.append(_make_step(group, number=len(steps) + 1))
    return steps


class StepDetectionHandler(AnalyzerHandler):
    """Handler для авто-аннотации шагов.

    Provides:
    - STEPS: список WalkthroughStep (пустой, если аннотация выключена)
    """

    requires: ClassVar[FrozenSet[Key]] = frozenset({Key.POINTER_EVENTS})
    provides: ClassVar[FrozenSet[Key]] = frozenset({Key.STEPS})

    def __init__(self, merge_threshold: float = 0.5, enabled: bool = True, verbose: bool = True) -> None:
        self.merge_threshold = float(merge_threshold)
        self.enabled = enabled
        self.verbose = verbose

    def handle(self, context: dict[str, Any]) -> dict[str, Any]:
        if not self.enabled:
            context[Key.STEPS.value] = []
            return context

        steps = detect_steps(context[Key.POINTER_EVENTS.value], self.merge_threshold)
        context[Key.STEPS.value] = steps

        if self.verbose:
            print(f"✓ Steps: {len(steps)} detected")

        return context
