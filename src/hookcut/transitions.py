"""Hook-to-demo transition planning.

Transition behavior:
  - crossfade: cross-dissolve over the configured duration (xfade=fade).
  - push-up: demo slides in from below, pushing the hook up (xfade=slideup).
  - zoom-cut: zoom blend, capped at ZOOM_CUT_MAX seconds (xfade=zoomin).
  - cut: no blend; the caller concatenates the two clips.

A duration <= 0 is always a hard cut, regardless of type. The blend
starts at max(0, hook_duration - duration); a transition longer than
the hook overlaps it entirely from t=0.
"""

from dataclasses import dataclass

from .edit_config import Transition, TransitionKind

ZOOM_CUT_MAX = 0.3

XFADE_NAMES = {
    TransitionKind.CROSSFADE: "fade",
    TransitionKind.PUSH_UP: "slideup",
    TransitionKind.ZOOM_CUT: "zoomin",
}


@dataclass(frozen=True)
class TransitionPlan:
    """A blend of `duration` seconds starting `offset` seconds into the hook."""

    xfade: str
    duration: float
    offset: float

    def to_filter(self) -> str:
        return (
            f"xfade=transition={self.xfade}"
            f":duration={self.duration:.3f}:offset={self.offset:.3f}"
        )

    def output_duration(self, demo_duration: float) -> float:
        return self.offset + demo_duration


def transition_offset(hook_duration: float, duration: float) -> float:
    """Blend start time on the hook, never negative."""
    return max(0.0, hook_duration - duration)


def plan_transition(transition: Transition | None, hook_duration: float) -> TransitionPlan | None:
    """Plan the blend between hook and demo.

    Returns:
        TransitionPlan, or None meaning "hard concatenation".
    """
    if transition is None:
        return None
    try:
        kind = TransitionKind(transition.kind)
    except ValueError:
        return None
    if kind is TransitionKind.CUT or transition.duration <= 0:
        return None

    duration = transition.duration
    if kind is TransitionKind.ZOOM_CUT:
        duration = min(duration, ZOOM_CUT_MAX)

    return TransitionPlan(
        xfade=XFADE_NAMES[kind],
        duration=duration,
        offset=transition_offset(hook_duration, duration),
    )
