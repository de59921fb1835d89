"""Timing resolution: turn trims and probed durations into clip windows.

Every downstream generator (effects, transition, overlay, audio) reads
the same ResolvedTiming, so the four intervals are computed exactly
once per job.
"""

import math
from dataclasses import dataclass

from .edit_config import EditConfig, Trim
from .errors import InvalidTrimError

CANONICAL_FPS = 30
MIN_EFFECT_FRAMES = CANONICAL_FPS


@dataclass(frozen=True)
class ResolvedTiming:
    """Effective source windows, in seconds."""

    hook_start: float
    hook_duration: float
    demo_start: float
    demo_duration: float

    @property
    def hook_frames(self) -> int:
        return frame_count(self.hook_duration)

    @property
    def demo_frames(self) -> int:
        return frame_count(self.demo_duration)


def frame_count(duration: float) -> int:
    """Frames spanned by `duration` on the 30 fps timeline, at least 1s worth."""
    return max(MIN_EFFECT_FRAMES, math.floor(duration * CANONICAL_FPS))


def _resolve_window(trim: Trim | None, probed: float, side: str) -> tuple[float, float]:
    if trim is not None and trim.active:
        start, duration = trim.start, trim.end - trim.start
    else:
        start, duration = 0.0, probed
    if duration <= 0:
        raise InvalidTrimError(
            f"{side} window resolves to {duration:.3f}s "
            f"(start={start}, probed={probed}); it must be > 0"
        )
    return start, duration


def resolve_timing(config: EditConfig, hook_probed: float, demo_probed: float) -> ResolvedTiming:
    """Compute hook/demo start offsets and effective durations.

    An absent trim or use_full_clip=true selects the whole probed clip.

    Raises:
        InvalidTrimError: A resolved duration is <= 0.
    """
    hook_start, hook_duration = _resolve_window(config.hook_trim, hook_probed, "hook")
    demo_start, demo_duration = _resolve_window(config.demo_trim, demo_probed, "demo")
    return ResolvedTiming(
        hook_start=hook_start,
        hook_duration=hook_duration,
        demo_start=demo_start,
        demo_duration=demo_duration,
    )
