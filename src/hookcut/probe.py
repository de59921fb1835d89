"""Duration and audio-presence probing.

Uses moviepy's VideoFileClip (imageio-ffmpeg does not bundle ffprobe).
A clip that cannot be opened is not an error here: the caller gets the
fallback duration and no audio, and the engine reports the real
problem if the file is unusable.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from moviepy import VideoFileClip

logger = logging.getLogger(__name__)

FALLBACK_DURATION = 5.0


@dataclass(frozen=True)
class ProbeResult:
    duration: float
    has_audio: bool


FALLBACK = ProbeResult(duration=FALLBACK_DURATION, has_audio=False)


def probe_media(path: str | Path) -> ProbeResult:
    """Return the clip's duration in seconds and whether it has audio."""
    try:
        with VideoFileClip(str(path)) as clip:
            duration = clip.duration
            has_audio = clip.audio is not None
    except Exception as exc:
        logger.warning("Probe failed for %s (%s); using %.1fs, no audio", path, exc, FALLBACK_DURATION)
        return FALLBACK

    if not duration or duration <= 0:
        logger.warning("Probe of %s reported no duration; using %.1fs", path, FALLBACK_DURATION)
        return ProbeResult(duration=FALLBACK_DURATION, has_audio=has_audio)
    return ProbeResult(duration=float(duration), has_audio=has_audio)


def probe_pair(hook: str | Path, demo: str | Path) -> tuple[ProbeResult, ProbeResult]:
    """Probe hook and demo concurrently."""
    with ThreadPoolExecutor(max_workers=2) as pool:
        hook_future = pool.submit(probe_media, hook)
        demo_future = pool.submit(probe_media, demo)
        return hook_future.result(), demo_future.result()
