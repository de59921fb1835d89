"""Camera-motion and crop effects on the 1080x1920 canonical frame.

Each generator is a pure function (multiplier, frames) -> filter string
that is appended to a clip's normalised video chain. Zoom and pan
curves are written as closed-form zoompan expressions of the output
frame index `on`, so the animation is fixed analytically rather than
accumulated frame by frame.

Effects are cosmetic: an absent or unknown kind yields the empty
fragment and never blocks a job.
"""

import math

from .edit_config import Effect, EffectKind

FRAME_W = 1080
FRAME_H = 1920

ZOOM_IN_SPAN = 0.15        # extra zoom reached at the last frame, per unit intensity
PUNCH_ZOOM_SPAN = 0.2
PUNCH_RAMP_FRACTION = 0.2  # share of the clip spent ramping before the hold
PAN_ZOOM = 1.1
PAN_TRAVEL = 0.05          # vertical travel either side of centre, fraction of height
# Largest travel zoompan can honour at PAN_ZOOM, rounded down to the 4 decimals emitted.
PAN_MAX_TRAVEL = math.floor((1 - 1 / PAN_ZOOM) / 2 * 10000) / 10000
CROP_SPAN = 0.1

_CENTER_X = "iw/2-(iw/zoom/2)"
_CENTER_Y = "ih/2-(ih/zoom/2)"


def _zoompan(z: str, x: str = _CENTER_X, y: str = _CENTER_Y) -> str:
    # d=1: one output frame per input frame, so `on` tracks the clip timeline.
    return (
        f"zoompan=z='{z}':x='{x}':y='{y}'"
        f":d=1:s={FRAME_W}x{FRAME_H}:fps=30"
    )


def zoom_in(multiplier: float, frames: int) -> str:
    """Linear zoom from 1.0 to 1 + 0.15*m across `frames`, centre anchored."""
    span = ZOOM_IN_SPAN * multiplier
    return _zoompan(f"min(1+{span:.4f}*on/{frames},{1 + span:.4f})")


def punch_zoom(multiplier: float, frames: int) -> str:
    """Fast ramp to 1 + 0.2*m over the first 20% of frames, then hold."""
    span = PUNCH_ZOOM_SPAN * multiplier
    ramp = max(1, math.floor(frames * PUNCH_RAMP_FRACTION))
    return _zoompan(f"if(lte(on,{ramp}),1+{span:.4f}*on/{ramp},{1 + span:.4f})")


def vertical_pan(multiplier: float, frames: int) -> str:
    """Constant 1.1 zoom, camera travelling from -travel to +travel of height.

    Travel is capped at the crop margin the 1.1 zoom leaves, so the pan
    keeps moving on every frame instead of stalling at the frame edge.
    """
    travel = min(PAN_TRAVEL * multiplier, PAN_MAX_TRAVEL)
    y = f"{_CENTER_Y}+ih*{travel:.4f}*(2*min(on/{frames},1)-1)"
    return _zoompan(f"{PAN_ZOOM}", y=y)


def center_crop_geometry(multiplier: float) -> tuple[int, int, int, int]:
    """Return (scaled_w, scaled_h, crop_x, crop_y) for a centred crop.

    Scaled dimensions are rounded to even numbers, so both crop offsets
    are whole pixels.
    """
    factor = 1 + CROP_SPAN * multiplier
    scaled_w = 2 * round(FRAME_W * factor / 2)
    scaled_h = 2 * round(FRAME_H * factor / 2)
    return scaled_w, scaled_h, (scaled_w - FRAME_W) // 2, (scaled_h - FRAME_H) // 2


def center_crop(multiplier: float, frames: int) -> str:
    """Static upscale by 1 + 0.1*m, cropped back to the canonical frame."""
    scaled_w, scaled_h, crop_x, crop_y = center_crop_geometry(multiplier)
    return f"scale={scaled_w}:{scaled_h},crop={FRAME_W}:{FRAME_H}:{crop_x}:{crop_y}"


EFFECT_GENERATORS = {
    EffectKind.ZOOM_IN: zoom_in,
    EffectKind.PUNCH_ZOOM: punch_zoom,
    EffectKind.VERTICAL_PAN: vertical_pan,
    EffectKind.CENTER_CROP: center_crop,
}


def effect_filter(effect: Effect | None, frames: int) -> str:
    """Return the filter fragment for `effect`, or "" for none/unknown."""
    if effect is None:
        return ""
    try:
        kind = EffectKind(effect.kind)
    except ValueError:
        return ""
    generator = EFFECT_GENERATORS.get(kind)
    if generator is None:
        return ""
    return generator(effect.multiplier, frames)
