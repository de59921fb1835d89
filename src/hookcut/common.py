"""hookcut.common: shared utilities.

Contains: color parsing into ffmpeg color syntax, path variable
resolution, and font file discovery for the text overlay.
"""

import re
from pathlib import Path

from PIL import ImageColor


# ── Font paths ─────────────────────────────────────────────────────
# DejaVu ships with the ffmpeg Docker images we deploy on; Liberation
# and Noto cover the common desktop distributions.

FONT_PATHS = [
    Path("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
    Path("/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf"),
    Path("/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf"),
    Path("/System/Library/Fonts/Supplemental/Arial.ttf"),
]

BOLD_FONT_PATHS = [
    Path("/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"),
    Path("/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf"),
    Path("/usr/share/fonts/truetype/noto/NotoSans-Bold.ttf"),
    Path("/System/Library/Fonts/Supplemental/Arial Bold.ttf"),
]


# ── Color utilities ────────────────────────────────────────────────

def parse_color(value: str) -> tuple[int, ...]:
    """Parse a CSS color name, '#RGB', '#RRGGBB' or '#RRGGBBAA' string.

    Returns an (R, G, B) or (R, G, B, A) tuple. Raises ValueError for
    anything Pillow does not recognise.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Unknown color: {value!r}")
    try:
        return ImageColor.getrgb(value.strip())
    except ValueError as exc:
        raise ValueError(f"Unknown color: '{value}'") from exc


def to_ffmpeg_color(value: str) -> str:
    """Convert a color string into ffmpeg's '0xRRGGBB[@alpha]' syntax.

    ffmpeg only knows a subset of CSS names, so everything is
    normalised to hex before it reaches the filter graph.
    """
    rgb = parse_color(value)
    hex_part = "0x" + "".join(f"{c:02X}" for c in rgb[:3])
    if len(rgb) == 4 and rgb[3] != 255:
        return f"{hex_part}@{rgb[3] / 255:.2f}"
    return hex_part


# ── Path utilities ─────────────────────────────────────────────────

def resolve_path_vars(text: str, paths: dict[str, str]) -> str:
    """Replace ${name} variables in a string using the paths dict."""
    def _replace(match):
        key = match.group(1)
        if key not in paths:
            raise ValueError(f"Unknown path variable: ${{{key}}}")
        return paths[key]
    return re.sub(r"\$\{(\w+)\}", _replace, text)


# ── Font lookup ────────────────────────────────────────────────────

def find_font(bold: bool = False) -> Path | None:
    """Return the first installed font file for the requested weight.

    None means no candidate exists; drawtext then falls back to the
    engine's fontconfig default.
    """
    for font_path in (BOLD_FONT_PATHS if bold else FONT_PATHS):
        if font_path.exists():
            return font_path
    return None
