"""Hook text overlay for the compiled filter graph.

Builds one drawtext filter appended to the hook's video chain. The text
is styled from TextStyle (size table, color, weight), placed either at
the frame centre or with its *centre* at a percentage of the frame, and
enabled only while the hook segment is on screen.
"""

from .common import to_ffmpeg_color
from .edit_config import TextPosition, TextStyle

# ── Constants ────────────────────────────────────────────────────

STROKE_WIDTH = 3
STROKE_COLOR = "black"
SHADOW_COLOR = "black@0.7"
SHADOW_OFFSET = 3
BOX_COLOR = "black@0.5"
BOX_BORDER = 15


# ── Escaping ─────────────────────────────────────────────────────


def escape_text(text: str) -> str:
    """Escape text for a single-quoted drawtext value.

    The value is unquoted twice: once as a filtergraph token, where the
    single quotes keep everything literal, then as a filter option,
    where backslash escapes apply. A quote cannot appear inside the
    graph-level quotes, so it closes them, emits an escaped backslash
    and quote, and reopens.

    Order matters: backslashes first, so later substitutions are not
    escaped again.
    """
    return (
        text.replace("\\", "\\\\")
        .replace("'", "'\\\\\\''")
        .replace(":", "\\:")
        .replace("[", "\\[")
        .replace("]", "\\]")
    )


# ── Position computation ─────────────────────────────────────────


def compute_text_position(position: TextPosition | None) -> tuple[str, str]:
    """Return drawtext (x, y) expressions.

    A TextPosition percentage is the text's centre, so half the rendered
    text size is subtracted on each axis. Without a position the text is
    centred in the frame.
    """
    if position is None:
        return "(w-text_w)/2", "(h-text_h)/2"
    x = f"(w*{position.x_percent / 100:.4f})-(text_w/2)"
    y = f"(h*{position.y_percent / 100:.4f})-(text_h/2)"
    return x, y


def _font_option(style: TextStyle, font_regular: str | None, font_bold: str | None) -> str:
    fontfile = (font_bold or font_regular) if style.bold else font_regular
    if fontfile:
        return f"fontfile='{escape_text(str(fontfile))}'"
    # No font file on disk: ask fontconfig for the default family.
    return "font='Sans\\:style=Bold'" if style.bold else "font='Sans'"


# ── Filter construction ──────────────────────────────────────────


def text_overlay_filter(
    text: str | None,
    style: TextStyle | None,
    position: TextPosition | None,
    hook_duration: float,
    font_regular: str | None = None,
    font_bold: str | None = None,
) -> str:
    """Return the drawtext fragment, or "" when there is no text.

    Args:
        text: Raw overlay text (unescaped).
        style: Font size/color/weight; defaults apply when None.
        position: Text centre in percent, or None to centre.
        hook_duration: Effective hook length; the text is hidden after it.
        font_regular: Font file for normal weight.
        font_bold: Font file for bold weight.
    """
    if not text or not text.strip():
        return ""
    style = style or TextStyle()
    x, y = compute_text_position(position)

    options = [
        _font_option(style, font_regular, font_bold),
        f"text='{escape_text(text)}'",
        f"fontsize={style.font_px}",
        f"fontcolor={to_ffmpeg_color(style.color)}",
        f"x={x}",
        f"y={y}",
        f"borderw={STROKE_WIDTH}",
        f"bordercolor={STROKE_COLOR}",
        f"shadowcolor={SHADOW_COLOR}",
        f"shadowx={SHADOW_OFFSET}",
        f"shadowy={SHADOW_OFFSET}",
    ]
    if style.background:
        options += ["box=1", f"boxcolor={BOX_COLOR}", f"boxborderw={BOX_BORDER}"]
    options.append(f"enable='between(t,0,{hook_duration:.3f})'")

    return "drawtext=" + ":".join(options)
