"""Tests for the hook text overlay."""

from hookcut.edit_config import TextPosition, TextStyle
from hookcut.overlays import compute_text_position, escape_text, text_overlay_filter


class TestEscapeText:
    """Test drawtext text escaping."""

    def test_colon(self):
        assert escape_text("Step 1: win") == "Step 1\\: win"

    def test_single_quote(self):
        # Graph level yields don\'t; option level then yields don't.
        assert escape_text("don't") == "don'\\\\\\''t"

    def test_brackets(self):
        assert escape_text("[new]") == "\\[new\\]"

    def test_backslash_escaped_first(self):
        # The backslash introduced for ':' must not be doubled.
        assert escape_text("a\\b:c") == "a\\\\b\\:c"

    def test_plain_text_unchanged(self):
        assert escape_text("Wait for it...") == "Wait for it..."


class TestComputeTextPosition:
    """Test percentage to pixel text placement."""

    def test_default_is_centred(self):
        assert compute_text_position(None) == ("(w-text_w)/2", "(h-text_h)/2")

    def test_percent_is_text_centre(self):
        x, y = compute_text_position(TextPosition(x_percent=50, y_percent=10))
        assert x == "(w*0.5000)-(text_w/2)"
        assert y == "(h*0.1000)-(text_h/2)"


class TestTextOverlayFilter:
    """Test drawtext filter construction."""

    def test_empty_text_gives_nothing(self):
        assert text_overlay_filter("", None, None, 5.0) == ""
        assert text_overlay_filter(None, None, None, 5.0) == ""
        assert text_overlay_filter("   ", None, None, 5.0) == ""

    def test_basic_fragment(self):
        fragment = text_overlay_filter("Wait for it", None, None, 5.0, font_regular="/f/R.ttf")
        assert fragment.startswith("drawtext=fontfile='/f/R.ttf':")
        assert "text='Wait for it'" in fragment
        assert "fontsize=72" in fragment
        assert "fontcolor=0xFFFFFF" in fragment
        assert "borderw=3" in fragment
        assert "shadowx=3" in fragment

    def test_enabled_only_during_hook(self):
        fragment = text_overlay_filter("Hi", None, None, 5.0)
        assert fragment.endswith("enable='between(t,0,5.000)'")

    def test_style_applied(self):
        style = TextStyle(font_size="large", color="#FFE600", weight="bold")
        fragment = text_overlay_filter(
            "Hi", style, TextPosition(50, 10), 5.0,
            font_regular="/f/R.ttf", font_bold="/f/B.ttf",
        )
        assert "fontfile='/f/B.ttf'" in fragment
        assert "fontsize=96" in fragment
        assert "fontcolor=0xFFE600" in fragment
        assert "x=(w*0.5000)-(text_w/2)" in fragment
        assert "y=(h*0.1000)-(text_h/2)" in fragment

    def test_bold_falls_back_to_regular_file(self):
        fragment = text_overlay_filter("Hi", TextStyle(weight="bold"), None, 5.0, font_regular="/f/R.ttf")
        assert "fontfile='/f/R.ttf'" in fragment

    def test_fontconfig_fallback_without_files(self):
        assert "font='Sans'" in text_overlay_filter("Hi", None, None, 5.0)
        bold = text_overlay_filter("Hi", TextStyle(weight="bold"), None, 5.0)
        assert "font='Sans\\:style=Bold'" in bold

    def test_background_box(self):
        fragment = text_overlay_filter("Hi", TextStyle(background=True), None, 5.0)
        assert "box=1:boxcolor=black@0.5:boxborderw=15" in fragment

    def test_no_box_by_default(self):
        assert "box=1" not in text_overlay_filter("Hi", None, None, 5.0)

    def test_text_is_escaped(self):
        fragment = text_overlay_filter("Price: $5", None, None, 5.0)
        assert "text='Price\\: $5'" in fragment
