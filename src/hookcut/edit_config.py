"""Edit configuration loader: what to do with the hook and demo clips.

Parses a mapping (from a YAML file, a JSON string stored on a job row,
or a plain dict) into an immutable EditConfig. Keys may be written in
snake_case, kebab-case or camelCase.

Edit configuration schema:
  hook_trim:     {start: 2.0, end: 7.0, use_full_clip: false}
  demo_trim:     {use_full_clip: true}
  transition:    {type: crossfade, duration_ms: 500}
  hook_effect:   {type: zoom-in, intensity: medium}
  demo_effect:   {type: none}
  text_style:    {font_size: large, color: "#FFE600", weight: bold}
  text_position: {x_percent: 50, y_percent: 10}
  audio_source:  both

Effect and transition kinds are cosmetic and are not validated here:
unknown values degrade to "no effect" / "hard cut" at compile time.
Everything else is checked and reported as ConfigError.
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import yaml

from .common import parse_color
from .errors import ConfigError


class EffectKind(str, Enum):
    NONE = "none"
    ZOOM_IN = "zoom-in"
    PUNCH_ZOOM = "punch-zoom"
    VERTICAL_PAN = "vertical-pan"
    CENTER_CROP = "center-crop"


class TransitionKind(str, Enum):
    CUT = "cut"
    CROSSFADE = "crossfade"
    PUSH_UP = "push-up"
    ZOOM_CUT = "zoom-cut"


class AudioSource(str, Enum):
    HOOK = "hook"
    DEMO = "demo"
    BOTH = "both"
    NONE = "none"


INTENSITY_MULTIPLIERS = {"subtle": 0.5, "medium": 1.0, "strong": 1.5}

FONT_SIZES = {"small": 48, "medium": 72, "large": 96}

VALID_WEIGHTS = {"normal", "bold"}

DEFAULT_AUDIO_SOURCE = AudioSource.BOTH

TOP_LEVEL_KEYS = {
    "hook_trim", "demo_trim", "transition", "hook_effect", "demo_effect",
    "text_style", "text_position", "audio_source",
}

# Alternative spellings seen in client payloads.
KEY_ALIASES = {
    "start_time": "start",
    "end_time": "end",
    "type": "kind",
    "full_clip": "use_full_clip",
    "size": "font_size",
    "font_weight": "weight",
    "x": "x_percent",
    "y": "y_percent",
}


# ── Data model ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Trim:
    """Trim window on one source clip, in seconds."""

    start: float = 0.0
    end: float | None = None
    use_full_clip: bool = False

    @property
    def active(self) -> bool:
        return not self.use_full_clip and self.end is not None


@dataclass(frozen=True)
class Effect:
    kind: str = EffectKind.NONE.value
    intensity: str = "medium"

    @property
    def multiplier(self) -> float:
        return INTENSITY_MULTIPLIERS.get(self.intensity, 1.0)


@dataclass(frozen=True)
class Transition:
    kind: str = TransitionKind.CUT.value
    duration_ms: float = 0.0

    @property
    def duration(self) -> float:
        return self.duration_ms / 1000.0


@dataclass(frozen=True)
class TextStyle:
    font_size: str = "medium"
    color: str = "white"
    weight: str = "normal"
    background: bool = False

    @property
    def font_px(self) -> int:
        return FONT_SIZES.get(self.font_size, FONT_SIZES["medium"])

    @property
    def bold(self) -> bool:
        return self.weight == "bold"


@dataclass(frozen=True)
class TextPosition:
    """Centre of the text as a percentage of the frame, origin top-left."""

    x_percent: float = 50.0
    y_percent: float = 50.0


@dataclass(frozen=True)
class EditConfig:
    hook_trim: Trim | None = None
    demo_trim: Trim | None = None
    transition: Transition | None = None
    hook_effect: Effect | None = None
    demo_effect: Effect | None = None
    text_style: TextStyle | None = None
    text_position: TextPosition | None = None
    audio_source: AudioSource = DEFAULT_AUDIO_SOURCE


# ── Loading ────────────────────────────────────────────────────────


def load_edit_config(path: str | Path) -> EditConfig:
    """Load and validate an edit configuration from a YAML or JSON file.

    Raises:
        ConfigError: Malformed configuration.
        FileNotFoundError: Missing file.
    """
    with open(path) as f:
        raw = yaml.safe_load(f)
    return parse_edit_config(raw)


def parse_edit_config(raw) -> EditConfig:
    """Validate and normalize an edit configuration.

    Args:
        raw: A mapping, a YAML/JSON string, or None (all defaults).

    Returns:
        Immutable EditConfig.

    Raises:
        ConfigError: Root is not a mapping, unknown key, or invalid value.
    """
    if raw is None:
        return EditConfig()
    if isinstance(raw, str):
        if not raw.strip():
            return EditConfig()
        try:
            raw = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Edit config is not valid YAML/JSON: {exc}") from exc
        if raw is None:
            return EditConfig()
    if not isinstance(raw, dict):
        raise ConfigError("Edit config root must be a mapping")

    data = _normalize_keys(raw, "edit config")
    unknown = set(data) - TOP_LEVEL_KEYS
    if unknown:
        raise ConfigError(f"Unknown edit config key(s): {sorted(unknown)}")

    return EditConfig(
        hook_trim=_parse_trim(data.get("hook_trim"), "hook_trim"),
        demo_trim=_parse_trim(data.get("demo_trim"), "demo_trim"),
        transition=_parse_transition(data.get("transition")),
        hook_effect=_parse_effect(data.get("hook_effect"), "hook_effect"),
        demo_effect=_parse_effect(data.get("demo_effect"), "demo_effect"),
        text_style=_parse_text_style(data.get("text_style")),
        text_position=_parse_text_position(data.get("text_position")),
        audio_source=_parse_audio_source(data.get("audio_source")),
    )


def _snake(key: str) -> str:
    key = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", key.strip())
    return key.lower().replace("-", "_")


def _normalize_keys(obj: dict, where: str) -> dict:
    out = {}
    for key, value in obj.items():
        if not isinstance(key, str):
            raise ConfigError(f"{where}: keys must be strings, got {key!r}")
        name = _snake(key)
        out[KEY_ALIASES.get(name, name)] = value
    return out


def _section(value, name: str) -> dict | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ConfigError(f"{name} must be a mapping, got {value!r}")
    return _normalize_keys(value, name)


def _number(value, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (ValueError, OverflowError) as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise ConfigError(f"{name} must be a finite number, got {value!r}")
    return number


def _parse_trim(value, name: str) -> Trim | None:
    section = _section(value, name)
    if section is None:
        return None

    use_full = section.get("use_full_clip", False)
    if not isinstance(use_full, bool):
        raise ConfigError(f"{name}.use_full_clip must be a boolean, got {use_full!r}")

    start = _number(section.get("start", 0.0), f"{name}.start")
    if start < 0:
        raise ConfigError(f"{name}.start must be >= 0, got {start}")

    end = section.get("end")
    if end is not None:
        end = _number(end, f"{name}.end")
    elif not use_full:
        raise ConfigError(f"{name}.end is required unless use_full_clip is true")

    return Trim(start=start, end=end, use_full_clip=use_full)


def _parse_effect(value, name: str) -> Effect | None:
    if isinstance(value, str):
        return Effect(kind=value.strip().lower())
    section = _section(value, name)
    if section is None:
        return None
    kind = str(section.get("kind") or EffectKind.NONE.value).strip().lower()
    intensity = str(section.get("intensity") or "medium").strip().lower()
    return Effect(kind=kind, intensity=intensity)


def _parse_transition(value) -> Transition | None:
    if isinstance(value, str):
        return Transition(kind=value.strip().lower())
    section = _section(value, "transition")
    if section is None:
        return None
    kind = str(section.get("kind") or TransitionKind.CUT.value).strip().lower()
    duration_ms = _number(section.get("duration_ms", 0), "transition.duration_ms")
    return Transition(kind=kind, duration_ms=duration_ms)


def _parse_text_style(value) -> TextStyle | None:
    section = _section(value, "text_style")
    if section is None:
        return None

    font_size = str(section.get("font_size") or "medium").strip().lower()
    if font_size not in FONT_SIZES:
        raise ConfigError(
            f"text_style: invalid font_size '{font_size}'. Valid: {sorted(FONT_SIZES)}"
        )

    weight = str(section.get("weight") or "normal").strip().lower()
    if weight not in VALID_WEIGHTS:
        raise ConfigError(
            f"text_style: invalid weight '{weight}'. Valid: {sorted(VALID_WEIGHTS)}"
        )

    color = section.get("color") or "white"
    try:
        parse_color(color)
    except ValueError as exc:
        raise ConfigError(f"text_style: {exc}") from exc

    background = section.get("background", False)
    if not isinstance(background, bool):
        raise ConfigError(f"text_style.background must be a boolean, got {background!r}")

    return TextStyle(font_size=font_size, color=color, weight=weight, background=background)


def _parse_text_position(value) -> TextPosition | None:
    section = _section(value, "text_position")
    if section is None:
        return None
    coords = {}
    for axis in ("x_percent", "y_percent"):
        pct = _number(section.get(axis, 50.0), f"text_position.{axis}")
        if not 0 <= pct <= 100:
            raise ConfigError(f"text_position.{axis} must be within 0-100, got {pct}")
        coords[axis] = pct
    return TextPosition(**coords)


def _parse_audio_source(value) -> AudioSource:
    if value is None:
        return DEFAULT_AUDIO_SOURCE
    try:
        return AudioSource(str(value).strip().lower())
    except ValueError as exc:
        raise ConfigError(
            f"Invalid audio_source '{value}'. Valid: {sorted(a.value for a in AudioSource)}"
        ) from exc
