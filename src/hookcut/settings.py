"""Runtime settings for the compiler, engine invoker and job worker.

Settings are an explicit struct handed to every component at
construction time. They come from built-in defaults, an optional YAML
file, and HOOKCUT_* environment variables, in that order of precedence
(environment wins).

Settings file schema:
  paths:
    data: "/srv/hookcut"
  engine_timeout: 300
  tmp_dir: "${data}/tmp"
  storage_dir: "${data}/storage"
  public_base_url: "https://cdn.example.com/videos"
"""

import os
import shutil
from dataclasses import dataclass, field, fields
from pathlib import Path

import imageio_ffmpeg
import yaml

from .common import find_font, resolve_path_vars
from .errors import ConfigError


def _default_ffmpeg() -> str:
    # Prefer the system build: the imageio-ffmpeg binary lacks drawtext.
    return shutil.which("ffmpeg") or imageio_ffmpeg.get_ffmpeg_exe()


def _default_font() -> str | None:
    font = find_font(bold=False)
    return str(font) if font else None


def _default_bold_font() -> str | None:
    font = find_font(bold=True)
    return str(font) if font else None


@dataclass(frozen=True)
class Settings:
    """All tunables for one hookcut process."""

    ffmpeg_exe: str = field(default_factory=_default_ffmpeg)
    engine_timeout: float = 300.0
    tmp_dir: Path = Path("/tmp/hookcut")
    poll_interval: float = 5.0
    db_path: Path = Path("hookcut.sqlite3")
    storage_dir: Path = Path("storage")
    public_base_url: str | None = None
    video_preset: str = "medium"
    video_crf: int = 23
    audio_bitrate: str = "128k"
    font_regular: str | None = field(default_factory=_default_font)
    font_bold: str | None = field(default_factory=_default_bold_font)
    download_timeout: float = 60.0


# Field name -> (environment variable, converter).
ENV_OVERRIDES = {
    "ffmpeg_exe": ("HOOKCUT_FFMPEG", str),
    "engine_timeout": ("HOOKCUT_ENGINE_TIMEOUT", float),
    "tmp_dir": ("HOOKCUT_TMP_DIR", Path),
    "poll_interval": ("HOOKCUT_POLL_INTERVAL", float),
    "db_path": ("HOOKCUT_DB_PATH", Path),
    "storage_dir": ("HOOKCUT_STORAGE_DIR", Path),
    "public_base_url": ("HOOKCUT_PUBLIC_BASE_URL", str),
    "video_preset": ("HOOKCUT_VIDEO_PRESET", str),
    "video_crf": ("HOOKCUT_VIDEO_CRF", int),
    "audio_bitrate": ("HOOKCUT_AUDIO_BITRATE", str),
    "font_regular": ("HOOKCUT_FONT", str),
    "font_bold": ("HOOKCUT_FONT_BOLD", str),
    "download_timeout": ("HOOKCUT_DOWNLOAD_TIMEOUT", float),
}

PATH_FIELDS = {"tmp_dir", "db_path", "storage_dir"}


def load_settings(path: str | Path | None = None, environ=None) -> Settings:
    """Build Settings from defaults, an optional YAML file and the environment.

    Args:
        path: Optional YAML settings file. Relative paths inside it are
            resolved against the file's directory.
        environ: Mapping to read overrides from (defaults to os.environ).

    Raises:
        ConfigError: Unknown key, wrong type, or unparseable override.
        FileNotFoundError: Settings file does not exist.
    """
    environ = os.environ if environ is None else environ
    values = {}

    if path is not None:
        values.update(_read_settings_file(Path(path)))

    for name, (env_key, convert) in ENV_OVERRIDES.items():
        raw = environ.get(env_key)
        if raw is None or raw == "":
            continue
        try:
            values[name] = convert(raw)
        except ValueError as exc:
            raise ConfigError(f"{env_key}: cannot parse {raw!r}") from exc

    return Settings(**values)


def _read_settings_file(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")
    with open(path) as f:
        raw = yaml.safe_load(f)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("Settings file root must be a mapping")

    paths = raw.pop("paths", {}) or {}
    known = {f.name: f for f in fields(Settings)}
    values = {}
    for key, value in raw.items():
        name = str(key).strip().lower().replace("-", "_")
        if name not in known:
            raise ConfigError(f"Unknown settings key: {key}")
        if isinstance(value, str):
            try:
                value = resolve_path_vars(value, paths)
            except ValueError as exc:
                raise ConfigError(f"Settings key {key}: {exc}") from exc
        if name in PATH_FIELDS and value is not None:
            value = Path(value)
            if not value.is_absolute():
                value = (path.parent / value).resolve(strict=False)
        elif value is not None:
            _, convert = ENV_OVERRIDES[name]
            try:
                value = convert(value)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"Settings key {key}: invalid value {value!r}") from exc
        values[name] = value
    return values
