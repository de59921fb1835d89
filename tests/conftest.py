"""Shared test fixtures for hookcut tests."""

import subprocess

import pytest
import imageio_ffmpeg

from hookcut.compiler import CompileOptions
from hookcut.settings import Settings

_FFMPEG = imageio_ffmpeg.get_ffmpeg_exe()


@pytest.fixture
def hook_video(tmp_path):
    """Create a 3-second test video (320x240, 30fps) with a stereo tone."""
    out = tmp_path / "hook.mp4"
    subprocess.run(
        [
            _FFMPEG, "-y",
            "-f", "lavfi", "-i", "color=c=red:s=320x240:d=3:r=30",
            "-f", "lavfi", "-i", "sine=frequency=440:sample_rate=44100:duration=3",
            "-shortest",
            "-c:v", "libx264", "-crf", "28", "-pix_fmt", "yuv420p",
            "-c:a", "aac", "-ac", "2", "-b:a", "64k",
            str(out),
        ],
        check=True,
        capture_output=True,
    )
    return out


@pytest.fixture
def demo_video(tmp_path):
    """Create a 2-second test video (240x320, 25fps) with no audio stream."""
    out = tmp_path / "demo.mp4"
    subprocess.run(
        [
            _FFMPEG, "-y",
            "-f", "lavfi", "-i", "color=c=blue:s=240x320:d=2:r=25",
            "-an",
            "-c:v", "libx264", "-crf", "28", "-pix_fmt", "yuv420p",
            str(out),
        ],
        check=True,
        capture_output=True,
    )
    return out


@pytest.fixture
def settings(tmp_path):
    """Fast-encoding settings rooted in the test's temp directory."""
    return Settings(
        ffmpeg_exe=_FFMPEG,
        engine_timeout=120.0,
        tmp_dir=tmp_path / "work",
        poll_interval=0.01,
        db_path=tmp_path / "jobs.sqlite3",
        storage_dir=tmp_path / "storage",
        public_base_url="https://cdn.example.com/videos",
        video_preset="ultrafast",
        video_crf=35,
        font_regular=None,
        font_bold=None,
    )


@pytest.fixture
def options():
    """Compile options with fixed fonts so filter text is machine independent."""
    return CompileOptions(
        font_regular="/fonts/Regular.ttf",
        font_bold="/fonts/Bold.ttf",
    )
