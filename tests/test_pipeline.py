"""Tests for end-to-end job processing."""

import json
import shutil
from dataclasses import replace

import imageio_ffmpeg
import pytest

from hookcut import pipeline
from hookcut.common import find_font
from hookcut.engine import EngineResult, available_filters
from hookcut.errors import EngineStartError
from hookcut.jobs import JobStore
from hookcut.pipeline import job_paths, process_job
from hookcut.storage import LocalBlobStore


def _text_capable_ffmpeg():
    exe = shutil.which("ffmpeg")
    if exe is None:
        return None
    try:
        return exe if "drawtext" in available_filters(exe) else None
    except EngineStartError:
        return None


TEXT_FFMPEG = _text_capable_ffmpeg()
BUNDLED_HAS_DRAWTEXT = "drawtext" in available_filters(imageio_ffmpeg.get_ffmpeg_exe())


@pytest.fixture
def store(settings):
    return JobStore(settings.db_path)


@pytest.fixture
def blobs(settings):
    return LocalBlobStore(settings.storage_dir, settings.public_base_url)


def _leftovers(job, settings):
    return [p for p in job_paths(job, settings.tmp_dir) if p.exists()]


class TestProcessJob:
    """Integration tests for processing one job."""

    def test_renders_and_publishes(self, hook_video, demo_video, settings, store, blobs):
        config = {
            "hook_trim": {"start": 0.5, "end": 2.5},
            "transition": {"type": "push-up", "duration_ms": 300},
            "audio_source": "hook",
        }
        job = store.enqueue("u1", str(hook_video), demo_video.as_uri(), edit_config=config)

        result = process_job(job, settings, store, blobs)

        assert result.success, result.error
        assert result.output_url == f"https://cdn.example.com/videos/u1/output/{job.id}.mp4"
        assert (settings.storage_dir / "u1" / "output" / f"{job.id}.mp4").exists()
        videos = store.list_videos("u1")
        assert [v["filename"] for v in videos] == [f"hookcut-{job.id[:8]}.mp4"]
        assert videos[0]["storage_path"] == f"u1/output/{job.id}.mp4"
        assert _leftovers(job, settings) == []

    def test_invalid_trim_fails_without_engine(self, hook_video, demo_video, settings, store, blobs, monkeypatch):
        def _never(*_args):
            raise AssertionError("engine must not run")

        monkeypatch.setattr(pipeline, "invoke_engine", _never)
        config = json.dumps({"hook_trim": {"start": 3, "end": 1}})
        job = store.enqueue("u1", str(hook_video), str(demo_video), edit_config=config)

        result = process_job(job, settings, store, blobs)

        assert result.success is False
        assert "hook window" in result.error
        assert _leftovers(job, settings) == []

    def test_bad_config(self, hook_video, demo_video, settings, store, blobs):
        job = store.enqueue("u1", str(hook_video), str(demo_video), edit_config='{"audio_source": "music"}')
        result = process_job(job, settings, store, blobs)
        assert result.success is False
        assert "audio_source" in result.error

    def test_download_failure(self, hook_video, tmp_path, settings, store, blobs):
        job = store.enqueue("u1", str(hook_video), str(tmp_path / "gone.mp4"))
        result = process_job(job, settings, store, blobs)
        assert result.success is False
        assert "Failed to download" in result.error
        assert _leftovers(job, settings) == []

    def test_engine_failure_message_kept(self, hook_video, demo_video, settings, store, blobs, monkeypatch):
        monkeypatch.setattr(
            pipeline, "invoke_engine",
            lambda program, settings: EngineResult(success=False, error="Invalid argument"),
        )
        job = store.enqueue("u1", str(hook_video), str(demo_video))
        result = process_job(job, settings, store, blobs)
        assert result.error == "Invalid argument"
        assert store.list_videos("u1") == []

    def test_missing_output(self, hook_video, demo_video, settings, store, blobs, monkeypatch):
        monkeypatch.setattr(pipeline, "invoke_engine", lambda program, settings: EngineResult(success=True))
        job = store.enqueue("u1", str(hook_video), str(demo_video))
        result = process_job(job, settings, store, blobs)
        assert result.success is False
        assert result.error == "Output file was not created"

    def test_user_id_cannot_escape_storage(self, hook_video, demo_video, settings, store, blobs, monkeypatch):
        def _fake_render(program, settings):
            with open(program.output_path, "wb") as f:
                f.write(b"video")
            return EngineResult(success=True)

        monkeypatch.setattr(pipeline, "invoke_engine", _fake_render)
        job = store.enqueue("../../outside", str(hook_video), str(demo_video))

        result = process_job(job, settings, store, blobs)

        assert result.success is False
        assert "escapes the storage root" in result.error
        assert store.list_videos("../../outside") == []
        assert _leftovers(job, settings) == []


class TestHookText:
    """Jobs carrying overlay text."""

    @pytest.mark.skipif(TEXT_FFMPEG is None, reason="no ffmpeg with drawtext on PATH")
    def test_renders_hook_text(self, hook_video, demo_video, settings, store, blobs):
        font, bold = find_font(), find_font(bold=True)
        text_settings = replace(
            settings,
            ffmpeg_exe=TEXT_FFMPEG,
            font_regular=str(font) if font else None,
            font_bold=str(bold) if bold else None,
        )
        config = {
            "transition": {"type": "crossfade", "duration_ms": 400},
            "text_style": {"font_size": "large", "color": "#FFE600", "weight": "bold", "background": True},
            "text_position": {"x_percent": 50, "y_percent": 10},
        }
        job = store.enqueue(
            "u1", str(hook_video), str(demo_video),
            hook_text="Wait for it: [part 1] don't blink", edit_config=config,
        )

        result = process_job(job, text_settings, store, blobs)

        assert result.success, result.error
        assert (settings.storage_dir / "u1" / "output" / f"{job.id}.mp4").exists()

    @pytest.mark.skipif(BUNDLED_HAS_DRAWTEXT, reason="bundled ffmpeg has drawtext")
    def test_engine_without_drawtext_fails_clearly(self, hook_video, demo_video, settings, store, blobs):
        job = store.enqueue("u1", str(hook_video), str(demo_video), hook_text="Hi")

        result = process_job(job, settings, store, blobs)

        assert result.success is False
        assert "no drawtext filter" in result.error
        assert _leftovers(job, settings) == []
