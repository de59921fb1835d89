"""Tests for settings loading."""

from pathlib import Path

import imageio_ffmpeg
import pytest
import yaml

from hookcut import settings as settings_module
from hookcut.errors import ConfigError
from hookcut.settings import Settings, load_settings


def _write_settings(tmp_path, data):
    path = tmp_path / "settings.yaml"
    path.write_text(yaml.dump(data))
    return path


class TestDefaults:
    """Test built-in settings."""

    def test_defaults(self):
        settings = load_settings(environ={})
        assert settings.engine_timeout == 300.0
        assert settings.poll_interval == 5.0
        assert settings.video_preset == "medium"
        assert settings.ffmpeg_exe

    def test_explicit_settings_are_frozen(self):
        settings = Settings(ffmpeg_exe="/opt/ffmpeg")
        with pytest.raises(AttributeError):
            settings.engine_timeout = 1.0

    def test_system_ffmpeg_preferred(self, monkeypatch):
        monkeypatch.setattr(settings_module.shutil, "which", lambda name: f"/usr/local/bin/{name}")
        assert Settings().ffmpeg_exe == "/usr/local/bin/ffmpeg"

    def test_bundled_ffmpeg_when_none_on_path(self, monkeypatch):
        monkeypatch.setattr(settings_module.shutil, "which", lambda name: None)
        assert Settings().ffmpeg_exe == imageio_ffmpeg.get_ffmpeg_exe()


class TestEnvironmentOverrides:
    """Test HOOKCUT_* environment overrides."""

    def test_override_values(self):
        settings = load_settings(environ={
            "HOOKCUT_FFMPEG": "/opt/ffmpeg/bin/ffmpeg",
            "HOOKCUT_ENGINE_TIMEOUT": "12.5",
            "HOOKCUT_VIDEO_CRF": "28",
            "HOOKCUT_TMP_DIR": "/var/tmp/hookcut",
        })
        assert settings.ffmpeg_exe == "/opt/ffmpeg/bin/ffmpeg"
        assert settings.engine_timeout == 12.5
        assert settings.video_crf == 28
        assert settings.tmp_dir == Path("/var/tmp/hookcut")

    def test_empty_value_ignored(self):
        assert load_settings(environ={"HOOKCUT_ENGINE_TIMEOUT": ""}).engine_timeout == 300.0

    def test_unparseable_value(self):
        with pytest.raises(ConfigError, match="HOOKCUT_POLL_INTERVAL"):
            load_settings(environ={"HOOKCUT_POLL_INTERVAL": "soon"})


class TestSettingsFile:
    """Test settings files."""

    def test_path_vars_and_relative_paths(self, tmp_path):
        path = _write_settings(tmp_path, {
            "paths": {"data": "/srv/hookcut"},
            "tmp_dir": "${data}/tmp",
            "storage_dir": "storage",
            "engine_timeout": 90,
            "public_base_url": "https://cdn.example.com/videos",
        })
        settings = load_settings(path, environ={})
        assert settings.tmp_dir == Path("/srv/hookcut/tmp")
        assert settings.storage_dir == (tmp_path / "storage").resolve()
        assert settings.engine_timeout == 90.0
        assert settings.public_base_url == "https://cdn.example.com/videos"

    def test_kebab_case_keys(self, tmp_path):
        path = _write_settings(tmp_path, {"poll-interval": 1})
        assert load_settings(path, environ={}).poll_interval == 1.0

    def test_environment_beats_file(self, tmp_path):
        path = _write_settings(tmp_path, {"engine_timeout": 90})
        settings = load_settings(path, environ={"HOOKCUT_ENGINE_TIMEOUT": "30"})
        assert settings.engine_timeout == 30.0

    def test_unknown_key(self, tmp_path):
        path = _write_settings(tmp_path, {"gpu": True})
        with pytest.raises(ConfigError, match="Unknown settings key"):
            load_settings(path, environ={})

    def test_unknown_path_var(self, tmp_path):
        path = _write_settings(tmp_path, {"tmp_dir": "${nowhere}/tmp"})
        with pytest.raises(ConfigError, match="Unknown path variable"):
            load_settings(path, environ={})

    def test_invalid_value(self, tmp_path):
        path = _write_settings(tmp_path, {"video_crf": "high"})
        with pytest.raises(ConfigError, match="video_crf"):
            load_settings(path, environ={})

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "missing.yaml", environ={})

    def test_root_must_be_mapping(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(path, environ={})
