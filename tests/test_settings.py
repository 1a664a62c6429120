"""Tests for environment-driven configuration and logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import pytest_mock

from media_core.config.settings import MediaSettings, get_settings
from media_core.monitoring.logging import LOG_FORMAT, configure_logging
from media_core.transport.admission import AdmissionLimits


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> None:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults_without_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    for name in ("MEDIA_INBAND_MAX_BYTES", "MEDIA_UPLOAD_MAX_BYTES", "MEDIA_MAX_BITMAP_SIZE", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.default_limits == AdmissionLimits()
    assert settings.max_bitmap_size == 1024
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MEDIA_INBAND_MAX_BYTES", "4096")
    monkeypatch.setenv("MEDIA_UPLOAD_MAX_BYTES", "65536")
    monkeypatch.setenv("MEDIA_SHRINK_FACTOR", "0.5")

    settings = get_settings()

    assert settings.default_limits == AdmissionLimits(inband_max=4096, upload_max=65536)
    assert settings.shrink_factor == 0.5
    assert get_settings() is settings


def test_env_file_is_loaded(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    # Register the variable so monkeypatch removes what the loader writes.
    monkeypatch.setenv("MEDIA_AVATAR_SIZE", "0")
    monkeypatch.delenv("MEDIA_AVATAR_SIZE")
    (tmp_path / ".env").write_text("# avatars\nMEDIA_AVATAR_SIZE = 256\nbroken line\n", encoding="utf-8")

    assert get_settings().avatar_size == 256


def test_configure_logging_uses_settings_level(mocker: pytest_mock.MockerFixture) -> None:
    basic_config = mocker.patch("media_core.monitoring.logging.logging.basicConfig")

    configure_logging(MediaSettings(log_level="debug"))

    basic_config.assert_called_once_with(level=logging.DEBUG, format=LOG_FORMAT)
