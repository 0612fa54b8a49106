from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from companion_mcp.config import CompanionSettings, get_settings, resolve_home


def test_defaults_point_at_home_directory(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("COMPANION_HOME", raising=False)
    monkeypatch.delenv("COMPANION_LOG_LEVEL", raising=False)

    settings = CompanionSettings(_env_file=None)

    assert settings.companion_home == Path("~/.companion")
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("COMPANION_HOME", str(tmp_path))
    monkeypatch.setenv("COMPANION_LOG_LEVEL", " debug ")

    settings = CompanionSettings(_env_file=None)

    assert settings.companion_home == tmp_path
    assert settings.log_level == "DEBUG"


def test_rejects_unknown_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COMPANION_LOG_LEVEL", "loud")

    with pytest.raises(ValidationError):
        CompanionSettings(_env_file=None)


def test_get_settings_resolves_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("COMPANION_HOME", str(tmp_path / "cfg"))
    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.companion_home == (tmp_path / "cfg").resolve()
        assert resolve_home() == settings.companion_home
    finally:
        get_settings.cache_clear()


def test_resolve_home_prefers_explicit_root(tmp_path: Path) -> None:
    assert resolve_home(tmp_path) == tmp_path
    assert resolve_home(str(tmp_path)) == tmp_path
