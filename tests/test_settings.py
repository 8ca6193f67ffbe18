"""Tests for SettingsManager scopes, API settings and stored auth keys."""

from pathlib import Path

import pytest
import yaml

from addon_manager_cli.settings import SettingsManager


@pytest.fixture
def settings(tmp_path) -> SettingsManager:
    return SettingsManager(settings_dir=tmp_path / "project", user_dir=tmp_path / "user")


def _write(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(data))


def test_default_api_settings(settings):
    api = settings.get_api_settings()

    assert api.url == "https://api.strem.io/api/"
    assert api.timeout == 10.0


def test_local_overrides_project_overrides_user(settings):
    _write(settings.user_settings_file, {"api": {"url": "https://user/api/", "timeout": 5}})
    _write(settings.project_settings_file, {"api": {"url": "https://project/api/"}})
    _write(settings.local_settings_file, {"api": {"timeout": 30}})

    api = settings.get_api_settings()

    assert api.url == "https://project/api/"
    assert api.timeout == 30


def test_environment_overrides_url(settings, monkeypatch):
    _write(settings.user_settings_file, {"api": {"url": "https://user/api/"}})
    monkeypatch.setenv("ADDON_MANAGER_API_URL", "http://localhost:9000/api/")

    assert settings.get_api_settings().url == "http://localhost:9000/api/"


def test_invalid_api_settings_fall_back_to_defaults(settings):
    _write(settings.user_settings_file, {"api": {"timeout": "soon"}})

    assert settings.get_api_settings().timeout == 10.0


def test_corrupt_settings_file_is_ignored(settings):
    settings.user_settings_file.parent.mkdir(parents=True)
    settings.user_settings_file.write_text("api: [unclosed")

    assert settings.get_merged_settings() == {}


def test_set_api_merges_into_existing_file(settings):
    _write(settings.user_settings_file, {"auth": {"key": "k"}})

    settings.set_api(url="https://new/api/")

    data = yaml.safe_load(settings.user_settings_file.read_text())
    assert data == {"auth": {"key": "k"}, "api": {"url": "https://new/api/"}}


def test_set_and_clear_auth_key(settings):
    settings.set_auth_key("user-key")
    assert settings.get_auth_key() == "user-key"

    settings.set_auth_key("local-key", scope="local")
    assert settings.get_auth_key() == "local-key"

    assert settings.clear_auth_key(scope="local") is True
    assert settings.get_auth_key() == "user-key"
    assert settings.clear_auth_key(scope="local") is False


def test_auth_key_refused_in_project_scope(settings):
    with pytest.raises(ValueError):
        settings.set_auth_key("k", scope="project")


def test_project_auth_key_is_ignored(settings):
    _write(settings.project_settings_file, {"auth": {"key": "committed-key"}})

    assert settings.get_auth_key() is None


def test_unknown_scope(settings):
    with pytest.raises(ValueError):
        settings.set_api(url="x", scope="team")


def test_profile_path_expands_user(settings):
    _write(settings.user_settings_file, {"auth": {"profile_path": "~/stremio/profile.json"}})

    assert settings.get_profile_path() == Path.home() / "stremio" / "profile.json"
