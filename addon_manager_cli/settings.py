"""Settings manager for addon-manager settings.yaml files.

Manages three-scope settings system:
- User global (~/.addon-manager/settings.yaml)
- Project (.addon-manager/settings.yaml)
- Local (.addon-manager/settings.local.yaml)
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import ApiSettings

logger = logging.getLogger(__name__)

API_URL_ENV = "ADDON_MANAGER_API_URL"

SCOPES = ("user", "project", "local")


class SettingsManager:
    """Manages settings across user/project/local scopes."""

    def __init__(self, settings_dir: Path | None = None, user_dir: Path | None = None):
        """Initialize settings manager with standard paths.

        Args:
            settings_dir: Base directory for project/local settings (for testing).
                          If None, uses .addon-manager in current directory.
            user_dir: Base directory for user settings (for testing).
                      If None, uses ~/.addon-manager.
        """
        if settings_dir is None:
            settings_dir = Path(".addon-manager")
        if user_dir is None:
            user_dir = Path.home() / ".addon-manager"

        self.user_settings_file = user_dir / "settings.yaml"
        self.project_settings_file = settings_dir / "settings.yaml"
        self.local_settings_file = settings_dir / "settings.local.yaml"

    def _scope_file(self, scope: str) -> Path:
        file_map = {
            "user": self.user_settings_file,
            "project": self.project_settings_file,
            "local": self.local_settings_file,
        }
        if scope not in file_map:
            raise ValueError(f"Unknown settings scope '{scope}' (expected one of {', '.join(SCOPES)})")
        return file_map[scope]

    def get_api_settings(self) -> ApiSettings:
        """Get remote API settings.

        Resolution order for the URL:
        1. ADDON_MANAGER_API_URL environment variable
        2. Merged settings (local > project > user)
        3. Built-in default

        Returns:
            ApiSettings with url and timeout
        """
        api = self.get_merged_settings().get("api") or {}
        values: dict[str, Any] = {}
        if api.get("url"):
            values["url"] = api["url"]
        if api.get("timeout") is not None:
            values["timeout"] = api["timeout"]

        env_url = os.environ.get(API_URL_ENV)
        if env_url:
            values["url"] = env_url

        try:
            return ApiSettings(**values)
        except ValidationError as e:
            logger.warning(f"Invalid api settings, using defaults: {e}")
            return ApiSettings()

    def set_api(self, url: str | None = None, timeout: float | None = None, scope: str = "user") -> None:
        """Persist API url and/or timeout.

        Args:
            url: Base URL of the collection API
            timeout: Request timeout in seconds
            scope: "user", "project", or "local"
        """
        updates: dict[str, Any] = {}
        if url is not None:
            updates["url"] = url
        if timeout is not None:
            updates["timeout"] = timeout
        if not updates:
            return

        self._update_settings(self._scope_file(scope), {"api": updates})
        logger.info(f"Updated {scope} api settings: {', '.join(updates)}")

    def get_auth_key(self) -> str | None:
        """Get stored auth key (local overrides user). Project scope is ignored."""
        for path in (self.local_settings_file, self.user_settings_file):
            settings = self._read_settings(path)
            if settings and isinstance(settings.get("auth"), dict) and settings["auth"].get("key"):
                return settings["auth"]["key"]
        return None

    def set_auth_key(self, key: str, scope: str = "user") -> None:
        """Store auth key in user or local settings.

        Args:
            key: Auth key for the collection API
            scope: "user" or "local" (project settings are typically committed)
        """
        if scope == "project":
            raise ValueError("Auth keys cannot be stored in project settings")
        self._update_settings(self._scope_file(scope), {"auth": {"key": key}})
        logger.info(f"Stored auth key in {scope} settings")

    def clear_auth_key(self, scope: str = "user") -> bool:
        """Remove stored auth key.

        Returns:
            True if removed, False if not found
        """
        target_file = self._scope_file(scope)
        settings = self._read_settings(target_file)
        if not settings or not isinstance(settings.get("auth"), dict) or "key" not in settings["auth"]:
            return False

        del settings["auth"]["key"]
        if not settings["auth"]:
            del settings["auth"]

        self._write_settings(target_file, settings)
        logger.info(f"Cleared auth key from {scope} settings")
        return True

    def get_profile_path(self) -> Path | None:
        """Get path to a client profile.json holding an auth key, if configured."""
        auth = self.get_merged_settings().get("auth") or {}
        profile_path = auth.get("profile_path")
        return Path(profile_path).expanduser() if profile_path else None

    def get_merged_settings(self) -> dict[str, Any]:
        """Get merged settings from all scopes.

        Merge order (later overrides earlier):
        1. User settings
        2. Project settings
        3. Local settings

        Returns:
            Merged settings dictionary
        """
        merged: dict[str, Any] = {}

        for path in (self.user_settings_file, self.project_settings_file, self.local_settings_file):
            settings = self._read_settings(path)
            if settings:
                merged = self._deep_merge(merged, settings)

        return merged

    def _read_settings(self, path: Path) -> dict[str, Any] | None:
        """Read settings from YAML file.

        Args:
            path: Path to settings file

        Returns:
            Settings dict or None if file doesn't exist or is unreadable
        """
        if not path.exists():
            return None

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
                return data if isinstance(data, dict) else {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to read settings from {path}: {e}")
            return None

    def _write_settings(self, path: Path, settings: dict[str, Any]) -> None:
        """Write settings to YAML file.

        Args:
            path: Path to settings file
            settings: Settings dictionary
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(path, "w") as f:
                yaml.dump(settings, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            logger.error(f"Failed to write settings to {path}: {e}")
            raise

    def _update_settings(self, path: Path, updates: dict[str, Any]) -> None:
        """Update settings file with new values (deep merge)."""
        existing = self._read_settings(path) or {}
        merged = self._deep_merge(existing, updates)
        self._write_settings(path, merged)

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries.

        Args:
            base: Base dictionary
            overlay: Overlay dictionary (takes precedence)

        Returns:
            Merged dictionary
        """
        result = base.copy()

        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
