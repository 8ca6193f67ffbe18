"""Auth key resolution for the collection API.

Resolution order:
1. ADDON_MANAGER_AUTH_KEY environment variable
2. auth.key in settings (local > user)
3. auth.key inside a client profile.json ({"auth": {"key": ...}})
"""

import json
import logging
import os
from pathlib import Path

from .settings import SettingsManager

logger = logging.getLogger(__name__)

AUTH_KEY_ENV = "ADDON_MANAGER_AUTH_KEY"


def read_profile_auth_key(profile_path: Path) -> str | None:
    """Read the auth key from a client profile file.

    Unreadable or malformed files are logged and treated as "no key".
    """
    try:
        profile = json.loads(profile_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not read auth key from profile {profile_path}: {e}")
        return None

    if not isinstance(profile, dict):
        return None
    auth = profile.get("auth")
    if isinstance(auth, dict) and isinstance(auth.get("key"), str):
        return auth["key"]
    return None


class AuthKeyProvider:
    """Supplies the auth key sent with every collection request."""

    def __init__(self, settings: SettingsManager | None = None):
        self.settings = settings or SettingsManager()

    def get_auth_token(self) -> str | None:
        """Return the first non-blank key found, or None."""
        env_key = os.environ.get(AUTH_KEY_ENV, "").strip()
        if env_key:
            logger.debug(f"Using auth key from ${AUTH_KEY_ENV}")
            return env_key

        stored = (self.settings.get_auth_key() or "").strip()
        if stored:
            logger.debug("Using auth key from settings")
            return stored

        profile_path = self.settings.get_profile_path()
        if profile_path:
            profile_key = (read_profile_auth_key(profile_path) or "").strip()
            if profile_key:
                logger.debug(f"Using auth key from profile {profile_path}")
                return profile_key

        return None

    def describe_source(self) -> str | None:
        """Name where the key would come from, for `auth status`."""
        if os.environ.get(AUTH_KEY_ENV, "").strip():
            return f"environment (${AUTH_KEY_ENV})"
        if (self.settings.get_auth_key() or "").strip():
            return "settings"
        profile_path = self.settings.get_profile_path()
        if profile_path and (read_profile_auth_key(profile_path) or "").strip():
            return f"profile {profile_path}"
        return None
