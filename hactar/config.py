# SPDX-License-Identifier: MIT
"""Configuration storage for hactar.

Reads and writes ~/.hactar/config.json (or $HACTAR_HOME/config.json).
Missing files yield defaults; missing fields are merged from defaults.
"""
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from hactar.errors import ConfigError
from hactar.models import ConfigFile, UserConfig
from hactar.paths import PathResolver


class ConfigManager:
    """Loads, updates and saves the hactar configuration file."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        self._config_path = config_path

    @property
    def config_path(self) -> Path:
        return self._config_path or PathResolver.config_path()

    def load_config(self) -> ConfigFile:
        """Load config.json, returning defaults when it does not exist.

        Raises:
            ConfigError: The file exists but is not valid JSON.
        """
        path = self.config_path
        if not path.exists():
            return ConfigFile()
        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read configuration file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid configuration file {path}: expected an object")
        return ConfigFile.from_dict(data)

    def save_config(self, config: ConfigFile) -> None:
        """Write the configuration, stamping lastUpdated."""
        config.last_updated = datetime.now(timezone.utc).isoformat()
        path = self.config_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(config.to_dict(), indent=2) + "\n")
        except OSError as e:
            raise ConfigError(f"Cannot write configuration file {path}: {e}") from e

    def update_config(
        self,
        server_url: Optional[str] = None,
        token: Optional[str] = None,
    ) -> ConfigFile:
        """Update the stored credentials, keeping fields that are not given."""
        config = self.load_config()
        if server_url is not None:
            config.user.server_url = server_url.rstrip("/")
        if token is not None:
            config.user.token = token
        self.save_config(config)
        return config

    def get_credentials(self) -> Optional[UserConfig]:
        """Return the credentials, or None unless both token and server URL are set."""
        try:
            user = self.load_config().user
        except ConfigError:
            return None
        if not user.token or not user.server_url:
            return None
        return user

    def is_configured(self) -> bool:
        return self.get_credentials() is not None
