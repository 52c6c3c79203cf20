"""Configuration loading utilities."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from .model import BotConfig
from .repository import ConfigRepository

DEFAULT_CONFIG_FILE = "rustbot.conf"

# Environment variables overriding single keys of the configuration file
ENV_OVERRIDES = {
    "RUSTBOT_SERVER": "server",
    "RUSTBOT_PORT": "port",
    "RUSTBOT_NICKNAME": "nickname",
    "RUSTBOT_PASSWORD": "password",
    "RUSTBOT_CHANNELS": "channels",
    "RUSTBOT_COMMAND_PREFIX": "command_prefix",
}


class ConfigLoader:
    """Loads the bot configuration from file and environment."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self.environ = os.environ if environ is None else environ
        self.repository = ConfigRepository(self.config_file())

    def config_file(self) -> str:
        return self.environ.get("RUSTBOT_CONF_FILE", DEFAULT_CONFIG_FILE)

    def load_raw(self) -> dict[str, Any]:
        """Merge the configuration file with environment overrides."""
        raw = dict(self.repository.load_raw())
        for env_name, key in ENV_OVERRIDES.items():
            value = self.environ.get(env_name)
            if value:
                raw[key] = value
        return raw

    def get_configuration(self) -> BotConfig:
        """Load and validate the configuration.

        Raises:
            SystemExit: If no configuration was found or it is invalid.
        """
        raw = self.load_raw()
        if not raw:
            logging.error(f"📁 No configuration found (file={self.config_file()})")
            sys.exit(1)
        try:
            config = BotConfig.from_dict(raw)
        except ValidationError as e:
            logging.error(f"⚠️ Invalid configuration: {e}")
            sys.exit(1)
        logging.info(
            f"✅ Configuration loaded server={config.server}:{config.port} "
            f"nick={config.nickname} channels={len(config.channels)}"
        )
        return config


def get_configuration() -> BotConfig:
    return ConfigLoader().get_configuration()
