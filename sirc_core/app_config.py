# sirc_core/app_config.py
import configparser
import os
import logging
from typing import Type, Any, Optional

from sirc_core.config_defs import *

logger = logging.getLogger("sirc.config")

CONFIG_ENV_VAR = "SIRC_CONFIG"


class AppConfig:
    """Read-only view over the INI configuration file.

    Missing sections, missing keys and malformed values all resolve to the
    DEFAULT_* constants in config_defs. Nothing is ever written back.
    """

    def __init__(self, config_file_path: Optional[str] = None):
        self.BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        self.CONFIG_FILE_NAME = "sirc_config.ini"
        self.CONFIG_DIR = os.path.join(self.BASE_DIR, "config")
        self.CONFIG_FILE_PATH = (
            config_file_path
            or os.environ.get(CONFIG_ENV_VAR)
            or os.path.join(self.CONFIG_DIR, self.CONFIG_FILE_NAME)
        )
        self._config_parser = configparser.ConfigParser()
        self.config_file_loaded = False
        self._load_config_file()
        self._load_all_settings()

    def _load_config_file(self):
        if not os.path.exists(self.CONFIG_FILE_PATH):
            return
        try:
            self._config_parser.read(self.CONFIG_FILE_PATH, encoding="utf-8")
            self.config_file_loaded = True
        except configparser.Error as e:
            logger.warning(f"Could not parse config file '{self.CONFIG_FILE_PATH}': {e}. Using defaults.")

    def _get_config_value(self, section: str, key: str, fallback: Any, value_type: Type = str) -> Any:
        if self._config_parser.has_section(section) and self._config_parser.has_option(section, key):
            try:
                if value_type == bool:
                    return self._config_parser.getboolean(section, key)
                elif value_type == int:
                    return self._config_parser.getint(section, key)
                value = self._config_parser.get(section, key).strip()
                return value if value else fallback
            except (ValueError, configparser.Error):
                logger.warning(f"Invalid value for [{section}] {key}; using default {fallback!r}.")
                return fallback
        return fallback

    def _load_all_settings(self):
        self.nick = self._get_config_value("Identity", "nick", DEFAULT_NICK, str)
        self.username = self._get_config_value("Identity", "username", DEFAULT_USERNAME, str)
        self.realname = self._get_config_value("Identity", "realname", DEFAULT_REALNAME, str)

        self.default_port = self._get_config_value("Connection", "default_port", DEFAULT_PORT, int)
        self.connection_timeout = self._get_config_value("Connection", "connection_timeout", DEFAULT_CONNECTION_TIMEOUT, int)
        self.quit_message = self._get_config_value("Connection", "quit_message", DEFAULT_QUIT_MESSAGE, str)

        self.channel_log_max_lines = self._get_config_value("UI", "channel_log_max_lines", DEFAULT_CHANNEL_LOG_MAX_LINES, int)
        if self.channel_log_max_lines < 0:
            logger.warning(f"channel_log_max_lines must not be negative; got {self.channel_log_max_lines}. Keeping every line.")
            self.channel_log_max_lines = 0

        self.log_enabled = self._get_config_value("Logging", "log_enabled", DEFAULT_LOG_ENABLED, bool)
        self.log_file = self._get_config_value("Logging", "log_file", DEFAULT_LOG_FILE, str)
        self.log_level_str = self._get_config_value("Logging", "log_level", DEFAULT_LOG_LEVEL, str).split("#")[0].strip().upper()
        self.log_max_bytes = self._get_config_value("Logging", "log_max_bytes", DEFAULT_LOG_MAX_BYTES, int)
        self.log_backup_count = self._get_config_value("Logging", "log_backup_count", DEFAULT_LOG_BACKUP_COUNT, int)
        self.console_log_level_str = self._get_config_value("Logging", "console_log_level", DEFAULT_CONSOLE_LOG_LEVEL, str).split("#")[0].strip().upper()

    @property
    def log_level_int(self) -> int:
        return log_level_from_name(self.log_level_str, logging.INFO)

    @property
    def console_log_level_int(self) -> int:
        return log_level_from_name(self.console_log_level_str, logging.WARNING)

    def default_identity(self) -> Identity:
        return Identity(nick=self.nick, username=self.username, realname=self.realname)
