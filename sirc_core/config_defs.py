import logging
from dataclasses import dataclass
from typing import Optional

# --- Default Fallback Constants ---
# These are used as fallbacks if values are not found in the INI file.

# Identity
DEFAULT_NICK = "sircUser"
DEFAULT_USERNAME: Optional[str] = None  # falls back to the nick
DEFAULT_REALNAME: Optional[str] = None  # falls back to the nick

# Connection
DEFAULT_PORT = 6667
DEFAULT_CONNECTION_TIMEOUT = 30
DEFAULT_QUIT_MESSAGE = "sIRC exiting"
DEFAULT_TERMINATION_MESSAGE = "Program terminated"

# UI
DEFAULT_CHANNEL_LOG_MAX_LINES = 0  # 0 keeps every line

# Logging
DEFAULT_LOG_ENABLED = False
DEFAULT_LOG_FILE = "sirc.log"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_MAX_BYTES = 1024 * 1024 * 5
DEFAULT_LOG_BACKUP_COUNT = 3
DEFAULT_CONSOLE_LOG_LEVEL = "WARNING"

# --- Protocol Constants ---
CHANNEL_PREFIX = "#"
CHANNEL_PREFIXES = ("#", "&", "!", "+")
NICK_PRIVILEGE_PREFIXES = "~&@%+"
LINE_TERMINATOR = "\r\n"


@dataclass
class Identity:
    """The nick/user/real name triple sent when registering a new connection."""

    nick: str
    username: Optional[str] = None
    realname: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.username:
            self.username = self.nick
        if not self.realname:
            self.realname = self.nick


def log_level_from_name(name: str, fallback: int = logging.INFO) -> int:
    level = logging.getLevelName(name.split("#")[0].strip().upper())
    return level if isinstance(level, int) else fallback
