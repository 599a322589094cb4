import logging
from collections import deque
from datetime import datetime
from typing import Deque, Dict, List, Optional

from sirc_core.config_defs import CHANNEL_PREFIXES, DEFAULT_CHANNEL_LOG_MAX_LINES

logger = logging.getLogger("sirc.context")


class Channel:
    """A joined channel: membership roster plus the raw lines seen while joined.

    Members are never deleted from ``members``; leaving flips the flag to False,
    so membership must be checked with is_present(), not ``in``.
    """

    def __init__(self, name: str, max_log_lines: int = DEFAULT_CHANNEL_LOG_MAX_LINES):
        now = datetime.now()
        self.name: str = name
        self.members: Dict[str, bool] = {}
        self.log: Deque[str] = deque(maxlen=max_log_lines or None)
        self.created_at: datetime = now
        self.last_active_at: datetime = now

    def mark_present(self, nick: str):
        self.members[nick] = True

    def mark_absent(self, nick: str):
        self.members[nick] = False

    def is_present(self, nick: str) -> bool:
        return self.members.get(nick, False)

    def present_members(self) -> List[str]:
        return sorted(nick for nick, present in self.members.items() if present)

    def append_log(self, raw_line: str):
        self.log.append(raw_line)

    def touch(self):
        self.last_active_at = datetime.now()

    def __repr__(self):
        return f"<Channel name='{self.name}' members={len(self.present_members())} log={len(self.log)}>"


class ContextManager:
    """The channel set of one server and its active-channel pointer."""

    def __init__(self, max_log_lines: int = DEFAULT_CHANNEL_LOG_MAX_LINES):
        self.channels: Dict[str, Channel] = {}
        self.active_channel_name: Optional[str] = None
        self.max_log_lines = max_log_lines

    @staticmethod
    def _normalize_context_name(name: str) -> str:
        if not name:
            return ""
        if name.startswith(CHANNEL_PREFIXES):
            return name.lower()
        return name

    def create_channel(self, channel_name: str) -> Channel:
        """Returns the channel, creating it first if it is not already joined."""
        normalized_name = self._normalize_context_name(channel_name)
        channel = self.channels.get(normalized_name)
        if channel is None:
            channel = Channel(normalized_name, max_log_lines=self.max_log_lines)
            self.channels[normalized_name] = channel
            logger.debug(f"Created channel: '{normalized_name}' (original: '{channel_name}')")
        return channel

    def get_channel(self, channel_name: str) -> Optional[Channel]:
        return self.channels.get(self._normalize_context_name(channel_name))

    def get_active_channel(self) -> Optional[Channel]:
        if self.active_channel_name:
            return self.channels.get(self.active_channel_name)
        return None

    def is_active(self, channel_name: str) -> bool:
        return (
            self.active_channel_name is not None
            and self.active_channel_name == self._normalize_context_name(channel_name)
        )

    def set_active_channel(self, channel_name: str) -> bool:
        channel = self.get_channel(channel_name)
        if channel is None:
            logger.warning(f"Cannot switch to non-existent channel: '{channel_name}'")
            return False
        self.active_channel_name = channel.name
        channel.touch()
        logger.debug(f"Switched active channel to: '{channel.name}'")
        return True

    def remove_channel(self, channel_name: str) -> bool:
        """Drops a channel; if it was active, reselects the most recently active survivor."""
        normalized_name = self._normalize_context_name(channel_name)
        if normalized_name not in self.channels:
            logger.debug(f"Channel '{normalized_name}' not found, cannot remove.")
            return False

        was_active = self.active_channel_name == normalized_name
        del self.channels[normalized_name]
        logger.info(f"Removed channel: '{normalized_name}'")
        if was_active:
            self.reselect_active_channel()
        return True

    def reselect_active_channel(self) -> Optional[Channel]:
        # Sorting first makes max() resolve equal timestamps to the lexicographically first name.
        candidates = sorted(self.channels.values(), key=lambda c: c.name)
        if not candidates:
            self.active_channel_name = None
            logger.debug("No channels left; active channel cleared.")
            return None
        chosen = max(candidates, key=lambda c: c.last_active_at)
        self.active_channel_name = chosen.name
        chosen.touch()
        logger.debug(f"Reselected active channel: '{chosen.name}'")
        return chosen

    def append_log(self, channel_name: str, raw_line: str) -> bool:
        channel = self.get_channel(channel_name)
        if channel is None:
            return False
        channel.append_log(raw_line)
        return True

    def get_all_channel_names(self) -> List[str]:
        return sorted(self.channels.keys())
