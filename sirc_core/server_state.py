# sirc_core/server_state.py
import asyncio
import logging
from datetime import datetime
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

from sirc_core.config_defs import DEFAULT_CHANNEL_LOG_MAX_LINES, Identity
from sirc_core.context_manager import Channel, ContextManager

if TYPE_CHECKING:
    from sirc_core.network_handler import IRCConnection

logger = logging.getLogger("sirc.server")


class ConnectionState(Enum):
    """Possible connection states."""

    CONNECTED = auto()
    DISCONNECTED = auto()


class Server:
    """One live connection: identity, channel set and active channel.

    ``lock`` serialises every state transition on this server, whether it comes
    from the listener task or from a user command.
    """

    def __init__(
        self,
        host: str,
        port: int,
        identity: Identity,
        connection: Optional["IRCConnection"] = None,
        max_log_lines: int = DEFAULT_CHANNEL_LOG_MAX_LINES,
    ):
        now = datetime.now()
        self.host = host
        self.port = port
        self.nickname: str = identity.nick
        self.username: str = identity.username or identity.nick
        self.realname: str = identity.realname or identity.nick
        self.context_manager = ContextManager(max_log_lines=max_log_lines)
        self.connection = connection
        self.state = ConnectionState.CONNECTED if connection else ConnectionState.DISCONNECTED
        self.created_at: datetime = now
        self.last_activity: datetime = now
        self.lock = asyncio.Lock()
        self.listener_task: Optional[asyncio.Task] = None

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def channels(self):
        return self.context_manager.channels

    @property
    def active_channel(self) -> Optional[Channel]:
        return self.context_manager.get_active_channel()

    @property
    def connected(self) -> bool:
        return self.state == ConnectionState.CONNECTED and self.connection is not None

    def is_self(self, nick: str) -> bool:
        return bool(nick) and nick.lower() == self.nickname.lower()

    async def send_raw(self, line: str):
        """Writes one protocol line; the transport appends the terminator."""
        if not self.connected:
            logger.warning(f"[{self.address}] Dropping outbound line, not connected: {line}")
            return
        logger.debug(f"[{self.address}] C >> {line}")
        await self.connection.write_line(line)
        self.last_activity = datetime.now()

    async def register(self):
        await self.send_raw(f"NICK {self.nickname}")
        await self.send_raw(f"USER {self.username} 0 * :{self.realname}")

    async def close(self):
        self.state = ConnectionState.DISCONNECTED
        if self.connection is not None:
            await self.connection.close()

    def __repr__(self):
        active = self.context_manager.active_channel_name or "-"
        return f"<Server address='{self.address}' nick='{self.nickname}' channels={len(self.channels)} active={active} state={self.state.name}>"
