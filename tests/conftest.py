import asyncio
from typing import List, Optional

import pytest
import pytest_asyncio

from sirc_core.app_config import AppConfig
from sirc_core.client.dummy_ui import DummyUI
from sirc_core.client.session_manager import SessionManager
from sirc_core.config_defs import Identity
from sirc_core.server_state import Server


class FakeConnection:
    """In-memory stand-in for IRCConnection.

    Lines queued with feed() come out of read_line(); feed_eof() makes the next
    read raise EOFError. Everything written is kept in ``sent``.
    """

    def __init__(self, host: str = "irc.test", port: int = 6667):
        self.host = host
        self.port = port
        self.sent: List[str] = []
        self.closed = False
        self._incoming: "asyncio.Queue[Optional[str]]" = asyncio.Queue()

    def feed(self, *lines: str):
        for line in lines:
            self._incoming.put_nowait(line)

    def feed_eof(self):
        self._incoming.put_nowait(None)

    async def read_line(self) -> str:
        line = await self._incoming.get()
        if line is None:
            raise EOFError("connection closed by peer")
        return line

    async def write_line(self, line: str):
        if self.closed:
            raise ConnectionResetError("connection is closed")
        self.sent.append(line)

    async def close(self):
        self.closed = True


@pytest.fixture
def config(tmp_path):
    # A path that does not exist: every setting comes from the defaults.
    return AppConfig(str(tmp_path / "absent.ini"))


@pytest.fixture
def ui():
    return DummyUI()


@pytest.fixture
def connections():
    return []


@pytest.fixture
def connector(connections):
    async def _connect(host, port, timeout=None):
        connection = FakeConnection(host, port)
        connections.append(connection)
        return connection

    return _connect


@pytest_asyncio.fixture
async def manager(config, ui, connector):
    session_manager = SessionManager(config, ui, identity=Identity("alice"), connector=connector)
    yield session_manager
    await session_manager.request_shutdown("tests done")


@pytest_asyncio.fixture
async def connected(manager, connections):
    """A manager with one open connection to irc.test; returns (manager, server, connection)."""
    server = await manager.connect_server("irc.test", 6667)
    connection = connections[-1]
    connection.sent.clear()
    return manager, server, connection


@pytest.fixture
def server():
    """A bare Server with no transport, for driving the protocol engine directly."""
    return Server("irc.test", 6667, Identity("alice"))
