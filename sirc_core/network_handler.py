# sirc_core/network_handler.py
import asyncio
import logging
from typing import Optional

from sirc_core.config_defs import DEFAULT_CONNECTION_TIMEOUT, LINE_TERMINATOR

logger = logging.getLogger("sirc.network")

ENCODING = "utf-8"


class IRCConnection:
    """Line-oriented wrapper over an asyncio stream pair.

    read_line() strips the terminator and raises EOFError once the peer closes;
    write_line() appends it and flushes.
    """

    def __init__(self, host: str, port: int, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        self.host = host
        self.port = port
        self._reader = reader
        self._writer = writer

    @classmethod
    async def open(cls, host: str, port: int, timeout: Optional[float] = DEFAULT_CONNECTION_TIMEOUT) -> "IRCConnection":
        logger.info(f"Connecting to {host}:{port} (timeout: {timeout}s)")
        reader, writer = await asyncio.wait_for(asyncio.open_connection(host, port), timeout=timeout)
        logger.info(f"Connected to {host}:{port}")
        return cls(host, port, reader, writer)

    async def read_line(self) -> str:
        data = await self._reader.readline()
        if not data:
            raise EOFError(f"Connection to {self.host}:{self.port} closed by peer")
        return data.decode(ENCODING, errors="replace").rstrip("\r\n")

    async def write_line(self, line: str):
        if self._writer.is_closing():
            raise ConnectionResetError(f"Connection to {self.host}:{self.port} is closing")
        # A line must never smuggle in a second command.
        safe_line = line.replace("\r", " ").replace("\n", " ")
        self._writer.write((safe_line + LINE_TERMINATOR).encode(ENCODING))
        await self._writer.drain()

    async def close(self):
        if self._writer.is_closing():
            return
        self._writer.close()
        try:
            await asyncio.wait_for(self._writer.wait_closed(), timeout=5.0)
        except (asyncio.TimeoutError, OSError) as e:
            logger.debug(f"Error while closing connection to {self.host}:{self.port}: {e}")


async def open_connection(host: str, port: int, timeout: Optional[float] = DEFAULT_CONNECTION_TIMEOUT) -> IRCConnection:
    return await IRCConnection.open(host, port, timeout=timeout)
