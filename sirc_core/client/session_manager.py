# sirc_core/client/session_manager.py
import asyncio
import logging
import signal
from typing import Awaitable, Callable, Iterable, List, Optional

from sirc_core.app_config import AppConfig
from sirc_core.client.client_shutdown_coordinator import ClientShutdownCoordinator
from sirc_core.client.display_events import error, semantic
from sirc_core.client.input_handler import InputHandler
from sirc_core.commands.command_handler import CommandHandler
from sirc_core.config_defs import DEFAULT_TERMINATION_MESSAGE, Identity
from sirc_core.errors import (
    CommandError,
    InvalidServerIndex,
    NotConnected,
    ServerConnectionError,
)
from sirc_core.irc import irc_protocol
from sirc_core.irc.irc_message import IRCMessage
from sirc_core.network_handler import IRCConnection, open_connection
from sirc_core.server_state import ConnectionState, Server

logger = logging.getLogger("sirc.session")

Connector = Callable[..., Awaitable[IRCConnection]]


class SessionManager:
    """Owns every Server, the current-server pointer and the command loop.

    All display output goes through ``ui``; all network output goes through the
    Server objects, whose ``lock`` is held for every state transition.
    """

    def __init__(
        self,
        config: AppConfig,
        ui,
        identity: Optional[Identity] = None,
        connector: Connector = open_connection,
        input_handler: Optional[InputHandler] = None,
    ):
        self.config = config
        self.ui = ui
        self.identity: Identity = identity or config.default_identity()
        self.connector = connector
        self.input_handler = input_handler

        self.servers: List[Server] = []
        self.current: Optional[Server] = None

        self.should_quit = asyncio.Event()
        self._signal_shutdown_task: Optional[asyncio.Task] = None
        self.shutdown_coordinator = ClientShutdownCoordinator(self)
        self.command_handler = CommandHandler(self)

    # --- Routing ---

    def require_current(self, connected: bool = False) -> Server:
        """Returns the current server or raises NotConnected."""
        server = self.current
        if server is None:
            raise NotConnected()
        if connected and not server.connected:
            raise NotConnected(f"Connection to {server.address} is closed.")
        return server

    def select_server(self, index: int) -> Server:
        """Makes the 1-based ``index`` entry of ``servers`` current."""
        if not 1 <= index <= len(self.servers):
            raise InvalidServerIndex(str(index))
        self.current = self.servers[index - 1]
        logger.info(f"Current server is now {self.current.address}")
        return self.current

    async def connect_server(self, host: str, port: int) -> Server:
        address = f"{host}:{port}"
        try:
            connection = await self.connector(host, port, timeout=self.config.connection_timeout)
        except (OSError, EOFError, asyncio.TimeoutError) as e:
            logger.warning(f"Connection to {address} failed: {e}")
            raise ServerConnectionError(address, e) from e

        identity = Identity(self.identity.nick, self.identity.username, self.identity.realname)
        server = Server(
            host,
            port,
            identity,
            connection=connection,
            max_log_lines=self.config.channel_log_max_lines,
        )
        try:
            async with server.lock:
                await server.register()
        except (OSError, EOFError) as e:
            logger.warning(f"Registration with {address} failed: {e}")
            await server.close()
            raise ServerConnectionError(address, e) from e

        self.servers.append(server)
        self.current = server
        server.listener_task = asyncio.create_task(self.listen(server), name=f"sirc-listener-{address}")
        logger.info(f"Connected to {address} as {server.nickname}; {len(self.servers)} server(s) open")
        return server

    # --- Inbound ---

    async def listen(self, server: Server):
        """Reads lines from one server until the connection fails or closes."""
        logger.debug(f"[{server.address}] Listener started.")
        try:
            while True:
                line = await server.connection.read_line()
                await self.handle_incoming(server, line)
        except asyncio.CancelledError:
            logger.debug(f"[{server.address}] Listener cancelled.")
            raise
        except (EOFError, OSError) as e:
            server.state = ConnectionState.DISCONNECTED
            if self.shutdown_coordinator.shutdown_initiated:
                return
            logger.info(f"[{server.address}] Listener stopped: {e}")
            self.ui.render(semantic(f"Disconnected from {server.address}: {e}", "error"))

    async def handle_incoming(self, server: Server, line: str):
        if line.startswith("PING"):
            await server.send_raw(line.replace("PING", "PONG", 1))
            return
        logger.debug(f"[{server.address}] S << {line}")
        async with server.lock:
            self.apply_line(server, line)

    def apply_line(self, server: Server, raw_line: str, record: bool = True, scope: Optional[str] = None) -> str:
        """Runs one line through the protocol engine and renders the result.

        The caller must hold ``server.lock``.
        """
        msg = IRCMessage.parse(raw_line)
        channel_name, events = irc_protocol.handle_server_message(server, msg, raw_line, record=record, scope=scope)
        self.ui.render_all(events)
        return channel_name

    # --- Outbound ---

    async def dispatch(self, command: str, args_str: str = ""):
        """Runs one command. Raises CommandError subclasses on failure."""
        await self.command_handler.dispatch(command, args_str)

    async def process_user_line(self, line: str) -> bool:
        """Handles one line of user input. Failures are rendered, never raised."""
        if not line.strip():
            return False
        if line.startswith("/"):
            command, _, args_str = line[1:].partition(" ")
        else:
            command, args_str = "", line

        try:
            await self.dispatch(command, args_str)
            return True
        except CommandError as e:
            logger.info(f"Command '/{command}' failed: {e}")
            self.ui.render(error(str(e)))
        except Exception as e:
            logger.error(f"Error executing command '/{command}' with args '{args_str}': {e}", exc_info=True)
            self.ui.render(error(f"Error in command /{command}: {e}"))
        return False

    # --- Lifecycle ---

    async def request_shutdown(self, quit_message: Optional[str] = None):
        logger.info(f"request_shutdown called with message: '{quit_message}'")
        await self.shutdown_coordinator.initiate_graceful_shutdown(quit_message or self.config.quit_message)
        self.should_quit.set()

    def _handle_signal(self, sig: signal.Signals):
        logger.info(f"Received {sig.name}; shutting down.")
        self.ui.render(semantic(f"Received {sig.name}, quitting all servers..."))
        self._signal_shutdown_task = asyncio.create_task(self.request_shutdown(DEFAULT_TERMINATION_MESSAGE))

    def install_signal_handlers(self):
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self._handle_signal, sig)
            except (NotImplementedError, RuntimeError) as e:
                logger.debug(f"Signal handler for {sig.name} not installed: {e}")

    async def _next_user_line(self) -> Optional[str]:
        """Waits for the next input line; returns None on EOF or once quitting."""
        get_task = asyncio.ensure_future(self.input_handler.get_line())
        quit_task = asyncio.ensure_future(self.should_quit.wait())
        try:
            done, _ = await asyncio.wait({get_task, quit_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (get_task, quit_task):
                if not task.done():
                    task.cancel()
        if get_task in done:
            return get_task.result()
        return None

    async def run_main_loop(self, initial_commands: Iterable[str] = ()):
        logger.info(f"Starting main loop (interactive={self.input_handler is not None}).")
        self.install_signal_handlers()
        try:
            for command_line in initial_commands:
                if self.should_quit.is_set():
                    break
                await self.process_user_line(command_line)

            if self.input_handler is None:
                await self.should_quit.wait()
                return

            self.input_handler.start()
            while not self.should_quit.is_set():
                line = await self._next_user_line()
                if line is None:
                    if not self.should_quit.is_set():
                        logger.info("End of input; quitting.")
                    break
                await self.process_user_line(line)
        except asyncio.CancelledError:
            logger.info("run_main_loop task was cancelled. Proceeding to shutdown.")
        finally:
            await self.request_shutdown(self.config.quit_message)
            logger.info("run_main_loop: shutdown complete.")
