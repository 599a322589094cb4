# sirc_core/client/client_shutdown_coordinator.py
import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sirc_core.client.session_manager import SessionManager

logger = logging.getLogger("sirc.shutdown_coordinator")


class ClientShutdownCoordinator:
    """Handles the shutdown sequence for every open connection."""

    def __init__(self, session_manager: "SessionManager"):
        self.manager = session_manager
        self.shutdown_initiated = False
        self.shutdown_lock = asyncio.Lock()

    async def initiate_graceful_shutdown(self, quit_message: str):
        """Sends QUIT everywhere, then stops listeners and closes connections.

        Idempotent. Safe to run while listener tasks are mid-read: each QUIT is
        written under that server's lock.
        """
        async with self.shutdown_lock:
            if self.shutdown_initiated:
                logger.info("Shutdown already in progress or completed.")
                return
            self.shutdown_initiated = True
            logger.info(f"Initiating shutdown. Quit message: {quit_message}")

            servers = list(self.manager.servers)
            for server in servers:
                if not server.connected:
                    continue
                try:
                    async with server.lock:
                        await server.send_raw(f"QUIT :{quit_message}")
                except (OSError, EOFError) as e:
                    logger.warning(f"[{server.address}] Could not send QUIT: {e}")

            current_task = asyncio.current_task()
            for server in servers:
                task = server.listener_task
                if task is not None and task is not current_task and not task.done():
                    task.cancel()
                    try:
                        await task
                    except asyncio.CancelledError:
                        logger.debug(f"[{server.address}] Listener task cancelled.")
                await server.close()

            if self.manager.input_handler is not None:
                self.manager.input_handler.stop()
            self.manager.ui.shutdown()
            logger.info("Client shutdown sequence complete.")
