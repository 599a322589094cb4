# sirc_core/client/input_handler.py
import asyncio
import logging
import sys
import threading
from typing import Optional, TextIO

logger = logging.getLogger("sirc.input")


class InputHandler:
    """Feeds stdin lines into an asyncio.Queue from a daemon thread.

    A blocking readline can't be cancelled, so the reader lives outside the
    event loop and never holds up shutdown. ``None`` on the queue means EOF.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdin
        self._input_queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._stopped = threading.Event()

    def start(self):
        if self._thread is not None:
            return
        self._loop = asyncio.get_running_loop()
        self._thread = threading.Thread(target=self._read_stdin, name="sirc-stdin", daemon=True)
        self._thread.start()
        logger.debug("Input reader thread started.")

    def _read_stdin(self):
        while not self._stopped.is_set():
            try:
                line = self.stream.readline()
            except (OSError, ValueError) as e:
                logger.warning(f"Error reading from stdin: {e}")
                line = ""
            if not line:
                self._put(None)
                return
            self._put(line.rstrip("\r\n"))

    def _put(self, line: Optional[str]):
        if self._loop is None or self._loop.is_closed():
            return
        try:
            self._loop.call_soon_threadsafe(self._input_queue.put_nowait, line)
        except RuntimeError:
            # Loop closed between the check and the call.
            self._stopped.set()

    async def get_line(self) -> Optional[str]:
        return await self._input_queue.get()

    def stop(self):
        self._stopped.set()
