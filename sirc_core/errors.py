# sirc_core/errors.py
"""Exception taxonomy for user-facing command failures.

Every CommandError carries the single message shown to the user; the session
manager renders it and carries on. None of these abort the process.
"""
from typing import Optional


class SircError(Exception):
    """Base class for all sIRC errors."""


class CommandError(SircError):
    """A user command could not be carried out. The command is a no-op."""


class NotConnected(CommandError):
    def __init__(self, message: str = "Not connected to any server."):
        super().__init__(message)


class NoActiveContext(CommandError):
    def __init__(self, message: str = "No active channel."):
        super().__init__(message)


class MissingArgument(CommandError):
    def __init__(self, usage: str):
        self.usage = usage
        super().__init__(f"Usage: {usage}")


class InvalidNick(CommandError):
    def __init__(self, nick: str):
        self.nick = nick
        super().__init__(f"Invalid nickname: '{nick}'")


class NoSuchChannel(CommandError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No such channel: {name}")


class UnknownCommand(CommandError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown command: {name}")


class InvalidServerIndex(CommandError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"No server with index '{value}'. Use /servers to list them.")


class ServerConnectionError(CommandError):
    """Dialing a server failed. Only that one attempt is affected."""

    def __init__(self, address: str, cause: Optional[BaseException] = None):
        self.address = address
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to connect to {address}{detail}")
