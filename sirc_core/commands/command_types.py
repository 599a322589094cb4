# sirc_core/commands/command_types.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from sirc_core.errors import UnknownCommand


class CommandKind(Enum):
    """Every command the session manager understands. SAY is the unnamed one:
    plain text sent to the active channel."""

    SAY = ""
    MSG = "msg"
    AWAY = "away"
    QUIT = "quit"
    JOIN = "join"
    PART = "part"
    CHANNEL = "channel"
    CHANNELS = "channels"
    SERVER = "server"
    SERVERS = "servers"
    NICK = "nick"
    NICKS = "nicks"
    USR = "usr"
    HELP = "help"

    @classmethod
    def from_name(cls, name: str) -> "CommandKind":
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise UnknownCommand(name) from None


@dataclass(frozen=True)
class SayArgs:
    text: str


@dataclass(frozen=True)
class MsgArgs:
    target: str
    text: str


@dataclass(frozen=True)
class AwayArgs:
    message: Optional[str] = None


@dataclass(frozen=True)
class QuitArgs:
    message: Optional[str] = None


@dataclass(frozen=True)
class JoinArgs:
    channel: str


@dataclass(frozen=True)
class PartArgs:
    channel: Optional[str] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class ChannelArgs:
    name: str


@dataclass(frozen=True)
class NoArgs:
    pass


@dataclass(frozen=True)
class ServerArgs:
    host: str
    port: Optional[int] = None


@dataclass(frozen=True)
class ServersArgs:
    index: Optional[int] = None


@dataclass(frozen=True)
class NickArgs:
    nick: str


@dataclass(frozen=True)
class NicksArgs:
    channel: Optional[str] = None


@dataclass(frozen=True)
class UsrArgs:
    nick: Optional[str] = None
    username: Optional[str] = None
    realname: Optional[str] = None


@dataclass(frozen=True)
class HelpArgs:
    command: Optional[str] = None


CommandPayload = Union[
    SayArgs, MsgArgs, AwayArgs, QuitArgs, JoinArgs, PartArgs, ChannelArgs, NoArgs,
    ServerArgs, ServersArgs, NickArgs, NicksArgs, UsrArgs, HelpArgs,
]


@dataclass(frozen=True)
class ParsedCommand:
    kind: CommandKind
    payload: CommandPayload
