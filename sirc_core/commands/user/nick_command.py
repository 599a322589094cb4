# sirc_core/commands/user/nick_command.py
import logging
from typing import TYPE_CHECKING

from sirc_core.commands.command_types import CommandKind, NickArgs
from sirc_core.errors import InvalidNick

if TYPE_CHECKING:
    from sirc_core.client.session_manager import SessionManager

logger = logging.getLogger("sirc.commands.user.nick")

COMMAND_DEFINITIONS = [
    {
        "kind": CommandKind.NICK,
        "parser": "parse_nick_args",
        "handler": "handle_nick_command",
        "help": {
            "usage": "/nick <newnickname>",
            "description": "Asks the current server to change your nickname.",
        },
    }
]


def validate_nick(nick: str) -> str:
    if not nick or any(ch.isspace() for ch in nick):
        raise InvalidNick(nick)
    return nick


def parse_nick_args(args_str: str) -> NickArgs:
    # Leading/trailing spaces are input noise, embedded ones are not.
    return NickArgs(nick=validate_nick(args_str.strip()))


async def handle_nick_command(manager: "SessionManager", args: NickArgs):
    # The local nickname only changes once the server echoes NICK back.
    server = manager.require_current(connected=True)
    await server.send_raw(f"NICK {args.nick}")
    logger.info(f"[{server.address}] Requested nick change to {args.nick}")
