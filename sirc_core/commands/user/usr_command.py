# sirc_core/commands/user/usr_command.py
import logging
from typing import TYPE_CHECKING

from sirc_core.client.display_events import note, semantic
from sirc_core.commands.command_types import CommandKind, UsrArgs
from sirc_core.commands.user.nick_command import validate_nick

if TYPE_CHECKING:
    from sirc_core.client.session_manager import SessionManager

logger = logging.getLogger("sirc.commands.user.usr")

COMMAND_DEFINITIONS = [
    {
        "kind": CommandKind.USR,
        "parser": "parse_usr_args",
        "handler": "handle_usr_command",
        "help": {
            "usage": "/usr [nick [username [realname]]]",
            "description": (
                "Shows or sets the identity used for new connections. "
                "Existing connections keep their identity."
            ),
        },
    }
]


def parse_usr_args(args_str: str) -> UsrArgs:
    parts = args_str.strip().split(None, 2)
    if not parts:
        return UsrArgs()
    nick = validate_nick(parts[0])
    username = parts[1] if len(parts) > 1 else None
    realname = parts[2] if len(parts) > 2 else None
    return UsrArgs(nick=nick, username=username, realname=realname)


async def handle_usr_command(manager: "SessionManager", args: UsrArgs):
    identity = manager.identity
    if args.nick is None:
        manager.ui.render(
            note(f"Nick: {identity.nick}  Username: {identity.username}  Realname: {identity.realname}")
        )
        return

    identity.nick = args.nick
    if args.username is not None:
        identity.username = args.username
    if args.realname is not None:
        identity.realname = args.realname
    logger.info(f"Identity for new connections set to {identity}")
    manager.ui.render(
        semantic(f"New connections will use nick {identity.nick} ({identity.username}, {identity.realname})")
    )
