# sirc_core/commands/channel/join_command.py
import logging
from typing import TYPE_CHECKING

from sirc_core.commands.command_types import CommandKind, JoinArgs
from sirc_core.config_defs import CHANNEL_PREFIX, CHANNEL_PREFIXES
from sirc_core.errors import MissingArgument

if TYPE_CHECKING:
    from sirc_core.client.session_manager import SessionManager

logger = logging.getLogger("sirc.commands.channel.join")

JOIN_USAGE = "/join <channel>"

COMMAND_DEFINITIONS = [
    {
        "kind": CommandKind.JOIN,
        "parser": "parse_join_args",
        "handler": "handle_join_command",
        "help": {
            "usage": JOIN_USAGE,
            "description": "Joins the specified channel on the current server.",
        },
    }
]


def parse_join_args(args_str: str) -> JoinArgs:
    parts = args_str.split()
    if not parts:
        raise MissingArgument(JOIN_USAGE)
    channel = parts[0]
    if not channel.startswith(CHANNEL_PREFIXES):
        channel = CHANNEL_PREFIX + channel
    return JoinArgs(channel=channel)


async def handle_join_command(manager: "SessionManager", args: JoinArgs):
    # No local channel yet: it is created when the server echoes our JOIN.
    server = manager.require_current(connected=True)
    await server.send_raw(f"JOIN {args.channel}")
    logger.info(f"[{server.address}] Sent JOIN for {args.channel}")
