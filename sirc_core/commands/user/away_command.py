# sirc_core/commands/user/away_command.py
import logging
from typing import TYPE_CHECKING

from sirc_core.client.display_events import semantic
from sirc_core.commands.command_types import AwayArgs, CommandKind

if TYPE_CHECKING:
    from sirc_core.client.session_manager import SessionManager

logger = logging.getLogger("sirc.commands.user.away")

COMMAND_DEFINITIONS = [
    {
        "kind": CommandKind.AWAY,
        "parser": "parse_away_args",
        "handler": "handle_away_command",
        "help": {
            "usage": "/away [message]",
            "description": "Sets your away status with an optional message. No message marks you as back.",
        },
    }
]


def parse_away_args(args_str: str) -> AwayArgs:
    return AwayArgs(message=args_str.strip() or None)


async def handle_away_command(manager: "SessionManager", args: AwayArgs):
    server = manager.require_current(connected=True)
    if args.message:
        await server.send_raw(f"AWAY :{args.message}")
        manager.ui.render(semantic(f"Marked as away: {args.message}"))
    else:
        await server.send_raw("AWAY")
        manager.ui.render(semantic("No longer marked as away"))
