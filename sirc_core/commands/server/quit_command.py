# sirc_core/commands/server/quit_command.py
import logging
from typing import TYPE_CHECKING

from sirc_core.commands.command_types import CommandKind, QuitArgs

if TYPE_CHECKING:
    from sirc_core.client.session_manager import SessionManager

logger = logging.getLogger("sirc.commands.server.quit")

COMMAND_DEFINITIONS = [
    {
        "kind": CommandKind.QUIT,
        "parser": "parse_quit_args",
        "handler": "handle_quit_command",
        "help": {
            "usage": "/quit [message]",
            "description": "Sends QUIT to every server and exits sIRC.",
        },
    }
]


def parse_quit_args(args_str: str) -> QuitArgs:
    return QuitArgs(message=args_str.strip() or None)


async def handle_quit_command(manager: "SessionManager", args: QuitArgs):
    quit_message = args.message or manager.config.quit_message
    logger.info(f"QUIT command issued. Message: '{quit_message}'")
    await manager.request_shutdown(quit_message)
