# sirc_core/commands/server/server_command.py
import logging
from typing import TYPE_CHECKING

from sirc_core.client.display_events import semantic
from sirc_core.commands.command_types import CommandKind, ServerArgs
from sirc_core.errors import MissingArgument

if TYPE_CHECKING:
    from sirc_core.client.session_manager import SessionManager

logger = logging.getLogger("sirc.commands.server.server")

SERVER_USAGE = "/server <host> [port]"

COMMAND_DEFINITIONS = [
    {
        "kind": CommandKind.SERVER,
        "parser": "parse_server_args",
        "handler": "handle_server_command",
        "help": {
            "usage": SERVER_USAGE,
            "description": "Connects to a new server and makes it the current one. Other connections stay open.",
        },
    }
]


def parse_server_args(args_str: str) -> ServerArgs:
    parts = args_str.split()
    if not parts:
        raise MissingArgument(SERVER_USAGE)
    host = parts[0]
    port = None
    if len(parts) > 1:
        try:
            port = int(parts[1])
        except ValueError:
            raise MissingArgument(SERVER_USAGE) from None
        if not 0 < port < 65536:
            raise MissingArgument(SERVER_USAGE)
    return ServerArgs(host=host, port=port)


async def handle_server_command(manager: "SessionManager", args: ServerArgs):
    port = args.port if args.port is not None else manager.config.default_port
    manager.ui.render(semantic(f"Connecting to {args.host}:{port}..."))
    server = await manager.connect_server(args.host, port)
    manager.ui.render(semantic(f"Connected to {server.address} as {server.nickname}"))
