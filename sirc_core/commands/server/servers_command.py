# sirc_core/commands/server/servers_command.py
import logging
from typing import TYPE_CHECKING

from sirc_core.client.display_events import note, semantic
from sirc_core.commands.command_types import CommandKind, ServersArgs
from sirc_core.errors import InvalidServerIndex

if TYPE_CHECKING:
    from sirc_core.client.session_manager import SessionManager

logger = logging.getLogger("sirc.commands.server.servers")

COMMAND_DEFINITIONS = [
    {
        "kind": CommandKind.SERVERS,
        "parser": "parse_servers_args",
        "handler": "handle_servers_command",
        "help": {
            "usage": "/servers [index]",
            "description": "Lists open connections, or makes connection <index> the current one.",
        },
    }
]


def parse_servers_args(args_str: str) -> ServersArgs:
    value = args_str.strip()
    if not value:
        return ServersArgs()
    try:
        return ServersArgs(index=int(value))
    except ValueError:
        raise InvalidServerIndex(value) from None


async def handle_servers_command(manager: "SessionManager", args: ServersArgs):
    if args.index is not None:
        server = manager.select_server(args.index)
        manager.ui.render(semantic(f"Current server is now {server.address}"))
        return

    if not manager.servers:
        manager.ui.render(note("No servers. Use /server <host> [port] to connect."))
        return
    lines = []
    for position, server in enumerate(manager.servers, start=1):
        marker = "*" if server is manager.current else " "
        lines.append(f"{marker} {position}. {server.address} as {server.nickname} [{server.state.name.lower()}]")
    manager.ui.render_all([note(line) for line in lines])
