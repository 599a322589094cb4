# sirc_core/commands/channel/nicks_command.py
from typing import TYPE_CHECKING

from sirc_core.client.display_events import note
from sirc_core.commands.command_handler import resolve_context_channel
from sirc_core.commands.command_types import CommandKind, NicksArgs
from sirc_core.errors import NoSuchChannel

if TYPE_CHECKING:
    from sirc_core.client.session_manager import SessionManager

COMMAND_DEFINITIONS = [
    {
        "kind": CommandKind.NICKS,
        "parser": "parse_nicks_args",
        "handler": "handle_nicks_command",
        "help": {
            "usage": "/nicks [channel]",
            "description": "Lists the nicks present in a channel, or in the active channel.",
        },
    }
]


def parse_nicks_args(args_str: str) -> NicksArgs:
    parts = args_str.split()
    return NicksArgs(channel=parts[0] if parts else None)


async def handle_nicks_command(manager: "SessionManager", args: NicksArgs):
    server = manager.require_current()
    async with server.lock:
        channel_name = resolve_context_channel(server, args.channel)
        channel = server.context_manager.get_channel(channel_name)
        if channel is None:
            raise NoSuchChannel(channel_name)
        members = channel.present_members()
    manager.ui.render(note(" ".join(members)))
