# sirc_core/commands/channel/channels_command.py
from typing import TYPE_CHECKING

from sirc_core.client.display_events import note
from sirc_core.commands.command_types import CommandKind, NoArgs

if TYPE_CHECKING:
    from sirc_core.client.session_manager import SessionManager

COMMAND_DEFINITIONS = [
    {
        "kind": CommandKind.CHANNELS,
        "parser": "parse_channels_args",
        "handler": "handle_channels_command",
        "help": {
            "usage": "/channels",
            "description": "Lists the channels joined on the current server. The active one is marked with *.",
        },
    }
]


def parse_channels_args(args_str: str) -> NoArgs:
    return NoArgs()


async def handle_channels_command(manager: "SessionManager", args: NoArgs):
    server = manager.require_current()
    async with server.lock:
        names = server.context_manager.get_all_channel_names()
        if not names:
            manager.ui.render(note(f"No channels joined on {server.address}"))
            return
        active = server.active_channel
        lines = [
            f"{'*' if active is not None and name == active.name else ' '} {name}"
            for name in names
        ]
    manager.ui.render_all([note(line) for line in lines])
