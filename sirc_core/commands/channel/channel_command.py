# sirc_core/commands/channel/channel_command.py
import logging
from typing import TYPE_CHECKING

from sirc_core.client.display_events import clear
from sirc_core.commands.command_types import ChannelArgs, CommandKind
from sirc_core.errors import MissingArgument, NoSuchChannel

if TYPE_CHECKING:
    from sirc_core.client.session_manager import SessionManager

logger = logging.getLogger("sirc.commands.channel.channel")

CHANNEL_USAGE = "/channel <name>"

COMMAND_DEFINITIONS = [
    {
        "kind": CommandKind.CHANNEL,
        "parser": "parse_channel_args",
        "handler": "handle_channel_command",
        "help": {
            "usage": CHANNEL_USAGE,
            "description": "Switches the active channel and replays its history.",
        },
    }
]


def parse_channel_args(args_str: str) -> ChannelArgs:
    parts = args_str.split()
    if not parts:
        raise MissingArgument(CHANNEL_USAGE)
    return ChannelArgs(name=parts[0])


async def handle_channel_command(manager: "SessionManager", args: ChannelArgs):
    server = manager.require_current()
    async with server.lock:
        channel = server.context_manager.get_channel(args.name)
        if channel is None:
            raise NoSuchChannel(args.name)
        server.context_manager.set_active_channel(channel.name)
        manager.ui.render(clear())
        # Replay goes through inbound handling only, so nothing is re-logged.
        for raw_line in list(channel.log):
            manager.apply_line(server, raw_line, record=False, scope=channel.name)
    logger.debug(f"[{server.address}] Switched to {channel.name}, replayed {len(channel.log)} lines")
