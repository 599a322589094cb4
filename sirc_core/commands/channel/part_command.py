# sirc_core/commands/channel/part_command.py
import logging
from typing import TYPE_CHECKING

from sirc_core.commands.command_handler import resolve_context_channel
from sirc_core.commands.command_types import CommandKind, PartArgs

if TYPE_CHECKING:
    from sirc_core.client.session_manager import SessionManager

logger = logging.getLogger("sirc.commands.channel.part")

COMMAND_DEFINITIONS = [
    {
        "kind": CommandKind.PART,
        "parser": "parse_part_args",
        "handler": "handle_part_command",
        "help": {
            "usage": "/part [channel] [reason]",
            "description": "Leaves the specified channel, or the active channel if none is given.",
        },
    }
]


def parse_part_args(args_str: str) -> PartArgs:
    parts = args_str.strip().split(None, 1)
    channel = parts[0] if parts else None
    reason = parts[1].strip() if len(parts) > 1 else None
    return PartArgs(channel=channel, reason=reason or None)


async def handle_part_command(manager: "SessionManager", args: PartArgs):
    server = manager.require_current(connected=True)
    async with server.lock:
        channel_name = resolve_context_channel(server, args.channel)
        command = f"PART {channel_name}"
        if args.reason:
            command += f" :{args.reason}"
        await server.send_raw(command)
    logger.info(f"[{server.address}] Sent PART for {channel_name}. Reason: {args.reason or 'N/A'}")
