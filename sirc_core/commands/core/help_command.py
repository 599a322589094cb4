# sirc_core/commands/core/help_command.py
import logging
from typing import TYPE_CHECKING

from sirc_core.client.display_events import note, semantic
from sirc_core.commands.command_types import CommandKind, HelpArgs

if TYPE_CHECKING:
    from sirc_core.client.session_manager import SessionManager

logger = logging.getLogger("sirc.commands.core.help")

COMMAND_DEFINITIONS = [
    {
        "kind": CommandKind.HELP,
        "parser": "parse_help_args",
        "handler": "handle_help_command",
        "help": {
            "usage": "/help [command]",
            "description": "Lists the available commands, or shows the usage of one.",
        },
    }
]


def parse_help_args(args_str: str) -> HelpArgs:
    parts = args_str.split()
    if not parts:
        return HelpArgs()
    return HelpArgs(command=parts[0].lstrip("/"))


async def handle_help_command(manager: "SessionManager", args: HelpArgs):
    handler = manager.command_handler
    if args.command:
        # Unknown names raise UnknownCommand.
        registered = handler.get_help(args.command)
        manager.ui.render_all([
            semantic(f"Help for /{registered.kind.value}:"),
            note(f"  Usage: {registered.usage}"),
            note(f"  {registered.description}"),
        ])
        return

    events = [semantic("Available commands:")]
    for registered in handler.get_named_commands():
        events.append(note(f"  {registered.usage:<36} {registered.description}"))
    say = handler.command_map[CommandKind.SAY]
    events.append(note(f"  {say.usage:<36} {say.description}"))
    manager.ui.render_all(events)
