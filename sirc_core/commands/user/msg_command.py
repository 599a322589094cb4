# sirc_core/commands/user/msg_command.py
import logging
from typing import TYPE_CHECKING

from sirc_core.commands.command_types import CommandKind, MsgArgs, SayArgs
from sirc_core.errors import MissingArgument, NoActiveContext

if TYPE_CHECKING:
    from sirc_core.client.session_manager import SessionManager
    from sirc_core.server_state import Server

logger = logging.getLogger("sirc.commands.user.msg")

MSG_USAGE = "/msg <target> <message>"

COMMAND_DEFINITIONS = [
    {
        "kind": CommandKind.MSG,
        "parser": "parse_msg_args",
        "handler": "handle_msg_command",
        "help": {
            "usage": MSG_USAGE,
            "description": "Sends a message to a channel or a nick.",
        },
    },
    {
        "kind": CommandKind.SAY,
        "parser": "parse_say_args",
        "handler": "handle_say_command",
        "help": {
            "usage": "<message>",
            "description": "Text without a leading / is sent to the active channel.",
        },
    },
]


def parse_msg_args(args_str: str) -> MsgArgs:
    target, _, text = args_str.strip().partition(" ")
    if not target or not text.strip():
        raise MissingArgument(MSG_USAGE)
    return MsgArgs(target=target, text=text)


def parse_say_args(args_str: str) -> SayArgs:
    return SayArgs(text=args_str)


async def send_privmsg(manager: "SessionManager", server: "Server", target: str, text: str):
    """Sends PRIVMSG and shows it as if the server had echoed it back.

    The caller must hold ``server.lock``.
    """
    await server.send_raw(f"PRIVMSG {target} :{text}")
    # Logged as the prefixed echo, not the bare outbound line, so replay renders it like inbound traffic.
    manager.apply_line(server, f":{server.nickname} PRIVMSG {target} :{text}")
    logger.info(f"[{server.address}] Sent message to {target}")


async def handle_msg_command(manager: "SessionManager", args: MsgArgs):
    server = manager.require_current(connected=True)
    async with server.lock:
        await send_privmsg(manager, server, args.target, args.text)


async def handle_say_command(manager: "SessionManager", args: SayArgs):
    server = manager.require_current(connected=True)
    async with server.lock:
        active = server.active_channel
        if active is None:
            raise NoActiveContext()
        msg_args = parse_msg_args(f"{active.name} {args.text}")
        await send_privmsg(manager, server, msg_args.target, msg_args.text)
