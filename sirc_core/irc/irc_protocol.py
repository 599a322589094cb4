# sirc_core/irc/irc_protocol.py
import logging
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple

from sirc_core.client.display_events import DisplayEvent, note
from sirc_core.irc.irc_message import IRCMessage
from sirc_core.irc.handlers import (
    message_handlers,
    membership_handlers,
    state_change_handlers,
    irc_numeric_handlers,
)

if TYPE_CHECKING:
    from sirc_core.context_manager import Channel
    from sirc_core.server_state import Server

logger = logging.getLogger("sirc.protocol")

HandlerFunction = Callable[["Server", IRCMessage, str, list, Optional[str]], List[DisplayEvent]]


COMMAND_HANDLERS: Dict[str, HandlerFunction] = {
    "JOIN": membership_handlers._handle_join,
    "PART": membership_handlers._handle_part,
    "PRIVMSG": message_handlers._handle_privmsg,
    "QUIT": membership_handlers._handle_quit,
    "NICK": state_change_handlers._handle_nick,
    "KICK": membership_handlers._handle_kick,
}


def _handle_unknown(server: "Server", msg: IRCMessage, raw_line: str, params: list, trailing: Optional[str]) -> List[DisplayEvent]:
    text = " ".join(params)
    return [note(text)] if text else []


def resolve_handler(msg: IRCMessage) -> HandlerFunction:
    command_upper = msg.command.upper()
    if command_upper in COMMAND_HANDLERS:
        return COMMAND_HANDLERS[command_upper]
    if msg.is_numeric:
        return irc_numeric_handlers.get_numeric_handler(command_upper)
    return _handle_unknown


# QUIT and NICK name no channel; they touch every channel the sender is in.
MEMBER_WIDE_COMMANDS = frozenset({"QUIT", "NICK"})


def _channels_with_member(server: "Server", nick: str, scope: Optional[str]) -> List["Channel"]:
    cm = server.context_manager
    if scope is not None:
        candidates = [cm.get_channel(scope)]
    else:
        candidates = [cm.channels[name] for name in cm.get_all_channel_names()]
    return [channel for channel in candidates if channel is not None and channel.is_present(nick)]


def handle_server_message(
    server: "Server",
    msg: IRCMessage,
    raw_line: Optional[str] = None,
    record: bool = True,
    scope: Optional[str] = None,
) -> Tuple[str, List[DisplayEvent]]:
    """Applies one inbound message to ``server`` and returns what to show.

    Exactly one handler runs per message. Afterwards the raw line is appended to
    the log of the channel named by the first parameter, if that channel exists.
    QUIT and NICK lines are instead appended to every channel where the sender
    was present. ``record=False`` (history replay) skips the append; ``scope``
    restricts QUIT and NICK to that one channel, so replaying one channel's log
    leaves the others alone. Returns the name of the channel the line was logged
    against ("" if none; the active one when there are several) and the display
    events. Performs no I/O.
    """
    if msg.is_empty:
        return "", []
    if raw_line is None:
        raw_line = msg.raw

    handler = resolve_handler(msg)
    params = list(msg.params)
    member_wide = msg.command.upper() in MEMBER_WIDE_COMMANDS
    try:
        if member_wide:
            affected = _channels_with_member(server, msg.source_nick, scope)
            events = handler(server, msg, raw_line, params, msg.trailing, channels=affected)
        else:
            events = handler(server, msg, raw_line, params, msg.trailing)
    except Exception as e:
        logger.error(f"Error in handler for command {msg.command}: {e}. Raw: {raw_line.strip()}", exc_info=True)
        return "", []

    if member_wide:
        if record:
            for channel in affected:
                channel.append_log(raw_line)
        names = [channel.name for channel in affected]
        active_name = server.context_manager.active_channel_name
        if active_name in names:
            return active_name, events
        return (names[0] if names else ""), events

    channel_name = ""
    target = params[0] if params else ""
    channel = server.context_manager.get_channel(target) if target else None
    if channel is not None:
        channel_name = channel.name
        if record:
            channel.append_log(raw_line)
    return channel_name, events
