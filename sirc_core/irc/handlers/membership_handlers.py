# sirc_core/irc/handlers/membership_handlers.py
import logging
from typing import TYPE_CHECKING, Iterable, List, Optional

from sirc_core.client.display_events import DisplayEvent, clear, semantic

if TYPE_CHECKING:
    from sirc_core.context_manager import Channel
    from sirc_core.irc.irc_message import IRCMessage
    from sirc_core.server_state import Server

logger = logging.getLogger("sirc.handlers.membership")


def _remove_member(server: "Server", channel_name: str, nick: str) -> List[DisplayEvent]:
    """Marks ``nick`` absent; if it is our own nick the channel is dropped and,
    when it was the active one, another channel is reselected."""
    cm = server.context_manager
    events: List[DisplayEvent] = []

    channel = cm.get_channel(channel_name)
    if channel is not None:
        channel.mark_absent(nick)

    if server.is_self(nick) and channel is not None:
        was_active = cm.is_active(channel_name)
        cm.remove_channel(channel_name)
        if was_active:
            new_active = cm.get_active_channel()
            if new_active is not None:
                events.append(semantic(f"Now talking in {new_active.name}", "system"))
            else:
                events.append(semantic("No channels left", "system"))
    return events


def _handle_join(server: "Server", msg: "IRCMessage", raw_line: str, params: list, trailing: Optional[str]) -> List[DisplayEvent]:
    """Handles JOIN messages from the server."""
    channel_name = params[0] if params else None
    if not channel_name:
        logger.warning(f"JOIN message without channel: {raw_line.strip()}")
        return []

    cm = server.context_manager
    source_nick = msg.source_nick
    events: List[DisplayEvent] = []

    if server.is_self(source_nick) and cm.get_channel(channel_name) is None:
        cm.create_channel(channel_name)
        cm.set_active_channel(channel_name)
        logger.info(f"[{server.address}] Joined channel: {channel_name}")
        events.append(clear())

    channel = cm.get_channel(channel_name)
    if channel is None:
        logger.debug(f"[{server.address}] Ignoring JOIN of {source_nick} to unjoined channel {channel_name}")
        return events

    if cm.is_active(channel_name):
        events.append(semantic(f"{source_nick} ({msg.prefix}) has joined {channel.name}", "join_part"))
    channel.mark_present(source_nick)
    return events


def _handle_part(server: "Server", msg: "IRCMessage", raw_line: str, params: list, trailing: Optional[str]) -> List[DisplayEvent]:
    channel_name = params[0] if params else None
    if not channel_name:
        logger.warning(f"PART message without channel: {raw_line.strip()}")
        return []

    source_nick = msg.source_nick
    events: List[DisplayEvent] = []
    if server.context_manager.is_active(channel_name):
        message = f"{source_nick} ({msg.prefix}) has left {channel_name}"
        part_message = params[1] if len(params) > 1 else None
        if part_message:
            message += f" ({part_message})"
        events.append(semantic(message, "join_part"))

    events.extend(_remove_member(server, channel_name, source_nick))
    return events


def _handle_kick(server: "Server", msg: "IRCMessage", raw_line: str, params: list, trailing: Optional[str]) -> List[DisplayEvent]:
    if len(params) < 2:
        logger.warning(f"KICK message with insufficient params: {raw_line.strip()}")
        return []

    channel_name = params[0]
    kicked_nick = params[1]
    kick_reason = params[2] if len(params) > 2 else "No reason given"
    kicker_nick = msg.source_nick

    if server.is_self(kicked_nick):
        message = f"You were kicked from {channel_name} by {kicker_nick} ({kick_reason})"
        logger.info(f"[{server.address}] {message}")
    else:
        message = f"{kicked_nick} was kicked from {channel_name} by {kicker_nick} ({kick_reason})"

    events = [semantic(message, "kick")]
    events.extend(_remove_member(server, channel_name, kicked_nick))
    return events


def _handle_quit(
    server: "Server",
    msg: "IRCMessage",
    raw_line: str,
    params: list,
    trailing: Optional[str],
    channels: Optional[Iterable["Channel"]] = None,
) -> List[DisplayEvent]:
    """Handles QUIT. ``channels`` limits which channels are updated; default is all."""
    source_nick = msg.source_nick
    if not source_nick:
        logger.warning(f"QUIT message without source_nick: {raw_line.strip()}")
        return []

    quit_message = params[0] if params else None
    cm = server.context_manager
    events: List[DisplayEvent] = []

    # Every channel is updated, not only the active one.
    targets = list(cm.channels.values()) if channels is None else list(channels)
    for channel in targets:
        if not channel.is_present(source_nick):
            continue
        channel.mark_absent(source_nick)
        if cm.is_active(channel.name):
            message = f"{source_nick} ({msg.prefix}) has quit"
            if quit_message:
                message += f" ({quit_message})"
            events.append(semantic(message, "quit"))
    return events
