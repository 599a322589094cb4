# sirc_core/irc/handlers/state_change_handlers.py
import logging
from typing import TYPE_CHECKING, Iterable, List, Optional

from sirc_core.client.display_events import DisplayEvent, semantic

if TYPE_CHECKING:
    from sirc_core.context_manager import Channel
    from sirc_core.irc.irc_message import IRCMessage
    from sirc_core.server_state import Server

logger = logging.getLogger("sirc.handlers.state_change")


def _handle_nick(
    server: "Server",
    msg: "IRCMessage",
    raw_line: str,
    params: list,
    trailing: Optional[str],
    channels: Optional[Iterable["Channel"]] = None,
) -> List[DisplayEvent]:
    """Handles NICK messages from the server. ``channels`` limits which channels are updated."""
    old_nick = msg.source_nick
    new_nick = params[0] if params else None

    if not old_nick or not new_nick:
        logger.warning(f"Received NICK without old or new nick: {raw_line.strip()}")
        return []

    events: List[DisplayEvent] = []
    is_self = server.is_self(old_nick)
    if is_self:
        server.nickname = new_nick
        logger.info(f"[{server.address}] Own nick changed: {old_nick} -> {new_nick}")
        events.append(semantic(f"You are now known as {new_nick}", "nick_change"))

    cm = server.context_manager
    targets = list(cm.channels.values()) if channels is None else list(channels)
    for channel in targets:
        if not channel.is_present(old_nick):
            continue
        channel.mark_absent(old_nick)
        channel.mark_present(new_nick)
        logger.debug(f"Updated nick in channel {channel.name}: {old_nick} -> {new_nick}")
        if not is_self and cm.is_active(channel.name):
            events.append(semantic(f"{old_nick} is now known as {new_nick}", "nick_change"))
    return events
