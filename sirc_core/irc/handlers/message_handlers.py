# sirc_core/irc/handlers/message_handlers.py
import logging
from typing import TYPE_CHECKING, List, Optional

from sirc_core.client.display_events import DisplayEvent, note, private
from sirc_core.config_defs import CHANNEL_PREFIXES

if TYPE_CHECKING:
    from sirc_core.irc.irc_message import IRCMessage
    from sirc_core.server_state import Server

logger = logging.getLogger("sirc.handlers.message")

CTCP_DELIMITER = "\x01"


def format_chat_line(nick: str, text: str) -> str:
    if text.startswith(CTCP_DELIMITER + "ACTION "):
        return f"* {nick} {text[len(CTCP_DELIMITER + 'ACTION '):].rstrip(CTCP_DELIMITER)}"
    return f"<{nick}> {text}"


def _handle_privmsg(server: "Server", msg: "IRCMessage", raw_line: str, params: list, trailing: Optional[str]) -> List[DisplayEvent]:
    if not params:
        logger.warning(f"PRIVMSG without target: {raw_line.strip()}")
        return []

    target = params[0]
    text = params[1] if len(params) > 1 else ""
    line = format_chat_line(msg.source_nick, text)

    if not target.startswith(CHANNEL_PREFIXES):
        return [private(line)]
    if server.context_manager.is_active(target):
        return [note(line)]
    return []
