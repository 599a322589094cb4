# sirc_core/irc/handlers/irc_numeric_handlers.py
import logging
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from sirc_core.client.display_events import DisplayEvent, note, semantic
from sirc_core.config_defs import NICK_PRIVILEGE_PREFIXES

if TYPE_CHECKING:
    from sirc_core.irc.irc_message import IRCMessage
    from sirc_core.server_state import Server

logger = logging.getLogger("sirc.handlers.numeric")

RPL_WELCOME = "001"
RPL_NAMREPLY = "353"
RPL_ENDOFNAMES = "366"
RPL_MOTDSTART = "375"
RPL_MOTD = "372"
RPL_ENDOFMOTD = "376"

# Recognised, but deliberately produce neither state change nor output.
SILENT_NUMERICS = frozenset({RPL_ENDOFNAMES, RPL_MOTDSTART, RPL_MOTD, RPL_ENDOFMOTD})


def strip_privilege_prefix(nick: str) -> str:
    if nick and nick[0] in NICK_PRIVILEGE_PREFIXES:
        return nick[1:]
    return nick


def _handle_rpl_welcome(server: "Server", msg: "IRCMessage", raw_line: str, params: list, trailing: Optional[str]) -> List[DisplayEvent]:
    """Handles RPL_WELCOME (001)."""
    confirmed_nick = params[0] if params else server.nickname
    if confirmed_nick and confirmed_nick != server.nickname:
        logger.info(f"RPL_WELCOME: Nick confirmed by server as '{confirmed_nick}', was '{server.nickname}'.")
        server.nickname = confirmed_nick
    welcome_text = params[1] if len(params) > 1 else ""
    if welcome_text:
        return [semantic(f"Welcome to {server.host}: {welcome_text}", "system")]
    return [semantic(f"Welcome to {server.host}", "system")]


def _handle_rpl_namreply(server: "Server", msg: "IRCMessage", raw_line: str, params: list, trailing: Optional[str]) -> List[DisplayEvent]:
    """Handles RPL_NAMREPLY (353). Never creates a channel."""
    if len(params) < 2:
        logger.warning(f"RPL_NAMREPLY with insufficient params: {raw_line.strip()}")
        return []

    # <client> [<symbol>] <channel> :<names>
    channel_name = params[-2]
    channel = server.context_manager.get_channel(channel_name)
    if channel is None:
        logger.debug(f"RPL_NAMREPLY for unjoined channel {channel_name}, ignoring.")
        return []

    for raw_nick in params[-1].split():
        nick = strip_privilege_prefix(raw_nick)
        if nick:
            channel.mark_present(nick)
    return []


def _handle_silent_numeric(server: "Server", msg: "IRCMessage", raw_line: str, params: list, trailing: Optional[str]) -> List[DisplayEvent]:
    return []


def _handle_generic_numeric(server: "Server", msg: "IRCMessage", raw_line: str, params: list, trailing: Optional[str]) -> List[DisplayEvent]:
    """Handles generic or unassigned numeric replies."""
    # The first parameter of a numeric is always our own nick.
    text = " ".join(params[1:])
    logger.debug(f"Received unhandled/generic numeric {msg.command}: {raw_line.strip()}")
    return [note(text)] if text else []


NUMERIC_HANDLERS: Dict[str, Callable[..., List[DisplayEvent]]] = {
    RPL_WELCOME: _handle_rpl_welcome,
    RPL_NAMREPLY: _handle_rpl_namreply,
    **{code: _handle_silent_numeric for code in SILENT_NUMERICS},
}


def get_numeric_handler(code: str) -> Callable[..., List[DisplayEvent]]:
    return NUMERIC_HANDLERS.get(code, _handle_generic_numeric)
