# sirc_core/irc/irc_message.py
from typing import List, Optional, Tuple

TRAILING_MARKER = " :"


def source_nick_from_prefix(prefix: str) -> str:
    """Short nickname of a sender: everything before the first '!'."""
    nick = prefix.split("!", 1)[0]
    if nick.startswith(":"):
        nick = nick[1:]
    return nick


class IRCMessage:
    """One decoded protocol line.

    ``params`` holds every parameter after the command; when the line carried a
    trailing parameter (introduced by the first " :") it is the last element and
    is also exposed as ``trailing``.
    """

    def __init__(self, prefix: str, command: str, params: List[str], trailing: Optional[str] = None, raw: str = ""):
        self.prefix = prefix
        self.command = command
        self.params = params
        self.trailing = trailing
        self.raw = raw
        self.source_nick = source_nick_from_prefix(prefix) if prefix else ""

    @classmethod
    def parse(cls, line: str) -> "IRCMessage":
        """Decode a raw line. Never raises; an empty line yields an empty message."""
        raw = line.rstrip("\r\n")
        if not raw:
            return cls("", "", [], raw=raw)

        prefix = ""
        body = raw
        if raw.startswith(":"):
            prefix, _, body = raw[1:].partition(" ")

        trailing: Optional[str] = None
        marker_index = body.find(TRAILING_MARKER)
        if marker_index != -1:
            trailing = body[marker_index + len(TRAILING_MARKER):]
            body = body[:marker_index]

        tokens = [token for token in body.split(" ") if token]
        if trailing is not None:
            tokens.append(trailing)

        if not tokens:
            return cls(prefix, "", [], raw=raw)
        return cls(prefix, tokens[0], tokens[1:], trailing, raw=raw)

    @property
    def is_empty(self) -> bool:
        return not self.command

    @property
    def is_numeric(self) -> bool:
        return len(self.command) == 3 and self.command.isdigit()

    def param(self, index: int, default: str = "") -> str:
        return self.params[index] if len(self.params) > index else default

    def as_tuple(self) -> Tuple[str, str, List[str]]:
        return self.prefix, self.command, list(self.params)

    def __repr__(self):
        return f"<IRCMessage prefix='{self.prefix}' command='{self.command}' params={self.params}>"
