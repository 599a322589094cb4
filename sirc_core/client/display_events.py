# sirc_core/client/display_events.py
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class DisplayKind(Enum):
    NOTE = auto()
    SEMANTIC = auto()
    PRIVATE = auto()
    CLEAR = auto()


@dataclass(frozen=True)
class DisplayEvent:
    """Something the display collaborator should show.

    ``color_key`` names a semantic role (join_part, nick_change, kick, quit,
    system, error) for SEMANTIC events; renderers may ignore it.
    """

    kind: DisplayKind
    text: str = ""
    color_key: Optional[str] = None


def note(text: str) -> DisplayEvent:
    return DisplayEvent(DisplayKind.NOTE, text)


def semantic(text: str, color_key: str = "system") -> DisplayEvent:
    return DisplayEvent(DisplayKind.SEMANTIC, text, color_key)


def private(text: str) -> DisplayEvent:
    return DisplayEvent(DisplayKind.PRIVATE, text)


def clear() -> DisplayEvent:
    return DisplayEvent(DisplayKind.CLEAR)


def error(text: str) -> DisplayEvent:
    return semantic(text, "error")
