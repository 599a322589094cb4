# sirc_core/client/console_ui.py
import sys
from typing import Iterable, TextIO, Optional

from sirc_core.client.display_events import DisplayEvent, DisplayKind

SEMANTIC_MARKERS = {
    "error": "!!",
    "join_part": "-->",
    "quit": "<--",
    "kick": "<--",
    "nick_change": "--",
    "system": "--",
}
CLEAR_RULE = "-" * 60


class ConsoleUI:
    """Plain line renderer: one display event becomes at most one stdout line."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def format_event(self, event: DisplayEvent) -> str:
        if event.kind == DisplayKind.CLEAR:
            return CLEAR_RULE
        if event.kind == DisplayKind.PRIVATE:
            return f"[private] {event.text}"
        if event.kind == DisplayKind.SEMANTIC:
            marker = SEMANTIC_MARKERS.get(event.color_key or "system", "--")
            return f"{marker} {event.text}"
        return event.text

    def render(self, event: DisplayEvent):
        print(self.format_event(event), file=self.stream, flush=True)

    def render_all(self, events: Iterable[DisplayEvent]):
        for event in events:
            self.render(event)

    def shutdown(self):
        self.stream.flush()
