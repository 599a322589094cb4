# sirc_core/client/dummy_ui.py
from typing import Iterable, List

from sirc_core.client.display_events import DisplayEvent, DisplayKind


class DummyUI:
    """Headless display: keeps every event instead of drawing it."""

    def __init__(self):
        self.events: List[DisplayEvent] = []

    def render(self, event: DisplayEvent):
        self.events.append(event)

    def render_all(self, events: Iterable[DisplayEvent]):
        for event in events:
            self.render(event)

    def texts(self) -> List[str]:
        return [event.text for event in self.events if event.kind != DisplayKind.CLEAR]

    def visible_since_clear(self) -> List[DisplayEvent]:
        for index in range(len(self.events) - 1, -1, -1):
            if self.events[index].kind == DisplayKind.CLEAR:
                return self.events[index + 1:]
        return list(self.events)

    def reset(self):
        self.events.clear()

    def shutdown(self):
        pass
