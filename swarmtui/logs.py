"""The service log view: a scrollable, searchable page of log output."""

from __future__ import annotations

import copy

from swarmtui.commands import _run_combined
from swarmtui.messages import Cmd, KeyMsg, KeyType, LogsMsg, WindowSizeMsg
from swarmtui.search import find_all_matches, highlight_matches
from swarmtui.styles import BORDER_STYLE
from swarmtui.viewport import Viewport

NORMAL = "normal"
SEARCH = "search"


def load(service_id: str) -> Cmd:
    """A command that fetches the full logs of a service."""

    def command() -> LogsMsg:
        output, error = _run_combined("service", "logs", "--no-trunc", service_id)
        if error:
            return LogsMsg(f"Error: {error}\n{output}")
        return LogsMsg(output)

    return command


class LogsModel:
    """State of the log view: the text, its viewport and any search in progress."""

    def __init__(self, width: int = 80, height: int = 20) -> None:
        self.viewport = Viewport(width=width, height=height)
        self.viewport.set_content("")
        self.visible = False
        self.search_term = ""
        self.search_index = 0
        self.search_matches: list[int] = []
        self.mode = ""
        self.log_lines = ""

    def set_size(self, width: int, height: int) -> None:
        self.viewport.width = width
        self.viewport.height = height - 4

    def set_content(self, content: str) -> None:
        """Replace the shown text and forget any search."""
        self.viewport.set_content(content)
        self.search_matches = []
        self.search_term = ""
        self.search_index = 0
        self.mode = NORMAL

    def update(self, msg: object) -> Cmd | None:
        if isinstance(msg, LogsMsg):
            self.log_lines = msg.text
            self.viewport.set_content(self.log_lines)
            self.visible = True
        elif isinstance(msg, WindowSizeMsg):
            self.viewport.width = msg.width
            self.viewport.height = msg.height - 2
        elif isinstance(msg, KeyMsg):
            return self.handle_key(msg)
        return None

    def handle_key(self, msg: KeyMsg) -> Cmd | None:
        key = str(msg)
        if key in ("q", "esc"):
            self.visible = False
        elif key == "/":
            self.mode = SEARCH
            self.search_term = ""
        elif key == "enter":
            if self.mode == SEARCH:
                self._run_search()
        elif key == "n":
            if self.search_matches:
                self.search_index = (self.search_index + 1) % len(self.search_matches)
                self._scroll_to_match()
        elif key == "N":
            if self.search_matches:
                self.search_index = (self.search_index - 1) % len(self.search_matches)
                self._scroll_to_match()
        elif key == "up":
            self.viewport.scroll_up(1)
        elif key == "down":
            self.viewport.scroll_down(1)
        elif key == "pgup":
            self.viewport.scroll_up(self.viewport.height)
        elif key == "pgdown":
            self.viewport.scroll_down(self.viewport.height)
        elif self.mode == SEARCH:
            if msg.type is KeyType.RUNES:
                self.search_term += msg.runes
            elif msg.type is KeyType.BACKSPACE:
                self.search_term = self.search_term[:-1]
        return None

    def _run_search(self) -> None:
        self.mode = NORMAL
        self.search_matches = find_all_matches(self.viewport.view(), self.search_term)
        self.search_index = 0
        self.viewport.set_content(highlight_matches(self.log_lines, self.search_term))
        self._scroll_to_match()

    def _scroll_to_match(self) -> None:
        if not self.search_matches:
            return
        position = self.search_matches[self.search_index]
        lines_before = self.log_lines[:position].split("\n")
        offset = max(0, len(lines_before) - self.viewport.height // 2)
        self.viewport.goto_top()
        self.viewport.set_y_offset(offset)

    def view(self) -> str:
        if not self.visible:
            return ""
        header = f"Inspecting ({self.mode})"
        if self.mode == SEARCH:
            header += f" - Search: {self.search_term}"

        content = self.viewport.view()
        if self.search_matches:
            content = highlight_matches(content, self.search_term)
        # Render from a copy so the live viewport keeps its own content.
        shown = copy.copy(self.viewport)
        shown.set_content(content)

        return BORDER_STYLE.render(
            f"{header}\n\n{shown.view()}\n\n[press q or esc to go back, / to search]"
        )