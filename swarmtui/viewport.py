"""A scrollable window onto a block of text."""

from __future__ import annotations

from dataclasses import dataclass, field

from swarmtui.styles import truncate, visible_width


@dataclass
class Viewport:
    """Shows ``height`` lines of its content starting at ``y_offset``."""

    width: int = 0
    height: int = 0
    y_position: int = 0
    y_offset: int = 0
    _lines: list[str] = field(default_factory=list, init=False, repr=False)

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(self._lines)

    @property
    def total_line_count(self) -> int:
        return len(self._lines)

    @property
    def max_y_offset(self) -> int:
        return max(0, len(self._lines) - max(self.height, 0))

    @property
    def at_top(self) -> bool:
        return self.y_offset <= 0

    @property
    def at_bottom(self) -> bool:
        return self.y_offset >= self.max_y_offset

    def set_content(self, content: str) -> None:
        self._lines = content.replace("\r\n", "\n").split("\n")
        if self.y_offset > len(self._lines) - 1:
            self.goto_bottom()

    def goto_top(self) -> None:
        self.y_offset = 0

    def goto_bottom(self) -> None:
        self.y_offset = self.max_y_offset

    def set_y_offset(self, offset: int) -> None:
        self.y_offset = min(max(offset, 0), self.max_y_offset)

    def scroll_down(self, n: int) -> None:
        if not self.at_bottom and n and self._lines:
            self.set_y_offset(self.y_offset + n)

    def scroll_up(self, n: int) -> None:
        if not self.at_top and n and self._lines:
            self.set_y_offset(self.y_offset - n)

    def visible_lines(self) -> list[str]:
        top = max(0, self.y_offset)
        return self._lines[top : max(top, self.y_offset + max(self.height, 0))]

    def view(self) -> str:
        """Render the visible lines, padded and cut to the viewport size."""
        if self.height <= 0:
            return ""
        lines = self.visible_lines()
        if self.width > 0:
            lines = [
                cut + " " * (self.width - visible_width(cut))
                for cut in (truncate(line, self.width) for line in lines)
            ]
        lines.extend([" " * max(self.width, 0)] * (self.height - len(lines)))
        return "\n".join(lines)