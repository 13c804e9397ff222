"""Terminal text styling: borders, padding, colours and simple frames."""

from __future__ import annotations

import re
import textwrap
from dataclasses import dataclass

_ANSI = r"\x1b\[[0-9;?]*[ -/]*[@-~]"
_ANSI_RE = re.compile(_ANSI)
_ANSI_SPLIT = re.compile(f"({_ANSI})")


def visible_width(text: str) -> int:
    """Number of printed characters in ``text``, ignoring ANSI escapes."""
    return len(_ANSI_RE.sub("", text))


def truncate(text: str, width: int) -> str:
    """Cut ``text`` to ``width`` printed characters, keeping escape sequences."""
    pieces = []
    for part in _ANSI_SPLIT.split(text):
        if _ANSI_RE.fullmatch(part):
            pieces.append(part)
        elif width > 0:
            pieces.append(part[:width])
            width -= len(pieces[-1])
    return "".join(pieces)


@dataclass(frozen=True)
class Border:
    horizontal: str
    vertical: str
    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str


NORMAL_BORDER = Border("─", "│", "┌", "┐", "└", "┘")
ROUNDED_BORDER = Border("─", "│", "╭", "╮", "╰", "╯")


def _color(color: str | None, base: int) -> list[str]:
    if not color:
        return []
    if color.startswith("#"):
        red, green, blue = (int(color[i : i + 2], 16) for i in (1, 3, 5))
        return [f"{base};2;{red};{green};{blue}"]
    return [f"{base};5;{int(color)}"]


def _sgr(params: list[str], text: str) -> str:
    if not params or not text:
        return text
    return f"\x1b[{';'.join(params)}m{text}\x1b[0m"


@dataclass(frozen=True)
class Style:
    """An immutable set of text attributes applied by :meth:`render`."""

    foreground: str | None = None
    background: str | None = None
    italic: bool = False
    border: Border | None = None
    border_foreground: str | None = None
    padding: tuple[int, int, int, int] = (0, 0, 0, 0)
    margin: tuple[int, int, int, int] = (0, 0, 0, 0)
    width: int | None = None

    def render(self, text: str) -> str:
        """Return ``text`` laid out and coloured according to this style."""
        lines = text.replace("\t", "    ").split("\n")
        pad_top, pad_right, pad_bottom, pad_left = self.padding
        if self.width:
            inner = max(self.width - pad_left - pad_right, 1)
            lines = [
                piece
                for line in lines
                for piece in (
                    [line]
                    if visible_width(line) <= inner or "\x1b" in line
                    else textwrap.wrap(line, inner) or [""]
                )
            ]
        else:
            inner = max(visible_width(line) for line in lines)

        text_params = (["3"] if self.italic else []) + _color(self.foreground, 38)
        text_params += _color(self.background, 48)
        space = _color(self.background, 48)
        width = inner + pad_left + pad_right
        blank = _sgr(space, " " * width)

        block = [blank] * pad_top
        block += [
            _sgr(space, " " * pad_left)
            + _sgr(text_params, line + " " * (inner - visible_width(line)))
            + _sgr(space, " " * pad_right)
            for line in lines
        ]
        block += [blank] * pad_bottom

        if self.border is not None:
            edge = self.border
            params = _color(self.border_foreground, 38)
            side = _sgr(params, edge.vertical)
            block = [
                _sgr(params, edge.top_left + edge.horizontal * width + edge.top_right),
                *(side + line + side for line in block),
                _sgr(params, edge.bottom_left + edge.horizontal * width + edge.bottom_right),
            ]
            width += 2

        m_top, m_right, m_bottom, m_left = self.margin
        if any(self.margin):
            empty = " " * (width + m_left + m_right)
            block = (
                [empty] * m_top
                + [" " * m_left + line + " " * m_right for line in block]
                + [empty] * m_bottom
            )
        return "\n".join(block)


BORDER_STYLE = Style(border=NORMAL_BORDER, border_foreground="#874BFD", padding=(0, 1, 0, 1))
STATUS_STYLE = Style(
    border=ROUNDED_BORDER, border_foreground="#00FF00", padding=(0, 1, 0, 1), width=50
)
LIST_STYLE = Style(
    border=NORMAL_BORDER, border_foreground="#FFD700", margin=(1, 0, 1, 0), padding=(1, 1, 1, 1)
)
HELP_STYLE = Style(foreground="#888888", italic=True, margin=(1, 0, 1, 0))


def join_vertical(*blocks: str) -> str:
    """Stack text blocks top to bottom, left aligned to a common width."""
    lines = [line for block in blocks for line in block.split("\n")]
    if not lines:
        return ""
    width = max(visible_width(line) for line in lines)
    return "\n".join(line + " " * (width - visible_width(line)) for line in lines)


def frame(title: str, content: str, width: int) -> str:
    """Draw ``content`` inside a box of ``width`` columns with ``title`` on top."""
    width = max(width, len(title) + 4)
    title_space = width - len(title) - 2
    left = title_space // 2
    top = "┌" + "─" * left + title + "─" * (title_space - left) + "┐\n"
    body = "".join(
        "│" + line[: width - 2].ljust(width - 2) + "│\n" for line in content.split("\n")
    )
    return top + body + "└" + "─" * (width - 2) + "┘"