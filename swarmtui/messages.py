"""Messages passed through the application's update loop."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

VERSION = "dev"
LOGS_VIEW = "logs"

Cmd = Callable[[], object]


class Mode(str, Enum):
    """What the main list shows."""

    NODES = "nodes"
    SERVICES = "services"
    STACKS = "stacks"

    def __str__(self) -> str:
        return self.value


class KeyType(Enum):
    """Kinds of key press; the value is the key's printed name."""

    RUNES = "runes"
    ENTER = "enter"
    ESC = "esc"
    BACKSPACE = "backspace"
    CTRL_C = "ctrl+c"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PGUP = "pgup"
    PGDOWN = "pgdown"
    HOME = "home"
    END = "end"
    TAB = "tab"
    SPACE = " "


@dataclass(frozen=True)
class KeyMsg:
    """A key press: a named key or typed characters."""

    type: KeyType
    runes: str = ""

    def __str__(self) -> str:
        return self.runes if self.type is KeyType.RUNES else self.type.value

    @staticmethod
    def from_text(text: str) -> KeyMsg:
        """Build a key message from its printed name, e.g. ``"enter"`` or ``"j"``."""
        if not text:
            raise ValueError("a key needs a name or at least one character")
        try:
            named = KeyType(text)
        except ValueError:
            named = KeyType.RUNES
        if named is KeyType.RUNES:
            return KeyMsg(KeyType.RUNES, text)
        return KeyMsg(named)


@dataclass(frozen=True)
class WindowSizeMsg:
    width: int
    height: int


@dataclass(frozen=True)
class TickMsg:
    time: datetime


@dataclass(frozen=True)
class LoadedMsg:
    items: tuple[str, ...] = ()


@dataclass(frozen=True)
class InspectMsg:
    text: str


@dataclass(frozen=True)
class NodeStacksMsg:
    output: str
    stacks: tuple[str, ...] = ()
    services: tuple[str, ...] = ()


@dataclass(frozen=True)
class StatusMsg:
    host: str
    version: str
    cpu: str
    mem: str
    containers: int
    services: int


@dataclass(frozen=True)
class LogsMsg:
    text: str


@dataclass(frozen=True)
class QuitMsg:
    """Asks the program loop to stop."""