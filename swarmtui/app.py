"""The interactive swarm browser: application state, key handling and rendering."""

from __future__ import annotations

import argparse
import queue
import threading

from swarmtui.commands import inspect_item, load_data, load_node_stacks, load_status, tick
from swarmtui.logs import LogsModel, load
from swarmtui.messages import (
    LOGS_VIEW,
    VERSION,
    Cmd,
    InspectMsg,
    KeyMsg,
    KeyType,
    LoadedMsg,
    LogsMsg,
    Mode,
    NodeStacksMsg,
    QuitMsg,
    StatusMsg,
    TickMsg,
    WindowSizeMsg,
)
from swarmtui.search import highlight_insensitive
from swarmtui.styles import BORDER_STYLE, HELP_STYLE, STATUS_STYLE, join_vertical
from swarmtui.viewport import Viewport

MAIN_VIEW = "main"
NODE_STACKS_VIEW = "nodeStacks"


def _quit() -> QuitMsg:
    return QuitMsg()


def _cmds(*commands: Cmd | None) -> list[Cmd]:
    return [command for command in commands if command is not None]


class App:
    """All state of the running program; ``update`` turns messages into new state."""

    def __init__(self) -> None:
        self.mode = Mode.NODES
        self.view_name = MAIN_VIEW
        self.items: list[str] = []
        self.cursor = 0
        self.viewport = Viewport(width=80, height=20, y_position=5)
        self.inspect_viewport = Viewport(width=80, height=20)
        self.inspecting = False
        self.inspect_text = ""
        self.command_mode = False
        self.command_input = ""
        self.selected_node_id = ""
        self.host = self.version = self.cpu_usage = self.mem_usage = ""
        self.container_count = self.service_count = 0
        self.node_stacks: list[str] = []
        self.stack_cursor = 0
        self.node_stack_lines: list[str] = []
        self.node_services: list[str] = []
        self.logs = LogsModel(80, 20)
        self.inspect_search_mode = False
        self.inspect_search_term = ""

    def init(self) -> list[Cmd]:
        """Commands to run when the program starts."""
        return [tick(), load_data(self.mode), load_status()]

    def update(self, msg: object) -> list[Cmd]:
        """Apply ``msg`` and return the commands it triggers."""
        if isinstance(msg, WindowSizeMsg):
            self.handle_resize(msg)
        elif isinstance(msg, KeyMsg):
            return self.handle_key(msg)
        elif isinstance(msg, TickMsg):
            return [load_data(self.mode), load_status()]
        elif isinstance(msg, LoadedMsg):
            self.items = list(msg.items)
            self.cursor = 0
        elif isinstance(msg, InspectMsg):
            self.inspecting = True
            self.inspect_text = msg.text
            self.inspect_viewport.set_content(self.inspect_text)
            self.inspect_viewport.goto_top()
        elif isinstance(msg, NodeStacksMsg):
            self.view_name = NODE_STACKS_VIEW
            self.node_stacks = list(msg.stacks)
            self.node_services = list(msg.services)
            self.node_stack_lines = msg.output.split("\n")
            self.stack_cursor = 0
        elif isinstance(msg, LogsMsg):
            self.view_name = LOGS_VIEW
            return _cmds(self.logs.update(msg))
        elif isinstance(msg, StatusMsg):
            self.host, self.version = msg.host, msg.version
            self.cpu_usage, self.mem_usage = msg.cpu, msg.mem
            self.container_count, self.service_count = msg.containers, msg.services
        return []

    def handle_resize(self, msg: WindowSizeMsg) -> None:
        width, height = msg.width - 4, msg.height - 10
        for viewport in (self.viewport, self.inspect_viewport):
            viewport.width, viewport.height = width, height
        self.logs.set_size(width, height)

    def handle_key(self, msg: KeyMsg) -> list[Cmd]:
        if msg.type in (KeyType.CTRL_C, KeyType.ESC) or str(msg) == "esc":
            if self.inspecting:
                self.inspecting = False
                self.inspect_text = ""
                return []
            if self.view_name == NODE_STACKS_VIEW:
                self.view_name = MAIN_VIEW
                return []
            if self.view_name == LOGS_VIEW:
                self.view_name = NODE_STACKS_VIEW
                return _cmds(self.logs.update(msg))
            return [_quit]
        if self.command_mode:
            return self.handle_command_key(msg)
        if self.inspecting:
            return self.handle_inspect_key(msg)
        if self.view_name == LOGS_VIEW:
            return _cmds(self.logs.update(msg))
        return self.handle_main_key(msg)

    def handle_command_key(self, msg: KeyMsg) -> list[Cmd]:
        if msg.type in (KeyType.ENTER, KeyType.ESC):
            command = self.command_input.strip()
            self.command_mode = False
            self.command_input = ""
            if msg.type is KeyType.ENTER and command in {mode.value for mode in Mode}:
                self.mode = Mode(command)
                self.cursor = 0
                return [load_data(self.mode)]
        elif msg.type is KeyType.BACKSPACE:
            self.command_input = self.command_input[:-1]
        else:
            self.command_input += str(msg)
        return []

    def handle_inspect_key(self, msg: KeyMsg) -> list[Cmd]:
        if self.inspect_search_mode:
            self._handle_inspect_search_key(msg)
        else:
            self._handle_inspect_scroll_key(msg)
        return []

    def _handle_inspect_search_key(self, msg: KeyMsg) -> None:
        if msg.type is KeyType.ENTER:
            self.inspect_search_mode = False
            self.inspect_viewport.set_content(
                highlight_insensitive(self.inspect_text, self.inspect_search_term)
            )
            self.inspect_viewport.goto_top()
        elif msg.type is KeyType.ESC:
            self.inspect_search_mode = False
            self.inspect_search_term = ""
            self.inspect_viewport.set_content(self.inspect_text)
        elif msg.type is KeyType.BACKSPACE:
            self.inspect_search_term = self.inspect_search_term[:-1]
        elif len(key := str(msg)) == 1 and ord(key) >= 32:
            self.inspect_search_term += key

    def _handle_inspect_scroll_key(self, msg: KeyMsg) -> None:
        viewport = self.inspect_viewport
        key = str(msg)
        if key == "/":
            self.inspect_search_mode = True
            self.inspect_search_term = ""
        elif key in ("j", "down"):
            viewport.scroll_down(1)
        elif key in ("k", "up"):
            viewport.scroll_up(1)
        elif key == "pgdown":
            viewport.scroll_down(viewport.height)
        elif key == "pgup":
            viewport.scroll_up(viewport.height)
        elif key == "g":
            viewport.goto_top()
        elif key == "G":
            viewport.goto_bottom()
        elif key in ("q", "esc"):
            self.inspecting = False
            self.inspect_text = ""

    def handle_main_key(self, msg: KeyMsg) -> list[Cmd]:
        key = str(msg)
        in_stacks = self.view_name == NODE_STACKS_VIEW
        if key == "q":
            return [_quit]
        if key in ("j", "down"):
            if in_stacks and self.stack_cursor < len(self.node_stacks) - 1:
                self.stack_cursor += 1
            elif self.cursor < len(self.items) - 1:
                self.cursor += 1
        elif key in ("k", "up"):
            if in_stacks and self.stack_cursor > 0:
                self.stack_cursor -= 1
            elif self.cursor > 0:
                self.cursor -= 1
        elif key == "enter":
            if in_stacks and self.stack_cursor < min(
                len(self.node_stack_lines), len(self.node_services)
            ):
                return [load(self.node_services[self.stack_cursor])]
        elif key == "i":
            if self.cursor < len(self.items) and self.items[self.cursor].split():
                command = inspect_item(self.mode, self.items[self.cursor])
                self.inspect_viewport.set_content("")
                return [command]
        elif key == ":":
            self.command_mode = True
        elif key == "s":
            return self.handle_select_node()
        return []

    def handle_select_node(self) -> list[Cmd]:
        """Open the stacks view for the node under the cursor."""
        if self.mode is not Mode.NODES or self.cursor >= len(self.items):
            return []
        fields = self.items[self.cursor].split()
        if not fields:
            return []
        self.selected_node_id = fields[0]
        self.view_name = NODE_STACKS_VIEW
        return [load_node_stacks(self.selected_node_id)]

    def view(self) -> str:
        """Render the current screen."""
        if self.inspecting:
            header = f"Inspecting ({self.mode})"
            if self.inspect_search_mode:
                header += f" - Search: {self.inspect_search_term}"
            return BORDER_STYLE.render(
                f"{header}\n\n{self.inspect_viewport.view()}\n\n"
                "[press q or esc to go back, / to search]"
            )
        if self.view_name == LOGS_VIEW:
            return self.logs.view()
        if self.view_name == NODE_STACKS_VIEW:
            rows = "".join(
                f"{'➜ ' if index == self.stack_cursor else '  '}{stack}\n"
                for index, stack in enumerate(self.node_stacks)
            )
            return f"Stacks on node:\n\n{rows}\n[press enter to inspect logs, q/esc to go back]"

        status = STATUS_STYLE.render(
            f"Host: {self.host}\nVersion: {self.version}\nCPU: {self.cpu_usage}\n"
            f"MEM: {self.mem_usage}\nContainers: {self.container_count}\n"
            f"Services: {self.service_count}"
        )
        rows = "".join(
            f"{'→ ' if index == self.cursor else '  '}{item}\n"
            for index, item in enumerate(self.items)
        )
        return join_vertical(
            status,
            BORDER_STYLE.render(f"Mode: {self.mode}\n\n{rows}"),
            HELP_STYLE.render("[i: inspect, s: see stacks, q: quit, j/k: move cursor, : switch mode]"),
        )


_KEYS = {
    "KEY_ENTER": KeyType.ENTER,
    "KEY_ESCAPE": KeyType.ESC,
    "KEY_BACKSPACE": KeyType.BACKSPACE,
    "KEY_DELETE": KeyType.BACKSPACE,
    "KEY_UP": KeyType.UP,
    "KEY_DOWN": KeyType.DOWN,
    "KEY_LEFT": KeyType.LEFT,
    "KEY_RIGHT": KeyType.RIGHT,
    "KEY_PGUP": KeyType.PGUP,
    "KEY_PGDOWN": KeyType.PGDOWN,
    "KEY_HOME": KeyType.HOME,
    "KEY_END": KeyType.END,
    "KEY_TAB": KeyType.TAB,
    "\x03": KeyType.CTRL_C,
    "\r": KeyType.ENTER,
    "\n": KeyType.ENTER,
    "\x7f": KeyType.BACKSPACE,
    "\b": KeyType.BACKSPACE,
    "\x1b": KeyType.ESC,
    "\t": KeyType.TAB,
    " ": KeyType.SPACE,
}


def _key_from_keystroke(keystroke) -> KeyMsg | None:
    text = str(keystroke)
    key_type = _KEYS.get(keystroke.name or "") or _KEYS.get(text)
    if key_type is not None:
        return KeyMsg(key_type)
    if keystroke.is_sequence or not text:
        return None
    return KeyMsg(KeyType.RUNES, text)


def _start(command: Cmd, inbox: queue.Queue) -> None:
    def work() -> None:
        try:
            message = command()
        except Exception:  # a failed background job must not take down the UI
            return
        if message is not None:
            inbox.put(message)

    threading.Thread(target=work, daemon=True).start()


def run(app: App) -> None:
    """Drive ``app`` on the terminal until it asks to quit."""
    import blessed

    term = blessed.Terminal()
    inbox: queue.Queue = queue.Queue()
    size = (0, 0)

    with term.fullscreen(), term.raw(), term.hidden_cursor():
        for command in app.init():
            _start(command, inbox)
        while True:
            messages: list[object] = []
            if (term.width, term.height) != size:
                size = (term.width, term.height)
                messages.append(WindowSizeMsg(*size))
            keystroke = term.inkey(timeout=0.1)
            if keystroke and (key := _key_from_keystroke(keystroke)) is not None:
                messages.append(key)
            while not inbox.empty():
                messages.append(inbox.get_nowait())
            for message in messages:
                if isinstance(message, QuitMsg):
                    return
                for command in app.update(message):
                    _start(command, inbox)
            body = app.view().replace("\n", term.clear_eol + "\r\n")
            print(term.home + body + term.clear_eol + term.clear_eos, end="", flush=True)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="swarmtui", description="Browse the nodes, services and stacks of a Docker swarm."
    )
    parser.add_argument("--version", action="version", version=VERSION)
    parser.parse_args(argv)
    try:
        run(App())
    except KeyboardInterrupt:
        return 130
    return 0