import subprocess
from unittest import mock

from swarmtui.logs import LogsModel, load
from swarmtui.messages import KeyMsg, LogsMsg, TickMsg, WindowSizeMsg
from swarmtui.search import highlight_matches


def _press(model, *keys):
    for key in keys:
        model.handle_key(KeyMsg.from_text(key))


def _loaded(text, width=0, height=10):
    model = LogsModel(width, height)
    model.update(LogsMsg(text))
    return model


def test_hidden_model_renders_nothing():
    assert LogsModel().view() == ""


def test_logs_message_shows_text():
    model = _loaded("line1\nline2", width=40)
    assert model.visible is True
    assert model.log_lines == "line1\nline2"
    assert "line1" in model.view()
    assert "[press q or esc to go back, / to search]" in model.view()


def test_set_size_leaves_room_for_header():
    model = LogsModel()
    model.set_size(100, 30)
    assert model.viewport.width == 100
    assert model.viewport.height == 26


def test_window_size_message_resizes():
    model = LogsModel()
    model.update(WindowSizeMsg(50, 10))
    assert model.viewport.width == 50
    assert model.viewport.height == 8


def test_other_messages_change_nothing():
    model = LogsModel()
    assert model.update(TickMsg(None)) is None
    assert model.visible is False


def test_quit_and_escape_hide_view():
    for key in ("q", "esc"):
        model = _loaded("text")
        _press(model, key)
        assert model.visible is False
        assert model.view() == ""


def test_typing_search_term():
    model = _loaded("text")
    _press(model, "/", "a", "b", "c", "backspace")
    assert model.mode == "search"
    assert model.search_term == "ab"
    assert "Inspecting (search) - Search: ab" in model.view()


def test_search_highlights_log_text():
    text = "err a\nok\nerr b"
    model = _loaded(text)
    _press(model, "/", "e", "r", "r", "enter")
    assert model.mode == "normal"
    assert len(model.search_matches) == 2
    assert "\n".join(model.viewport.lines) == highlight_matches(text, "err")
    assert "Inspecting (normal)" in model.view()


def test_next_and_previous_match_wrap_around():
    model = _loaded("err a\nerr b\nok")
    _press(model, "/", "e", "r", "r", "enter")
    assert model.search_index == 0
    _press(model, "n")
    assert model.search_index == 1
    _press(model, "n")
    assert model.search_index == 0
    _press(model, "N")
    assert model.search_index == 1


def test_search_scrolls_match_into_view():
    text = "\n".join(f"line {i}" for i in range(10))
    model = _loaded(text, width=0, height=4)
    _press(model, "/", *"line 3", "enter")
    offset = model.viewport.y_offset
    assert offset <= 3 < offset + model.viewport.height
    assert model.search_matches == [text.index("line 3")]


def test_arrow_and_page_keys_scroll():
    model = _loaded("\n".join(str(i) for i in range(20)), height=5)
    _press(model, "down")
    assert model.viewport.y_offset == 1
    _press(model, "up")
    assert model.viewport.y_offset == 0
    _press(model, "pgdown")
    assert model.viewport.y_offset == model.viewport.height
    _press(model, "pgup")
    assert model.viewport.y_offset == 0


def test_set_content_clears_search():
    model = _loaded("err here")
    _press(model, "/", "e", "r", "r", "enter")
    model.set_content("fresh")
    assert model.search_term == ""
    assert model.search_matches == []
    assert model.search_index == 0
    assert model.mode == "normal"
    assert model.viewport.lines == ("fresh",)


def test_load_returns_service_logs():
    calls = []

    def run(cmd, **kwargs):
        calls.append(list(cmd))
        return subprocess.CompletedProcess(cmd, 0, stdout=b"log output", stderr=None)

    with mock.patch("subprocess.run", side_effect=run):
        msg = load("svc1")()
    assert calls == [["docker", "service", "logs", "--no-trunc", "svc1"]]
    assert msg == LogsMsg("log output")


def test_load_reports_error():
    def run(cmd, **kwargs):
        return subprocess.CompletedProcess(cmd, 1, stdout=b"no such service", stderr=None)

    with mock.patch("subprocess.run", side_effect=run):
        msg = load("svc1")()
    assert msg.text == "Error: exit status 1\nno such service"