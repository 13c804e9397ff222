import dataclasses
import datetime
import socket
import subprocess
from unittest import mock

import pytest

from swarmtui import docker
from swarmtui.commands import (
    STACK_LABEL_FORMAT,
    TICK_INTERVAL,
    format_node_stacks,
    inspect_item,
    load_data,
    load_node_stacks,
    load_status,
    service_names_from_tasks,
    tick,
)
from swarmtui.messages import VERSION, InspectMsg, LoadedMsg, Mode


def _fake_run(responses, calls=None):
    def run(cmd, **kwargs):
        if calls is not None:
            calls.append(list(cmd))
        code, out = responses.get(tuple(cmd), (1, b""))
        if kwargs.get("check") and code:
            raise subprocess.CalledProcessError(code, cmd, output=out, stderr=b"")
        return subprocess.CompletedProcess(cmd, code, stdout=out, stderr=b"")

    return run


def test_service_names_from_tasks_are_unique_and_sorted():
    output = "web.1.abc\nweb.2.def\ndb.1.xyz\n"
    assert service_names_from_tasks(output) == ["db", "web"]


def test_service_names_from_empty_output():
    assert service_names_from_tasks("") == []


def test_format_node_stacks():
    assert format_node_stacks("n1", ["a", "b"]) == "Stacks running on node n1:\n- a\n- b\n"
    assert format_node_stacks("n1", []) == "Stacks running on node n1:\n"


def test_tick_waits_then_reports_time():
    before = datetime.datetime.now()
    with mock.patch("time.sleep") as sleep:
        msg = tick()()
    after = datetime.datetime.now()
    sleep.assert_called_once_with(TICK_INTERVAL)
    stamp = dataclasses.astuple(msg)[0]
    assert before <= stamp <= after


def test_load_data_lists_nodes():
    key = ("docker", "node", "ls", "--format", docker.NODE_FORMAT)
    responses = {key: (0, b"abc\thost1\tReady\tActive\tLeader\n")}
    with mock.patch("subprocess.run", side_effect=_fake_run(responses)):
        msg = load_data(Mode.NODES)()
    assert msg == LoadedMsg(("abc host1 Ready Active Leader",))


def test_load_data_failure_gives_empty_list():
    with mock.patch("subprocess.run", side_effect=_fake_run({})):
        msg = load_data("services")()
    assert msg == LoadedMsg(())


def test_load_status_collects_overview():
    responses = {
        ("docker", "stats", "--no-stream", "--format", "{{.CPUPerc}}"): (0, b"1.5%\n2.5%\n"),
        ("docker", "stats", "--no-stream", "--format", "{{.MemPerc}}"): (0, b"10%\n"),
        ("docker", "ps", "-q"): (0, b"a1\nb2\n"),
        ("docker", "service", "ls", "-q"): (0, b"s1\n"),
    }
    with mock.patch("subprocess.run", side_effect=_fake_run(responses)):
        msg = load_status()()
        mem = docker.get_swarm_mem_usage()
    assert msg.cpu == "4.0%"
    assert msg.mem == mem
    assert msg.containers == 2
    assert msg.version == VERSION
    assert msg.host == socket.gethostname()


def test_inspect_item_uses_first_field():
    calls = []
    responses = {("docker", "node", "inspect", "abc"): (0, b"[{}]")}
    with mock.patch("subprocess.run", side_effect=_fake_run(responses, calls)):
        msg = inspect_item(Mode.NODES, "abc host1 Ready")()
    assert calls == [["docker", "node", "inspect", "abc"]]
    assert msg == InspectMsg("[{}]")


def test_inspect_stack_lists_its_services():
    calls = []
    responses = {("docker", "stack", "services", "shop"): (0, b"ID NAME")}
    with mock.patch("subprocess.run", side_effect=_fake_run(responses, calls)):
        msg = inspect_item(Mode.STACKS, "shop 3 Swarm")()
    assert calls == [["docker", "stack", "services", "shop"]]
    assert msg == InspectMsg("ID NAME")


def test_inspect_item_reports_error_with_output():
    responses = {("docker", "service", "inspect", "web"): (1, b"boom")}
    with mock.patch("subprocess.run", side_effect=_fake_run(responses)):
        msg = inspect_item(Mode.SERVICES, "web replicated 1/1")()
    assert msg.text == "Error: exit status 1\nboom"


def test_inspect_item_without_docker():
    with mock.patch("subprocess.run", side_effect=FileNotFoundError("docker")):
        msg = inspect_item(Mode.NODES, "abc")()
    assert msg.text.startswith("Error: ")


def test_inspect_item_rejects_blank_line():
    with pytest.raises(ValueError):
        inspect_item(Mode.NODES, "   ")


def test_load_node_stacks_finds_stacks_and_services():
    responses = {
        ("docker", "node", "ps", "n1", "--format", "{{.Name}}"): (0, b"web.1.x\ndb.1.y\nweb.2.z\n"),
        ("docker", "service", "ls", "--filter", "name=web", "--format", "{{.ID}}"): (0, b"id1\n"),
        ("docker", "service", "ls", "--filter", "name=db", "--format", "{{.ID}}"): (0, b"id2\n"),
        ("docker", "service", "inspect", "id1", "--format", STACK_LABEL_FORMAT): (0, b"shop\n"),
        ("docker", "service", "inspect", "id2", "--format", STACK_LABEL_FORMAT): (0, b"\n"),
    }
    with mock.patch("subprocess.run", side_effect=_fake_run(responses)):
        msg = load_node_stacks("n1")()
    assert msg.stacks == ("shop",)
    assert msg.services == ("db", "web")
    assert msg.output == format_node_stacks("n1", ["shop"])


def test_load_node_stacks_reports_task_error():
    responses = {("docker", "node", "ps", "n1", "--format", "{{.Name}}"): (1, b"no such node")}
    with mock.patch("subprocess.run", side_effect=_fake_run(responses)):
        msg = load_node_stacks("n1")()
    assert msg.output == "Error getting node tasks: exit status 1\nno such node"
    assert msg.stacks == ()
    assert msg.services == ()