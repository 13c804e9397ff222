"""Commands that gather swarm data in the background and return messages."""

from __future__ import annotations

import socket
import subprocess
import time
from collections.abc import Iterable
from datetime import datetime

from swarmtui import docker
from swarmtui.messages import (
    VERSION,
    Cmd,
    InspectMsg,
    LoadedMsg,
    Mode,
    NodeStacksMsg,
    StatusMsg,
    TickMsg,
)

TICK_INTERVAL = 5.0
STACK_LABEL_FORMAT = '{{ index .Spec.Labels "com.docker.stack.namespace" }}'

_LISTERS = {
    Mode.NODES: docker.list_swarm_nodes,
    Mode.SERVICES: docker.list_swarm_services,
    Mode.STACKS: docker.list_stacks,
}

_INSPECT_ARGS = {
    Mode.NODES: ("node", "inspect"),
    Mode.SERVICES: ("service", "inspect"),
    Mode.STACKS: ("stack", "services"),
}


def _run_combined(*args: str) -> tuple[str, str | None]:
    """Run ``docker args...`` and return its merged output and an error, if any."""
    try:
        result = subprocess.run(
            ["docker", *args], stdout=subprocess.PIPE, stderr=subprocess.STDOUT
        )
    except OSError as exc:
        return "", str(exc)
    output = (result.stdout or b"").decode(errors="replace")
    if result.returncode != 0:
        return output, f"exit status {result.returncode}"
    return output, None


def tick() -> Cmd:
    """A command that waits one refresh interval and then reports the time."""

    def command() -> TickMsg:
        time.sleep(TICK_INTERVAL)
        return TickMsg(datetime.now())

    return command


def load_data(mode: Mode | str) -> Cmd:
    """A command that lists nodes, services or stacks; failures give an empty list."""
    mode = Mode(mode)

    def command() -> LoadedMsg:
        try:
            records = _LISTERS[mode]()
        except docker.DockerError:
            records = []
        return LoadedMsg(tuple(str(record) for record in records))

    return command


def load_status() -> Cmd:
    """A command that collects the overview shown in the status box."""

    def command() -> StatusMsg:
        return StatusMsg(
            host=socket.gethostname(),
            version=VERSION,
            cpu=docker.get_swarm_cpu_usage(),
            mem=docker.get_swarm_mem_usage(),
            containers=docker.get_container_count(),
            services=docker.get_service_count(),
        )

    return command


def inspect_item(mode: Mode | str, line: str) -> Cmd:
    """A command that inspects the item whose identifier starts ``line``."""
    fields = line.split()
    if not fields:
        raise ValueError("cannot inspect an empty line")
    args = (*_INSPECT_ARGS[Mode(mode)], fields[0])

    def command() -> InspectMsg:
        output, error = _run_combined(*args)
        if error:
            return InspectMsg(f"Error: {error}\n{output}")
        return InspectMsg(output)

    return command


def service_names_from_tasks(output: str) -> list[str]:
    """Service names behind task names such as ``web.1.abc``, sorted and unique."""
    return sorted({task.split(".")[0] for task in output.split()})


def format_node_stacks(node_id: str, stacks: Iterable[str]) -> str:
    lines = [f"Stacks running on node {node_id}:\n"]
    lines.extend(f"- {stack}\n" for stack in stacks)
    return "".join(lines)


def _stack_of_service(service_name: str) -> str:
    ids, error = _run_combined(
        "service", "ls", "--filter", f"name={service_name}", "--format", "{{.ID}}"
    )
    if error or not ids:
        return ""
    namespace, error = _run_combined(
        "service", "inspect", ids.strip(), "--format", STACK_LABEL_FORMAT
    )
    if error:
        return ""
    return namespace.strip()


def load_node_stacks(node_id: str) -> Cmd:
    """A command that finds the services and stacks with tasks on a node."""

    def command() -> NodeStacksMsg:
        output, error = _run_combined("node", "ps", node_id, "--format", "{{.Name}}")
        if error:
            return NodeStacksMsg(output=f"Error getting node tasks: {error}\n{output}")
        services = service_names_from_tasks(output)
        stacks = sorted({stack for stack in map(_stack_of_service, services) if stack})
        return NodeStacksMsg(
            output=format_node_stacks(node_id, stacks),
            stacks=tuple(stacks),
            services=tuple(services),
        )

    return command