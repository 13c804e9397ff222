"""Query a Docker swarm through the ``docker`` command line."""

from __future__ import annotations

import subprocess
from collections.abc import Iterable, Iterator
from dataclasses import astuple, dataclass

NODE_FORMAT = "{{.ID}}\t{{.Hostname}}\t{{.Status}}\t{{.Availability}}\t{{.ManagerStatus}}"
SERVICE_FORMAT = "{{.Name}}\t{{.Mode}}\t{{.Replicas}}"
STACK_FORMAT = "{{.Name}}\t{{.Services}}\t{{.Orchestrator}}"


class DockerError(RuntimeError):
    """Raised when a docker command cannot be started or exits with an error."""

    def __init__(self, message: str, output: bytes = b"") -> None:
        super().__init__(message)
        self.output = output


class _Record:
    """Mixin that prints a dataclass as its field values joined by spaces."""

    def __str__(self) -> str:
        return " ".join(str(value) for value in astuple(self))


@dataclass(frozen=True)
class SwarmNode(_Record):
    id: str
    hostname: str
    status: str
    availability: str
    manager_status: str


@dataclass(frozen=True)
class SwarmService(_Record):
    name: str
    mode: str
    replicas: str


@dataclass(frozen=True)
class Stack(_Record):
    name: str
    services: str
    orchestrator: str


def run_docker_cmd(name: str, *args: str) -> bytes:
    """Run ``docker name args...`` and return its standard output."""
    command = ["docker", name, *args]
    try:
        result = subprocess.run(command, capture_output=True, check=True)
    except subprocess.CalledProcessError as exc:
        raise DockerError(
            f"{' '.join(command)} exited with status {exc.returncode}",
            exc.stderr or b"",
        ) from exc
    except OSError as exc:
        raise DockerError(f"cannot run docker: {exc}") from exc
    return result.stdout


def _lines(output: bytes | str) -> list[str]:
    text = output.decode(errors="replace") if isinstance(output, bytes) else output
    return text.strip().split("\n")


def _rows(output: bytes | str) -> Iterator[list[str]]:
    for line in _lines(output):
        yield line.split("\t")


def parse_nodes(output: bytes | str) -> list[SwarmNode]:
    """Parse tab separated ``docker node ls`` output; short rows are skipped."""
    return [SwarmNode(*parts[:5]) for parts in _rows(output) if len(parts) >= 5]


def parse_services(output: bytes | str) -> list[SwarmService]:
    """Parse tab separated ``docker service ls`` output; short rows are skipped."""
    return [SwarmService(*parts[:3]) for parts in _rows(output) if len(parts) >= 3]


def parse_stacks(output: bytes | str) -> list[Stack]:
    """Parse tab separated ``docker stack ls`` output; short rows are skipped."""
    return [Stack(*parts[:3]) for parts in _rows(output) if len(parts) >= 3]


def list_swarm_nodes() -> list[SwarmNode]:
    return parse_nodes(run_docker_cmd("node", "ls", "--format", NODE_FORMAT))


def list_swarm_services() -> list[SwarmService]:
    return parse_services(run_docker_cmd("service", "ls", "--format", SERVICE_FORMAT))


def list_stacks() -> list[Stack]:
    return parse_stacks(run_docker_cmd("stack", "ls", "--format", STACK_FORMAT))


def _parse_float(value: str) -> float:
    # Reject forms Python accepts but a strict float parser would not.
    if not value or value != value.strip() or "_" in value:
        raise ValueError(value)
    return float(value)


def parse_and_sum_percent_lines(lines: Iterable[str]) -> float:
    """Sum lines like ``12.5%``; lines that are not numbers are ignored."""
    total = 0.0
    for line in lines:
        try:
            total += _parse_float(line.strip().removesuffix("%"))
        except ValueError:
            continue
    return total


def count_non_empty_lines(lines: Iterable[str]) -> int:
    return sum(1 for line in lines if line.strip())


def _stats_total(field: str) -> str:
    try:
        out = run_docker_cmd("stats", "--no-stream", "--format", field)
    except DockerError:
        return "0%"
    return f"{parse_and_sum_percent_lines(_lines(out)):.1f}%"


def get_swarm_cpu_usage() -> str:
    return _stats_total("{{.CPUPerc}}")


def get_swarm_mem_usage() -> str:
    return _stats_total("{{.MemPerc}}")


def _count_output_lines(name: str, *args: str) -> int:
    try:
        out = run_docker_cmd(name, *args)
    except DockerError:
        return 0
    return count_non_empty_lines(_lines(out))


def get_container_count() -> int:
    return _count_output_lines("ps", "-q")


def get_service_count() -> int:
    return _count_output_lines("service", "ls", "-q")


def get_docker_version() -> str:
    try:
        out = run_docker_cmd("version", "--format", "{{.Server.Version}}")
    except DockerError:
        return "unknown"
    return out.decode(errors="replace").strip()