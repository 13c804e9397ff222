[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "swarmtui"
version = "0.1.0"
description = "A terminal user interface for browsing Docker Swarm nodes, services, stacks and logs"
requires-python = ">=3.10"
keywords = ["docker", "swarm", "tui", "terminal", "cluster"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]
dependencies = [
    "blessed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
swarmtui = "swarmtui.app:main"

[tool.hatch.build.targets.wheel]
packages = ["swarmtui"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
