# swarmtui

A full-screen terminal interface for a Docker Swarm cluster. It lists the
cluster's nodes, services or stacks and shows a small status box: host name,
summed CPU and memory use of running containers, the number of running
containers and the number of services. From the list you can inspect an item,
see which stacks have tasks on a node, and read a service's logs.

The program calls the `docker` command line client. Run it on a manager node,
or with a `docker` context that points at one.

## Install

    pip install .

## Run

    swarmtui

`swarmtui --version` prints the version string and exits.

At start the program loads the node list and the status box. Five seconds
later it loads both once more; after that they are only reloaded when you
switch mode with `:`. Each reload puts the cursor back on the first line.

## Keys

`ctrl+c` and `esc` always act first: they leave the inspect view, go from the
node stacks view back to the main list, or from the logs view back to the node
stacks view. In the main list they quit.

Main list:

| Key          | Action                                                  |
|--------------|---------------------------------------------------------|
| `j` / `down` | move the cursor down                                    |
| `k` / `up`   | move the cursor up                                      |
| `i`          | inspect the selected item                               |
| `s`          | in node mode, show the stacks on the selected node      |
| `:`          | type a command, then `enter`: `nodes`, `services` or `stacks` |
| `q`          | quit                                                    |

While typing a command, `backspace` deletes a character and `enter` runs it;
anything other than the three mode names is ignored.

Inspect view: `j`/`k` and the arrow keys scroll, `pgup`/`pgdown` scroll a
page, `g`/`G` jump to the top or bottom, and `q` goes back. `/` starts a
search: type the term and press `enter` to highlight every case-insensitive
match.

Node stacks view: `j`/`k` move the cursor and `enter` opens the logs of the
service at the same position in the node's (sorted) list of services. `q`
quits the program.

Logs view: the arrow keys and `pgup`/`pgdown` scroll, `/` starts a search,
`enter` highlights the matches, and `n` / `N` jump to the next and previous
match. `q` hides the log text.

## Use as a library

The `swarmtui.docker` module can be used on its own:

    from swarmtui.docker import list_swarm_nodes, get_swarm_cpu_usage

    for node in list_swarm_nodes():
        print(node.hostname, node.status)
    print(get_swarm_cpu_usage())

`list_swarm_nodes`, `list_swarm_services` and `list_stacks` return lists of
`SwarmNode`, `SwarmService` and `Stack` records and raise `DockerError` when
the `docker` command fails. `parse_nodes`, `parse_services` and `parse_stacks`
parse tab separated output you already have. `get_swarm_cpu_usage` and
`get_swarm_mem_usage` return a string such as `"12.5%"` (`"0%"` on failure),
`get_container_count` and `get_service_count` return `0` on failure, and
`get_docker_version` returns `"unknown"` on failure.

`swarmtui.search` has `find_all_matches` and `highlight_matches` for
case-insensitive search in text, and `swarmtui.styles.frame` draws text inside
a titled box.

## Tests

    pip install .[test]
    pytest