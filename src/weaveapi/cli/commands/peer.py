"""Peer membership commands."""

from typing import Annotated

import typer

from weaveapi.cli import config as cli_config
from weaveapi.cli.output import console, print_error, print_success
from weaveapi.exceptions import WeaveError

app = typer.Typer(help="Peer management")

Peers = Annotated[list[str], typer.Argument(help="Peer addresses or names")]


@app.command("connect")
def connect(
    peers: Peers,
    replace: Annotated[
        bool, typer.Option("--replace", help="Replace the current peer set")
    ] = False,
):
    """Connect the router to additional peers."""
    try:
        with cli_config.get_node() as node:
            reply = node.connect(peers, replace=replace)
        if reply.strip():
            console.print(reply.strip())
        print_success(f"Connecting to {', '.join(peers)}")
    except WeaveError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command("forget")
def forget(peers: Peers):
    """Stop trying to connect to peers."""
    try:
        with cli_config.get_node() as node:
            node.forget(peers)
        print_success(f"Forgot {', '.join(peers)}")
    except WeaveError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command("rm")
def remove(peers: Peers):
    """Remove peers from the mesh."""
    try:
        with cli_config.get_node() as node:
            for reply in node.remove_peer(*peers):
                if reply.strip():
                    console.print(reply.strip())
    except WeaveError as e:
        print_error(str(e))
        raise typer.Exit(1)
