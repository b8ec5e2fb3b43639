"""weaveDNS commands."""

from typing import Annotated

import typer

from weaveapi.cli import config as cli_config
from weaveapi.cli.output import console, print_error, print_json, print_success
from weaveapi.exceptions import WeaveError

app = typer.Typer(help="DNS entry management")


@app.command("lookup")
def lookup(hostname: Annotated[str, typer.Argument(help="Name to resolve")]):
    """Resolve a name through weaveDNS and the system resolver."""
    try:
        with cli_config.get_node() as node:
            addresses = node.lookup_dns(hostname)
    except WeaveError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if cli_config.OUTPUT_FORMAT == "json":
        print_json(addresses)
    elif addresses:
        for address in addresses:
            console.print(address)
    else:
        console.print(f"[yellow]No addresses for {hostname}.[/yellow]")


@app.command("add")
def add(
    target: Annotated[str, typer.Argument(help="Container name/id, or an IP with --external")],
    fqdn: Annotated[str, typer.Argument(help="Fully qualified name")],
    external: Annotated[
        bool, typer.Option("--external", help="TARGET is an address, not a container")
    ] = False,
):
    """Register a DNS name."""
    try:
        with cli_config.get_node() as node:
            if external:
                node.add_external_dns(target, fqdn)
            else:
                node.add_container_dns(target, fqdn)
        print_success(f"Registered {fqdn} for {target}")
    except WeaveError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command("remove")
def remove(
    target: Annotated[str, typer.Argument(help="Container name/id, or an IP with --external")],
    fqdn: Annotated[str | None, typer.Argument(help="Name to remove (all if omitted)")] = None,
    external: Annotated[
        bool, typer.Option("--external", help="TARGET is an address, not a container")
    ] = False,
):
    """Remove DNS names."""
    try:
        with cli_config.get_node() as node:
            if external:
                node.remove_external_dns(target, fqdn)
            else:
                node.remove_container_dns(target, fqdn)
        print_success(f"Removed {fqdn or 'names'} for {target}")
    except WeaveError as e:
        print_error(str(e))
        raise typer.Exit(1)
