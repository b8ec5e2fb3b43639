"""Container attach/detach and host expose/hide commands."""

from typing import Annotated

import typer

from weaveapi.cli import config as cli_config
from weaveapi.cli.output import console, print_error, print_json, print_success
from weaveapi.exceptions import WeaveError

app = typer.Typer(help="Attach containers and expose host addresses")

AddressArgs = Annotated[
    list[str] | None,
    typer.Argument(help="Addresses: net:default, net:CIDR or CIDR (default subnet if omitted)"),
]


def _report(addresses: list[str], verb: str) -> None:
    if cli_config.OUTPUT_FORMAT == "json":
        print_json(addresses)
        return
    if not addresses:
        console.print(f"[yellow]Nothing {verb}.[/yellow]")
        return
    print_success(f"{verb.capitalize()}: {', '.join(addresses)}")


@app.command("attach")
def attach(
    container: Annotated[str, typer.Argument(help="Container name or id")],
    addresses: AddressArgs = None,
    without_dns: Annotated[
        bool, typer.Option("--without-dns", help="Do not register DNS names")
    ] = False,
    rewrite_hosts: Annotated[
        bool, typer.Option("--rewrite-hosts", help="Rewrite the container's /etc/hosts")
    ] = False,
    no_multicast_route: Annotated[
        bool, typer.Option("--no-multicast-route", help="Do not add a multicast route")
    ] = False,
    add_host: Annotated[
        list[str] | None,
        typer.Option("--add-host", help="Extra NAME:IP entry for /etc/hosts"),
    ] = None,
):
    """Attach a container to the overlay network."""
    try:
        with cli_config.get_node() as node:
            attached = node.attach(
                container,
                addresses or [],
                without_dns=without_dns,
                rewrite_hosts=rewrite_hosts,
                no_multicast_route=no_multicast_route,
                hosts=add_host or [],
            )
        _report(attached, "attached")
    except WeaveError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command("detach")
def detach(
    container: Annotated[str, typer.Argument(help="Container name or id")],
    addresses: AddressArgs = None,
):
    """Detach a container and release its addresses."""
    try:
        with cli_config.get_node() as node:
            detached = node.detach(container, addresses or [])
        _report(detached, "detached")
    except WeaveError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command("expose")
def expose(
    addresses: AddressArgs = None,
    fqdn: Annotated[
        str, typer.Option("--fqdn", help="DNS name for the exposed addresses")
    ] = "",
    without_masquerade: Annotated[
        bool, typer.Option("--without-masquerade", help="Do not NAT exposed traffic")
    ] = False,
):
    """Give the host an address on the overlay network."""
    try:
        with cli_config.get_node() as node:
            exposed = node.expose(fqdn, without_masquerade, addresses or [])
        _report(exposed, "exposed")
    except WeaveError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command("hide")
def hide(addresses: AddressArgs = None):
    """Remove exposed host addresses."""
    try:
        with cli_config.get_node() as node:
            hidden = node.hide(addresses or [])
        _report(hidden, "hidden")
    except WeaveError as e:
        print_error(str(e))
        raise typer.Exit(1)
