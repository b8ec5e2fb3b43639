"""Router status commands."""

from typing import Annotated

import typer

from weaveapi.cli import config as cli_config
from weaveapi.cli.formatters import (
    format_connection_table,
    format_dns_table,
    format_ipam,
    format_overview,
    format_peer_table,
    format_targets,
)
from weaveapi.cli.output import console, print_error, print_json
from weaveapi.exceptions import WeaveError
from weaveapi.models.enums import StatusSection

_FORMATTERS = {
    StatusSection.OVERVIEW: format_overview,
    StatusSection.DNS: format_dns_table,
    StatusSection.CONNECTIONS: format_connection_table,
    StatusSection.PEERS: format_peer_table,
    StatusSection.TARGETS: format_targets,
    StatusSection.IPAM: format_ipam,
}


def show_status(
    section: Annotated[
        StatusSection,
        typer.Argument(help="Report to show", case_sensitive=False),
    ] = StatusSection.OVERVIEW,
):
    """Show a decoded status report."""
    try:
        with cli_config.get_node() as node:
            status = node.status(section)
    except WeaveError as e:
        print_error(str(e))
        raise typer.Exit(1)

    record = getattr(status, section.value)
    if cli_config.OUTPUT_FORMAT == "json":
        print_json(record)
        return
    console.print(_FORMATTERS[section](record))
