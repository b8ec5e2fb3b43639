"""
weave-api unified CLI entry point.

Usage:
    weaveapi [OPTIONS] COMMAND [ARGS]...

Commands:
    network   Attach/detach containers, expose/hide host addresses
    status    Router status reports
    dns       DNS entry management
    peer      Peer management
"""

from typing import Annotated

import typer

from weaveapi.cli import config as cli_config
from weaveapi.cli.commands import dns, network, peer, status
from weaveapi.cli.output import console
from weaveapi.models.enums import LogLevel
from weaveapi.utils.logger import init_logger

app = typer.Typer(
    name="weaveapi",
    help="Weave Net control-plane CLI",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register command groups
app.add_typer(network.app, name="network", help="Attach containers and expose addresses")
app.add_typer(dns.app, name="dns", help="DNS entry management")
app.add_typer(peer.app, name="peer", help="Peer management")
app.command("status")(status.show_status)


@app.callback()
def main(
    host: Annotated[
        str | None,
        typer.Option("--host", "-H", help="Router address", envvar="WEAVE_HOST"),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", "-P", help="Router HTTP port", envvar="WEAVE_PORT"),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table|json"),
    ] = "table",
    log_level: Annotated[
        LogLevel | None,
        typer.Option(
            "--log-level",
            help="Log verbosity [default: warning]",
            envvar="WEAVE_LOG_LEVEL",
            case_sensitive=False,
        ),
    ] = None,
):
    """
    Weave Net control-plane CLI.

    Talks to the router's HTTP API and runs weaveutil in exec containers.
    """
    cli_config.HOST_ADDRESS = host
    cli_config.HOST_PORT = port
    cli_config.OUTPUT_FORMAT = output_format
    cli_config.LOG_LEVEL = log_level
    init_logger(log_level or LogLevel.WARNING)


@app.command("version")
def version():
    """Show version information."""
    from weaveapi import __version__

    console.print(f"weave-api v{__version__}")


def run():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
