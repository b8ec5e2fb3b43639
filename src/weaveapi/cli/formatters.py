"""Rich renderables for decoded status reports."""

from rich.panel import Panel
from rich.table import Table

from weaveapi.models.status import (
    Connection,
    DNSEntry,
    IPAMSummary,
    Overview,
    Peer,
    TargetList,
)


def format_overview(overview: Overview) -> Panel:
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Version", overview.version)
    for group in ("router", "ipam", "dns", "proxy", "plugin"):
        values = getattr(overview, group).model_dump()
        table.add_row(f"[bold]{group}[/bold]", "")
        for name, value in values.items():
            table.add_row(f"  {name.replace('_', ' ')}", value)

    return Panel(table, title="Weave Status", border_style="blue")


def format_dns_table(entries: list[DNSEntry]) -> Table:
    table = Table(title="DNS Entries", show_header=True)
    table.add_column("Hostname", style="cyan")
    table.add_column("Address", style="green")
    table.add_column("Container")
    table.add_column("Origin", style="dim")
    for entry in entries:
        table.add_row(entry.hostname, entry.address, entry.container_id, entry.origin)
    return table


def _direction(connection: Connection) -> str:
    return "->" if connection.outbound else "<-"


def format_connection_table(connections: list[Connection]) -> Table:
    table = Table(title="Connections", show_header=True)
    table.add_column("Dir")
    table.add_column("Address", style="green")
    table.add_column("State")
    table.add_column("Info")
    table.add_column("Attrs", style="dim")
    for conn in connections:
        attrs = " ".join(f"{k}={v}" for k, v in conn.attrs.items())
        table.add_row(_direction(conn), conn.address, conn.state, conn.info, attrs)
    return table


def format_peer_table(peers: list[Peer]) -> Table:
    table = Table(title="Peers", show_header=True)
    table.add_column("Peer", style="cyan")
    table.add_column("Dir")
    table.add_column("Address", style="green")
    table.add_column("Remote")
    table.add_column("State")
    for peer in peers:
        if not peer.connections:
            table.add_row(peer.node_id, "", "", "", "")
        for index, conn in enumerate(peer.connections):
            table.add_row(
                peer.node_id if index == 0 else "",
                _direction(conn),
                conn.address,
                conn.peer_id or "",
                conn.state,
            )
    return table


def format_targets(targets: TargetList) -> Table:
    table = Table(title="Targets", show_header=False)
    table.add_column("Address", style="green")
    for address in targets.addresses:
        table.add_row(address)
    return table


def format_ipam(summary: IPAMSummary) -> Panel:
    return Panel(summary.raw or "[dim]empty[/dim]", title="IPAM", border_style="blue")
