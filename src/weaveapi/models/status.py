"""
Pydantic models for the router's status reports.

Each ``/status`` sub-report decodes into one of these read-only records.
They are built fresh on every query; nothing here is cached.

Model Categories:
    - DNS: entries from ``/status/dns``
    - Connections: ``/status/connections`` and the per-peer lists of ``/status/peers``
    - Overview: the grouped key/value report of ``/status``
    - IPAM / Targets: ``/status/ipam`` and ``/status/targets``
"""

from pydantic import BaseModel, ConfigDict, Field


class StatusRecord(BaseModel):
    """Base for decoded status records (immutable)."""

    model_config = ConfigDict(frozen=True)


# =============================================================================
# DNS
# =============================================================================


class DNSEntry(StatusRecord):
    """One registered DNS name."""

    hostname: str
    address: str
    container_id: str
    origin: str


# =============================================================================
# Connections / Peers
# =============================================================================


class Connection(StatusRecord):
    """
    A connection between this router and another one.

    ``info`` is the free text between the state and the first ``key=value``
    token (e.g. "fastdp a6:66:4f:a5:8a:11(host1)"); the ``key=value`` tokens
    themselves land in ``attrs``.
    """

    outbound: bool
    address: str
    state: str
    peer_id: str | None = None
    info: str = ""
    attrs: dict[str, str] = Field(default_factory=dict)


class Peer(StatusRecord):
    """A peer in the mesh and the connections it reports."""

    node_id: str
    connections: list[Connection] = Field(default_factory=list)


# =============================================================================
# Overview
# =============================================================================


class RouterInfo(StatusRecord):
    protocol: str = ""
    name: str = ""
    encryption: str = ""
    peer_discovery: str = ""
    targets: str = ""
    connections: str = ""
    peers: str = ""
    trusted_subnets: str = ""


class IPAMInfo(StatusRecord):
    status: str = ""
    range: str = ""
    default_subnet: str = ""


class DNSInfo(StatusRecord):
    domain: str = ""
    upstream: str = ""
    ttl: str = ""
    entries: str = ""


class ProxyInfo(StatusRecord):
    address: str = ""


class PluginInfo(StatusRecord):
    driver_name: str = ""


class Overview(StatusRecord):
    """Decoded top-level ``/status`` report."""

    version: str = ""
    router: RouterInfo = Field(default_factory=RouterInfo)
    ipam: IPAMInfo = Field(default_factory=IPAMInfo)
    dns: DNSInfo = Field(default_factory=DNSInfo)
    proxy: ProxyInfo = Field(default_factory=ProxyInfo)
    plugin: PluginInfo = Field(default_factory=PluginInfo)


# =============================================================================
# IPAM / Targets
# =============================================================================


class IPAMSummary(StatusRecord):
    """First line of ``/status/ipam``, kept verbatim."""

    raw: str = ""


class TargetList(StatusRecord):
    """Addresses the router is trying to connect to."""

    addresses: list[str] = Field(default_factory=list)


# =============================================================================
# Aggregate
# =============================================================================


class Status(StatusRecord):
    """
    Result of one status query.

    Only the field that matches the queried section is populated.
    """

    overview: Overview | None = None
    dns: list[DNSEntry] = Field(default_factory=list)
    connections: list[Connection] = Field(default_factory=list)
    peers: list[Peer] = Field(default_factory=list)
    targets: TargetList | None = None
    ipam: IPAMSummary | None = None
