"""
Decoder for the router's plaintext status reports.

All reports are line oriented with space separated fields. Fields may be
padded with runs of spaces, so every line is tokenized with ``str.split``
before any positional access. Blank lines are skipped everywhere.

Report layouts::

    /status/dns          hostname address container-id origin
    /status/connections  -> 10.0.0.2:6783  established  fastdp a6:..(h2) mtu=1376
    /status/peers        ce:31:e0:06:45:1a(h1)
                            <- 10.0.0.2:33870  ea:64:dc:d1:8e:68(h2)  established
    /status/targets      10.0.0.3
    /status/ipam         ce:31:e0:06:45:1a(h1)  1048576 IPs (100.0% of total)
    /status              Version: 2.8.1 (up to date)
                         Service: router
                         Protocol: weave 1..2
                         ...

The overview report is mapped by position, not by label: the n-th
``label: value`` line fills the n-th entry of ``OVERVIEW_FIELDS``.
"""

from __future__ import annotations

import re

from weaveapi.exceptions import MalformedStatus
from weaveapi.models.enums import StatusSection
from weaveapi.models.status import (
    Connection,
    DNSEntry,
    IPAMSummary,
    Overview,
    Peer,
    Status,
    TargetList,
)
from weaveapi.utils.logger import get_logger

log = get_logger(__name__)

OUTBOUND_MARKER = "->"

PEER_NAME_RE = re.compile(r"^[0-9a-fA-F]{2}(:[0-9a-fA-F]{2}){5}(\(.*\))?$")

# (group, field) for each "label: value" line of /status, in report order
OVERVIEW_FIELDS: tuple[tuple[str, str], ...] = (
    ("router", "protocol"),
    ("router", "name"),
    ("router", "encryption"),
    ("router", "peer_discovery"),
    ("router", "targets"),
    ("router", "connections"),
    ("router", "peers"),
    ("router", "trusted_subnets"),
    ("ipam", "status"),
    ("ipam", "range"),
    ("ipam", "default_subnet"),
    ("dns", "domain"),
    ("dns", "upstream"),
    ("dns", "ttl"),
    ("dns", "entries"),
    ("proxy", "address"),
    ("plugin", "driver_name"),
)


def _lines(payload: bytes | str) -> list[list[str]]:
    """Tokenize a payload into non-empty token lists, one per line."""
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8", errors="replace")
    return [tokens for tokens in (line.split() for line in payload.splitlines()) if tokens]


def _require(section: str, tokens: list[str], count: int) -> None:
    if len(tokens) < count:
        raise MalformedStatus(section, " ".join(tokens), count)


# =============================================================================
# Section parsers
# =============================================================================


def parse_dns(payload: bytes | str) -> list[DNSEntry]:
    entries = []
    for tokens in _lines(payload):
        _require("dns", tokens, 4)
        hostname, address, container_id, origin = tokens[:4]
        entries.append(
            DNSEntry(
                hostname=hostname,
                address=address,
                container_id=container_id,
                origin=origin,
            )
        )
    return entries


def _is_attr(token: str) -> bool:
    key, sep, _ = token.partition("=")
    return bool(sep and key)


def parse_connection(tokens: list[str]) -> Connection:
    """Decode one ``/status/connections`` line (already tokenized)."""
    _require("connections", tokens, 3)
    direction, address, state, *rest = tokens

    info: list[str] = []
    attrs: dict[str, str] = {}
    for token in rest:
        if _is_attr(token):
            key, _, value = token.partition("=")
            attrs[key] = value
        elif not attrs:
            info.append(token)

    peer_id = next((token for token in info if PEER_NAME_RE.match(token)), None)
    return Connection(
        outbound=direction == OUTBOUND_MARKER,
        address=address,
        state=state,
        peer_id=peer_id,
        info=" ".join(info),
        attrs=attrs,
    )


def parse_connections(payload: bytes | str) -> list[Connection]:
    return [parse_connection(tokens) for tokens in _lines(payload)]


def parse_peers(payload: bytes | str) -> list[Peer]:
    """
    Decode ``/status/peers``.

    A single-token line opens a peer; following multi-token lines are its
    connections (direction, address, peer name, state).
    """
    peers: list[Peer] = []
    node_id: str | None = None
    connections: list[Connection] = []

    for tokens in _lines(payload):
        if len(tokens) == 1:
            if node_id is not None:
                peers.append(Peer(node_id=node_id, connections=connections))
            node_id, connections = tokens[0], []
            continue

        _require("peers", tokens, 4)
        if node_id is None:
            log.debug(f"Skipping peer connection before any peer: {tokens}")
            continue
        direction, address, peer_id, state, *rest = tokens
        connections.append(
            Connection(
                outbound=direction == OUTBOUND_MARKER,
                address=address,
                state=state,
                peer_id=peer_id,
                info=" ".join(rest),
            )
        )

    if node_id is not None:
        peers.append(Peer(node_id=node_id, connections=connections))
    return peers


def parse_targets(payload: bytes | str) -> TargetList:
    return TargetList(addresses=[tokens[0] for tokens in _lines(payload)])


def parse_ipam(payload: bytes | str) -> IPAMSummary:
    lines = _lines(payload)
    return IPAMSummary(raw=" ".join(lines[0]) if lines else "")


def parse_overview(payload: bytes | str) -> Overview:
    """
    Decode the top-level ``/status`` report.

    The first line carries the version as its second token. Every later
    ``label: value`` line, except the "Service:" headers, fills the next
    slot of ``OVERVIEW_FIELDS``; lines beyond the table are ignored.
    """
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8", errors="replace")
    lines = [line.strip() for line in payload.splitlines() if line.strip()]
    if not lines:
        return Overview()

    version_tokens = lines[0].split()
    _require("overview", version_tokens, 2)

    groups: dict[str, dict[str, str]] = {group: {} for group, _ in OVERVIEW_FIELDS}
    slots = iter(OVERVIEW_FIELDS)
    for line in lines[1:]:
        label, sep, value = line.partition(":")
        if not sep or label.strip().lower() == "service":
            continue
        slot = next(slots, None)
        if slot is None:
            log.debug(f"Ignoring extra overview line: {line}")
            continue
        group, name = slot
        groups[group][name] = value.strip()

    return Overview(version=version_tokens[1], **groups)


# =============================================================================
# Entry points
# =============================================================================

_PARSERS = {
    StatusSection.OVERVIEW: parse_overview,
    StatusSection.DNS: parse_dns,
    StatusSection.CONNECTIONS: parse_connections,
    StatusSection.PEERS: parse_peers,
    StatusSection.TARGETS: parse_targets,
    StatusSection.IPAM: parse_ipam,
}


def decode_status(section: StatusSection | str | None, payload: bytes | str):
    """
    Decode one status payload.

    Args:
        section: Which report ``payload`` came from; None means the overview.
        payload: Raw response body.

    Returns:
        Overview, list[DNSEntry], list[Connection], list[Peer], TargetList
        or IPAMSummary depending on ``section``.

    Raises:
        MalformedStatus: A line lacks a field its grammar requires.
    """
    section = StatusSection(section or StatusSection.OVERVIEW)
    return _PARSERS[section](payload)


def build_status(section: StatusSection | str | None, payload: bytes | str) -> Status:
    """Decode ``payload`` into a ``Status`` with the matching field set."""
    section = StatusSection(section or StatusSection.OVERVIEW)
    return Status(**{section.value: decode_status(section, payload)})
