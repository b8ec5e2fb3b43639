"""
weaveDNS registration helpers.

Names are registered with the router per (identity, address) pair:
``PUT /name/{identity}/{ip}`` with the fqdn as form data, and removed
with ``DELETE /name/{identity}/{ip}?fqdn=...``. Names that are not tied
to a container use the synthetic ``weave:extern`` identity.
"""

from __future__ import annotations

import socket
from typing import Iterable

from weaveapi.exceptions import DNSDisabledError
from weaveapi.models.cidr import split_cidr
from weaveapi.models.status import DNSEntry
from weaveapi.router.client import RouterClient
from weaveapi.utils.logger import get_logger

log = get_logger(__name__)

EXTERNAL_IDENTITY = "weave:extern"


def has_domain(fqdn: str) -> bool:
    """
    Check that ``fqdn`` is more than a bare container name.

    "box.weave.local" qualifies; "box" and "box." do not.
    """
    name = fqdn.split(".", 1)[0]
    return fqdn not in (name, f"{name}.")


class DNSService:
    """DNS registrations on one router."""

    def __init__(
        self,
        router: RouterClient,
        search: str = "weave.local.",
        disabled: bool = False,
    ):
        self.router = router
        self.search = search
        self.disabled = disabled

    def _ensure_enabled(self) -> None:
        if self.disabled:
            raise DNSDisabledError("weaveDNS disabled")

    # =========================================================================
    # Single entries
    # =========================================================================

    def add(
        self, identity: str, address: str, fqdn: str, check_alive: bool = False
    ) -> None:
        self._ensure_enabled()
        log.debug(f"Registering {fqdn} -> {address} for {identity}")
        self.router.name_register(identity, address, fqdn, check_alive=check_alive)

    def remove(self, identity: str, address: str, fqdn: str | None = None) -> None:
        self._ensure_enabled()
        log.debug(f"Removing {fqdn or '*'} -> {address} for {identity}")
        self.router.name_unregister(identity, address, fqdn)

    def add_external(self, address: str, fqdn: str) -> None:
        """Register a name for an address not owned by a container."""
        self.add(EXTERNAL_IDENTITY, _bare(address), fqdn)

    def remove_external(self, address: str, fqdn: str | None = None) -> None:
        self.remove(EXTERNAL_IDENTITY, _bare(address), fqdn)

    # =========================================================================
    # Bulk registration used by attach
    # =========================================================================

    def register_addresses(
        self, identity: str, fqdn: str, cidrs: Iterable[str]
    ) -> list[str]:
        """
        Register ``fqdn`` for every address in ``cidrs``.

        Entries without a prefix length are skipped.

        Returns:
            The addresses that were registered.
        """
        registered = []
        for cidr in cidrs:
            address = split_cidr(cidr)
            if address is None:
                log.debug(f"Skipping DNS for {cidr}: not in CIDR form")
                continue
            self.add(identity, address, fqdn, check_alive=True)
            registered.append(address)
        return registered

    # =========================================================================
    # Lookup
    # =========================================================================

    def matches(self, hostname: str, entry: DNSEntry) -> bool:
        """Whether ``hostname`` (with or without the search domain) names ``entry``."""
        if hostname == entry.hostname:
            return True
        domain = self.search.rstrip(".")
        short = hostname.rstrip(".")
        if domain and short.endswith(f".{domain}"):
            return short[: -len(domain) - 1] == entry.hostname.rstrip(".")
        return False

    def lookup(self, hostname: str, entries: Iterable[DNSEntry] = ()) -> list[str]:
        """
        Addresses for ``hostname``.

        Combines the router's DNS ``entries`` with the system resolver. A
        resolver failure is not an error; whatever was found is returned.
        """
        addresses = [entry.address for entry in entries if self.matches(hostname, entry)]
        try:
            _, _, resolved = socket.gethostbyname_ex(hostname)
        except OSError as e:
            log.debug(f"Resolver lookup for {hostname} failed: {e}")
            resolved = []
        for address in resolved:
            if address not in addresses:
                addresses.append(address)
        return addresses


def _bare(address: str) -> str:
    return split_cidr(address) or address
