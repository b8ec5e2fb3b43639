"""
Facade for one Weave node.

``WeaveNode`` wires the router HTTP client, the Docker daemon, the exec
runner, DNS helpers and the network workflows together from a single
``WeaveConfig``. It is the entry point used by the CLI and by library
callers.
"""

from __future__ import annotations

from typing import Iterable

from weaveapi.config import WeaveConfig
from weaveapi.dns import DNSService
from weaveapi.docker.client import DockerManager
from weaveapi.docker.exec_runner import ExecRunner
from weaveapi.exceptions import DNSDisabledError
from weaveapi.management import NetworkManager
from weaveapi.models.cidr import CIDRArgument
from weaveapi.models.enums import StatusSection
from weaveapi.models.status import Status
from weaveapi.router.client import RouterClient
from weaveapi.status import build_status
from weaveapi.utils.logger import get_logger

log = get_logger(__name__)


class WeaveNode:
    """
    Client for the Weave router running on one host.

    Collaborators can be injected (tests pass fakes); anything not given
    is built from ``config``. The Docker client is created on first use.
    """

    def __init__(
        self,
        config: WeaveConfig | None = None,
        router: RouterClient | None = None,
        docker: DockerManager | None = None,
        runner: ExecRunner | None = None,
    ):
        self.config = config or WeaveConfig()
        self.router = router or RouterClient(
            self.config.base_url, timeout=self.config.timeout
        )
        self._docker = docker
        self.runner = runner or ExecRunner(
            docker, self.config.exec_image, self.config.bridge
        )
        self.dns = DNSService(
            self.router,
            search=self.config.dns_search,
            disabled=self.config.dns_disabled,
        )
        self.network = NetworkManager(
            self.router, self.runner, self.dns, self._container_id
        )

    @property
    def docker(self) -> DockerManager:
        if self._docker is None:
            self._docker = DockerManager.from_config(self.config)
        return self._docker

    def _container_id(self, name: str) -> str:
        return self.docker.container_id(name)

    def close(self) -> None:
        self.router.close()
        if self._docker is not None:
            self._docker.close()

    def __enter__(self) -> WeaveNode:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # =========================================================================
    # Network workflows
    # =========================================================================

    def attach(
        self,
        container: str,
        addresses: Iterable[str | CIDRArgument] = (),
        without_dns: bool = False,
        rewrite_hosts: bool = False,
        no_multicast_route: bool = False,
        hosts: Iterable[str] = (),
    ) -> list[str]:
        self._ensure_runner()
        return self.network.attach(
            container,
            addresses,
            without_dns=without_dns,
            rewrite_hosts=rewrite_hosts,
            no_multicast_route=no_multicast_route,
            hosts=hosts,
        )

    def detach(
        self, container: str, addresses: Iterable[str | CIDRArgument] = ()
    ) -> list[str]:
        self._ensure_runner()
        return self.network.detach(container, addresses)

    def expose(
        self,
        fqdn: str = "",
        without_masquerade: bool = False,
        addresses: Iterable[str | CIDRArgument] = (),
    ) -> list[str]:
        self._ensure_runner()
        return self.network.expose(fqdn, without_masquerade, addresses)

    def hide(self, addresses: Iterable[str | CIDRArgument] = ()) -> list[str]:
        self._ensure_runner()
        return self.network.hide(addresses)

    def _ensure_runner(self) -> None:
        if self.runner.docker is None:
            self.runner.docker = self.docker

    # =========================================================================
    # Status
    # =========================================================================

    def status(self, section: StatusSection | str | None = None) -> Status:
        """Fetch and decode one status report (overview when ``section`` is None)."""
        section = StatusSection(section or StatusSection.OVERVIEW)
        payload = self.router.status(section.path)
        return build_status(section, payload)

    def is_awsvpc(self) -> bool:
        return self.network.ipam.is_awsvpc()

    def check_overlap(self, cidr: str) -> None:
        """Raise RouteOverlapError if ``cidr`` overlaps a host route."""
        self._ensure_runner()
        self.runner.netcheck(cidr)

    def bridge_type(self) -> str:
        self._ensure_runner()
        return self.runner.detect_bridge_type()

    # =========================================================================
    # DNS
    # =========================================================================

    def lookup_dns(self, hostname: str) -> list[str]:
        """
        Addresses for ``hostname`` from weaveDNS and the system resolver.
        """
        entries = []
        if not self.dns.disabled:
            entries = self.status(StatusSection.DNS).dns
        return self.dns.lookup(hostname, entries)

    def add_container_dns(self, container: str, fqdn: str) -> None:
        if self.dns.disabled:
            raise DNSDisabledError("weaveDNS disabled")
        address = self.docker.container_network_ip(container, self.config.bridge)
        container_id = self.docker.container_id(container)
        self.dns.add(container_id, address, fqdn)

    def remove_container_dns(self, container: str, fqdn: str | None = None) -> None:
        if self.dns.disabled:
            raise DNSDisabledError("weaveDNS disabled")
        address = self.docker.container_network_ip(container, self.config.bridge)
        container_id = self.docker.container_id(container)
        self.dns.remove(container_id, address, fqdn)

    def add_external_dns(self, address: str, fqdn: str) -> None:
        self.dns.add_external(address, fqdn)

    def remove_external_dns(self, address: str, fqdn: str | None = None) -> None:
        self.dns.remove_external(address, fqdn)

    # =========================================================================
    # Peers
    # =========================================================================

    def connect(self, peers: Iterable[str], replace: bool = False) -> str:
        """Ask the router to connect to ``peers`` (replacing its set if ``replace``)."""
        result = self.router.connect(list(peers), replace=replace)
        if result.strip():
            log.info(result.strip())
        return result

    def forget(self, peers: Iterable[str]) -> None:
        self.router.forget(list(peers))

    def remove_peer(self, *peers: str) -> list[str]:
        """
        Remove peers from the mesh.

        Returns:
            The router's reply for each peer.
        """
        if not peers:
            raise ValueError("should provide at least 1 peer")
        replies = []
        for peer in peers:
            reply = self.router.remove_peer(peer)
            log.info(f"Removed peer {peer}: {reply.strip()}")
            replies.append(reply)
        return replies

    def prime(self) -> None:
        """Wait until the IP allocation ring is ready."""
        self.router.prime()

