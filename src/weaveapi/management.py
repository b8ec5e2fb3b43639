"""
Network attachment workflows.

Each public method of ``NetworkManager`` composes IPAM allocation with
exec-container commands and DNS calls. Steps run one after another and
the first failure is raised unchanged; side effects of earlier steps
(allocated addresses, attached interfaces) are not rolled back.

The only deliberately lenient steps are the DNS cleanup in ``detach``
and the NAT/firewall rule removal in ``hide``: their targets may already
be gone, so failures there are logged and skipped.
"""

from __future__ import annotations

from typing import Callable, Iterable

from weaveapi.dns import DNSService, has_domain
from weaveapi.docker.exec_runner import KEEP_TX_ON, NO_MULTICAST_ROUTE, ExecRunner
from weaveapi.exceptions import WeaveError
from weaveapi.ipam import IPAMOrchestrator
from weaveapi.models.cidr import CIDRArgument, classify, split_cidr
from weaveapi.models.enums import AllocationMode
from weaveapi.router.client import RouterClient
from weaveapi.utils.logger import get_logger

log = get_logger(__name__)

EXPOSED_IDENTITY = "weave:expose"

HIDE_RULES_SCRIPT = """
ip addr del dev {bridge} {cidr} && \\
iptables -w -t nat -C WEAVE -d {cidr} ! -s {cidr} -j MASQUERADE && \\
iptables -w -t nat -D WEAVE -d {cidr} ! -s {cidr} -j MASQUERADE && \\
iptables -w -t nat -C WEAVE -s {cidr} ! -d {cidr} -j MASQUERADE && \\
iptables -w -t nat -D WEAVE -s {cidr} ! -d {cidr} -j MASQUERADE && \\
iptables -w -t filter -C WEAVE_EXPOSE -d {cidr} -j ACCEPT && \\
iptables -w -t filter -D WEAVE_EXPOSE -d {cidr} -j ACCEPT
"""


def _arguments(addresses: Iterable[str | CIDRArgument]) -> list[CIDRArgument]:
    """Classify raw strings; already classified arguments pass through."""
    args: list[CIDRArgument] = []
    for item in addresses:
        if isinstance(item, str):
            args.extend(classify([item]))
        else:
            args.append(item)
    return args


class NetworkManager:
    """
    Attach/detach containers and expose/hide host addresses.

    Attributes:
        resolve_identity: Maps a container name to its canonical id
            (``DockerManager.container_id`` in production).
    """

    def __init__(
        self,
        router: RouterClient,
        runner: ExecRunner,
        dns: DNSService,
        resolve_identity: Callable[[str], str],
    ):
        self.router = router
        self.runner = runner
        self.dns = dns
        self.resolve_identity = resolve_identity
        self.ipam = IPAMOrchestrator(router, runner)

    # =========================================================================
    # Attach / Detach
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
        """
        Attach a container to the overlay network.

        Args:
            container: Container name or id.
            addresses: Address specifications ("net:default", "net:CIDR",
                "CIDR"); empty means the default subnet.
            without_dns: Skip DNS registration.
            rewrite_hosts: Rewrite the container's /etc/hosts.
            no_multicast_route: Do not add a multicast route.
            hosts: Extra "name:ip" entries for /etc/hosts.

        Returns:
            Every address bound to the container, in argument order.
        """
        args = _arguments(addresses)
        container_id = self.resolve_identity(container)

        result = self.ipam.allocate(AllocationMode.ALLOCATE, container_id, args)
        cidrs = result.all_addresses

        if rewrite_hosts:
            self.runner.rewrite_etc_hosts(container_id, cidrs, list(hosts))

        flags = []
        if no_multicast_route:
            flags.append(NO_MULTICAST_ROUTE)
        if self.ipam.is_awsvpc():
            flags.append(KEEP_TX_ON)
        self.runner.attach_container(container_id, cidrs, flags)
        log.info(f"Attached {container} ({container_id[:12]}) to {', '.join(cidrs)}")

        if not without_dns and not self.dns.disabled:
            fqdn = self.runner.container_fqdn(container_id)
            if has_domain(fqdn):
                self.dns.register_addresses(container_id, fqdn, cidrs)
                log.info(f"Registered {fqdn} for {container_id[:12]}")

        return cidrs

    def detach(
        self, container: str, addresses: Iterable[str | CIDRArgument] = ()
    ) -> list[str]:
        """
        Detach a container and release its pool addresses.

        Returns:
            Every address that was unbound from the container.
        """
        args = _arguments(addresses)
        container_id = self.resolve_identity(container)

        result = self.ipam.allocate(AllocationMode.LOOKUP, container_id, args)
        self.runner.detach_container(container_id, result.all_addresses)
        log.info(f"Detached {container} ({container_id[:12]})")

        if not self.dns.disabled:
            self._cleanup_dns(container_id, result.all_addresses)

        self._release(container_id, result.pool_owned)
        return result.all_addresses

    def _cleanup_dns(self, container_id: str, cidrs: list[str]) -> None:
        try:
            fqdn = self.runner.container_fqdn(container_id)
        except WeaveError as e:
            log.warning(f"DNS cleanup for {container_id[:12]} skipped: {e}")
            return
        if not has_domain(fqdn):
            return

        for cidr in cidrs:
            address = split_cidr(cidr)
            if address is None:
                continue
            try:
                self.dns.remove(container_id, address, fqdn)
            except WeaveError as e:
                log.warning(f"Removing {fqdn} -> {address} failed: {e}")

    def _release(self, identity: str, cidrs: list[str]) -> None:
        for cidr in cidrs:
            address = split_cidr(cidr)
            if address is None:
                continue
            self.router.ip_release(identity, address)
            log.debug(f"Released {address} from {identity}")

    # =========================================================================
    # Expose / Hide
    # =========================================================================

    def expose(
        self,
        fqdn: str = "",
        without_masquerade: bool = False,
        addresses: Iterable[str | CIDRArgument] = (),
    ) -> list[str]:
        """
        Give the host an address on the overlay network.

        Args:
            fqdn: If set, register this name for each exposed address.
            without_masquerade: Do not NAT traffic from the exposed address.
            addresses: Address specifications; empty means the default subnet.

        Returns:
            The exposed addresses.
        """
        args = _arguments(addresses)
        result = self.ipam.allocate(
            AllocationMode.ALLOCATE_NO_CHECK_ALIVE, EXPOSED_IDENTITY, args
        )
        for cidr in result.all_addresses:
            self.router.expose(cidr, skip_nat=without_masquerade)
            if fqdn:
                self.dns.add_external(cidr, fqdn)
        log.info(f"Exposed {', '.join(result.all_addresses)}")
        return result.all_addresses

    def hide(self, addresses: Iterable[str | CIDRArgument] = ()) -> list[str]:
        """
        Remove host addresses added by ``expose`` and release them.

        Returns:
            The hidden addresses.
        """
        args = _arguments(addresses)
        result = self.ipam.allocate(AllocationMode.LOOKUP, EXPOSED_IDENTITY, args)

        for cidr in result.all_addresses:
            self._remove_expose_rules(cidr)

        self._release(EXPOSED_IDENTITY, result.pool_owned)
        log.info(f"Hid {', '.join(result.all_addresses)}")
        return result.all_addresses

    def _remove_expose_rules(self, cidr: str) -> None:
        script = HIDE_RULES_SCRIPT.format(bridge=self.runner.bridge, cidr=cidr)
        try:
            result = self.runner.shell(script)
        except WeaveError as e:
            log.warning(f"Removing expose rules for {cidr} failed: {e}")
            return
        if not result.ok:
            log.warning(
                f"Expose rules for {cidr} not fully removed "
                f"(exit {result.exit_code}); they may already be gone"
            )
