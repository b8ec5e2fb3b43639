"""
Address allocation against the router's IPAM pool.

Every workflow that hands addresses to a container (or to the host via
expose) goes through ``IPAMOrchestrator.allocate``. It walks the
classified arguments in order and produces two lists:

- ``pool_owned``: addresses the pool handed out for the identity; these
  are the ones to release again on detach / hide.
- ``all_addresses``: every address taking part, explicit ones included;
  these are bound to the container.

Calls are strictly sequential and the first failure aborts the walk.
Nothing already allocated is rolled back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from weaveapi.docker.exec_runner import ExecRunner
from weaveapi.exceptions import PolicyViolation, RemoteStatusError
from weaveapi.models.cidr import (
    CIDRArgument,
    DefaultSubnet,
    ExplicitAddress,
    NamedSubnet,
    with_default,
)
from weaveapi.models.enums import AllocationMode
from weaveapi.router.client import RouterClient
from weaveapi.utils.logger import get_logger

log = get_logger(__name__)

AWSVPC_TRACKER = "awsvpc"

# identity + one explicit address is the most the guard lets through
MAX_GUARDED_ARGS = 2


@dataclass(frozen=True)
class AllocationResult:
    """Addresses produced by one orchestrator run."""

    pool_owned: list[str] = field(default_factory=list)
    all_addresses: list[str] = field(default_factory=list)


class IPAMOrchestrator:
    """
    Sequences IPAM calls for one identity.

    Holds no state between calls; the router's pool is the only shared
    resource and does its own serialization.
    """

    def __init__(self, router: RouterClient, runner: ExecRunner):
        self.router = router
        self.runner = runner

    def is_awsvpc(self) -> bool:
        """Probe the platform mode via the router's IPAM tracker."""
        tracker = self.router.ipinfo_tracker()
        log.debug(f"IPAM tracker: {tracker!r}")
        return tracker == AWSVPC_TRACKER

    def check_policy(self, identity: str, args: Iterable[CIDRArgument]) -> None:
        """
        Refuse explicit addresses the platform mode does not allow.

        Raises:
            PolicyViolation: Tracker is not awsvpc and more than one
                explicit address was requested.
        """
        explicit = [arg.value for arg in args if isinstance(arg, ExplicitAddress)]
        guarded = len(explicit) + (1 if identity else 0)
        if guarded <= MAX_GUARDED_ARGS:
            return
        if not self.is_awsvpc():
            raise PolicyViolation(identity, explicit)

    def allocate(
        self,
        mode: AllocationMode | str,
        identity: str,
        args: Iterable[CIDRArgument],
    ) -> AllocationResult:
        """
        Run the IPAM calls for ``args`` in order.

        Args:
            mode: lookup, allocate or allocate_no_check_alive.
            identity: Container id or synthetic identity ("weave:expose").
            args: Classified address arguments; empty means the default subnet.

        Returns:
            AllocationResult with pool-owned and all addresses, in input order.

        Raises:
            PolicyViolation: See ``check_policy`` (allocate mode only).
            RouteOverlapError: An explicit address overlaps a host route.
            TransportError / RemoteStatusError: A pool call failed.
        """
        mode = AllocationMode(mode)
        args = list(args)

        if mode is AllocationMode.ALLOCATE:
            self.check_policy(identity, args)

        check_alive = mode is AllocationMode.ALLOCATE
        pool_owned: list[str] = []
        all_addresses: list[str] = []

        for arg in with_default(args):
            if isinstance(arg, (DefaultSubnet, NamedSubnet)):
                subnet = arg.name if isinstance(arg, NamedSubnet) else None
                address = self._pool_call(mode, identity, subnet, check_alive)
                if address:
                    pool_owned.append(address)
                    all_addresses.append(address)
            else:
                if mode.is_allocating:
                    self.runner.netcheck(arg.value)
                    self.router.ip_claim(identity, arg.value, check_alive=check_alive)
                all_addresses.append(arg.value)

        log.debug(
            f"{mode.value} {identity}: pool={pool_owned} all={all_addresses}"
        )
        return AllocationResult(pool_owned=pool_owned, all_addresses=all_addresses)

    def _pool_call(
        self,
        mode: AllocationMode,
        identity: str,
        subnet: str | None,
        check_alive: bool,
    ) -> str:
        if mode.is_allocating:
            return self.router.ip_allocate(identity, subnet, check_alive=check_alive)
        try:
            return self.router.ip_lookup(identity, subnet)
        except RemoteStatusError as e:
            # 404 on lookup: the identity owns nothing there
            if e.status_code == 404:
                return ""
            raise
