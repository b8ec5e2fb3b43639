"""
Remote execution of the weaveutil helper.

``ExecRunner`` turns weaveutil subcommands into Python calls. The actual
execution is delegated to ``DockerManager.run_exec_container`` so every
command runs in a privileged, host-networked throwaway container that
shares the Docker control socket with the router.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from weaveapi.docker.exec_manager import ExecResult
from weaveapi.exceptions import ExecError, RouteOverlapError
from weaveapi.utils.logger import get_logger

if TYPE_CHECKING:
    from weaveapi.docker.client import DockerManager

log = get_logger(__name__)

WEAVEUTIL = "/usr/bin/weaveutil"

# Flags for attach-container
NO_MULTICAST_ROUTE = "--no-multicast-route"
KEEP_TX_ON = "--keep-tx-on"


class ExecRunner:
    """
    weaveutil subcommands executed in exec containers.

    Attributes:
        image: weaveexec image used for every command.
        bridge: Name of the weave bridge on the host.
    """

    def __init__(self, docker: DockerManager | None, image: str, bridge: str = "weave"):
        self.docker = docker
        self.image = image
        self.bridge = bridge

    def run(self, *command: str) -> ExecResult:
        """Run an arbitrary command (iptables, conntrack, sh ...)."""
        if self.docker is None:
            raise ExecError("no Docker daemon configured", list(command))
        return self.docker.run_exec_container(self.image, list(command))

    def weaveutil(self, *args: str) -> str:
        """
        Run a weaveutil subcommand and return its stdout.

        Raises:
            ExecError: On a non-zero exit status.
        """
        command = [WEAVEUTIL, *args]
        result = self.run(*command)
        if not result.ok:
            raise ExecError(
                f"exit status {result.exit_code}",
                command,
                exit_code=result.exit_code,
                output=result.output,
            )
        return result.output

    # =========================================================================
    # Subcommands
    # =========================================================================

    def netcheck(self, cidr: str, bridge: str | None = None) -> None:
        """
        Fail if ``cidr`` overlaps an existing route on the host.

        weaveutil prints the conflicting route and exits non-zero when it
        finds one; either signal counts as an overlap.

        Raises:
            RouteOverlapError: If the range overlaps a host route.
        """
        result = self.run(WEAVEUTIL, "netcheck", cidr, bridge or self.bridge)
        if result.output.strip() or not result.ok:
            log.warning(f"Range {cidr} overlaps host route: {result.output.strip()}")
            raise RouteOverlapError(cidr, result.output.strip())

    def attach_container(
        self, container_id: str, cidrs: list[str], flags: list[str] | None = None
    ) -> str:
        return self.weaveutil(
            "attach-container", *(flags or []), container_id, self.bridge, *cidrs
        )

    def detach_container(self, container_id: str, cidrs: list[str]) -> str:
        return self.weaveutil("detach-container", container_id, *cidrs)

    def container_fqdn(self, container_id: str) -> str:
        """Fully qualified hostname configured inside the container."""
        return self.weaveutil("container-fqdn", container_id).strip()

    def rewrite_etc_hosts(
        self, container_id: str, cidrs: list[str], hosts: list[str] | None = None
    ) -> str:
        return self.weaveutil(
            "rewrite-etc-hosts", container_id, self.image, *cidrs, *(hosts or [])
        )

    def detect_bridge_type(self) -> str:
        """Type of the existing weave bridge ("bridge", "fastdp", ... or "")."""
        return self.weaveutil("detect-bridge-type", self.bridge, "datapath").strip()

    def shell(self, script: str) -> ExecResult:
        """Run a shell script on the host; the caller inspects the result."""
        return self.run("sh", "-c", script)
