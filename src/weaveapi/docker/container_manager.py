"""
Container lookup mixin for DockerManager.

Resolves the containers the workflows operate on: friendly names to
canonical ids, and a container's address on the overlay network.
"""

from docker.errors import NotFound
from docker.models.containers import Container

from weaveapi.docker.exec_manager import DOCKER_ERRORS
from weaveapi.exceptions import ContainerNotFoundError, DockerConnectionError
from weaveapi.utils.logger import get_logger

log = get_logger(__name__)


class ContainerManagerMixin:
    """
    Mixin providing container queries.

    Expects ``self.client`` to be a docker-py client instance.
    """

    def container_exists(self, name: str) -> bool:
        """Check if a container exists."""
        try:
            self.client.containers.get(name)
            return True
        except NotFound:
            return False

    def get_container(self, name: str) -> Container:
        """
        Get a container by name or id.

        Raises:
            ContainerNotFoundError: If container doesn't exist.
            DockerConnectionError: If the daemon rejects the request.
        """
        try:
            return self.client.containers.get(name)
        except NotFound:
            raise ContainerNotFoundError(name)
        except DOCKER_ERRORS as e:
            log.error(f"Failed to inspect container {name}: {e}")
            raise DockerConnectionError(f"inspect {name} failed: {e}") from e

    def container_id(self, name: str) -> str:
        """Resolve a name or short id to the full container id."""
        return self.get_container(name).id

    def container_network_ip(self, name: str, network: str) -> str:
        """
        Address of a container on the given Docker network.

        Args:
            name: Container name or id.
            network: Network name or id (e.g. "weave").

        Raises:
            ContainerNotFoundError: If the container is not attached to ``network``.
        """
        container = self.get_container(name)
        networks = container.attrs.get("NetworkSettings", {}).get("Networks") or {}
        for net_name, settings in networks.items():
            if network in (net_name, settings.get("NetworkID")):
                return settings.get("IPAddress", "")
        raise ContainerNotFoundError(f"{name} on network {network}")
