"""
Docker client wrapper using docker-py SDK.

This module provides the DockerManager class, a thin wrapper around the
docker-py SDK for the Docker daemon that hosts the Weave router.

The class is composed from two mixins:
    - ContainerManagerMixin: container id / address lookups
    - ExecManagerMixin: ephemeral privileged exec containers
"""

import docker
from docker.errors import DockerException
from docker.tls import TLSConfig

from weaveapi.config import TLSCerts, WeaveConfig
from weaveapi.docker.container_manager import ContainerManagerMixin
from weaveapi.docker.exec_manager import ExecManagerMixin
from weaveapi.exceptions import DockerConnectionError
from weaveapi.utils.logger import get_logger

log = get_logger(__name__)


class DockerManager(ContainerManagerMixin, ExecManagerMixin):
    """
    Manages Docker operations for the Weave node.

    Attributes:
        client: The docker-py client instance.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        tls: TLSCerts | None = None,
    ):
        """
        Initialize Docker client.

        Args:
            base_url: Daemon URL (e.g. "tcp://10.0.0.5:2375"). None uses
                the local environment (DOCKER_HOST or the unix socket).
            timeout: Request timeout in seconds. None means docker-py default.
            tls: Client certificates for a TLS-verified daemon.

        Raises:
            DockerConnectionError: If connection to Docker daemon fails.
        """
        kwargs = {}
        if timeout is not None:
            kwargs["timeout"] = int(timeout)
        try:
            if base_url is None:
                self.client = docker.from_env(**kwargs)
            else:
                if tls is not None:
                    kwargs["tls"] = TLSConfig(
                        client_cert=(tls.cert_path, tls.key_path),
                        ca_cert=tls.cacert_path,
                        verify=True,
                    )
                self.client = docker.DockerClient(base_url=base_url, **kwargs)
            self.client.ping()
            log.debug(f"Docker client initialized ({base_url or 'env'})")
        except DockerException as e:
            log.error(f"Failed to connect to Docker daemon: {e}")
            raise DockerConnectionError(f"Failed to connect to Docker: {e}") from e

    @classmethod
    def from_config(cls, config: WeaveConfig) -> "DockerManager":
        return cls(
            base_url=config.docker_base_url,
            timeout=config.exec_timeout,
            tls=config.tls,
        )

    def close(self) -> None:
        self.client.close()
