"""
Ephemeral exec container mixin for DockerManager.

The router's helper binary has to run on the host with full privileges.
Instead of a local subprocess, every command runs in a throwaway
container: created privileged with host networking and host pid
namespace, started, waited on, its stdout collected, then removed.
"""

from __future__ import annotations

from dataclasses import dataclass

from docker.errors import DockerException, ImageNotFound, NotFound
from docker.types import Mount
from requests.exceptions import RequestException

from weaveapi.exceptions import ExecError
from weaveapi.utils.logger import get_logger

log = get_logger(__name__)

# docker-py lets transport failures escape as raw requests exceptions
DOCKER_ERRORS = (DockerException, RequestException)

EXEC_MOUNTS = (
    ("/var/run/docker.sock", "/var/run/docker.sock"),
    ("/", "/host/"),
)


@dataclass(frozen=True)
class ExecResult:
    """Outcome of one exec container run."""

    exit_code: int
    output: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ExecManagerMixin:
    """
    Mixin running one-shot commands in privileged host containers.

    Expects ``self.client`` to be a docker-py client instance.
    """

    def run_exec_container(self, image: str, command: list[str]) -> ExecResult:
        """
        Run ``command`` as the entrypoint of a throwaway container.

        Args:
            image: Image providing the command (weaveexec).
            command: Entrypoint and arguments.

        Returns:
            Exit code and stdout of the command.

        Raises:
            ExecError: If the container cannot be created, started or read.
        """
        container = self._create_exec_container(image, command)
        try:
            container.start()
            status = container.wait()
            output = container.logs(stdout=True, stderr=False)
        except DOCKER_ERRORS as e:
            log.error(f"Exec container for {command[0]} failed: {e}")
            raise ExecError(str(e), command) from e
        finally:
            self._remove_exec_container(container)

        exit_code = int(status.get("StatusCode", 0))
        text = output.decode("utf-8", errors="replace")
        log.debug(f"exec {' '.join(command)} -> exit {exit_code}")
        return ExecResult(exit_code=exit_code, output=text)

    def _create_exec_container(self, image: str, command: list[str]):
        kwargs = dict(
            entrypoint=command,
            privileged=True,
            network_mode="host",
            pid_mode="host",
            mounts=[Mount(target, source, type="bind") for source, target in EXEC_MOUNTS],
        )
        try:
            return self.client.containers.create(image, **kwargs)
        except ImageNotFound:
            log.info(f"Image {image} not found locally, pulling...")
            try:
                self.client.images.pull(image)
                return self.client.containers.create(image, **kwargs)
            except DOCKER_ERRORS as e:
                raise ExecError(f"cannot pull {image}: {e}", command) from e
        except DOCKER_ERRORS as e:
            log.error(f"Failed to create exec container from {image}: {e}")
            raise ExecError(str(e), command) from e

    def _remove_exec_container(self, container) -> None:
        try:
            container.remove(v=True, force=True)
        except NotFound:
            pass
        except DOCKER_ERRORS as e:
            log.warning(f"Failed to remove exec container {container.id}: {e}")
