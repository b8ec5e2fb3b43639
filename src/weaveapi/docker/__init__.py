"""Docker daemon access: container lookups and exec containers."""

from weaveapi.docker.client import DockerManager  # noqa: F401
from weaveapi.docker.exec_manager import ExecResult  # noqa: F401
from weaveapi.docker.exec_runner import ExecRunner  # noqa: F401
