"""
Client configuration.

``WeaveConfig`` is an immutable value validated once at construction.
Use ``with_options`` to derive a modified copy instead of mutating it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

from weaveapi.exceptions import ConfigError
from weaveapi.models.enums import LogLevel

DEFAULT_VERSION = "2.8.1"
DEFAULT_PORT = 6783
DEFAULT_HTTP_PORT = 6784
DEFAULT_STATUS_PORT = 6782

LOCAL_ADDRESSES = ("127.0.0.1", "localhost", "::1")


@dataclass(frozen=True)
class TLSCerts:
    """Client certificates for a TLS-protected Docker daemon."""

    cacert_path: str
    cert_path: str
    key_path: str


@dataclass(frozen=True)
class WeaveConfig:
    """Connection and behaviour settings for one Weave node."""

    # Router endpoints
    address: str = "127.0.0.1"
    port: int = DEFAULT_PORT
    http_port: int = DEFAULT_HTTP_PORT
    status_port: int = DEFAULT_STATUS_PORT
    version: str = DEFAULT_VERSION

    # Docker daemon that runs the router and the exec containers
    docker_host: str | None = None
    docker_port: int | None = None
    tls: TLSCerts | None = None

    # Overlay network
    bridge: str = "weave"
    dns_search: str = "weave.local."
    dns_disabled: bool = False

    # Seconds; timeout bounds every router HTTP call, exec_timeout every
    # Docker API call (exec containers may need to pull their image)
    timeout: float = 10.0
    exec_timeout: float = 120.0

    log_level: LogLevel = LogLevel.INFO

    def __post_init__(self):
        for name in ("port", "http_port", "status_port"):
            value = getattr(self, name)
            if not 0 < value < 65536:
                raise ConfigError(f"{name} must be between 1 and 65535, got {value}")
        if self.docker_port is not None and not 0 < self.docker_port < 65536:
            raise ConfigError(f"docker_port out of range: {self.docker_port}")
        if not self.is_local and self.docker_host is None and self.docker_port is None:
            raise ConfigError(
                f"docker_port or docker_host is required when address "
                f"{self.address} is not local"
            )
        if self.timeout <= 0 or self.exec_timeout <= 0:
            raise ConfigError(
                f"timeouts must be positive, got {self.timeout}/{self.exec_timeout}"
            )
        if not self.version:
            raise ConfigError("version must not be empty")
        try:
            object.__setattr__(self, "log_level", LogLevel(self.log_level))
        except ValueError as e:
            raise ConfigError(f"invalid log_level: {self.log_level!r}") from e

    # =========================================================================
    # Derived values
    # =========================================================================

    @property
    def is_local(self) -> bool:
        return self.address in LOCAL_ADDRESSES

    @property
    def base_url(self) -> str:
        """Base URL of the router's HTTP API."""
        return f"http://{self.address}:{self.http_port}"

    @property
    def exec_image(self) -> str:
        return f"weaveworks/weaveexec:{self.version}"

    @property
    def docker_base_url(self) -> str | None:
        """
        Docker daemon URL, or None to use the local environment defaults.
        """
        if self.docker_host:
            return self.docker_host
        if self.docker_port is not None:
            return f"tcp://{self.address}:{self.docker_port}"
        return None

    def with_options(self, **changes) -> WeaveConfig:
        """Return a validated copy with ``changes`` applied."""
        return replace(self, **changes)

    # =========================================================================
    # Construction helpers
    # =========================================================================

    @classmethod
    def from_env(cls, prefix: str = "WEAVE_", **overrides) -> WeaveConfig:
        """
        Build a config from environment variables.

        Recognised (with the default prefix): WEAVE_ADDRESS, WEAVE_HTTP_PORT,
        WEAVE_VERSION, WEAVE_DOCKER_HOST, WEAVE_DOCKER_PORT, WEAVE_TIMEOUT,
        WEAVE_NO_DNS, WEAVE_LOG_LEVEL.
        """
        env = os.environ
        values: dict = {}

        if f"{prefix}ADDRESS" in env:
            values["address"] = env[f"{prefix}ADDRESS"]
        if f"{prefix}HTTP_PORT" in env:
            values["http_port"] = _env_int(prefix, "HTTP_PORT")
        if f"{prefix}VERSION" in env:
            values["version"] = env[f"{prefix}VERSION"]
        if f"{prefix}DOCKER_HOST" in env:
            values["docker_host"] = env[f"{prefix}DOCKER_HOST"]
        if f"{prefix}DOCKER_PORT" in env:
            values["docker_port"] = _env_int(prefix, "DOCKER_PORT")
        if f"{prefix}TIMEOUT" in env:
            try:
                values["timeout"] = float(env[f"{prefix}TIMEOUT"])
            except ValueError as e:
                raise ConfigError(f"{prefix}TIMEOUT is not a number") from e
        if f"{prefix}NO_DNS" in env:
            values["dns_disabled"] = env[f"{prefix}NO_DNS"].lower() in ("1", "true", "yes")
        if f"{prefix}LOG_LEVEL" in env:
            try:
                values["log_level"] = LogLevel(env[f"{prefix}LOG_LEVEL"].lower())
            except ValueError as e:
                raise ConfigError(f"invalid {prefix}LOG_LEVEL") from e

        values.update(overrides)
        return cls(**values)


def _env_int(prefix: str, name: str) -> int:
    raw = os.environ[f"{prefix}{name}"]
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{prefix}{name} must be an integer, got {raw!r}") from e
