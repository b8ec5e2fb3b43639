"""Exception classes raised by weave-api."""


class WeaveError(Exception):
    """Base exception for all weave-api operations."""

    pass


class ConfigError(WeaveError):
    """Configuration value is invalid."""

    pass


# =============================================================================
# Router (HTTP) Errors
# =============================================================================


class TransportError(WeaveError):
    """Connection or I/O failure while talking to the router."""

    def __init__(self, message: str, method: str, url: str):
        self.method = method
        self.url = url
        super().__init__(f"{method} {url} failed: {message}")


class RemoteStatusError(WeaveError):
    """Router answered with a non-success HTTP status."""

    def __init__(self, status_code: int, method: str, url: str, detail: str = ""):
        self.status_code = status_code
        self.method = method
        self.url = url
        self.detail = detail
        message = f"{method} {url} returned HTTP {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


# =============================================================================
# Allocation Errors
# =============================================================================


class PolicyViolation(WeaveError):
    """Explicit addresses are not allowed under the detected platform mode."""

    def __init__(self, identity: str, explicit: list[str]):
        self.identity = identity
        self.explicit = explicit
        super().__init__(
            "no IP addresses or subnets may be specified in this platform mode "
            f"(identity={identity}, addresses={', '.join(explicit)})"
        )


class RouteOverlapError(WeaveError):
    """Requested range overlaps an existing route on the host."""

    def __init__(self, cidr: str, detail: str = ""):
        self.cidr = cidr
        self.detail = detail
        super().__init__(f"range {cidr} overlaps with existing route on host")


# =============================================================================
# Status Errors
# =============================================================================


class MalformedStatus(WeaveError):
    """A status line lacks a field its section's grammar requires."""

    def __init__(self, section: str, line: str, expected: int):
        self.section = section
        self.line = line
        self.expected = expected
        super().__init__(
            f"malformed {section} status line (need {expected} fields): {line!r}"
        )


# =============================================================================
# Container Runtime Errors
# =============================================================================


class ExecError(WeaveError):
    """The ephemeral exec container failed."""

    def __init__(
        self,
        message: str,
        command: list[str],
        exit_code: int | None = None,
        output: str = "",
    ):
        self.command = command
        self.exit_code = exit_code
        self.output = output
        super().__init__(f"exec {' '.join(command)} failed: {message}")


class ContainerNotFoundError(WeaveError):
    """Container could not be resolved by the runtime."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Container not found: {name}")


class DockerConnectionError(WeaveError):
    """Failed to reach the Docker daemon."""

    pass


class DNSDisabledError(WeaveError):
    """A DNS operation was requested while DNS is disabled."""

    pass
