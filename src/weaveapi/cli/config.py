"""
CLI configuration.

Module-level settings filled in by the ``weaveapi`` callback from command
line options and environment variables. Commands turn them into an
immutable ``WeaveConfig`` through ``build_config``.
"""

from weaveapi.config import WeaveConfig
from weaveapi.models.enums import LogLevel
from weaveapi.node import WeaveNode

HOST_ADDRESS: str | None = None
HOST_PORT: int | None = None
OUTPUT_FORMAT: str = "table"
LOG_LEVEL: LogLevel | None = None


def build_config() -> WeaveConfig:
    """Merge CLI overrides on top of the WEAVE_* environment."""
    overrides = {}
    if LOG_LEVEL is not None:
        overrides["log_level"] = LOG_LEVEL
    if HOST_ADDRESS:
        overrides["address"] = HOST_ADDRESS
    if HOST_PORT:
        overrides["http_port"] = HOST_PORT
    return WeaveConfig.from_env(**overrides)


def get_node() -> WeaveNode:
    """Create the node client used by a command."""
    return WeaveNode(build_config())

