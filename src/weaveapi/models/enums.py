"""
Enumeration types for weave-api.

This module defines the enumeration types shared by the allocation
workflows, the status decoder and the configuration layer.
"""

from enum import Enum


# =============================================================================
# IPAM Enums
# =============================================================================


class AllocationMode(str, Enum):
    """
    How the orchestrator talks to the router's address pool.

    - LOOKUP: GET the addresses already owned by an identity
    - ALLOCATE: POST with liveness check; explicit addresses are claimed with PUT
    - ALLOCATE_NO_CHECK_ALIVE: POST without liveness check (used for expose)
    """

    LOOKUP = "lookup"
    ALLOCATE = "allocate"
    ALLOCATE_NO_CHECK_ALIVE = "allocate_no_check_alive"

    @property
    def is_allocating(self) -> bool:
        return self is not AllocationMode.LOOKUP


# =============================================================================
# Status Enums
# =============================================================================


class StatusSection(str, Enum):
    """
    Sub-report of the router's ``/status`` endpoint.

    OVERVIEW maps to ``/status`` itself; every other member is appended
    to the path, e.g. ``/status/dns``.
    """

    OVERVIEW = "overview"
    DNS = "dns"
    CONNECTIONS = "connections"
    PEERS = "peers"
    TARGETS = "targets"
    IPAM = "ipam"

    @property
    def path(self) -> str:
        if self is StatusSection.OVERVIEW:
            return "/status"
        return f"/status/{self.value}"


# =============================================================================
# Configuration Enums
# =============================================================================


class LogLevel(str, Enum):
    """
    Logging verbosity levels.

    Levels (from most to least verbose):
        - FULL: Complete trace with detailed stack information
        - DEBUG: Debug messages and above
        - INFO: Informational messages and above
        - WARNING: Only warnings and errors
    """

    FULL = "full"
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
