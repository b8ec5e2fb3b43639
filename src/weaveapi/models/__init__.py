"""
Data models for weave-api.

Re-exports the address argument variants, enums and status records so
``from weaveapi.models import X`` works for any public name.
"""

from weaveapi.models.cidr import (  # noqa: F401
    CIDRArgument,
    DefaultSubnet,
    ExplicitAddress,
    NamedSubnet,
    classify,
    with_default,
)
from weaveapi.models.enums import AllocationMode, LogLevel, StatusSection  # noqa: F401
from weaveapi.models.status import (  # noqa: F401
    Connection,
    DNSEntry,
    IPAMSummary,
    Overview,
    Peer,
    Status,
    TargetList,
)
