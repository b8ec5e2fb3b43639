"""
weave-api: control-plane client for the Weave Net overlay router.

Typical use::

    from weaveapi import WeaveConfig, WeaveNode

    with WeaveNode(WeaveConfig(address="127.0.0.1")) as node:
        node.attach("box", ["net:10.44.0.0/24"])
"""

__version__ = "0.1.0"

from weaveapi.config import TLSCerts, WeaveConfig  # noqa: E402,F401
from weaveapi.exceptions import (  # noqa: E402,F401
    MalformedStatus,
    PolicyViolation,
    RemoteStatusError,
    TransportError,
    WeaveError,
)
from weaveapi.node import WeaveNode  # noqa: E402,F401
