"""
Address specification arguments for IPAM calls.

Users name the addresses a container should get with short strings:

- ``net:default``      -> one address from the router's default subnet
- ``net:10.44.0.0/24`` -> one address from the named subnet
- ``10.32.1.5/12``     -> exactly this address (``ip:`` prefix optional)

``classify`` turns such strings into a closed set of immutable variants
once, so the allocation code never inspects raw strings again. Anything
that does not parse as an address is dropped silently.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Iterable, Union

DEFAULT_SUBNET_ARG = "net:default"
NET_PREFIX = "net:"
IP_PREFIX = "ip:"


@dataclass(frozen=True)
class DefaultSubnet:
    """Allocate from the router's default subnet."""

    def __str__(self) -> str:
        return DEFAULT_SUBNET_ARG


@dataclass(frozen=True)
class NamedSubnet:
    """Allocate from an explicitly named subnet."""

    name: str

    def __str__(self) -> str:
        return f"{NET_PREFIX}{self.name}"


@dataclass(frozen=True)
class ExplicitAddress:
    """Use exactly this address (CIDR notation, prefix stripped)."""

    value: str

    def __str__(self) -> str:
        return self.value


CIDRArgument = Union[DefaultSubnet, NamedSubnet, ExplicitAddress]


def is_address(value: str) -> bool:
    """Check whether ``value`` is an IP address or CIDR."""
    try:
        ipaddress.ip_interface(value)
    except ValueError:
        return False
    return True


def parse_argument(raw: str) -> CIDRArgument | None:
    """
    Classify a single address specification.

    Args:
        raw: User supplied string, e.g. "net:default" or "ip:10.32.0.5/12".

    Returns:
        The matching variant, or None when the string is not usable.
    """
    raw = raw.strip()
    if raw == DEFAULT_SUBNET_ARG:
        return DefaultSubnet()

    if raw.startswith(NET_PREFIX):
        name = raw[len(NET_PREFIX) :]
        return NamedSubnet(name) if is_address(name) else None

    if raw.startswith(IP_PREFIX):
        raw = raw[len(IP_PREFIX) :]

    return ExplicitAddress(raw) if is_address(raw) else None


def classify(raw: Iterable[str]) -> list[CIDRArgument]:
    """
    Classify address specifications, dropping malformed entries.

    Order is preserved; each element is classified independently.
    """
    args = []
    for item in raw:
        arg = parse_argument(item)
        if arg is not None:
            args.append(arg)
    return args


def with_default(args: list[CIDRArgument]) -> list[CIDRArgument]:
    """Substitute ``[DefaultSubnet()]`` for an empty argument list."""
    return list(args) if args else [DefaultSubnet()]


def split_cidr(cidr: str) -> str | None:
    """
    Return the address part of ``cidr``.

    Returns None when there is no prefix length to split off; callers skip
    such entries.
    """
    address, sep, _ = cidr.partition("/")
    if not sep:
        return None
    return address
