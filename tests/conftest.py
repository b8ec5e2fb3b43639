"""Shared pytest fixtures for the weave-api test suite.

Guidelines
----------
* No network or Docker access in any test.
* The router is an in-memory fake served through ``httpx.MockTransport``.
* weaveutil runs are recorded by a fake ``ExecRunner`` instead of containers.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from urllib.parse import parse_qs

import httpx
import pytest

from weaveapi.config import WeaveConfig
from weaveapi.docker.exec_manager import ExecResult
from weaveapi.docker.exec_runner import WEAVEUTIL, ExecRunner
from weaveapi.node import WeaveNode
from weaveapi.router.client import RouterClient

BASE_URL = "http://127.0.0.1:6784"
DEFAULT_SUBNET = "10.32.0.0/12"

CONTAINERS = {
    "box": "c0ffee0000000000000000000000000000000000000000000000000000000001",
    "web": "beef000000000000000000000000000000000000000000000000000000000002",
}


@dataclass
class Call:
    method: str
    path: str
    params: dict[str, str]
    form: dict[str, list[str]]


@dataclass
class FakeRouter:
    """Minimal stand-in for the router's HTTP API."""

    tracker: str = "seed"
    pool: dict[str, list[str]] = field(default_factory=dict)
    claimed: dict[str, list[str]] = field(default_factory=dict)
    names: list[tuple[str, str, str]] = field(default_factory=list)
    exposed: list[tuple[str, bool]] = field(default_factory=list)
    status_payloads: dict[str, str] = field(default_factory=dict)
    fail: dict[tuple[str, str], int] = field(default_factory=dict)
    calls: list[Call] = field(default_factory=list)
    _next_host: dict[str, int] = field(default_factory=dict)

    # -------------------------------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path
        params = dict(request.url.params)
        form = parse_qs(request.content.decode()) if request.content else {}
        self.calls.append(Call(method, path, params, form))

        for (fail_method, prefix), code in self.fail.items():
            if method == fail_method and path.startswith(prefix):
                return httpx.Response(code, text="injected failure")

        parts = path.strip("/").split("/")
        head = parts[0]
        if head == "ipinfo":
            return httpx.Response(200, text=self.tracker)
        if head == "ip":
            return self._ip(method, parts[1], "/".join(parts[2:]))
        if head == "name":
            return self._name(method, parts[1], parts[2], params, form)
        if head == "expose":
            self.exposed.append(("/".join(parts[1:]), params.get("skipNAT") == "true"))
            return httpx.Response(200)
        if head == "status":
            return httpx.Response(200, text=self.status_payloads.get(path, ""))
        if head in ("connect", "forget", "ring", "peer"):
            return httpx.Response(200, text="")
        return httpx.Response(404, text="not found")

    def _ip(self, method: str, identity: str, rest: str) -> httpx.Response:
        owned = self.pool.setdefault(identity, [])
        if method == "GET":
            for cidr in owned:
                if not rest or _in_subnet(cidr, rest):
                    return httpx.Response(200, text=cidr)
            return httpx.Response(404, text=f"{identity} has no address")
        if method == "POST":
            cidr = self._allocate(rest or DEFAULT_SUBNET)
            owned.append(cidr)
            return httpx.Response(200, text=cidr)
        if method == "PUT":
            self.claimed.setdefault(identity, []).append(rest)
            return httpx.Response(204)
        if method == "DELETE":
            for cidr in owned:
                if cidr.split("/")[0] == rest:
                    owned.remove(cidr)
                    return httpx.Response(204)
            return httpx.Response(404, text="not owned")
        return httpx.Response(405)

    def _allocate(self, subnet: str) -> str:
        network = ipaddress.ip_network(subnet, strict=False)
        offset = self._next_host.get(subnet, 1)
        self._next_host[subnet] = offset + 1
        return f"{network.network_address + offset}/{network.prefixlen}"

    def _name(self, method, identity, address, params, form) -> httpx.Response:
        if method == "PUT":
            self.names.append((identity, address, form["fqdn"][0]))
            return httpx.Response(204)
        fqdn = params.get("fqdn")
        before = len(self.names)
        self.names = [
            entry
            for entry in self.names
            if not (
                entry[0] == identity
                and entry[1] == address
                and (fqdn is None or entry[2] == fqdn)
            )
        ]
        return httpx.Response(204 if len(self.names) < before else 404)

    # -------------------------------------------------------------------------

    def owned(self, identity: str) -> list[str]:
        return list(self.pool.get(identity, []))

    def paths(self, method: str | None = None) -> list[str]:
        return [c.path for c in self.calls if method is None or c.method == method]


def _in_subnet(cidr: str, subnet: str) -> bool:
    address = ipaddress.ip_interface(cidr).ip
    return address in ipaddress.ip_network(subnet, strict=False)


class FakeRunner(ExecRunner):
    """ExecRunner that records commands instead of starting containers."""

    def __init__(self):
        super().__init__(None, "weaveworks/weaveexec:test", "weave")
        self.commands: list[list[str]] = []
        self.results: dict[str, ExecResult] = {
            "container-fqdn": ExecResult(0, "box.weave.local.\n"),
        }

    def run(self, *command: str) -> ExecResult:
        self.commands.append(list(command))
        key = command[1] if command[0] == WEAVEUTIL else command[0]
        return self.results.get(key, ExecResult(0, ""))

    def subcommands(self) -> list[str]:
        return [c[1] for c in self.commands if c[0] == WEAVEUTIL]

    def find(self, subcommand: str) -> list[str]:
        return next(c for c in self.commands if c[0] == WEAVEUTIL and c[1] == subcommand)


class FakeDocker:
    """Container lookups without a Docker daemon."""

    def __init__(self):
        self.closed = False

    def container_id(self, name: str) -> str:
        return CONTAINERS.get(name, name)

    def container_network_ip(self, name: str, network: str) -> str:
        return "10.32.0.9"

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_router() -> FakeRouter:
    return FakeRouter()


@pytest.fixture
def router(fake_router) -> RouterClient:
    client = RouterClient(BASE_URL, transport=httpx.MockTransport(fake_router.handle))
    yield client
    client.close()


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def node(router, runner) -> WeaveNode:
    return WeaveNode(WeaveConfig(), router=router, docker=FakeDocker(), runner=runner)
