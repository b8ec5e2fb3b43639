import pytest

from weaveapi.config import WeaveConfig
from weaveapi.docker.exec_manager import ExecResult
from weaveapi.exceptions import DNSDisabledError, RouteOverlapError
from weaveapi.node import WeaveNode

from conftest import FakeDocker


def test_connect_and_forget(node, fake_router):
    node.connect(["10.0.0.2"])
    node.forget(["10.0.0.2"])

    connect, forget = fake_router.calls
    assert connect.form["replace"] == ["false"]
    assert forget.path == "/forget"


def test_remove_peer_needs_a_peer(node):
    with pytest.raises(ValueError):
        node.remove_peer()


def test_remove_peer_each(node, fake_router):
    replies = node.remove_peer("aa:bb:cc:dd:ee:01", "aa:bb:cc:dd:ee:02")

    assert len(replies) == 2
    assert fake_router.paths("DELETE") == [
        "/peer/aa:bb:cc:dd:ee:01",
        "/peer/aa:bb:cc:dd:ee:02",
    ]


def test_prime(node, fake_router):
    node.prime()
    assert fake_router.paths() == ["/ring"]


def test_is_awsvpc(node, fake_router):
    assert not node.is_awsvpc()
    fake_router.tracker = "awsvpc"
    assert node.is_awsvpc()


def test_check_overlap(node, runner):
    node.check_overlap("10.44.0.0/24")
    runner.results["netcheck"] = ExecResult(0, "10.44.0.0/24 dev eth1\n")

    with pytest.raises(RouteOverlapError):
        node.check_overlap("10.44.0.0/24")


def test_bridge_type(node, runner):
    runner.results["detect-bridge-type"] = ExecResult(0, "bridge\n")
    assert node.bridge_type() == "bridge"


def test_runner_gets_node_docker(router):
    docker = FakeDocker()
    node = WeaveNode(WeaveConfig(), router=router, docker=docker)

    assert node.runner.docker is docker
    assert node.runner.image == "weaveworks/weaveexec:2.8.1"


def test_container_dns_disabled(router, runner):
    node = WeaveNode(
        WeaveConfig(dns_disabled=True), router=router, docker=FakeDocker(), runner=runner
    )

    with pytest.raises(DNSDisabledError):
        node.add_container_dns("box", "box.weave.local.")


def test_close_closes_collaborators(router, runner):
    docker = FakeDocker()
    with WeaveNode(WeaveConfig(), router=router, docker=docker, runner=runner):
        pass

    assert docker.closed
    assert router._client.is_closed
