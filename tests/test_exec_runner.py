from unittest.mock import MagicMock

import pytest
import requests
from docker.errors import APIError, DockerException, ImageNotFound, NotFound

from weaveapi.docker.client import DockerManager
from weaveapi.docker.exec_manager import ExecResult
from weaveapi.docker.exec_runner import WEAVEUTIL, ExecRunner
from weaveapi.exceptions import (
    ContainerNotFoundError,
    DockerConnectionError,
    ExecError,
    RouteOverlapError,
)

IMAGE = "weaveworks/weaveexec:2.8.1"


class RecordingDocker:
    """Answers run_exec_container from a queue of results."""

    def __init__(self, *results):
        self.results = list(results)
        self.runs = []

    def run_exec_container(self, image, command):
        self.runs.append((image, command))
        return self.results.pop(0) if self.results else ExecResult(0, "")


def _manager(client):
    manager = DockerManager.__new__(DockerManager)
    manager.client = client
    return manager


# =============================================================================
# ExecRunner
# =============================================================================


def test_run_without_docker():
    with pytest.raises(ExecError):
        ExecRunner(None, IMAGE).run("true")


def test_weaveutil_returns_stdout():
    docker = RecordingDocker(ExecResult(0, "box.weave.local.\n"))
    runner = ExecRunner(docker, IMAGE)

    assert runner.container_fqdn("c0ffee") == "box.weave.local."
    assert docker.runs == [(IMAGE, [WEAVEUTIL, "container-fqdn", "c0ffee"])]


def test_weaveutil_nonzero_exit():
    runner = ExecRunner(RecordingDocker(ExecResult(2, "boom")), IMAGE)

    with pytest.raises(ExecError) as exc:
        runner.detach_container("c0ffee", ["10.32.0.1/12"])

    assert exc.value.exit_code == 2
    assert exc.value.output == "boom"


@pytest.mark.parametrize(
    "result",
    [ExecResult(0, "10.1.0.0/24 dev eth0\n"), ExecResult(1, "")],
)
def test_netcheck_overlap(result):
    runner = ExecRunner(RecordingDocker(result), IMAGE)

    with pytest.raises(RouteOverlapError):
        runner.netcheck("10.1.0.0/24")


def test_netcheck_clear():
    docker = RecordingDocker(ExecResult(0, ""))
    ExecRunner(docker, IMAGE, bridge="weave0").netcheck("10.1.0.0/24")

    assert docker.runs[0][1] == [WEAVEUTIL, "netcheck", "10.1.0.0/24", "weave0"]


def test_detect_bridge_type():
    docker = RecordingDocker(ExecResult(0, "fastdp\n"))

    assert ExecRunner(docker, IMAGE).detect_bridge_type() == "fastdp"
    assert docker.runs[0][1] == [WEAVEUTIL, "detect-bridge-type", "weave", "datapath"]


# =============================================================================
# DockerManager
# =============================================================================


def test_run_exec_container_removes_container():
    container = MagicMock()
    container.wait.return_value = {"StatusCode": 0}
    container.logs.return_value = b"fastdp\n"
    client = MagicMock()
    client.containers.create.return_value = container

    result = _manager(client).run_exec_container(IMAGE, [WEAVEUTIL, "detect-bridge-type"])

    assert result == ExecResult(0, "fastdp\n")
    kwargs = client.containers.create.call_args.kwargs
    assert kwargs["privileged"] is True
    assert kwargs["network_mode"] == "host"
    assert kwargs["pid_mode"] == "host"
    assert [m["Target"] for m in kwargs["mounts"]] == ["/var/run/docker.sock", "/host/"]
    container.remove.assert_called_once_with(v=True, force=True)


def test_run_exec_container_pulls_missing_image():
    container = MagicMock()
    container.wait.return_value = {"StatusCode": 3}
    container.logs.return_value = b""
    client = MagicMock()
    client.containers.create.side_effect = [ImageNotFound("missing"), container]

    result = _manager(client).run_exec_container(IMAGE, ["sh", "-c", "exit 3"])

    client.images.pull.assert_called_once_with(IMAGE)
    assert result.exit_code == 3
    assert not result.ok


def test_run_exec_container_start_failure():
    container = MagicMock()
    container.start.side_effect = APIError("cannot start")
    container.remove.side_effect = NotFound("gone")
    client = MagicMock()
    client.containers.create.return_value = container

    with pytest.raises(ExecError):
        _manager(client).run_exec_container(IMAGE, ["true"])
    container.remove.assert_called_once()


def test_container_network_ip():
    container = MagicMock()
    container.attrs = {
        "NetworkSettings": {
            "Networks": {
                "bridge": {"NetworkID": "n1", "IPAddress": "172.17.0.2"},
                "weave": {"NetworkID": "n2", "IPAddress": "10.32.0.9"},
            }
        }
    }
    client = MagicMock()
    client.containers.get.return_value = container
    manager = _manager(client)

    assert manager.container_network_ip("box", "weave") == "10.32.0.9"
    assert manager.container_network_ip("box", "n1") == "172.17.0.2"
    with pytest.raises(ContainerNotFoundError):
        manager.container_network_ip("box", "other")


def test_container_id_not_found():
    client = MagicMock()
    client.containers.get.side_effect = NotFound("no such container")
    manager = _manager(client)

    assert not manager.container_exists("ghost")
    with pytest.raises(ContainerNotFoundError):
        manager.container_id("ghost")


@pytest.mark.parametrize(
    "error",
    [DockerException("socket closed"), requests.exceptions.ConnectionError("reset by peer")],
)
def test_run_exec_container_transport_failure(error):
    container = MagicMock()
    container.wait.side_effect = error
    client = MagicMock()
    client.containers.create.return_value = container

    with pytest.raises(ExecError):
        _manager(client).run_exec_container(IMAGE, ["true"])
    container.remove.assert_called_once()


def test_run_exec_container_daemon_unreachable():
    client = MagicMock()
    client.containers.create.side_effect = requests.exceptions.ConnectionError("refused")

    with pytest.raises(ExecError):
        _manager(client).run_exec_container(IMAGE, ["true"])


def test_container_id_daemon_unreachable():
    client = MagicMock()
    client.containers.get.side_effect = requests.exceptions.ConnectionError("refused")

    with pytest.raises(DockerConnectionError):
        _manager(client).container_id("box")
