import pytest

from weaveapi.config import WeaveConfig
from weaveapi.exceptions import ConfigError
from weaveapi.models.enums import LogLevel


def test_defaults():
    cfg = WeaveConfig()

    assert cfg.base_url == "http://127.0.0.1:6784"
    assert cfg.exec_image == "weaveworks/weaveexec:2.8.1"
    assert cfg.docker_base_url is None
    assert cfg.log_level is LogLevel.INFO


def test_remote_address_needs_docker_endpoint():
    with pytest.raises(ConfigError):
        WeaveConfig(address="10.0.0.5")

    cfg = WeaveConfig(address="10.0.0.5", docker_port=2375)
    assert cfg.docker_base_url == "tcp://10.0.0.5:2375"


def test_docker_host_wins_over_port():
    cfg = WeaveConfig(docker_host="unix:///run/docker.sock", docker_port=2375)
    assert cfg.docker_base_url == "unix:///run/docker.sock"


@pytest.mark.parametrize(
    "changes",
    [
        {"http_port": 0},
        {"port": 70000},
        {"docker_port": -1},
        {"timeout": 0},
        {"exec_timeout": -5},
        {"version": ""},
        {"log_level": "loud"},
    ],
)
def test_invalid_values(changes):
    with pytest.raises(ConfigError):
        WeaveConfig(**changes)


def test_log_level_coerced_from_string():
    assert WeaveConfig(log_level="debug").log_level is LogLevel.DEBUG


def test_with_options_validates():
    cfg = WeaveConfig()

    assert cfg.with_options(http_port=7000).base_url == "http://127.0.0.1:7000"
    assert cfg.http_port == 6784
    with pytest.raises(ConfigError):
        cfg.with_options(http_port=0)


def test_from_env(monkeypatch):
    monkeypatch.setenv("WEAVE_ADDRESS", "10.0.0.5")
    monkeypatch.setenv("WEAVE_DOCKER_PORT", "2375")
    monkeypatch.setenv("WEAVE_VERSION", "2.7.0")
    monkeypatch.setenv("WEAVE_NO_DNS", "true")
    monkeypatch.setenv("WEAVE_LOG_LEVEL", "DEBUG")

    cfg = WeaveConfig.from_env(http_port=7000)

    assert cfg.address == "10.0.0.5"
    assert cfg.docker_port == 2375
    assert cfg.exec_image == "weaveworks/weaveexec:2.7.0"
    assert cfg.dns_disabled
    assert cfg.log_level is LogLevel.DEBUG
    assert cfg.http_port == 7000


def test_from_env_bad_integer(monkeypatch):
    monkeypatch.setenv("WEAVE_HTTP_PORT", "http")

    with pytest.raises(ConfigError):
        WeaveConfig.from_env()
