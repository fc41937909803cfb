from __future__ import annotations

import json
import logging

import pytest

from node_toolchain.config import ToolchainConfig
from node_toolchain.errors import InvalidArgument
from node_toolchain.logging import JsonFormatter, configure_logging, get_logger
from node_toolchain.platforms import WindowsPlatform
from node_toolchain.runtime.environment import Environment


def test_defaults() -> None:
    cfg = ToolchainConfig()
    assert cfg.probe_timeout == 5
    assert cfg.exists_timeout == 3
    assert cfg.marker_file_name == "npm-install.lockhash"


def test_env_overrides() -> None:
    env = Environment(
        {
            "NODE_TOOLCHAIN_PROBE_TIMEOUT": "10",
            "NODE_TOOLCHAIN_NPM_INSTALL_TIMEOUT_WINDOWS": "60",
            "NODE_TOOLCHAIN_MARKER_FILE_NAME": ".lockhash",
            "NODE_TOOLCHAIN_EXISTS_TIMEOUT": "  ",
        }
    )
    cfg = ToolchainConfig.from_env(env)
    assert cfg.probe_timeout == 10
    assert cfg.exists_timeout == 3
    assert cfg.marker_file_name == ".lockhash"
    assert WindowsPlatform(cfg).npm_install_timeout == 60


@pytest.mark.parametrize("value", ["0", "-3", "soon"])
def test_invalid_env_override(value: str) -> None:
    env = Environment({"NODE_TOOLCHAIN_PROBE_TIMEOUT": value})
    with pytest.raises(InvalidArgument):
        ToolchainConfig.from_env(env)


def test_environment_treats_blank_as_missing() -> None:
    env = Environment({"PATH": "", "HOME": "/root"})
    assert env.get("PATH") is None
    assert env.get("HOME") == "/root"
    assert env.get("NOPE") is None


def test_environment_defaults_to_os_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NODE_TOOLCHAIN_TEST_VAR", "x")
    assert Environment().get("NODE_TOOLCHAIN_TEST_VAR") == "x"


def test_json_formatter_includes_context() -> None:
    record = logging.LogRecord(
        "node_toolchain.core", logging.INFO, __file__, 1, "found %s", ("node",), None
    )
    record.ctx = {"node_path": "/usr/bin/node", "msg": "ignored"}
    payload = json.loads(JsonFormatter().format(record))
    assert payload["msg"] == "found node"
    assert payload["level"] == "INFO"
    assert payload["node_path"] == "/usr/bin/node"


def test_loggers_share_one_handler() -> None:
    child = get_logger("node_toolchain.locator")
    other = get_logger("installer.npm")
    root = get_logger()
    assert other.name == "node_toolchain.installer.npm"
    assert child.parent is root
    assert not child.handlers
    assert len(root.handlers) == 1


def test_configure_logging_levels() -> None:
    root = configure_logging("debug")
    assert root.level == logging.DEBUG
    configure_logging(logging.INFO)
    with pytest.raises(ValueError):
        configure_logging("chatty")
