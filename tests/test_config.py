"""Tests for environment-driven configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from kasa_cloud_cli.config import (
    LOG_FORMAT,
    CloudConfig,
    configure_logging,
    default_config_path,
    get_env_float,
    resolve_config_path,
)
from kasa_cloud_cli.const import DEFAULT_CLOUD_URL, DEFAULT_HTTP_TIMEOUT


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test without KASA_* overrides."""
    for name in (
        "KASA_CLOUD_URL",
        "KASA_CONFIG",
        "KASA_HTTP_TIMEOUT",
        "KASA_APP_TYPE",
        "KASA_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_default_config_path_is_in_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """The record lives at ~/.tplink.toml by default."""
    monkeypatch.setenv("HOME", str(tmp_path))

    assert default_config_path() == tmp_path / ".tplink.toml"
    assert resolve_config_path(None) == tmp_path / ".tplink.toml"


def test_flag_overrides_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """--config beats KASA_CONFIG."""
    monkeypatch.setenv("KASA_CONFIG", str(tmp_path / "env.toml"))

    assert resolve_config_path(tmp_path / "flag.toml") == tmp_path / "flag.toml"


def test_environment_overrides_default(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """KASA_CONFIG beats the home directory default."""
    monkeypatch.setenv("KASA_CONFIG", str(tmp_path / "env.toml"))

    assert resolve_config_path(None) == tmp_path / "env.toml"


def test_override_expands_user(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """A leading ~ in the override is expanded."""
    monkeypatch.setenv("HOME", str(tmp_path))

    assert resolve_config_path("~/kasa.toml") == tmp_path / "kasa.toml"


def test_cloud_config_defaults() -> None:
    """Without environment overrides the public cloud is used."""
    config = CloudConfig.from_env()

    assert config.base_url == DEFAULT_CLOUD_URL
    assert config.timeout == DEFAULT_HTTP_TIMEOUT
    assert config.app_type == ""


def test_cloud_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Every connection setting can be overridden."""
    monkeypatch.setenv("KASA_CLOUD_URL", "https://eu-wap.tplinkcloud.com/")
    monkeypatch.setenv("KASA_HTTP_TIMEOUT", "2.5")
    monkeypatch.setenv("KASA_APP_TYPE", "Kasa_Android")

    config = CloudConfig.from_env()

    assert config.base_url == "https://eu-wap.tplinkcloud.com/"
    assert config.timeout == 2.5
    assert config.app_type == "Kasa_Android"


@pytest.mark.parametrize("raw", ["soon", "-1", "0"])
def test_bad_timeout_falls_back_to_default(
    monkeypatch: pytest.MonkeyPatch, raw: str
) -> None:
    """Unusable timeouts are ignored with a warning."""
    monkeypatch.setenv("KASA_HTTP_TIMEOUT", raw)

    assert CloudConfig.from_env().timeout == DEFAULT_HTTP_TIMEOUT


def test_get_env_float_treats_blank_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    """An empty variable means the default."""
    monkeypatch.setenv("KASA_HTTP_TIMEOUT", "  ")

    assert get_env_float("KASA_HTTP_TIMEOUT", 3.0) == 3.0


@pytest.fixture
def restore_log_levels():
    """Undo logger level changes made by configure_logging."""
    names = ("", "kasa_cloud_cli", "httpx", "httpcore")
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


@pytest.mark.parametrize(
    ("env_level", "verbose", "expected"),
    [
        (None, False, logging.WARNING),
        ("INFO", False, logging.INFO),
        ("debug", False, logging.DEBUG),
        ("ERROR", True, logging.DEBUG),
        ("chatty", False, logging.WARNING),
        ("BASIC_FORMAT", False, logging.WARNING),
    ],
)
def test_configure_logging_level(
    monkeypatch: pytest.MonkeyPatch,
    restore_log_levels,
    env_level: str | None,
    verbose: bool,
    expected: int,
) -> None:
    """KASA_LOG_LEVEL picks the level, --verbose forces DEBUG."""
    if env_level is not None:
        monkeypatch.setenv("KASA_LOG_LEVEL", env_level)

    configure_logging(verbose)

    assert logging.getLogger("kasa_cloud_cli").level == expected


@pytest.mark.parametrize(
    ("env_level", "verbose", "expected"),
    [
        (None, True, logging.WARNING),
        ("INFO", False, logging.WARNING),
        ("ERROR", False, logging.ERROR),
    ],
)
def test_http_library_logging_stays_quiet(
    monkeypatch: pytest.MonkeyPatch,
    restore_log_levels,
    env_level: str | None,
    verbose: bool,
    expected: int,
) -> None:
    """httpx request lines carry the token, so they are never enabled."""
    if env_level is not None:
        monkeypatch.setenv("KASA_LOG_LEVEL", env_level)
    logging.getLogger("httpx").setLevel(logging.DEBUG)

    configure_logging(verbose)

    assert logging.getLogger("httpx").level == expected
    assert logging.getLogger("httpcore").level == expected


def test_configure_logging_installs_handler_when_unconfigured(
    monkeypatch: pytest.MonkeyPatch, restore_log_levels
) -> None:
    """A bare process gets a stream handler with the kasactl format."""
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setenv("KASA_LOG_LEVEL", "INFO")

    configure_logging()

    assert len(root.handlers) == 1
    assert root.handlers[0].formatter._fmt == LOG_FORMAT
    assert root.level == logging.INFO


def test_configure_logging_keeps_existing_handlers(
    monkeypatch: pytest.MonkeyPatch, restore_log_levels
) -> None:
    """An application that already set up logging keeps its handlers."""
    root = logging.getLogger()
    existing = logging.NullHandler()
    monkeypatch.setattr(root, "handlers", [existing])
    root.setLevel(logging.ERROR)

    configure_logging(verbose=True)

    assert root.handlers == [existing]
    assert root.level == logging.ERROR
    assert logging.getLogger("kasa_cloud_cli").level == logging.DEBUG
