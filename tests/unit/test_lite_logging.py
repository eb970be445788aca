"""Tests for zooevents.lite_logging and package logging setup."""

import logging

import pytest

import zooevents
from zooevents.lite_logging import (
    configure_lite_logging,
    get_logging_status,
)

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def restore_levels():
    names = ["", "zooevents", "aiohttp.access", "aiohttp.server", "asyncio"]
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


class TestConfigureLiteLogging:
    """Tests for configure_lite_logging function."""

    def test_default_production_mode(self):
        configure_lite_logging()

        assert logging.getLogger().level == logging.INFO
        assert logging.getLogger("aiohttp.access").level == logging.WARNING
        assert logging.getLogger("zooevents").level == logging.INFO

    def test_debug_mode(self):
        configure_lite_logging(debug_mode=True)

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("zooevents").level == logging.DEBUG
        # Third-party loggers should still be suppressed
        assert logging.getLogger("aiohttp.access").level == logging.WARNING

    def test_force_debug_overrides_env(self, monkeypatch):
        monkeypatch.setenv("ZOOEVENTS_DEBUG", "true")
        configure_lite_logging(force_debug=False)
        assert logging.getLogger("zooevents").level == logging.INFO

    def test_env_debug(self, monkeypatch):
        monkeypatch.setenv("ZOOEVENTS_DEBUG", "1")
        configure_lite_logging()
        assert logging.getLogger("zooevents").level == logging.DEBUG

    def test_env_log_level_overrides_root(self, monkeypatch):
        monkeypatch.setenv("ZOOEVENTS_LOG_LEVEL", "error")
        configure_lite_logging(debug_mode=True)
        assert logging.getLogger().level == logging.ERROR


def test_get_logging_status():
    configure_lite_logging()
    status = get_logging_status()

    assert status["root"] == "INFO"
    assert status["zooevents"] == "INFO"
    assert status["aiohttp.access"] == "WARNING"


def test_init_logging_honours_debug_env(monkeypatch):
    monkeypatch.setenv("ZOOEVENTS_DEBUG", "yes")
    zooevents._init_logging("WARNING")
    assert logging.getLogger().level == logging.DEBUG


def test_init_logging_unknown_level_defaults_to_info():
    zooevents._init_logging("chatty")
    assert logging.getLogger().level == logging.INFO
