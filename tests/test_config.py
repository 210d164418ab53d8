import logging
import sys

import pytest
import structlog

from httpbridge.config import Config
from httpbridge.logs import configure_from, configure_logging


class TestConfig:
    def test_defaults(self):
        config = Config()
        assert config.client["connect_timeout"] == 5
        assert config.client["max_connections"] == 2000
        assert config.client["keepalive_expiry"] == 50
        assert config.get("client", "follow_redirects") is True
        assert config.get("client", "missing", default="x") == "x"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("BRIDGE_READ_TIMEOUT", "2.5")
        monkeypatch.setenv("BRIDGE_MAX_CONNECTIONS", "10")
        monkeypatch.setenv("BRIDGE_FOLLOW_REDIRECTS", "false")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        config = Config()
        assert config.client["read_timeout"] == 2.5
        assert config.client["max_connections"] == 10
        assert config.client["follow_redirects"] is False
        assert config.logging["level"] == "DEBUG"

    def test_custom_file(self, tmp_path):
        path = tmp_path / "bridge.yaml"
        path.write_text("client:\n  read_timeout: 1\n")
        config = Config(str(path))
        assert config.client == {"read_timeout": 1}
        assert config.logging == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("client: [unclosed\n")
        with pytest.raises(ValueError):
            Config(str(path))


class TestLogging:
    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        yield
        structlog.reset_defaults()

    def test_configure_logging(self):
        configure_logging(level="warning", renderer="console")
        assert structlog.is_configured()
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_configure_from_config(self, monkeypatch):
        monkeypatch.setenv("LOG_RENDERER", "json")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        root.handlers.clear()
        try:
            configure_from(Config())
            handlers, level = root.handlers[:], root.level
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert level == logging.DEBUG
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert handlers[0].stream is sys.stdout
