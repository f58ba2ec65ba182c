"""Tests for configuration loading."""
import pytest
from pydantic import ValidationError

from aeon_scanner.config import (
    DEFAULT_ENGINE,
    Config,
    PoolListenerSettings,
    ReconnectConfig,
    ScannerConfig,
)


class TestConfig:
    """Test suite for environment driven settings."""

    def test_defaults(self, monkeypatch):
        for name in ("DEFAULT_EXCHANGE", "SCANNER_ENGINE", "STREAM_CAPACITY",
                     "RECONNECT_ATTEMPTS", "RECONNECT_DELAY_MS", "POOL_LISTENER_RPC_WS",
                     "LOG_LEVEL", "LOG_FILE"):
            monkeypatch.delenv(name, raising=False)

        config = Config()

        assert config.scanner.default_exchange == "binance"
        assert config.scanner.engine == DEFAULT_ENGINE
        assert config.scanner.stream_capacity == 1000
        assert config.reconnect.attempts == 10
        assert config.reconnect.delay_ms == 1000
        assert config.pool_listener.rpc_ws_url is None
        assert config.log_level == "INFO"
        assert config.log_file is None

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_EXCHANGE", "okx")
        monkeypatch.setenv("RECONNECT_ATTEMPTS", "3")
        monkeypatch.setenv("RECONNECT_DELAY_MS", "250")
        monkeypatch.setenv("POOL_LISTENER_RPC_WS", "wss://bsc.example/ws")

        config = Config()

        assert config.scanner.default_exchange == "okx"
        assert config.reconnect.attempts == 3
        assert config.reconnect.delay_ms == 250
        assert config.pool_listener.rpc_ws_url == "wss://bsc.example/ws"

    def test_blank_rpc_url_is_missing(self, monkeypatch):
        monkeypatch.setenv("POOL_LISTENER_RPC_WS", "   ")
        assert PoolListenerSettings().rpc_ws_url is None

    def test_validation(self):
        with pytest.raises(ValidationError):
            ReconnectConfig(attempts=-1)
        with pytest.raises(ValidationError):
            ScannerConfig(stream_capacity=0)
