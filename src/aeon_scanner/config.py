"""Configuration management for the market scanner CLI."""
import os
from typing import Optional
from pydantic import BaseModel, Field
from dotenv import load_dotenv

load_dotenv()

DEFAULT_ENGINE = "aeon_scanner.core.ccxt_engine:CcxtEngine"


def _optional_env(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


class ScannerConfig(BaseModel):
    """Engine and stream settings."""
    default_exchange: str = Field(
        default_factory=lambda: os.getenv("DEFAULT_EXCHANGE", "binance")
    )
    engine: str = Field(
        default_factory=lambda: os.getenv("SCANNER_ENGINE", DEFAULT_ENGINE)
    )
    # bounded queue size for live quote streams
    stream_capacity: int = Field(
        default_factory=lambda: int(os.getenv("STREAM_CAPACITY", "1000")),
        gt=0,
    )


class ReconnectConfig(BaseModel):
    """Reconnect policy forwarded to streaming producers."""
    attempts: int = Field(
        default_factory=lambda: int(os.getenv("RECONNECT_ATTEMPTS", "10")),
        ge=0,
    )
    delay_ms: int = Field(
        default_factory=lambda: int(os.getenv("RECONNECT_DELAY_MS", "1000")),
        ge=0,
    )


class PoolListenerSettings(BaseModel):
    """On-chain pool listener settings."""
    rpc_ws_url: Optional[str] = Field(
        default_factory=lambda: _optional_env("POOL_LISTENER_RPC_WS")
    )


class Config(BaseModel):
    """Main application configuration."""
    scanner: ScannerConfig = Field(default_factory=ScannerConfig)
    reconnect: ReconnectConfig = Field(default_factory=ReconnectConfig)
    pool_listener: PoolListenerSettings = Field(default_factory=PoolListenerSettings)
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = Field(default_factory=lambda: _optional_env("LOG_FILE"))

# single global config instance that everything uses
config = Config()
