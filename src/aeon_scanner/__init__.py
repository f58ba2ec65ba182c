"""
aeon-scanner - Command line driver for cross-exchange crypto market scanning.
"""

from .config import config
from .models import (
    ExchangeId,
    FeeOverrides,
    Token,
    PriceQuote,
    PriceUpdate,
    ArbitrageOpportunity,
    PoolListenerConfig,
    PoolPriceUpdate,
)
from .core.exchanges import resolve_exchange
from .core.router import parse_command

__version__ = "1.0.0"
__all__ = [
    "config",
    "ExchangeId",
    "FeeOverrides",
    "Token",
    "PriceQuote",
    "PriceUpdate",
    "ArbitrageOpportunity",
    "PoolListenerConfig",
    "PoolPriceUpdate",
    "resolve_exchange",
    "parse_command",
]
