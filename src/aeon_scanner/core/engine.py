"""Interfaces of the market scanning engine consumed by the CLI."""
import importlib
from abc import ABC, abstractmethod
from typing import AsyncIterator, List, Optional, Sequence

from loguru import logger

from aeon_scanner.core.exchanges import ExchangeCapability
from aeon_scanner.infrastructure.error_handling import ConfigurationError
from aeon_scanner.models import (
    ArbitrageOpportunity,
    DexAggregator,
    ExchangeId,
    FeeOverrides,
    PoolListenerConfig,
    PoolPriceUpdate,
    PriceQuote,
    PriceUpdate,
    Token,
)


class ExchangeClient(ABC):
    """Market data access for a single centralised exchange."""

    exchange_id: ExchangeId
    capability: ExchangeCapability = ExchangeCapability.REST_ONLY

    def exchange_name(self) -> str:
        """Display name of the exchange."""
        return self.exchange_id.display_name

    def supports_websocket(self) -> bool:
        """Whether live quote streaming is available."""
        return self.capability is ExchangeCapability.STREAMING

    @abstractmethod
    async def fetch_quote(self, symbol: str) -> PriceQuote:
        """Fetch a top-of-book snapshot over REST."""

    @abstractmethod
    async def stream_price_websocket(
        self,
        symbols: Sequence[str],
        reconnect_attempts: int,
        reconnect_delay_ms: int,
    ) -> AsyncIterator[PriceUpdate]:
        """Open a live quote stream; the iterator ends when the producer closes it."""

    async def close(self):
        """Release any connections held by the client."""


class ScannerEngine(ABC):
    """Arbitrage scanning and on-chain listening capabilities."""

    @abstractmethod
    def exchange(self, exchange_id: ExchangeId) -> ExchangeClient:
        """Client for one exchange, resolved once per command."""

    @abstractmethod
    async def scan_arbitrage_opportunities(
        self,
        symbol: str,
        exchanges: Sequence[ExchangeId],
        dex_aggregators: Optional[Sequence[DexAggregator]] = None,
        base_token: Optional[Token] = None,
        quote_token: Optional[Token] = None,
        quote_amount: Optional[float] = None,
        fee_overrides: Optional[FeeOverrides] = None,
    ) -> List[ArbitrageOpportunity]:
        """One-shot scan across ``exchanges`` (plus a DEX leg when given)."""

    @abstractmethod
    async def scan_arbitrage_from_websockets(
        self,
        symbols: Sequence[str],
        exchanges: Sequence[ExchangeId],
        fee_overrides: Optional[FeeOverrides],
        reconnect_attempts: int,
        reconnect_delay_ms: int,
    ) -> AsyncIterator[List[ArbitrageOpportunity]]:
        """Continuous scan; each item is a snapshot batch of opportunities."""

    @abstractmethod
    async def stream_pool_prices(
        self, config: PoolListenerConfig
    ) -> AsyncIterator[PoolPriceUpdate]:
        """Stream price observations for one AMM pool."""

    async def close(self):
        """Release engine resources."""


def load_engine(path: str) -> ScannerEngine:
    """
    Import an engine from a ``module:attr`` path.

    Classes are instantiated with no arguments; other objects are returned
    as they are.
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(f"Engine path must look like 'module:attr', got {path!r}")

    try:
        target = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(f"Cannot load engine {path!r}: {e}") from e

    engine = target() if isinstance(target, type) else target
    logger.debug(f"Loaded engine {type(engine).__name__} from {path}")
    return engine
