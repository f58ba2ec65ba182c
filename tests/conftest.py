"""Shared fixtures: a stub scanning engine and captured output."""
import io
from typing import List

import pytest
from rich.console import Console

from aeon_scanner.config import Config, PoolListenerSettings, ReconnectConfig, ScannerConfig
from aeon_scanner.core.engine import ExchangeClient, ScannerEngine
from aeon_scanner.core.exchanges import ExchangeCapability
from aeon_scanner.models import ExchangeId, PriceQuote
from aeon_scanner.monitoring.output import Output


async def aiter_items(items):
    """Async generator over ``items``; ends like a closed producer."""
    for item in items:
        yield item


class StubExchangeClient(ExchangeClient):
    """Exchange client returning canned data and recording calls."""

    def __init__(self, exchange_id, quote=None, updates=None, streaming=True):
        self.exchange_id = exchange_id
        self.capability = (
            ExchangeCapability.STREAMING if streaming else ExchangeCapability.REST_ONLY
        )
        self.quote = quote
        self.updates = updates or []
        self.calls = []

    async def fetch_quote(self, symbol):
        self.calls.append(("fetch_quote", symbol))
        return self.quote

    async def stream_price_websocket(self, symbols, reconnect_attempts, reconnect_delay_ms):
        self.calls.append(("stream", list(symbols), reconnect_attempts, reconnect_delay_ms))
        return aiter_items(self.updates)


class StubEngine(ScannerEngine):
    """Engine returning canned results and recording every call."""

    def __init__(self):
        self.clients = {}
        self.opportunities = []
        self.batches = []
        self.pool_updates = []
        self.calls = []
        self.closed = False

    def exchange(self, exchange_id):
        if exchange_id not in self.clients:
            self.clients[exchange_id] = StubExchangeClient(exchange_id)
        return self.clients[exchange_id]

    async def scan_arbitrage_opportunities(
        self,
        symbol,
        exchanges,
        dex_aggregators=None,
        base_token=None,
        quote_token=None,
        quote_amount=None,
        fee_overrides=None,
    ):
        self.calls.append(("scan", {
            "symbol": symbol,
            "exchanges": list(exchanges),
            "dex_aggregators": dex_aggregators,
            "base_token": base_token,
            "quote_token": quote_token,
            "quote_amount": quote_amount,
            "fee_overrides": fee_overrides,
        }))
        return list(self.opportunities)

    async def scan_arbitrage_from_websockets(
        self, symbols, exchanges, fee_overrides, reconnect_attempts, reconnect_delay_ms
    ):
        self.calls.append(("scan_ws", {
            "symbols": list(symbols),
            "exchanges": list(exchanges),
            "fee_overrides": fee_overrides,
            "reconnect_attempts": reconnect_attempts,
            "reconnect_delay_ms": reconnect_delay_ms,
        }))
        return aiter_items(self.batches)

    async def stream_pool_prices(self, config):
        self.calls.append(("pool", config))
        return aiter_items(self.pool_updates)

    async def close(self):
        self.closed = True


class CapturedOutput(Output):
    """Output writing into string buffers."""

    def __init__(self):
        self.stdout = io.StringIO()
        self.stderr = io.StringIO()
        super().__init__(
            Console(file=self.stdout, highlight=False, width=200),
            Console(file=self.stderr, highlight=False, width=200),
        )

    @property
    def lines(self) -> List[str]:
        return self.stdout.getvalue().splitlines()

    @property
    def error_text(self) -> str:
        return self.stderr.getvalue()


@pytest.fixture
def stub_engine():
    """Stub engine with no canned data."""
    return StubEngine()


@pytest.fixture
def output():
    """Output captured in memory."""
    return CapturedOutput()


@pytest.fixture
def settings():
    """Configuration independent of the process environment."""
    return Config(
        scanner=ScannerConfig(default_exchange="binance", engine="unused:Engine", stream_capacity=10),
        reconnect=ReconnectConfig(attempts=3, delay_ms=250),
        pool_listener=PoolListenerSettings(rpc_ws_url="wss://rpc.example/ws"),
        log_level="DEBUG",
        log_file=None,
    )


@pytest.fixture
def sample_quote():
    """Quote used by the end-to-end price scenario."""
    return PriceQuote(
        symbol="BTCUSDT",
        bid_price=100,
        bid_qty=1,
        ask_price=101,
        ask_qty=2,
        mid_price=100.5,
    )


@pytest.fixture
def make_client():
    """Factory for stub exchange clients."""
    return StubExchangeClient
