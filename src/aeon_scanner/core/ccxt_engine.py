"""Default engine backed by CCXT market data."""
import asyncio
from typing import Dict, List, Optional, Sequence

import ccxt
import ccxt.pro as ccxtpro
from loguru import logger

from aeon_scanner.config import config
from aeon_scanner.core.engine import ExchangeClient, ScannerEngine
from aeon_scanner.core.exchanges import ExchangeCapability
from aeon_scanner.core.streams import UpdateStream
from aeon_scanner.infrastructure.error_handling import (
    EngineError,
    EngineErrorKind,
    translate_engine_errors,
)
from aeon_scanner.models import (
    ArbitrageOpportunity,
    DexAggregator,
    ExchangeId,
    FeeOverrides,
    PoolListenerConfig,
    PriceQuote,
    PriceUpdate,
    Token,
)

CCXT_IDS: Dict[ExchangeId, str] = {
    ExchangeId.BINANCE: "binance",
    ExchangeId.BYBIT: "bybit",
    ExchangeId.MEXC: "mexc",
    ExchangeId.OKX: "okx",
    ExchangeId.GATEIO: "gate",
    ExchangeId.KUCOIN: "kucoin",
    ExchangeId.BITGET: "bitget",
    ExchangeId.BTCTURK: "btcturk",
    ExchangeId.HTX: "htx",
    ExchangeId.COINBASE: "coinbase",
    ExchangeId.KRAKEN: "kraken",
    ExchangeId.BITFINEX: "bitfinex",
    ExchangeId.UPBIT: "upbit",
    ExchangeId.CRYPTOCOM: "cryptocom",
}

EXCHANGE_OPTIONS = {
    'enableRateLimit': True,
    'options': {
        'defaultType': 'spot',
    }
}


def _compact(symbol: str) -> str:
    """BTC/USDT, btc-usdt and BTC_USDT all become BTCUSDT."""
    return symbol.upper().replace("/", "").replace("-", "").replace("_", "")


def _as_float(value) -> float:
    return float(value) if value is not None else 0.0


class CcxtExchangeClient(ExchangeClient):
    """Quotes from one exchange through CCXT (REST) and CCXT Pro (websocket)."""

    def __init__(self, exchange_id: ExchangeId, stream_capacity: int = 1000):
        """Initialise the CCXT exchange instance."""
        self.exchange_id = exchange_id
        self.ccxt_id = CCXT_IDS[exchange_id]
        self.stream_capacity = stream_capacity
        self.markets = {}
        self.capability = (
            ExchangeCapability.STREAMING
            if hasattr(ccxtpro, self.ccxt_id)
            else ExchangeCapability.REST_ONLY
        )

        exchange_class = getattr(ccxt, self.ccxt_id)
        self.exchange = exchange_class(dict(EXCHANGE_OPTIONS))
        logger.debug(
            f"CCXT client for {self.exchange_name()} ready ({self.capability.value})"
        )

    async def load_markets(self) -> dict:
        """Load available markets from the exchange once."""
        if not self.markets:
            self.markets = await asyncio.to_thread(self.exchange.load_markets)
            logger.info(f"Loaded {len(self.markets)} markets from {self.exchange_name()}")
        return self.markets

    def market_symbol(self, symbol: str, markets: dict) -> str:
        """Map a compact symbol such as BTCUSDT to the CCXT unified symbol."""
        if symbol in markets:
            return symbol

        wanted = _compact(symbol)
        for unified, market in markets.items():
            if not market.get('spot', True):
                continue
            if _compact(market.get('id', '')) == wanted or _compact(unified) == wanted:
                return unified

        raise EngineError(
            EngineErrorKind.VALIDATION,
            f"Unknown symbol {symbol}",
            self.exchange_id,
        )

    @translate_engine_errors
    async def fetch_quote(self, symbol: str) -> PriceQuote:
        """Fetch the best bid/ask from the order book."""
        markets = await self.load_markets()
        unified = self.market_symbol(symbol, markets)
        order_book = await asyncio.to_thread(self.exchange.fetch_order_book, unified, 5)

        bids, asks = order_book.get('bids') or [], order_book.get('asks') or []
        if not bids or not asks:
            raise EngineError(
                EngineErrorKind.ENGINE,
                f"Empty order book for {symbol}",
                self.exchange_id,
            )

        bid_price, bid_qty = float(bids[0][0]), float(bids[0][1])
        ask_price, ask_qty = float(asks[0][0]), float(asks[0][1])
        return PriceQuote(
            symbol=symbol,
            bid_price=bid_price,
            bid_qty=bid_qty,
            ask_price=ask_price,
            ask_qty=ask_qty,
            mid_price=(bid_price + ask_price) / 2,
        )

    async def stream_price_websocket(
        self,
        symbols: Sequence[str],
        reconnect_attempts: int,
        reconnect_delay_ms: int,
    ) -> UpdateStream:
        """Start a CCXT Pro ticker feed and return its bounded stream."""
        if not self.supports_websocket():
            raise EngineError(
                EngineErrorKind.UNSUPPORTED,
                "WebSocket streaming is not supported",
                self.exchange_id,
            )

        ws = getattr(ccxtpro, self.ccxt_id)(dict(EXCHANGE_OPTIONS))
        stream = UpdateStream(self.stream_capacity)
        producer = asyncio.create_task(
            self._pump(ws, list(symbols), stream, reconnect_attempts, reconnect_delay_ms)
        )
        stream.attach(producer)
        return stream

    async def _pump(
        self,
        ws,
        symbols: List[str],
        stream: UpdateStream,
        reconnect_attempts: int,
        reconnect_delay_ms: int,
    ):
        """Fan ticker watchers out per symbol and feed one stream."""
        watchers = []
        failure = None
        try:
            markets = await ws.load_markets()
            # every symbol must resolve before any watcher starts
            targets = [(self.market_symbol(symbol, markets), symbol) for symbol in symbols]
            for unified, symbol in targets:
                watchers.append(asyncio.create_task(
                    self._watch_symbol(
                        ws,
                        unified,
                        symbol,
                        stream,
                        reconnect_attempts,
                        reconnect_delay_ms,
                    )
                ))
            done, _ = await asyncio.wait(watchers, return_when=asyncio.FIRST_EXCEPTION)
            for task in done:
                task.result()
        except (ccxt.BaseError, EngineError) as e:
            logger.error(f"{self.exchange_name()} stream closed: {e}")
        except Exception as e:
            logger.exception(f"{self.exchange_name()} stream failed: {e}")
            failure = EngineError(
                EngineErrorKind.ENGINE,
                f"Stream failed: {e}",
                self.exchange_id,
            )
        finally:
            for task in watchers:
                task.cancel()
            await asyncio.gather(*watchers, return_exceptions=True)
            await ws.close()
            await stream.close(failure)

    async def _watch_symbol(
        self,
        ws,
        unified: str,
        symbol: str,
        stream: UpdateStream,
        reconnect_attempts: int,
        reconnect_delay_ms: int,
    ):
        """Forward ticks for one symbol, reconnecting on network errors."""
        failures = 0
        while True:
            try:
                ticker = await ws.watch_ticker(unified)
            except ccxt.NetworkError as e:
                failures += 1
                if failures > reconnect_attempts:
                    logger.error(
                        f"{self.exchange_name()} {symbol}: giving up after "
                        f"{reconnect_attempts} reconnect attempts"
                    )
                    raise
                logger.warning(
                    f"{self.exchange_name()} {symbol} disconnected "
                    f"(attempt {failures}/{reconnect_attempts}), "
                    f"reconnecting in {reconnect_delay_ms}ms: {e}"
                )
                await asyncio.sleep(reconnect_delay_ms / 1000)
                continue

            failures = 0
            await stream.send(PriceUpdate(
                exchange=self.exchange_id,
                symbol=symbol,
                bid_price=_as_float(ticker.get('bid')),
                bid_qty=_as_float(ticker.get('bidVolume')),
                ask_price=_as_float(ticker.get('ask')),
                ask_qty=_as_float(ticker.get('askVolume')),
            ))

    async def close(self):
        """Close exchange connection."""
        if hasattr(self.exchange, 'close'):
            try:
                await asyncio.to_thread(self.exchange.close)
            except Exception as e:
                logger.debug(f"Error closing {self.exchange_name()}: {e}")


class CcxtEngine(ScannerEngine):
    """
    Market data engine over CCXT.

    Serves single-exchange quotes and live quote streams. Arbitrage scans
    and pool listeners need a full scanning engine, selected with
    SCANNER_ENGINE; this engine reports them as unsupported.
    """

    def __init__(self, stream_capacity: Optional[int] = None):
        """Initialise the engine."""
        self.stream_capacity = stream_capacity or config.scanner.stream_capacity
        self.clients: Dict[ExchangeId, CcxtExchangeClient] = {}

    def exchange(self, exchange_id: ExchangeId) -> CcxtExchangeClient:
        """Get or create the client for ``exchange_id``."""
        if exchange_id not in self.clients:
            self.clients[exchange_id] = CcxtExchangeClient(exchange_id, self.stream_capacity)
        return self.clients[exchange_id]

    def _unsupported(self, capability: str) -> EngineError:
        return EngineError(
            EngineErrorKind.UNSUPPORTED,
            f"{capability} is not available in the CCXT engine; "
            f"set SCANNER_ENGINE to a scanning engine",
        )

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
        raise self._unsupported("Arbitrage scanning")

    async def scan_arbitrage_from_websockets(
        self,
        symbols: Sequence[str],
        exchanges: Sequence[ExchangeId],
        fee_overrides: Optional[FeeOverrides],
        reconnect_attempts: int,
        reconnect_delay_ms: int,
    ):
        raise self._unsupported("Websocket arbitrage scanning")

    async def stream_pool_prices(self, config: PoolListenerConfig):
        raise self._unsupported("Pool price streaming")

    async def close(self):
        """Close every exchange client."""
        for client in self.clients.values():
            await client.close()
