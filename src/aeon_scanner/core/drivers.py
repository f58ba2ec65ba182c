"""Drivers that call the engine and print what comes back."""
from typing import List, Optional, Sequence

from loguru import logger

from aeon_scanner.config import ReconnectConfig
from aeon_scanner.core.engine import ExchangeClient, ScannerEngine
from aeon_scanner.infrastructure.error_handling import ConfigurationError
from aeon_scanner.models import (
    ArbitrageOpportunity,
    ChainId,
    DexAggregator,
    ExchangeId,
    FeeOverrides,
    ListenMode,
    PoolKind,
    PoolListenerConfig,
    PriceDirection,
    Token,
)
from aeon_scanner.monitoring.formatting import (
    MAX_OPPORTUNITY_LINES,
    format_batch_header,
    format_dex_config,
    format_found,
    format_opportunity,
    format_pool_update,
    format_price_update,
    format_quote,
)
from aeon_scanner.monitoring.output import Output

DEFAULT_SYMBOL = "BTCUSDT"

EXAMPLE_EXCHANGES = [ExchangeId.BINANCE, ExchangeId.BYBIT, ExchangeId.OKX, ExchangeId.KUCOIN]

WS_SCAN_SYMBOLS = ["BTCUSDT", "ETHUSDT"]
WS_SCAN_EXCHANGES = [ExchangeId.BINANCE, ExchangeId.BYBIT, ExchangeId.OKX]
WS_SCAN_RECONNECT = ReconnectConfig(attempts=5, delay_ms=1000)

OVERRIDE_EXCHANGES = [ExchangeId.BINANCE, ExchangeId.OKX]


def default_fee_overrides() -> FeeOverrides:
    """Binance 0.075% and OKX 0.08% taker fees."""
    return (
        FeeOverrides()
        .with_cex_taker_fee(ExchangeId.BINANCE, 0.00075)
        .with_cex_taker_fee(ExchangeId.OKX, 0.0008)
    )


# BNB Chain (BSC) mainnet BTCB/USDT, priced against BTCUSDT on the CEX side
DEX_CHAIN = ChainId.BSC
DEX_AGGREGATORS = [DexAggregator.KYBERSWAP]
BTCB = Token.create(
    "0x7130d2A12B9BCbFAe4f2634d864A1Ee1Ce3Ead9c",
    "Binance BTC",
    "BTCB",
    18,
    ChainId.BSC,
)
USDT_BSC = Token.create(
    "0x55d398326f99059fF775485246999027B3197955",
    "Tether USD",
    "USDT",
    18,
    ChainId.BSC,
)

# pool kind -> (address, chain, price direction, label)
DEFAULT_POOLS = {
    PoolKind.V2: (
        "0x58F876857a02D6762E0101bb5C46A8c1ED44Dc16",
        ChainId.BSC,
        PriceDirection.TOKEN1_PER_TOKEN0,
        "WBNB/BUSD",
    ),
    PoolKind.V3: (
        "0x88e6A0c2dDD26FEEb64F039a2c41296FcB3f5640",
        ChainId.ETHEREUM,
        PriceDirection.TOKEN0_PER_TOKEN1,
        "USDC/WETH",
    ),
}


async def close_updates(updates):
    """Stop the producer behind ``updates`` when the consumer is done with it."""
    aclose = getattr(updates, "aclose", None)
    if aclose is not None:
        await aclose()


async def run_price(client: ExchangeClient, symbol: str, out: Output):
    """Fetch and print one REST quote."""
    logger.debug(f"Fetching {symbol} quote from {client.exchange_name()}")
    quote = await client.fetch_quote(symbol)
    out.line(format_quote(quote))


async def run_stream(
    client: ExchangeClient,
    symbols: Sequence[str],
    reconnect: ReconnectConfig,
    out: Output,
) -> int:
    """Print live quotes until the producer closes the stream."""
    if not client.supports_websocket():
        out.error("WebSocket streaming is not supported for this exchange.")
        return 0

    out.line(f"Streaming from {client.exchange_name()}")
    updates = await client.stream_price_websocket(
        list(symbols), reconnect.attempts, reconnect.delay_ms
    )

    received = 0
    try:
        async for update in updates:
            out.line(format_price_update(update))
            received += 1
    finally:
        await close_updates(updates)

    logger.info(f"{client.exchange_name()} stream ended after {received} updates")
    return received


def print_opportunities(opportunities: List[ArbitrageOpportunity], out: Output):
    """Print the count and the first few opportunities."""
    out.line(format_found(len(opportunities)))
    for opp in opportunities[:MAX_OPPORTUNITY_LINES]:
        out.line(format_opportunity(opp))


async def run_scan(
    engine: ScannerEngine,
    symbol: str,
    exchanges: Sequence[ExchangeId],
    out: Output,
    fee_overrides: Optional[FeeOverrides] = None,
) -> List[ArbitrageOpportunity]:
    """One-shot CEX-only scan."""
    logger.debug(f"Scanning {symbol} on {', '.join(e.display_name for e in exchanges)}")
    opportunities = await engine.scan_arbitrage_opportunities(
        symbol,
        list(exchanges),
        None,
        None,
        None,
        None,
        fee_overrides,
    )
    print_opportunities(opportunities, out)
    return opportunities


async def run_scan_dex(
    engine: ScannerEngine,
    exchanges: Sequence[ExchangeId],
    quote_amount: float,
    out: Output,
) -> List[ArbitrageOpportunity]:
    """One-shot CEX/DEX scan on the default BTCB/USDT pair."""
    out.line(format_dex_config(DEFAULT_SYMBOL, DEX_CHAIN.label, BTCB, USDT_BSC, quote_amount))

    opportunities = await engine.scan_arbitrage_opportunities(
        DEFAULT_SYMBOL,
        list(exchanges),
        DEX_AGGREGATORS,
        BTCB,
        USDT_BSC,
        quote_amount,
        None,
    )
    print_opportunities(opportunities, out)
    return opportunities


async def run_arb_ws(
    engine: ScannerEngine,
    out: Output,
    reconnect: ReconnectConfig = WS_SCAN_RECONNECT,
) -> int:
    """Print opportunity batches from the websocket scanner until it stops."""
    out.line(
        f"Scanning {', '.join(WS_SCAN_SYMBOLS)} on "
        f"{', '.join(e.display_name for e in WS_SCAN_EXCHANGES)} via websockets"
    )
    batches = await engine.scan_arbitrage_from_websockets(
        WS_SCAN_SYMBOLS,
        WS_SCAN_EXCHANGES,
        default_fee_overrides(),
        reconnect.attempts,
        reconnect.delay_ms,
    )

    batch_number = 0
    try:
        async for batch in batches:
            batch_number += 1
            out.line(format_batch_header(batch_number, len(batch)))
            for opp in batch[:MAX_OPPORTUNITY_LINES]:
                out.line(format_opportunity(opp))
    finally:
        await close_updates(batches)

    logger.info(f"Websocket scan ended after {batch_number} batches")
    return batch_number


class PoolListenerDriver:
    """Streams prices for one of the default AMM pools."""

    def __init__(self, rpc_ws_url: Optional[str], reconnect: ReconnectConfig):
        """
        Initialise the driver.

        Args:
            rpc_ws_url: Websocket RPC endpoint; required before ``run``
            reconnect: Reconnect policy forwarded to the listener
        """
        self.rpc_ws_url = rpc_ws_url
        self.reconnect = reconnect

    def build_config(self, pool_kind: PoolKind) -> PoolListenerConfig:
        """Listener configuration for the default pool of ``pool_kind``."""
        if not self.rpc_ws_url:
            raise ConfigurationError("POOL_LISTENER_RPC_WS env var is required")

        address, chain, direction, label = DEFAULT_POOLS[pool_kind]
        return PoolListenerConfig(
            rpc_ws_url=self.rpc_ws_url,
            chain_id=chain,
            pool_address=address,
            pool_kind=pool_kind,
            listen_mode=ListenMode.EVERY_BLOCK,
            price_direction=direction,
            symbol=label,
            reconnect_attempts=self.reconnect.attempts,
            reconnect_delay_ms=self.reconnect.delay_ms,
        )

    async def run(self, engine: ScannerEngine, pool_kind: PoolKind, out: Output) -> int:
        """Print pool prices until the listener closes its stream."""
        listener_config = self.build_config(pool_kind)
        out.line(
            f"Listening to {pool_kind.name} pool {listener_config.pool_address} "
            f"on {listener_config.chain_id.label}"
        )

        updates = await engine.stream_pool_prices(listener_config)
        received = 0
        try:
            async for update in updates:
                out.line(format_pool_update(update, pool_kind, listener_config.symbol))
                received += 1
        finally:
            await close_updates(updates)

        logger.info(f"Pool listener ended after {received} updates")
        return received
