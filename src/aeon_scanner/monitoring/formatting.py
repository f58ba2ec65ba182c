"""Line formatting for quotes, opportunities and pool prices."""
from decimal import Decimal
from typing import Optional

from aeon_scanner.models import (
    ArbitrageOpportunity,
    PoolKind,
    PoolPriceUpdate,
    PriceQuote,
    PriceUpdate,
    Token,
)

MAX_OPPORTUNITY_LINES = 10


def format_number(value: float) -> str:
    """Shortest plain decimal text: 100.0 -> '100', 1e-05 -> '0.00001'."""
    if isinstance(value, int):
        return str(value)
    return format(Decimal(repr(float(value))).normalize(), "f")


def format_quote(quote: PriceQuote) -> str:
    """One-shot REST quote line."""
    return (
        f"{quote.symbol} "
        f"bid={format_number(quote.bid_price)} (qty={format_number(quote.bid_qty)}) "
        f"ask={format_number(quote.ask_price)} (qty={format_number(quote.ask_qty)}) "
        f"mid={format_number(quote.mid_price)}"
    )


def format_price_update(update: PriceUpdate) -> str:
    """Streamed quote tick line."""
    return (
        f"[{update.exchange.display_name}] {update.symbol} "
        f"bid={format_number(update.bid_price)} (qty={format_number(update.bid_qty)}) "
        f"ask={format_number(update.ask_price)} (qty={format_number(update.ask_qty)})"
    )


def format_opportunity(opp: ArbitrageOpportunity) -> str:
    """Opportunity line with fixed precision."""
    return (
        f"{opp.source_exchange} -> {opp.destination_exchange} {opp.symbol} "
        f"spread={opp.spread:.6f} ({opp.spread_percentage:.3f}%) "
        f"qty={opp.executable_quantity:.8f}"
    )


def format_found(count: int) -> str:
    return f"Found {count} opportunities"


def format_batch_header(batch_number: int, count: int) -> str:
    return f"Batch #{batch_number}: {count} opportunities"


def format_dex_config(
    symbol: str,
    chain: str,
    base: Token,
    quote: Token,
    quote_amount: float,
) -> str:
    """Describe the DEX leg before a hybrid scan."""
    return (
        f"DEX config: symbol={symbol} chain={chain} "
        f"base={base.symbol}({base.address}) "
        f"quote={quote.symbol}({quote.address}) "
        f"quote_amount={format_number(quote_amount)}"
    )


def format_pool_update(
    update: PoolPriceUpdate,
    pool_kind: PoolKind,
    label: Optional[str] = None,
) -> str:
    """
    Pool price line.

    V2 pools show reserves and V3 pools show sqrtPriceX96; the field set is
    chosen by ``pool_kind`` alone.
    """
    prefix = f"[{label}] " if label else ""
    line = f"{prefix}block={update.block_number} price={update.price:.8f}"
    if pool_kind is PoolKind.V2:
        return f"{line} reserve0={update.reserve0} reserve1={update.reserve1}"
    return f"{line} sqrt_price_x96={update.sqrt_price_x96}"
