"""Exchange name resolution and capability lookup."""
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from aeon_scanner.models import ExchangeId

# every alias listed in the usage text must appear here
EXCHANGE_ALIASES: Dict[str, ExchangeId] = {
    "binance": ExchangeId.BINANCE,
    "bybit": ExchangeId.BYBIT,
    "mexc": ExchangeId.MEXC,
    "okx": ExchangeId.OKX,
    "gateio": ExchangeId.GATEIO,
    "gate": ExchangeId.GATEIO,
    "kucoin": ExchangeId.KUCOIN,
    "bitget": ExchangeId.BITGET,
    "btcturk": ExchangeId.BTCTURK,
    "btc-turk": ExchangeId.BTCTURK,
    "htx": ExchangeId.HTX,
    "huobi": ExchangeId.HTX,
    "coinbase": ExchangeId.COINBASE,
    "kraken": ExchangeId.KRAKEN,
    "bitfinex": ExchangeId.BITFINEX,
    "upbit": ExchangeId.UPBIT,
    "cryptocom": ExchangeId.CRYPTOCOM,
    "crypto.com": ExchangeId.CRYPTOCOM,
    "crypto": ExchangeId.CRYPTOCOM,
}


class ExchangeCapability(Enum):
    """Market data transports an exchange offers."""
    STREAMING = "streaming"
    REST_ONLY = "rest_only"


def resolve_exchange(name: str) -> Optional[ExchangeId]:
    """Map a user supplied exchange name to an ExchangeId, or None."""
    return EXCHANGE_ALIASES.get(name.strip().lower())


def resolve_exchanges(names: Iterable[str]) -> Tuple[List[ExchangeId], List[str]]:
    """Resolve every name, returning (resolved, unknown)."""
    resolved, unknown = [], []
    for name in names:
        exchange = resolve_exchange(name)
        if exchange is None:
            unknown.append(name)
        else:
            resolved.append(exchange)
    return resolved, unknown


def aliases_for(exchange: ExchangeId) -> List[str]:
    """All aliases that resolve to ``exchange``."""
    return [alias for alias, ex in EXCHANGE_ALIASES.items() if ex is exchange]
