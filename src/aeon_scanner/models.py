"""Data models for market scanning."""
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class ExchangeId(Enum):
    """Centralised exchanges known to the scanner."""
    BINANCE = "binance"
    BYBIT = "bybit"
    MEXC = "mexc"
    OKX = "okx"
    GATEIO = "gateio"
    KUCOIN = "kucoin"
    BITGET = "bitget"
    BTCTURK = "btcturk"
    HTX = "htx"
    COINBASE = "coinbase"
    KRAKEN = "kraken"
    BITFINEX = "bitfinex"
    UPBIT = "upbit"
    CRYPTOCOM = "cryptocom"

    @property
    def display_name(self) -> str:
        """Human readable exchange name."""
        return _DISPLAY_NAMES[self]

    def __str__(self) -> str:
        return self.display_name


_DISPLAY_NAMES = {
    ExchangeId.BINANCE: "Binance",
    ExchangeId.BYBIT: "Bybit",
    ExchangeId.MEXC: "MEXC",
    ExchangeId.OKX: "OKX",
    ExchangeId.GATEIO: "Gateio",
    ExchangeId.KUCOIN: "Kucoin",
    ExchangeId.BITGET: "Bitget",
    ExchangeId.BTCTURK: "Btcturk",
    ExchangeId.HTX: "Htx",
    ExchangeId.COINBASE: "Coinbase",
    ExchangeId.KRAKEN: "Kraken",
    ExchangeId.BITFINEX: "Bitfinex",
    ExchangeId.UPBIT: "Upbit",
    ExchangeId.CRYPTOCOM: "Cryptocom",
}


class ChainId(Enum):
    """EVM chain identifiers."""
    ETHEREUM = 1
    BSC = 56
    POLYGON = 137
    ARBITRUM = 42161
    BASE = 8453

    @property
    def label(self) -> str:
        """Short chain label used in output."""
        return "BSC" if self is ChainId.BSC else self.name.title()


class DexAggregator(Enum):
    """DEX aggregators the engine can quote through."""
    KYBERSWAP = "KyberSwap"


@dataclass(frozen=True)
class Token:
    """ERC20 token descriptor."""
    address: str
    name: str
    symbol: str
    decimals: int
    chain_id: ChainId

    @classmethod
    def create(
        cls,
        address: str,
        name: str,
        symbol: str,
        decimals: int,
        chain_id: ChainId,
    ) -> "Token":
        """Build a token, rejecting obviously malformed addresses."""
        if not (address.startswith("0x") and len(address) == 42):
            raise ValueError(f"Invalid token address: {address}")
        if decimals < 0:
            raise ValueError(f"Invalid decimals for {symbol}: {decimals}")
        return cls(address, name, symbol, decimals, chain_id)


@dataclass(frozen=True)
class FeeOverrides:
    """Per-exchange taker fee overrides.

    Instances are immutable; ``with_cex_taker_fee`` returns a new value and
    leaves the receiver untouched. Exchanges missing from the table use the
    engine's default fee.
    """
    cex_taker_fees: Mapping[ExchangeId, float] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def with_cex_taker_fee(self, exchange: ExchangeId, fee: float) -> "FeeOverrides":
        """Return a copy with ``exchange``'s taker fee set to ``fee``."""
        if not 0 <= fee < 1:
            raise ValueError(f"Taker fee must be a fraction in [0, 1), got {fee}")
        fees = dict(self.cex_taker_fees)
        fees[exchange] = fee
        return replace(self, cex_taker_fees=MappingProxyType(fees))

    def cex_taker_fee(self, exchange: ExchangeId) -> Optional[float]:
        """Override for ``exchange`` or None when the engine default applies."""
        return self.cex_taker_fees.get(exchange)

    def __len__(self) -> int:
        return len(self.cex_taker_fees)


@dataclass
class PriceQuote:
    """Top-of-book REST snapshot for one symbol."""
    symbol: str
    bid_price: float
    bid_qty: float
    ask_price: float
    ask_qty: float
    mid_price: float


@dataclass
class PriceUpdate:
    """One streamed quote tick."""
    exchange: ExchangeId
    symbol: str
    bid_price: float
    bid_qty: float
    ask_price: float
    ask_qty: float


@dataclass
class ArbitrageOpportunity:
    """A cross-venue spread reported by the engine."""
    source_exchange: str
    destination_exchange: str
    symbol: str
    spread: float
    spread_percentage: float
    executable_quantity: float


class PoolKind(Enum):
    """AMM pool flavour."""
    V2 = "v2"  # constant product reserves
    V3 = "v3"  # concentrated liquidity, sqrtPriceX96


class ListenMode(Enum):
    """When the pool listener emits an update."""
    EVERY_BLOCK = "every_block"
    ON_CHANGE = "on_change"


class PriceDirection(Enum):
    """Which side of the pool the price is quoted in."""
    TOKEN0_PER_TOKEN1 = "token0_per_token1"
    TOKEN1_PER_TOKEN0 = "token1_per_token0"


@dataclass(frozen=True)
class PoolListenerConfig:
    """Subscription settings for one on-chain pool."""
    rpc_ws_url: str
    chain_id: ChainId
    pool_address: str
    pool_kind: PoolKind
    listen_mode: ListenMode = ListenMode.EVERY_BLOCK
    price_direction: PriceDirection = PriceDirection.TOKEN1_PER_TOKEN0
    symbol: Optional[str] = None
    reconnect_attempts: int = 10
    reconnect_delay_ms: int = 1000


@dataclass
class PoolPriceUpdate:
    """One pool price observation.

    V2 pools populate ``reserve0``/``reserve1``; V3 pools populate
    ``sqrt_price_x96``.
    """
    price: float
    block_number: int
    reserve0: Optional[int] = None
    reserve1: Optional[int] = None
    sqrt_price_x96: Optional[int] = None
