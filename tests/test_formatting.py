"""Tests for output line formatting."""
import pytest

from aeon_scanner.models import (
    ArbitrageOpportunity,
    ChainId,
    ExchangeId,
    PoolKind,
    PoolPriceUpdate,
    PriceQuote,
    PriceUpdate,
    Token,
)
from aeon_scanner.monitoring.formatting import (
    format_dex_config,
    format_number,
    format_opportunity,
    format_pool_update,
    format_price_update,
    format_quote,
)


class TestFormatNumber:
    """Test suite for plain number rendering."""

    @pytest.mark.parametrize("value,expected", [
        (100, "100"),
        (100.0, "100"),
        (100.5, "100.5"),
        (0.00001, "0.00001"),
        (0.0, "0"),
        (64123.45, "64123.45"),
        (1e21, "1000000000000000000000"),
    ])
    def test_values(self, value, expected):
        assert format_number(value) == expected


class TestFormatLines:
    """Test suite for record lines."""

    def test_quote(self):
        """Test the quote line field order."""
        quote = PriceQuote("BTCUSDT", 100.0, 1.0, 101.0, 2.0, 100.5)
        assert format_quote(quote) == "BTCUSDT bid=100 (qty=1) ask=101 (qty=2) mid=100.5"

    def test_price_update(self):
        """Test the streamed tick line."""
        update = PriceUpdate(ExchangeId.OKX, "ETHUSDT", 3000.25, 0.5, 3000.75, 1.25)
        assert format_price_update(update) == (
            "[OKX] ETHUSDT bid=3000.25 (qty=0.5) ask=3000.75 (qty=1.25)"
        )

    def test_opportunity_precision(self):
        """Test fixed precision of opportunity fields."""
        opp = ArbitrageOpportunity("Binance", "Bybit", "BTCUSDT", 12.3456789, 0.0191234, 0.123456789)
        assert format_opportunity(opp) == (
            "Binance -> Bybit BTCUSDT spread=12.345679 (0.019%) qty=0.12345679"
        )

    def test_dex_config(self):
        """Test the DEX configuration line."""
        base = Token.create("0x" + "a" * 40, "Base", "BASE", 18, ChainId.BSC)
        quote = Token.create("0x" + "b" * 40, "Quote", "QUOTE", 6, ChainId.BSC)
        line = format_dex_config("BASEQUOTE", "BSC", base, quote, 25000.0)
        assert line == (
            f"DEX config: symbol=BASEQUOTE chain=BSC base=BASE(0x{'a' * 40}) "
            f"quote=QUOTE(0x{'b' * 40}) quote_amount=25000"
        )


class TestFormatPoolUpdate:
    """Test suite for pool price lines."""

    def test_v2_shows_reserves_only(self):
        update = PoolPriceUpdate(price=612.5, block_number=100, reserve0=10, reserve1=6125,
                                 sqrt_price_x96=999)
        line = format_pool_update(update, PoolKind.V2, "WBNB/BUSD")
        assert line == "[WBNB/BUSD] block=100 price=612.50000000 reserve0=10 reserve1=6125"
        assert "sqrt_price_x96" not in line

    def test_v3_shows_sqrt_price_only(self):
        update = PoolPriceUpdate(price=0.0005, block_number=7, sqrt_price_x96=1771595571142957166518320255467520,
                                 reserve0=1, reserve1=2)
        line = format_pool_update(update, PoolKind.V3)
        assert line == "block=7 price=0.00050000 sqrt_price_x96=1771595571142957166518320255467520"
        assert "reserve" not in line
