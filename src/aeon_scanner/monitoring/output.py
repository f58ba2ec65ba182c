"""Console output for record lines, diagnostics and usage text."""
from rich.console import Console

USAGE = """aeon-scanner

Usage:
  aeon-scanner price <SYMBOL>
  aeon-scanner stream [EXCHANGE] <SYMBOL> [SYMBOL...]
  aeon-scanner scan-cex <SYMBOL> <EXCHANGE> <EXCHANGE> [EXCHANGE...]
  aeon-scanner scan-cex-example
  aeon-scanner scan-arb-ws
  aeon-scanner scan-dex <EXCHANGE> [EXCHANGE...] [quote_amount | --amount N]
  aeon-scanner scan-cex-overrides
  aeon-scanner pool-listener-v2
  aeon-scanner pool-listener-v3

Examples:
  aeon-scanner price BTCUSDT
  aeon-scanner stream binance BTCUSDT ETHUSDT
  aeon-scanner scan-cex BTCUSDT binance bybit
  aeon-scanner scan-dex binance bybit 1000
  aeon-scanner scan-dex binance bybit --amount 25000
  aeon-scanner scan-cex-overrides
  POOL_LISTENER_RPC_WS=wss://... aeon-scanner pool-listener-v3

Notes:
  scan-dex defaults to BTC/USDT (symbol=BTCUSDT, DEX=KyberSwap on BSC using BTCB/USDT).
  scan-dex quote_amount is in quote token units (here: USDT on BSC by default).
  pool-listener-v2/v3 read the websocket RPC endpoint from POOL_LISTENER_RPC_WS.

Exchanges:
  binance, bybit, mexc, okx, gateio (gate), kucoin, bitget, btcturk (btc-turk),
  htx (huobi), coinbase, kraken, bitfinex, upbit, cryptocom (crypto.com, crypto)
"""


class Output:
    """Writes plain lines to stdout and diagnostics to stderr."""

    def __init__(self, console: Console = None, error_console: Console = None):
        """Initialise output consoles."""
        self.console = console or Console(highlight=False)
        self.error_console = error_console or Console(stderr=True, highlight=False)

    def line(self, text: str):
        """Print one record line verbatim."""
        self.console.print(text, markup=False, emoji=False, highlight=False, soft_wrap=True)

    def error(self, text: str):
        """Print a diagnostic on stderr."""
        self.error_console.print(text, markup=False, emoji=False, highlight=False, soft_wrap=True)

    def usage(self, error: str = None):
        """Print usage text, preceded by ``error`` when given."""
        if error:
            self.error(error)
        self.error_console.print(USAGE, markup=False, emoji=False, highlight=False, soft_wrap=True, end="")
