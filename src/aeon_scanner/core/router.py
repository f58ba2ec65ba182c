"""Command line routing: argv to a Command value."""
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from loguru import logger

from aeon_scanner.core.arguments import split_quote_amount
from aeon_scanner.core.exchanges import resolve_exchange, resolve_exchanges
from aeon_scanner.infrastructure.error_handling import CliValidationError
from aeon_scanner.models import ExchangeId, PoolKind


@dataclass
class Command:
    """Base for parsed commands."""
    name = ""


@dataclass
class HelpCommand(Command):
    """Print usage; ``error`` is shown first when the input was invalid."""
    name = "help"
    error: Optional[str] = None


@dataclass
class PriceCommand(Command):
    name = "price"
    symbol: str = ""


@dataclass
class StreamCommand(Command):
    """Live quotes; ``exchange`` None means the configured default."""
    name = "stream"
    exchange: Optional[ExchangeId] = None
    symbols: List[str] = field(default_factory=list)


@dataclass
class ScanCexCommand(Command):
    name = "scan-cex"
    symbol: str = ""
    exchanges: List[ExchangeId] = field(default_factory=list)


@dataclass
class ScanCexExampleCommand(Command):
    name = "scan-cex-example"


@dataclass
class ScanArbWsCommand(Command):
    name = "scan-arb-ws"


@dataclass
class ScanDexCommand(Command):
    name = "scan-dex"
    exchanges: List[ExchangeId] = field(default_factory=list)
    quote_amount: float = 1000.0


@dataclass
class ScanCexOverridesCommand(Command):
    name = "scan-cex-overrides"


@dataclass
class PoolListenerCommand(Command):
    name = "pool-listener"
    pool_kind: PoolKind = PoolKind.V2


def parse_command(argv: Sequence[str]) -> Command:
    """
    Parse the arguments after the program name.

    Never raises: missing or invalid input yields a HelpCommand, with an
    ``error`` message when there is something to report beyond usage.
    """
    if not argv:
        return HelpCommand()

    cmd, rest = argv[0], list(argv[1:])
    parser = _PARSERS.get(cmd)
    if parser is None:
        if cmd not in ("help", "-h", "--help"):
            logger.debug(f"Unrecognised command: {cmd!r}")
        return HelpCommand()

    try:
        return parser(rest)
    except CliValidationError as e:
        return HelpCommand(error=str(e))


def _parse_price(rest: List[str]) -> Command:
    if not rest:
        return HelpCommand()
    return PriceCommand(symbol=rest[0])


def _parse_stream(rest: List[str]) -> Command:
    # stream [EXCHANGE] <SYMBOL> [SYMBOL...]
    if not rest:
        return HelpCommand()

    if len(rest) >= 2:
        exchange = resolve_exchange(rest[0])
        if exchange is not None:
            return StreamCommand(exchange=exchange, symbols=rest[1:])
    return StreamCommand(exchange=None, symbols=rest)


def _parse_scan_cex(rest: List[str]) -> Command:
    if not rest:
        return HelpCommand()

    symbol = rest[0]
    exchanges = _resolve_all(rest[1:])
    if len(exchanges) < 2:
        raise CliValidationError("scan-cex needs at least 2 exchanges.")
    return ScanCexCommand(symbol=symbol, exchanges=exchanges)


def _parse_scan_dex(rest: List[str]) -> Command:
    # scan-dex <EXCHANGE...> [quote_amount]
    if not rest:
        return HelpCommand()

    split = split_quote_amount(rest)
    if split.only_amount_given:
        raise CliValidationError(
            f"scan-dex needs at least 1 CEX exchange (got only an amount: {split.exchanges[0]})"
        )
    exchanges = _resolve_all(split.exchanges)
    if not exchanges:
        raise CliValidationError("scan-dex needs at least 1 CEX exchange.")
    return ScanDexCommand(exchanges=exchanges, quote_amount=split.quote_amount)


def _resolve_all(names: List[str]) -> List[ExchangeId]:
    """Resolve names in order, dropping duplicates; unknown names are errors."""
    resolved, unknown = resolve_exchanges(names)
    if unknown:
        raise CliValidationError(f"Unknown exchange: {unknown[0]}")
    return list(dict.fromkeys(resolved))


_PARSERS: Dict[str, Callable[[List[str]], Command]] = {
    "price": _parse_price,
    "stream": _parse_stream,
    "scan-cex": _parse_scan_cex,
    "scan-cex-example": lambda rest: ScanCexExampleCommand(),
    "scan-arb-ws": lambda rest: ScanArbWsCommand(),
    "scan-dex": _parse_scan_dex,
    "scan-cex-overrides": lambda rest: ScanCexOverridesCommand(),
    "pool-listener-v2": lambda rest: PoolListenerCommand(pool_kind=PoolKind.V2),
    "pool-listener-v3": lambda rest: PoolListenerCommand(pool_kind=PoolKind.V3),
}

COMMANDS = tuple(_PARSERS)
