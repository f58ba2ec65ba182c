#!/usr/bin/env python3
"""Main entry point for the aeon-scanner command line."""
import asyncio
import sys
from typing import Optional, Sequence

from loguru import logger

from aeon_scanner.config import Config, config
from aeon_scanner.core.drivers import (
    DEFAULT_SYMBOL,
    EXAMPLE_EXCHANGES,
    OVERRIDE_EXCHANGES,
    PoolListenerDriver,
    default_fee_overrides,
    run_arb_ws,
    run_price,
    run_scan,
    run_scan_dex,
    run_stream,
)
from aeon_scanner.core.engine import ScannerEngine, load_engine
from aeon_scanner.core.exchanges import resolve_exchange
from aeon_scanner.core.router import (
    Command,
    HelpCommand,
    PoolListenerCommand,
    PriceCommand,
    ScanArbWsCommand,
    ScanCexCommand,
    ScanCexExampleCommand,
    ScanCexOverridesCommand,
    ScanDexCommand,
    StreamCommand,
    parse_command,
)
from aeon_scanner.infrastructure.error_handling import ConfigurationError, EngineError
from aeon_scanner.models import ExchangeId
from aeon_scanner.monitoring.output import Output


def setup_logging(settings: Config = config):
    """Send diagnostics to stderr, and to a rotating file when configured."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)
    if settings.log_file:
        logger.add(
            settings.log_file,
            rotation="1 day",
            retention="7 days",
            level=settings.log_level
        )


def default_exchange(settings: Config) -> ExchangeId:
    """Configured default exchange, falling back to Binance."""
    exchange = resolve_exchange(settings.scanner.default_exchange)
    if exchange is None:
        logger.warning(
            f"DEFAULT_EXCHANGE={settings.scanner.default_exchange!r} is not a known "
            f"exchange, using Binance"
        )
        return ExchangeId.BINANCE
    return exchange


async def dispatch(command: Command, engine: ScannerEngine, out: Output, settings: Config):
    """Run a parsed command against the engine."""
    logger.debug(f"Dispatching {command.name}: {command}")

    if isinstance(command, PriceCommand):
        await run_price(engine.exchange(default_exchange(settings)), command.symbol, out)

    elif isinstance(command, StreamCommand):
        exchange = command.exchange or default_exchange(settings)
        await run_stream(engine.exchange(exchange), command.symbols, settings.reconnect, out)

    elif isinstance(command, ScanCexCommand):
        await run_scan(engine, command.symbol, command.exchanges, out)

    elif isinstance(command, ScanCexExampleCommand):
        await run_scan(engine, DEFAULT_SYMBOL, EXAMPLE_EXCHANGES, out)

    elif isinstance(command, ScanCexOverridesCommand):
        await run_scan(
            engine, DEFAULT_SYMBOL, OVERRIDE_EXCHANGES, out,
            fee_overrides=default_fee_overrides(),
        )

    elif isinstance(command, ScanDexCommand):
        await run_scan_dex(engine, command.exchanges, command.quote_amount, out)

    elif isinstance(command, ScanArbWsCommand):
        await run_arb_ws(engine, out)

    elif isinstance(command, PoolListenerCommand):
        driver = PoolListenerDriver(settings.pool_listener.rpc_ws_url, settings.reconnect)
        await driver.run(engine, command.pool_kind, out)

    else:
        out.usage()


async def main(
    argv: Sequence[str],
    engine: Optional[ScannerEngine] = None,
    out: Optional[Output] = None,
    settings: Optional[Config] = None,
) -> int:
    """
    Parse ``argv`` and run the command.

    Returns 0 for every handled path, including invalid input. Engine and
    configuration errors propagate to the caller.
    """
    settings = settings or config
    out = out or Output()

    command = parse_command(argv)
    if isinstance(command, HelpCommand):
        out.usage(command.error)
        return 0

    owns_engine = engine is None
    if owns_engine:
        engine = load_engine(settings.scanner.engine)

    try:
        await dispatch(command, engine, out, settings)
    finally:
        if owns_engine:
            await engine.close()
    return 0


def run():
    """Console script entry point."""
    setup_logging(config)
    try:
        code = asyncio.run(main(sys.argv[1:]))
    except ConfigurationError as e:
        Output().error(str(e))
        code = 1
    except EngineError as e:
        logger.error(f"Engine error ({e.kind.value}): {e}")
        code = 1
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    run()
