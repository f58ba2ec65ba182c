"""Command routing, engine boundary and stream drivers."""

from .engine import ExchangeClient, ScannerEngine, load_engine
from .exchanges import ExchangeCapability, resolve_exchange
from .router import Command, parse_command
from .streams import UpdateStream

__all__ = [
    "ExchangeClient",
    "ScannerEngine",
    "load_engine",
    "ExchangeCapability",
    "resolve_exchange",
    "Command",
    "parse_command",
    "UpdateStream",
]
