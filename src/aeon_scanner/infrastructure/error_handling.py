"""Error taxonomy for the scanner CLI and its engine boundary."""
from enum import Enum
from functools import wraps
from typing import Callable, Optional

import ccxt
from loguru import logger

from aeon_scanner.models import ExchangeId


class ScannerError(Exception):
    """Base class for all scanner errors."""
    pass


class CliValidationError(ScannerError):
    """Bad command line input (unknown exchange, too few arguments)."""
    pass


class ConfigurationError(ScannerError):
    """Required configuration is missing or unusable."""
    pass


class EngineErrorKind(Enum):
    """Where an engine failure came from."""
    VALIDATION = "validation"  # engine rejected the request
    TRANSPORT = "transport"  # network / websocket failure
    ENGINE = "engine"  # engine-internal failure
    UNSUPPORTED = "unsupported"  # capability not offered by this engine


class EngineError(ScannerError):
    """Failure surfaced by the scanning engine."""

    def __init__(
        self,
        kind: EngineErrorKind,
        message: str,
        exchange: Optional[ExchangeId] = None,
    ):
        self.kind = kind
        self.message = message
        self.exchange = exchange
        prefix = f"[{exchange.display_name}] " if exchange else ""
        super().__init__(f"{prefix}{message}")

    @property
    def retryable(self) -> bool:
        """Transport failures may succeed on a later attempt."""
        return self.kind is EngineErrorKind.TRANSPORT


def classify_ccxt_error(
    error: Exception, exchange: Optional[ExchangeId] = None
) -> EngineError:
    """Map a ccxt exception onto an EngineError."""
    if isinstance(error, EngineError):
        return error
    if isinstance(error, ccxt.NetworkError):
        kind = EngineErrorKind.TRANSPORT
    elif isinstance(error, (ccxt.BadSymbol, ccxt.BadRequest)):
        kind = EngineErrorKind.VALIDATION
    elif isinstance(error, ccxt.NotSupported):
        kind = EngineErrorKind.UNSUPPORTED
    else:
        kind = EngineErrorKind.ENGINE
    return EngineError(kind, str(error) or type(error).__name__, exchange)


def translate_engine_errors(func: Callable) -> Callable:
    """
    Decorator turning ccxt failures raised by an async engine call into
    EngineError.

    The wrapped method's instance may expose ``exchange_id`` which is attached
    to the error.
    """
    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except ccxt.BaseError as e:
            error = classify_ccxt_error(e, getattr(self, "exchange_id", None))
            logger.debug(f"{func.__name__} failed ({error.kind.value}): {error}")
            raise error from e

    return wrapper
