"""Infrastructure components for error handling."""

from .error_handling import (
    ScannerError,
    CliValidationError,
    ConfigurationError,
    EngineError,
    EngineErrorKind,
    classify_ccxt_error,
    translate_engine_errors,
)

__all__ = [
    "ScannerError",
    "CliValidationError",
    "ConfigurationError",
    "EngineError",
    "EngineErrorKind",
    "classify_ccxt_error",
    "translate_engine_errors",
]
