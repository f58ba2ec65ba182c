"""Output formatting and console components."""

from .output import Output, USAGE

__all__ = [
    "Output",
    "USAGE",
]
