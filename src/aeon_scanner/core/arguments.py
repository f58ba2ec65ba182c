"""Argument splitting helpers for commands mixing exchanges and an amount."""
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from aeon_scanner.infrastructure.error_handling import CliValidationError

DEFAULT_QUOTE_AMOUNT = 1000.0
AMOUNT_FLAG = "--amount"


@dataclass
class QuoteAmountSplit:
    """Exchange candidates plus the quote amount to scan with."""
    exchanges: List[str]
    quote_amount: float
    explicit_amount: bool = False

    @property
    def only_amount_given(self) -> bool:
        """True when the sole candidate exchange is really a number."""
        return len(self.exchanges) == 1 and parse_amount(self.exchanges[0]) is not None


def parse_amount(token: str) -> Optional[float]:
    """Parse ``token`` as a finite float, or None."""
    try:
        value = float(token)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def split_quote_amount(tokens: Sequence[str]) -> QuoteAmountSplit:
    """
    Split trailing ``scan-dex`` arguments into exchanges and a quote amount.

    An explicit ``--amount N`` (or ``--amount=N``) wins. Otherwise the last
    token is the amount when it parses as a number and at least one other
    token precedes it; in every other case all tokens are exchange candidates
    and the amount defaults to 1000.
    """
    tokens = list(tokens)
    explicit = _extract_amount_flag(tokens)
    if explicit is not None:
        amount, rest = explicit
        return QuoteAmountSplit(rest, amount, explicit_amount=True)

    if tokens:
        amount = parse_amount(tokens[-1])
        if amount is not None and len(tokens) >= 2:
            return QuoteAmountSplit(tokens[:-1], _positive(amount, tokens[-1]))
    return QuoteAmountSplit(tokens, DEFAULT_QUOTE_AMOUNT)


def _positive(amount: Optional[float], raw: str) -> float:
    if amount is None or amount <= 0:
        raise CliValidationError(f"Invalid quote amount: {raw}")
    return amount


def _extract_amount_flag(tokens: List[str]):
    """Pull ``--amount`` out of ``tokens``; None when the flag is absent."""
    for i, token in enumerate(tokens):
        if token == AMOUNT_FLAG:
            if i + 1 >= len(tokens):
                raise CliValidationError(f"{AMOUNT_FLAG} needs a value")
            raw, rest = tokens[i + 1], tokens[:i] + tokens[i + 2:]
        elif token.startswith(AMOUNT_FLAG + "="):
            raw, rest = token.split("=", 1)[1], tokens[:i] + tokens[i + 1:]
        else:
            continue

        return _positive(parse_amount(raw), raw), rest
    return None
