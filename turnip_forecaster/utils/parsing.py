"""
Parsing of user-entered weekly price lists.

A week is written as up to twelve comma-separated half-day prices, Monday AM
first.  Blank entries and ``-`` mean "not known yet" (stored as 0); missing
trailing entries are padded with 0::

    parse_week_prices("95, 91,,-, 140")  # → (95, 91, 0, 0, 140, 0, 0, 0, 0, 0, 0, 0)
"""

from __future__ import annotations

from turnip_forecaster.models.pattern import HALF_DAYS

_UNKNOWN_TOKENS = frozenset({"", "-", "?"})


class PriceParseError(ValueError):
    """Raised when a price list cannot be parsed."""


def parse_price(token: str) -> int:
    """Parse one non-negative integer price; unknown tokens give 0."""
    token = token.strip()
    if token in _UNKNOWN_TOKENS:
        return 0
    if not (token.isascii() and token.isdigit()):
        raise PriceParseError(f"'{token}' is not a whole, non-negative price.")
    return int(token)


def parse_week_prices(text: str | None) -> tuple[int, ...]:
    """Parse a comma-separated week of prices into a 12-tuple.

    Raises:
        PriceParseError: On a non-integer or negative entry, or more than
            twelve entries.
    """
    if text is None or not text.strip():
        return (0,) * HALF_DAYS

    tokens = text.split(",")
    if len(tokens) > HALF_DAYS:
        raise PriceParseError(f"A week has {HALF_DAYS} half-days, got {len(tokens)} prices.")

    prices = [parse_price(t) for t in tokens]
    prices += [0] * (HALF_DAYS - len(prices))
    return tuple(prices)
