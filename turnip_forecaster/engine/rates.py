"""
Rate/price helpers shared by every pattern generator.

All price windows are expressed as rates (multiples of the base price) and
converted back to integer prices with ``floor`` for the lower bound and
``ceil`` for the upper bound.  The rounding direction decides whether a real
quote lands inside a window, so it must not be changed.

Run helpers
-----------
A pattern is built from consecutive *runs* of half-days:

  static_run      → every slot uses the same rate window.
  decreasing_run  → the window decays by fixed per-step deltas.  An observed
                    price restarts the window from that price's own rate
                    interval, so real data sharpens every later slot of the
                    run.
  fixed_run       → each slot has its own window from a rate table.

Every helper applies ``check_slot`` to each half-day: observed prices must
fall inside the model window (else ``NoMatch``) and collapse the slot to the
observed value.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from turnip_forecaster.engine.errors import NoMatch
from turnip_forecaster.models.pattern import DayPrice


@dataclass(frozen=True)
class PriceContext:
    """The two inputs every generator reads: base price and observed prices.

    Attributes:
        base_price: The week's base (sell) price.
        observed:   Twelve half-day prices; 0 means not yet known.
    """

    base_price: int
    observed: tuple[int, ...]

    def min_rate(self, i: int) -> float:
        """Lowest rate that rounds to ``observed[i]``."""
        return (self.observed[i] - 0.5) / self.base_price

    def max_rate(self, i: int) -> float:
        """Highest rate that rounds to ``observed[i]``."""
        return (self.observed[i] + 0.5) / self.base_price

    def min_rate_price(self, rate: float) -> int:
        # Long decay runs seeded from very low quotes can dip below zero.
        return max(0, math.floor(rate * self.base_price))

    def max_rate_price(self, rate: float) -> int:
        return math.ceil(rate * self.base_price)


def check_slot(ctx: PriceContext, i: int, min_pred: int, max_pred: int) -> DayPrice:
    """Reconcile the model window for slot ``i`` with the observed price.

    Raises:
        NoMatch: If the observed price is outside ``[min_pred, max_pred]``,
            or the slot is unobserved and the window itself is empty.
    """
    price = ctx.observed[i]
    if price != 0:
        if price < min_pred or price > max_pred:
            raise NoMatch(i, price, min_pred, max_pred)
        return DayPrice(min=price, max=price)

    if min_pred > max_pred:
        raise NoMatch(i, price, min_pred, max_pred)
    return DayPrice(min=min_pred, max=max_pred)


def static_run(
    ctx: PriceContext,
    start: int,
    length: int,
    min_rate: float,
    max_rate: float,
) -> list[DayPrice]:
    """Slots ``[start, start + length)`` all share one rate window."""
    min_pred = ctx.min_rate_price(min_rate)
    max_pred = ctx.max_rate_price(max_rate)
    return [check_slot(ctx, i, min_pred, max_pred) for i in range(start, start + length)]


def decreasing_run(
    ctx: PriceContext,
    start: int,
    length: int,
    min_rate: float,
    max_rate: float,
    min_decay: float,
    max_decay: float,
) -> list[DayPrice]:
    """Slots ``[start, start + length)`` with a window decaying each step.

    Args:
        min_rate, max_rate:   Window of the first slot of the run.
        min_decay, max_decay: Amounts subtracted from the lower/upper rate
            after every slot.
    """
    prices: list[DayPrice] = []
    for i in range(start, start + length):
        prices.append(
            check_slot(ctx, i, ctx.min_rate_price(min_rate), ctx.max_rate_price(max_rate))
        )
        if ctx.observed[i] != 0:
            min_rate = ctx.min_rate(i)
            max_rate = ctx.max_rate(i)
        min_rate -= min_decay
        max_rate -= max_decay
    return prices


def fixed_run(
    ctx: PriceContext,
    start: int,
    min_rates: Sequence[float],
    max_rates: Sequence[float],
) -> list[DayPrice]:
    """One slot per entry of the rate tables, starting at ``start``."""
    return [
        check_slot(ctx, start + offset, ctx.min_rate_price(lo), ctx.max_rate_price(hi))
        for offset, (lo, hi) in enumerate(zip(min_rates, max_rates))
    ]
