"""
Forecast engine entry point.

``build_forecast(base_price, observed, previous_week=None) -> Forecast``

Steps:
  1. Validate the base price and the twelve observed prices.
  2. Run the four pattern generators (Random, BigSpike, Falling, SmallSpike).
  3. Aggregate the survivors into the per-slot bounds envelope.
  4. Weight the surviving kinds with the transition matrix, conditioned on
     the previous week's forecast when one is supplied.

The whole computation is a pure function of its arguments: no state is
shared between calls, and identical inputs give identical forecasts.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from turnip_forecaster.engine.aggregator import compute_bounds, generate_all_patterns
from turnip_forecaster.engine.errors import (
    MAX_BASE_PRICE,
    MAX_OBSERVED_PRICE,
    MIN_BASE_PRICE,
    InvalidBasePrice,
    InvalidObservedPrice,
)
from turnip_forecaster.engine.probability import compute_probabilities
from turnip_forecaster.engine.rates import PriceContext
from turnip_forecaster.models.forecast import Forecast
from turnip_forecaster.models.pattern import HALF_DAYS

logger = logging.getLogger(__name__)


def validate_inputs(base_price: int, observed: Sequence[int]) -> tuple[int, ...]:
    """Check forecast inputs and return ``observed`` as a tuple.

    Raises:
        InvalidBasePrice: If ``base_price`` is outside ``[90, 110]``.
        InvalidObservedPrice: If ``observed`` is not twelve prices in
            ``[0, 660]``.
    """
    if not MIN_BASE_PRICE <= base_price <= MAX_BASE_PRICE:
        raise InvalidBasePrice(base_price)

    prices = tuple(observed)
    if len(prices) != HALF_DAYS:
        raise InvalidObservedPrice(
            None, None, f"Expected {HALF_DAYS} observed prices, got {len(prices)}."
        )
    for i, price in enumerate(prices):
        if not 0 <= price <= MAX_OBSERVED_PRICE:
            raise InvalidObservedPrice(i, price)
    return prices


def build_forecast(
    base_price: int,
    observed: Sequence[int],
    previous_week: Optional[Forecast] = None,
) -> Forecast:
    """Enumerate matching patterns and build the week's ``Forecast``.

    Args:
        base_price:    The week's base (sell) price, 90..110.
        observed:      Twelve half-day prices (Mon AM .. Sat PM); 0 = unknown.
        previous_week: Last week's forecast, read only, used to condition the
                       pattern-kind probabilities.

    Returns:
        A frozen ``Forecast``.  ``patterns`` may be empty when no model fits
        the observed prices; that is a valid "no forecast available" result.

    Raises:
        InvalidBasePrice, InvalidObservedPrice: On invalid inputs.
    """
    prices = validate_inputs(base_price, observed)
    ctx = PriceContext(base_price=base_price, observed=prices)

    patterns = generate_all_patterns(ctx)
    bounds = compute_bounds(patterns)
    probabilities = compute_probabilities(
        (p.kind for p in patterns),
        previous_week.probabilities if previous_week is not None else None,
    )

    if patterns:
        logger.info(
            "Forecast for base price %d: %d pattern(s), kinds %s",
            base_price,
            len(patterns),
            ", ".join(f"{k}={v:.3f}" for k, v in probabilities.items()),
        )
    else:
        logger.info("Forecast for base price %d: no pattern matches the observed prices", base_price)

    return Forecast(
        base_price=base_price,
        observed=prices,
        patterns=patterns,
        bounds=bounds,
        probabilities=probabilities,
    )
