"""
Aggregation of generator output into the hypothesis set and bounds envelope.
"""

from __future__ import annotations

import logging
from typing import Iterable

from turnip_forecaster.engine.generators import GENERATORS
from turnip_forecaster.engine.rates import PriceContext
from turnip_forecaster.models.pattern import HALF_DAYS, DayPrice, Pattern

logger = logging.getLogger(__name__)

EMPTY_BOUNDS: tuple[DayPrice, ...] = tuple(DayPrice(min=0, max=0) for _ in range(HALF_DAYS))


def generate_all_patterns(ctx: PriceContext) -> tuple[Pattern, ...]:
    """Run every generator and concatenate the results in kind order."""
    patterns: list[Pattern] = []
    for kind, generate in GENERATORS.items():
        found = generate(ctx)
        logger.debug("%s: %d matching pattern(s)", kind, len(found))
        patterns.extend(found)
    return tuple(patterns)


def compute_bounds(patterns: Iterable[Pattern]) -> tuple[DayPrice, ...]:
    """Per-slot min of mins and max of maxes across ``patterns``.

    Returns ``EMPTY_BOUNDS`` (all-zero windows) when there are no patterns;
    callers must check for an empty hypothesis set before trusting bounds.
    """
    patterns = list(patterns)
    if not patterns:
        return EMPTY_BOUNDS

    return tuple(
        DayPrice(
            min=min(p.prices[i].min for p in patterns),
            max=max(p.prices[i].max for p in patterns),
        )
        for i in range(HALF_DAYS)
    )
