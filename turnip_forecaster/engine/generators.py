"""
Pattern generators, one per pattern family.

Each family has two layers:

  <family>_pattern(ctx, ...)   → build ONE phase configuration.  Returns a
                                 ``Pattern`` or raises ``NoMatch`` when the
                                 observed prices contradict it, or
                                 ``MalformedPhaseError`` when the phase
                                 layout breaks the family's own constraints.

  generate_<family>(ctx)       → enumerate every configuration of the
                                 family and return the surviving patterns as
                                 an immutable tuple.

Phase models (rates are multiples of the base price)
----------------------------------------------------
Random       inc1 / dec1 / inc2 / dec2 / inc3 half-days.  Increase phases
             use a static [0.9, 1.4] window; decrease phases start at
             [0.6, 0.8] and decay by 0.1 / 0.04 per half-day.
BigSpike     spike_start in [1, 7]: decline from [0.85, 0.9] by 0.05 / 0.03,
             a five-slot peak, then static [0.4, 0.9].
Falling      one twelve-slot decline from [0.85, 0.9] by 0.05 / 0.03.
SmallSpike   spike_start in [0, 7]: decline from [0.4, 0.9] by 0.05 / 0.03,
             a five-slot peak with hand-tuned adjustments, then static
             [0.4, 0.9].
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Callable

from turnip_forecaster.engine.errors import MalformedPhaseError, NoMatch
from turnip_forecaster.engine.rates import (
    PriceContext,
    check_slot,
    decreasing_run,
    fixed_run,
    static_run,
)
from turnip_forecaster.models.pattern import HALF_DAYS, DayPrice, Pattern
from turnip_forecaster.taxonomy.pattern_taxonomy import PatternKind

logger = logging.getLogger(__name__)

# ── Rate tables ───────────────────────────────────────────────────────────────

RANDOM_INCREASE = (0.9, 1.4)
RANDOM_DECREASE_START = (0.6, 0.8)
RANDOM_DECREASE_DECAY = (0.1, 0.04)

SPIKE_DECLINE_DECAY = (0.05, 0.03)
BIG_SPIKE_DECLINE_START = (0.85, 0.9)
BIG_SPIKE_PEAK_MIN = (0.9, 1.4, 2.0, 1.4, 0.9)
BIG_SPIKE_PEAK_MAX = (1.4, 2.0, 6.0, 2.0, 1.4)

FALLING_START = (0.85, 0.9)
FALLING_DECAY = (0.05, 0.03)

SMALL_SPIKE_DECLINE_START = (0.4, 0.9)
SMALL_SPIKE_PEAK_MIN = (0.9, 0.9, 1.4, 1.4, 1.4)
SMALL_SPIKE_PEAK_MAX = (1.4, 1.4, 2.0, 2.0, 2.0)

POST_SPIKE = (0.4, 0.9)
PEAK_LENGTH = 5


def _attempt(build: Callable[[], Pattern], config: str) -> Pattern | None:
    """Run one configuration, turning the expected failures into ``None``."""
    try:
        return build()
    except NoMatch as exc:
        logger.debug("%s rejected: %s", config, exc)
    except MalformedPhaseError:
        logger.exception("Malformed phase configuration %s", config)
    return None


def _collect(attempts: list[tuple[Callable[[], Pattern], str]]) -> tuple[Pattern, ...]:
    patterns = (_attempt(build, config) for build, config in attempts)
    return tuple(p for p in patterns if p is not None)


# ── Random ────────────────────────────────────────────────────────────────────


def random_pattern(
    ctx: PriceContext,
    inc1: int,
    dec1: int,
    inc2: int,
    dec2: int,
    inc3: int,
) -> Pattern:
    """Build the Random pattern for one set of phase lengths (in half-days).

    Raises:
        MalformedPhaseError: If the phase lengths break the Random layout.
        NoMatch: If an observed price falls outside its window.
    """
    if not 0 <= inc1 <= 6:
        raise MalformedPhaseError(f"increase phase 1 must be 0..6 half-days, got {inc1}")
    if dec1 not in (2, 3):
        raise MalformedPhaseError(f"decrease phase 1 must be 2 or 3 half-days, got {dec1}")
    if inc2 != 7 - inc1 - inc3:
        raise MalformedPhaseError(f"increase phase 2 must be 7 - inc1 - inc3, got {inc2}")
    if dec2 != 5 - dec1:
        raise MalformedPhaseError(f"decrease phase 2 must be 5 - dec1, got {dec2}")
    if not 0 <= inc3 < 7 - inc1:
        raise MalformedPhaseError(f"increase phase 3 must be 0..{6 - inc1} half-days, got {inc3}")
    if inc1 + dec1 + inc2 + dec2 + inc3 != HALF_DAYS:
        raise MalformedPhaseError("phase lengths must sum to 12 half-days")

    prices: list[DayPrice] = []
    for length, decreasing in (
        (inc1, False), (dec1, True), (inc2, False), (dec2, True), (inc3, False),
    ):
        start = len(prices)
        if decreasing:
            prices += decreasing_run(ctx, start, length, *RANDOM_DECREASE_START, *RANDOM_DECREASE_DECAY)
        else:
            prices += static_run(ctx, start, length, *RANDOM_INCREASE)

    return Pattern(kind=PatternKind.RANDOM, prices=tuple(prices))


def generate_random(ctx: PriceContext) -> tuple[Pattern, ...]:
    """Every Random configuration consistent with the observed prices."""
    attempts = []
    for dec1 in (2, 3):
        for inc1 in range(7):
            for inc3 in range(7 - inc1):
                lengths = (inc1, dec1, 7 - inc1 - inc3, 5 - dec1, inc3)
                attempts.append((partial(random_pattern, ctx, *lengths), f"random{lengths}"))
    return _collect(attempts)


# ── Big spike ─────────────────────────────────────────────────────────────────


def big_spike_pattern(ctx: PriceContext, spike_start: int) -> Pattern:
    """Build the BigSpike pattern whose peak starts at half-day ``spike_start``."""
    if not 1 <= spike_start <= 7:
        raise MalformedPhaseError(f"big spike start must be 1..7, got {spike_start}")

    prices = decreasing_run(ctx, 0, spike_start, *BIG_SPIKE_DECLINE_START, *SPIKE_DECLINE_DECAY)
    prices += fixed_run(ctx, spike_start, BIG_SPIKE_PEAK_MIN, BIG_SPIKE_PEAK_MAX)
    tail = spike_start + PEAK_LENGTH
    prices += static_run(ctx, tail, HALF_DAYS - tail, *POST_SPIKE)

    return Pattern(kind=PatternKind.BIG_SPIKE, prices=tuple(prices))


def generate_big_spike(ctx: PriceContext) -> tuple[Pattern, ...]:
    """Every BigSpike configuration consistent with the observed prices."""
    return _collect([
        (partial(big_spike_pattern, ctx, start), f"big_spike(start={start})")
        for start in range(1, 8)
    ])


# ── Falling ───────────────────────────────────────────────────────────────────


def falling_pattern(ctx: PriceContext) -> Pattern:
    """Build the single Falling pattern."""
    prices = decreasing_run(ctx, 0, HALF_DAYS, *FALLING_START, *FALLING_DECAY)
    return Pattern(kind=PatternKind.FALLING, prices=tuple(prices))


def generate_falling(ctx: PriceContext) -> tuple[Pattern, ...]:
    """The Falling pattern, if it is consistent with the observed prices."""
    return _collect([(partial(falling_pattern, ctx), "falling")])


# ── Small spike ───────────────────────────────────────────────────────────────


def small_spike_pattern(ctx: PriceContext, spike_start: int) -> Pattern:
    """Build the SmallSpike pattern whose peak starts at half-day ``spike_start``.

    The peak has two fixed adjustments on top of its rate table: the 3rd and
    5th peak slots top out one unit below the table maximum, and the 4th
    slot (the true peak) cannot go below the 3rd slot's lower bound.
    """
    if not 0 <= spike_start <= 7:
        raise MalformedPhaseError(f"small spike start must be 0..7, got {spike_start}")

    prices = decreasing_run(ctx, 0, spike_start, *SMALL_SPIKE_DECLINE_START, *SPIKE_DECLINE_DECAY)

    for offset, (lo, hi) in enumerate(zip(SMALL_SPIKE_PEAK_MIN, SMALL_SPIKE_PEAK_MAX)):
        i = spike_start + offset
        min_pred = ctx.min_rate_price(lo)
        max_pred = ctx.max_rate_price(hi)
        if offset in (2, 4):
            max_pred -= 1
        if offset == 3:
            min_pred = prices[i - 1].min
        prices.append(check_slot(ctx, i, min_pred, max_pred))

    tail = spike_start + PEAK_LENGTH
    prices += static_run(ctx, tail, HALF_DAYS - tail, *POST_SPIKE)

    return Pattern(kind=PatternKind.SMALL_SPIKE, prices=tuple(prices))


def generate_small_spike(ctx: PriceContext) -> tuple[Pattern, ...]:
    """Every SmallSpike configuration consistent with the observed prices."""
    return _collect([
        (partial(small_spike_pattern, ctx, start), f"small_spike(start={start})")
        for start in range(8)
    ])


# Registry in canonical kind order; the aggregator walks it front to back.
GENERATORS: dict[PatternKind, Callable[[PriceContext], tuple[Pattern, ...]]] = {
    PatternKind.RANDOM: generate_random,
    PatternKind.BIG_SPIKE: generate_big_spike,
    PatternKind.FALLING: generate_falling,
    PatternKind.SMALL_SPIKE: generate_small_spike,
}
