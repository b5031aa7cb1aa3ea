"""
Pattern-kind probabilities from the weekly transition matrix.

Transition weights
------------------
``TRANSITION_WEIGHTS[prev][cur]`` is the unnormalized chance that a week of
kind ``prev`` is followed by a week of kind ``cur``; rows and columns follow
``PATTERN_KINDS`` order (Random, BigSpike, Falling, SmallSpike).  Every row
sums to 100.

Weighting
---------
Only kinds that produced at least one surviving pattern get a weight; the
number of patterns per kind does not matter.

  previous week known  → weight[k] = Σ_prev T[prev][k] × P_prev(prev)
  no previous week     → weight[k] = Σ_prev T[prev][k]
                         (a uniform prior over last week's kind)

A previous week whose own forecast matched nothing carries no information
and is treated like no previous week.  The weights are then normalized to
sum to 1.0.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

from turnip_forecaster.taxonomy.pattern_taxonomy import PATTERN_KINDS, PatternKind

TRANSITION_WEIGHTS: tuple[tuple[int, ...], ...] = (
    # Random  BigSpike  Falling  SmallSpike
    (20, 30, 15, 35),  # from Random
    (50, 5, 20, 25),   # from BigSpike
    (25, 45, 5, 25),   # from Falling
    (45, 25, 15, 15),  # from SmallSpike
)
TRANSITION_ROW_TOTAL = 100


def _check_transition_table() -> None:
    if len(TRANSITION_WEIGHTS) != len(PATTERN_KINDS):
        raise AssertionError("transition table needs one row per pattern kind")
    for kind, row in zip(PATTERN_KINDS, TRANSITION_WEIGHTS):
        if len(row) != len(PATTERN_KINDS) or sum(row) != TRANSITION_ROW_TOTAL:
            raise AssertionError(f"transition row for {kind} must have 4 weights summing to 100")


_check_transition_table()


def transition_weight(prev: PatternKind, cur: PatternKind) -> int:
    return TRANSITION_WEIGHTS[prev.ordinal][cur.ordinal]


def compute_probabilities(
    kinds: Iterable[PatternKind],
    previous: Optional[Mapping[PatternKind, float]] = None,
) -> dict[PatternKind, float]:
    """Probability of each kind in ``kinds`` given last week's distribution.

    Args:
        kinds:    Kinds with at least one surviving pattern (duplicates are
                  ignored).
        previous: Last week's ``Forecast.probabilities``, or ``None``.

    Returns:
        Dict in canonical kind order, summing to 1.0; empty if ``kinds`` is.
    """
    present = set(kinds)
    candidates = [k for k in PATTERN_KINDS if k in present]
    if not candidates:
        return {}

    weights: dict[PatternKind, float] = {}
    for cur in candidates:
        if previous:
            weights[cur] = sum(
                transition_weight(PatternKind(prev), cur) * p for prev, p in previous.items()
            )
        else:
            weights[cur] = float(sum(transition_weight(prev, cur) for prev in PATTERN_KINDS))

    total = sum(weights.values())
    return {k: w / total for k, w in weights.items()}
