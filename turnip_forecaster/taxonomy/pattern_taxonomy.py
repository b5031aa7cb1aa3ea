"""
Pattern taxonomy for weekly turnip prices.

Every week follows exactly one of four price pattern families.  The family
order below is significant: it is the row/column order of the transition
matrix in ``turnip_forecaster.engine.probability`` and the order in which
the engine concatenates generator output.

Usage example::

    from turnip_forecaster.taxonomy.pattern_taxonomy import PatternKind

    kind = PatternKind.BIG_SPIKE
    kind.ordinal        # 1
    kind.display_name   # "Big spike"

This module has NO imports from any other ``turnip_forecaster`` package.
"""

from enum import StrEnum


class PatternKind(StrEnum):
    """Weekly price pattern family."""

    RANDOM = "random"
    """Prices alternate between increasing and decreasing runs. Max 1.1x~1.45x."""

    BIG_SPIKE = "big_spike"
    """Decline, then a sharp spike. 2nd peak slot > 1.4x, 3rd slot 2x~6x."""

    FALLING = "falling"
    """Prices only fall all week; selling back always loses."""

    SMALL_SPIKE = "small_spike"
    """Decline, then a modest spike. Peak slots 1.4x~2x."""

    @property
    def ordinal(self) -> int:
        """Stable zero-based position of this kind in ``PATTERN_KINDS``."""
        return PATTERN_KINDS.index(self)

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


PATTERN_KINDS: tuple[PatternKind, ...] = (
    PatternKind.RANDOM,
    PatternKind.BIG_SPIKE,
    PatternKind.FALLING,
    PatternKind.SMALL_SPIKE,
)

_DISPLAY_NAMES: dict[PatternKind, str] = {
    PatternKind.RANDOM: "Random",
    PatternKind.BIG_SPIKE: "Big spike",
    PatternKind.FALLING: "Falling",
    PatternKind.SMALL_SPIKE: "Small spike",
}

_DESCRIPTIONS: dict[PatternKind, str] = {
    PatternKind.RANDOM: "prices move up and down; the best offer is usually 1.1x~1.45x the base price",
    PatternKind.BIG_SPIKE: "prices drop, then spike hard for a few half-days, peaking at 2x~6x the base price",
    PatternKind.FALLING: "prices keep falling all week; sell as soon as you can to cut losses",
    PatternKind.SMALL_SPIKE: "prices drop, then rise to a modest peak of 1.4x~2x the base price",
}
