"""
Price window and pattern hypothesis models.

``DayPrice`` is the integer price window for one half-day slot.

``Pattern`` is one fully bounded hypothesis for a whole week: a pattern kind
plus twelve ``DayPrice`` windows (Monday AM through Saturday PM).

Both models are frozen: a pattern is built once by a generator and never
mutated afterwards.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from turnip_forecaster.taxonomy.pattern_taxonomy import PatternKind

HALF_DAYS = 12

# Game limits on a week's inputs.
MIN_BASE_PRICE = 90
MAX_BASE_PRICE = 110
MAX_OBSERVED_PRICE = 660


class DayPrice(BaseModel):
    """Lower/upper price bound for one half-day slot.

    Attributes:
        min: Lowest price this slot can take, inclusive.
        max: Highest price this slot can take, inclusive.
    """

    model_config = ConfigDict(frozen=True)

    min: int
    max: int

    @model_validator(mode="after")
    def validate_window(self) -> "DayPrice":
        if self.min < 0:
            raise ValueError(f"min must be non-negative, got {self.min}.")
        if self.min > self.max:
            raise ValueError(f"min ({self.min}) must be <= max ({self.max}).")
        return self

    @property
    def is_exact(self) -> bool:
        """True when the window has collapsed to a single known price."""
        return self.min == self.max


class Pattern(BaseModel):
    """One hypothesis for the twelve half-day price windows of a week.

    Attributes:
        kind:   Pattern family that produced this hypothesis.
        prices: Exactly twelve ``DayPrice`` windows, in half-day order.
    """

    model_config = ConfigDict(frozen=True)

    kind: PatternKind
    prices: tuple[DayPrice, ...]

    @field_validator("prices")
    @classmethod
    def validate_length(cls, v: tuple[DayPrice, ...]) -> tuple[DayPrice, ...]:
        if len(v) != HALF_DAYS:
            raise ValueError(f"A pattern needs exactly {HALF_DAYS} half-day prices, got {len(v)}.")
        return v
