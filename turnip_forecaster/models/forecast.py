"""
Forecast result model.

A ``Forecast`` bundles the caller's inputs (base price and the twelve
observed half-day prices, 0 = unknown) with everything the engine derived
from them: the surviving pattern hypotheses, the per-slot bounds envelope
and the per-kind probabilities.

Forecasts are fully immutable: the model is frozen and ``probabilities`` is
stored as a read-only mapping, so a forecast handed to a report or used as
last week's prior cannot be altered.  Build them through
``turnip_forecaster.engine.forecaster.build_forecast``, which runs the
generators; the validators here reject out-of-range inputs and guard the
structural invariants of the result.

An empty ``patterns`` tuple is a valid result meaning "no forecast
available".  In that case ``bounds`` holds twelve zero windows and must not
be presented as a prediction.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from turnip_forecaster.models.pattern import (
    HALF_DAYS,
    MAX_BASE_PRICE,
    MAX_OBSERVED_PRICE,
    MIN_BASE_PRICE,
    DayPrice,
    Pattern,
)
from turnip_forecaster.taxonomy.pattern_taxonomy import PATTERN_KINDS, PatternKind


class Forecast(BaseModel):
    """Surviving pattern hypotheses and their envelope for one week.

    Attributes:
        base_price:    The week's base (sell) price, 90..110.
        observed:      Twelve observed half-day prices in 0..660; 0 means unknown.
        patterns:      Every pattern hypothesis consistent with ``observed``.
        bounds:        Per-slot min-of-mins / max-of-maxes over ``patterns``.
        probabilities: Read-only probability per pattern kind present in
                       ``patterns``.
    """

    model_config = ConfigDict(frozen=True)

    base_price: int
    observed: tuple[int, ...]
    patterns: tuple[Pattern, ...] = ()
    bounds: tuple[DayPrice, ...]
    probabilities: Mapping[PatternKind, float] = Field(default_factory=dict, validate_default=True)

    @field_validator("base_price")
    @classmethod
    def validate_base_price(cls, v: int) -> int:
        if not MIN_BASE_PRICE <= v <= MAX_BASE_PRICE:
            raise ValueError(
                f"base_price must be in [{MIN_BASE_PRICE}, {MAX_BASE_PRICE}], got {v}."
            )
        return v

    @field_validator("observed")
    @classmethod
    def validate_observed(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        if len(v) != HALF_DAYS:
            raise ValueError(f"observed must hold {HALF_DAYS} prices, got {len(v)}.")
        for i, price in enumerate(v):
            if not 0 <= price <= MAX_OBSERVED_PRICE:
                raise ValueError(
                    f"observed[{i}] must be in [0, {MAX_OBSERVED_PRICE}], got {price}."
                )
        return v

    @field_validator("probabilities")
    @classmethod
    def freeze_probabilities(cls, v: Mapping[PatternKind, float]) -> Mapping[PatternKind, float]:
        return MappingProxyType(dict(v))

    @field_serializer("probabilities")
    def dump_probabilities(self, v: Mapping[PatternKind, float]) -> dict[PatternKind, float]:
        return dict(v)

    @model_validator(mode="after")
    def validate_result_shape(self) -> "Forecast":
        if len(self.bounds) != HALF_DAYS:
            raise ValueError(f"bounds must hold {HALF_DAYS} windows, got {len(self.bounds)}.")

        present = {p.kind for p in self.patterns}
        if set(self.probabilities) != present:
            raise ValueError(
                "probabilities must cover exactly the pattern kinds present: "
                f"expected {sorted(present)}, got {sorted(self.probabilities)}."
            )
        if self.probabilities and not math.isclose(
            sum(self.probabilities.values()), 1.0, rel_tol=1e-9
        ):
            raise ValueError("probabilities must sum to 1.0.")
        return self

    @property
    def has_forecast(self) -> bool:
        """False when no pattern matched the observed prices."""
        return bool(self.patterns)

    @property
    def kinds(self) -> tuple[PatternKind, ...]:
        """Distinct kinds present in ``patterns``, in canonical kind order."""
        present = {p.kind for p in self.patterns}
        return tuple(k for k in PATTERN_KINDS if k in present)

    def patterns_of(self, kind: PatternKind) -> tuple[Pattern, ...]:
        return tuple(p for p in self.patterns if p.kind == kind)
