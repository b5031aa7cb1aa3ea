"""
Engine exceptions.

Caller-facing input errors derive from ``ForecastError`` (a ``ValueError``)
and abort forecast construction; no partial ``Forecast`` is produced.

``NoMatch`` and ``MalformedPhaseError`` never leave the engine.  ``NoMatch``
is the normal "this configuration contradicts the observed prices" signal.
``MalformedPhaseError`` means a generator was asked for a phase layout that
violates its own constraints, which only happens if the enumeration ranges
are wrong; the enumeration logs it at ERROR level.
"""

from __future__ import annotations

from turnip_forecaster.models.pattern import (
    MAX_BASE_PRICE,
    MAX_OBSERVED_PRICE,
    MIN_BASE_PRICE,
)


# ── Caller-facing errors ──────────────────────────────────────────────────────


class ForecastError(ValueError):
    """Base class for invalid forecast inputs."""


class InvalidBasePrice(ForecastError):
    """Raised when the base price is outside ``[90, 110]``.

    Attributes:
        base_price: The rejected value.
    """

    def __init__(self, base_price: int) -> None:
        self.base_price = base_price
        super().__init__(
            f"Base price must be between {MIN_BASE_PRICE} and {MAX_BASE_PRICE}, "
            f"got {base_price}."
        )


class InvalidObservedPrice(ForecastError):
    """Raised when an observed half-day price cannot be a real quote.

    Attributes:
        index: Half-day slot of the rejected value, or ``None`` when the
            series as a whole is malformed (wrong length).
        price: The rejected value, or ``None`` for a wrong-length series.
    """

    def __init__(self, index: int | None, price: int | None, reason: str | None = None) -> None:
        self.index = index
        self.price = price
        if reason is None:
            reason = (
                f"Observed price at half-day {index} must be between 0 and "
                f"{MAX_OBSERVED_PRICE}, got {price}."
            )
        super().__init__(reason)


# ── Internal signals ──────────────────────────────────────────────────────────


class NoMatch(Exception):
    """A phase configuration contradicts an observed price.

    Attributes:
        index:    Half-day slot that failed.
        price:    Observed price there (0 when the model window itself was empty).
        min_pred: Lower bound of the model window.
        max_pred: Upper bound of the model window.
    """

    def __init__(self, index: int, price: int, min_pred: int, max_pred: int) -> None:
        self.index = index
        self.price = price
        self.min_pred = min_pred
        self.max_pred = max_pred
        super().__init__(
            f"half-day {index}: price {price} outside window [{min_pred}, {max_pred}]"
        )


class MalformedPhaseError(RuntimeError):
    """A generator was asked for a phase layout that breaks its constraints."""
