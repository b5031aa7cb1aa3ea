"""
Shared pytest fixtures for the Turnip Forecaster test suite.

Provides:
  - ``blank_week``: twelve unknown half-day prices.
  - ``falling_week``: a fully known, self-consistent Falling series.
  - ``blank_ctx`` / ``blank_forecast``: engine context and forecast for a
    base price of 100 with no quotes yet.
"""

from __future__ import annotations

import pytest

from turnip_forecaster.engine.forecaster import build_forecast
from turnip_forecaster.engine.rates import PriceContext
from turnip_forecaster.models.forecast import Forecast

BASE_PRICE = 100


@pytest.fixture
def blank_week() -> tuple[int, ...]:
    return (0,) * 12


@pytest.fixture
def falling_week() -> tuple[int, ...]:
    """88, 84, 80, ... 44: drops 4 per half-day, inside the Falling decay."""
    return tuple(88 - 4 * i for i in range(12))


@pytest.fixture
def blank_ctx(blank_week) -> PriceContext:
    return PriceContext(base_price=BASE_PRICE, observed=blank_week)


@pytest.fixture
def blank_forecast(blank_week) -> Forecast:
    return build_forecast(BASE_PRICE, blank_week)
