"""
Forecast engine.

Public entry point::

    from turnip_forecaster.engine import build_forecast

    forecast = build_forecast(100, [0] * 12)
"""

from turnip_forecaster.engine.errors import (
    ForecastError,
    InvalidBasePrice,
    InvalidObservedPrice,
)
from turnip_forecaster.engine.forecaster import build_forecast

__all__ = [
    "ForecastError",
    "InvalidBasePrice",
    "InvalidObservedPrice",
    "build_forecast",
]
