"""Plain-text terminal reports for forecasts."""
