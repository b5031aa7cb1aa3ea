"""
Turnip Forecaster: CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Parse and validate inputs.
  4. Build the forecast.
  5. Report result to stdout.

Install and run::

    pip install -e .
    turnip-forecaster --help
    turnip-forecaster validate-config
    turnip-forecaster forecast --base-price 100 --prices "88,84,80"
    turnip-forecaster forecast --base-price 100 --prices "88,84" \\
        --prev-base-price 97 --prev-prices "85,80,76,72,68,64,60,56,52,48,44,40"
    turnip-forecaster patterns --base-price 100 --prices "88,84" --kind small_spike
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="turnip-forecaster",
    help="Turnip price forecaster: pattern bounds and probabilities from weekly quotes.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from turnip_forecaster.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from turnip_forecaster.utils.logging import configure_logging
    configure_logging(config.logging)


def _parse_prices_or_exit(text: Optional[str], option: str) -> tuple[int, ...]:
    from turnip_forecaster.utils.parsing import PriceParseError, parse_week_prices

    try:
        return parse_week_prices(text)
    except PriceParseError as exc:
        typer.echo(f"[ERROR] {option}: {exc}", err=True)
        raise typer.Exit(code=1)


def _build_or_exit(
    base_price: int,
    prices: tuple[int, ...],
    prev_base_price: Optional[int] = None,
    prev_prices: Optional[tuple[int, ...]] = None,
):
    """Build this week's forecast, conditioned on last week's when known.

    Last week's forecast is built from its own quotes with no prior.  It is
    skipped when its base price is missing or none of its prices are known.
    """
    from turnip_forecaster.engine import ForecastError, build_forecast

    try:
        previous = None
        if prev_base_price and prev_prices and any(prev_prices):
            previous = build_forecast(prev_base_price, prev_prices)
        return build_forecast(base_price, prices, previous)
    except ForecastError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Log file:         {config.logging.log_file or '(none)'}")
    typer.echo(f"  Currency label:   {config.report.currency_label}")
    typer.echo(f"  Probability dp:   {config.report.probability_decimals}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("forecast")
def forecast(
    base_price: int = typer.Option(
        ...,
        "--base-price",
        "-b",
        help="This week's base (sell) price, 90..110.",
    ),
    prices: Optional[str] = typer.Option(
        None,
        "--prices",
        "-p",
        help="Comma-separated half-day prices from Mon AM; blank or '-' = unknown.",
    ),
    prev_base_price: Optional[int] = typer.Option(
        None,
        "--prev-base-price",
        help="Last week's base price (enables last-week conditioning).",
    ),
    prev_prices: Optional[str] = typer.Option(
        None,
        "--prev-prices",
        help="Last week's half-day prices, same format as --prices.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the full forecast as JSON instead of a table.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Forecast this week's price bounds and pattern probabilities.

    \b
    Exit codes:
      0: forecast produced (including "no pattern matches")
      1: invalid input or config
    """
    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    week = _parse_prices_or_exit(prices, "--prices")
    prev_week = _parse_prices_or_exit(prev_prices, "--prev-prices")
    result = _build_or_exit(base_price, week, prev_base_price, prev_week)

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
        return

    from turnip_forecaster.reporting.formatters import (
        format_bounds_table,
        format_probability_summary,
    )

    typer.echo(
        format_bounds_table(
            result,
            currency_label=config.report.currency_label,
            show_observed=config.report.show_observed,
        )
    )
    typer.echo("")
    typer.echo(format_probability_summary(result, decimals=config.report.probability_decimals))


@app.command("patterns")
def patterns(
    base_price: int = typer.Option(
        ...,
        "--base-price",
        "-b",
        help="This week's base (sell) price, 90..110.",
    ),
    prices: Optional[str] = typer.Option(
        None,
        "--prices",
        "-p",
        help="Comma-separated half-day prices from Mon AM; blank or '-' = unknown.",
    ),
    kind: Optional[str] = typer.Option(
        None,
        "--kind",
        "-k",
        help="Only list one pattern kind: random, big_spike, falling or small_spike.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """List every pattern hypothesis that matches the entered prices."""
    from turnip_forecaster.reporting.formatters import format_pattern_list
    from turnip_forecaster.taxonomy.pattern_taxonomy import PatternKind

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    selected: Optional[PatternKind] = None
    if kind is not None:
        try:
            selected = PatternKind(kind.strip().lower())
        except ValueError:
            valid = ", ".join(k.value for k in PatternKind)
            typer.echo(f"[ERROR] Unknown pattern kind '{kind}'. Use one of: {valid}.", err=True)
            raise typer.Exit(code=1)

    week = _parse_prices_or_exit(prices, "--prices")
    result = _build_or_exit(base_price, week)

    typer.echo(f"Base price {result.base_price}: {len(result.patterns)} matching pattern(s)")
    typer.echo(format_pattern_list(result.patterns, kind=selected))


if __name__ == "__main__":
    app()
