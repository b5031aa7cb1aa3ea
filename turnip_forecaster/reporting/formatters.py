"""
ASCII terminal formatters for forecast reports.

All formatters accept a ``Forecast`` (or its patterns) and return plain
multi-line strings suitable for ``typer.echo()``.  They only read the
forecast; nothing here mutates it.

No third-party dependencies (no ``rich``, no ``colorama``).

Empty forecasts
---------------
A forecast with no surviving pattern has all-zero bounds.  Every formatter
prints an explicit "no forecast available" notice instead of those zeros.
"""

from __future__ import annotations

from typing import Iterable, Optional

from turnip_forecaster.models.forecast import Forecast
from turnip_forecaster.models.pattern import Pattern
from turnip_forecaster.taxonomy.pattern_taxonomy import PatternKind

# The sell day is Sunday; quotes run Monday AM through Saturday PM.
HALF_DAY_LABELS: tuple[str, ...] = tuple(
    f"{day} {half}"
    for day in ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
    for half in ("AM", "PM")
)

NO_FORECAST_NOTICE = (
    "  No known pattern matches these prices -- no forecast available.\n"
    "  Double-check the entered prices; a single typo rules out every pattern."
)


def _price(value: int) -> str:
    return str(value) if value else "-"


# ── Bounds table ──────────────────────────────────────────────────────────────


def format_bounds_table(
    forecast: Forecast,
    currency_label: str = "bells",
    show_observed: bool = True,
) -> str:
    """Format observed prices and the forecast envelope, one row per half-day.

    Example::

        === Turnip Forecast (base price 100 bells) ===
          Half-day  Observed    Min    Max
          --------------------------------
          Mon AM          88     88     88
          Mon PM           -     82     87

    Args:
        forecast:       The forecast to show.
        currency_label: Unit shown in the header.
        show_observed:  Include the observed-price column.

    Returns:
        Multi-line string.
    """
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== Turnip Forecast (base price {forecast.base_price} {currency_label}) ===")

    if not forecast.has_forecast:
        lines.append(NO_FORECAST_NOTICE)
        return "\n".join(lines)

    header = f"  {'Half-day':<8}"
    if show_observed:
        header += f"  {'Observed':>8}"
    header += f"  {'Min':>5}  {'Max':>5}"
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))

    for label, seen, window in zip(HALF_DAY_LABELS, forecast.observed, forecast.bounds):
        row = f"  {label:<8}"
        if show_observed:
            row += f"  {_price(seen):>8}"
        row += f"  {window.min:>5}  {window.max:>5}"
        lines.append(row)

    lines.append("")
    lines.append(f"  Matching patterns: {len(forecast.patterns)}")
    return "\n".join(lines)


# ── Probability summary ───────────────────────────────────────────────────────


def format_probability_summary(forecast: Forecast, decimals: int = 2) -> str:
    """List each matching pattern kind with its probability, most likely first.

    Example::

        Matching patterns:
          - Random (35.00%): prices move up and down; ...
          - Big spike (26.25%): prices drop, then spike hard ...
    """
    if not forecast.probabilities:
        return "Matching patterns:\n" + NO_FORECAST_NOTICE

    ranked = sorted(
        forecast.probabilities.items(),
        key=lambda kv: (-kv[1], kv[0].ordinal),
    )
    lines = ["Matching patterns:"]
    for kind, prob in ranked:
        lines.append(f"  - {kind.display_name} ({prob * 100:.{decimals}f}%): {kind.description}")
    return "\n".join(lines)


# ── Pattern listing ───────────────────────────────────────────────────────────


def format_pattern_list(
    patterns: Iterable[Pattern],
    kind: Optional[PatternKind] = None,
) -> str:
    """Format every pattern hypothesis as one row of twelve ``min-max`` windows.

    Args:
        patterns: Hypotheses to list, usually ``Forecast.patterns``.
        kind:     Only list patterns of this kind when given.
    """
    selected = [p for p in patterns if kind is None or p.kind == kind]
    if not selected:
        return "  (no matching patterns)"

    header = f"  {'#':>3}  {'Pattern':<11}  " + "  ".join(f"{label:>9}" for label in HALF_DAY_LABELS)
    lines = [header, "  " + "-" * (len(header) - 2)]
    for n, pattern in enumerate(selected, start=1):
        windows = "  ".join(
            f"{(str(w.min) if w.is_exact else f'{w.min}-{w.max}'):>9}" for w in pattern.prices
        )
        lines.append(f"  {n:>3}  {pattern.kind.display_name:<11}  {windows}")
    return "\n".join(lines)
