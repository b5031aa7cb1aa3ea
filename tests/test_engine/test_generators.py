"""
Tests for the four pattern generators.

What we test
------------
1. Enumeration sizes with no data (56 Random, 7 BigSpike, 1 Falling, 8 SmallSpike).
2. Malformed phase layouts raise ``MalformedPhaseError``, not ``NoMatch``.
3. Observed prices outside a window raise ``NoMatch``.
4. SmallSpike peak adjustments (3rd/5th max - 1, 4th min = 3rd min).
5. Enumeration swallows ``NoMatch`` quietly and logs malformed layouts.
"""

from __future__ import annotations

import logging

import pytest

from turnip_forecaster.engine.errors import MalformedPhaseError, NoMatch
from turnip_forecaster.engine.generators import (
    GENERATORS,
    _attempt,
    big_spike_pattern,
    falling_pattern,
    generate_big_spike,
    generate_falling,
    generate_random,
    generate_small_spike,
    random_pattern,
    small_spike_pattern,
)
from turnip_forecaster.engine.rates import PriceContext
from turnip_forecaster.models.pattern import DayPrice
from turnip_forecaster.taxonomy.pattern_taxonomy import PATTERN_KINDS, PatternKind


def _ctx(*known: int, base: int = 100) -> PriceContext:
    observed = list(known) + [0] * (12 - len(known))
    return PriceContext(base_price=base, observed=tuple(observed))


# ── Enumeration with no data ──────────────────────────────────────────────────

class TestBlankWeekEnumeration:
    def test_random_count(self, blank_ctx):
        patterns = generate_random(blank_ctx)
        assert len(patterns) == 56
        assert {p.kind for p in patterns} == {PatternKind.RANDOM}

    def test_big_spike_count(self, blank_ctx):
        assert len(generate_big_spike(blank_ctx)) == 7

    def test_falling_count(self, blank_ctx):
        assert len(generate_falling(blank_ctx)) == 1

    def test_small_spike_count(self, blank_ctx):
        assert len(generate_small_spike(blank_ctx)) == 8

    @pytest.mark.parametrize("base", [90, 95, 100, 105, 110])
    def test_only_falling_is_unambiguous(self, base):
        ctx = _ctx(base=base)
        for kind, generate in GENERATORS.items():
            found = generate(ctx)
            if kind == PatternKind.FALLING:
                assert len(found) == 1
            else:
                assert len(found) > 1

    def test_registry_in_kind_order(self):
        assert tuple(GENERATORS) == PATTERN_KINDS

    def test_results_are_immutable_tuples(self, blank_ctx):
        assert isinstance(generate_random(blank_ctx), tuple)


# ── Random ────────────────────────────────────────────────────────────────────

class TestRandomPattern:
    def test_phase_windows(self, blank_ctx):
        p = random_pattern(blank_ctx, 1, 2, 4, 3, 2)
        inc = (blank_ctx.min_rate_price(0.9), blank_ctx.max_rate_price(1.4))
        assert (p.prices[0].min, p.prices[0].max) == inc
        assert (p.prices[1].min, p.prices[1].max) == (
            blank_ctx.min_rate_price(0.6), blank_ctx.max_rate_price(0.8),
        )
        # second slot of a decrease phase has decayed
        assert p.prices[2].min < p.prices[1].min
        assert all((s.min, s.max) == inc for s in p.prices[3:7])
        # decrease phase 2 restarts at the top of its window
        assert p.prices[7] == p.prices[1]
        assert all((s.min, s.max) == inc for s in p.prices[10:])

    @pytest.mark.parametrize(
        "lengths",
        [
            (7, 2, 0, 3, 0),   # inc1 too long
            (1, 4, 2, 1, 4),   # dec1 not 2 or 3
            (1, 2, 3, 3, 2),   # inc2 != 7 - inc1 - inc3
            (1, 2, 4, 2, 2),   # dec2 != 5 - dec1
            (2, 2, 0, 3, 5),   # inc3 leaves no inc2
        ],
    )
    def test_malformed_layouts(self, blank_ctx, lengths):
        with pytest.raises(MalformedPhaseError):
            random_pattern(blank_ctx, *lengths)

    def test_price_above_every_window_rejects(self):
        with pytest.raises(NoMatch):
            random_pattern(_ctx(200), 1, 2, 4, 3, 2)

    def test_observed_prices_filter_layouts(self):
        # A low Monday AM quote rules out every layout opening on an increase.
        patterns = generate_random(_ctx(70))
        assert patterns
        for p in patterns:
            assert p.prices[0].min == p.prices[0].max == 70


# ── Big spike ─────────────────────────────────────────────────────────────────

class TestBigSpikePattern:
    def test_peak_is_six_times_base(self, blank_ctx):
        p = big_spike_pattern(blank_ctx, 3)
        assert p.prices[5].max == blank_ctx.max_rate_price(6.0)
        assert p.prices[5].min == blank_ctx.min_rate_price(2.0)

    def test_tail_is_static(self, blank_ctx):
        p = big_spike_pattern(blank_ctx, 2)
        tail = p.prices[7:]
        assert len(set(tail)) == 1
        assert tail[0].max == blank_ctx.max_rate_price(0.9)

    @pytest.mark.parametrize("start", [0, 8])
    def test_spike_start_out_of_range(self, blank_ctx, start):
        with pytest.raises(MalformedPhaseError):
            big_spike_pattern(blank_ctx, start)

    def test_spike_found_from_high_quote(self):
        # 400 only fits the 2x~6x peak slot.
        patterns = generate_big_spike(_ctx(0, 0, 0, 0, 400))
        assert [p.prices[4].max for p in patterns] == [400]
        assert patterns[0].prices[2] != patterns[0].prices[4]


# ── Falling ───────────────────────────────────────────────────────────────────

class TestFallingPattern:
    def test_monotonic_without_data(self, blank_ctx):
        p = falling_pattern(blank_ctx)
        maxes = [s.max for s in p.prices]
        assert maxes == sorted(maxes, reverse=True)

    def test_full_series_collapses(self, falling_week):
        p = falling_pattern(PriceContext(base_price=100, observed=falling_week))
        assert [s.min for s in p.prices] == list(falling_week)
        assert all(s.is_exact for s in p.prices)

    def test_rising_price_rejects(self):
        with pytest.raises(NoMatch) as info:
            falling_pattern(_ctx(88, 95))
        assert info.value.index == 1


# ── Small spike ───────────────────────────────────────────────────────────────

class TestSmallSpikePattern:
    def test_peak_adjustments(self, blank_ctx):
        p = small_spike_pattern(blank_ctx, 0)
        top = blank_ctx.max_rate_price(2.0)
        assert p.prices[2].max == top - 1
        assert p.prices[3].max == top
        assert p.prices[4].max == top - 1
        assert p.prices[3].min == p.prices[2].min

    def test_peak_min_follows_observed_third_slot(self):
        p = small_spike_pattern(_ctx(0, 0, 150), 0)
        assert p.prices[2] == DayPrice(min=150, max=150)
        assert p.prices[3].min == 150

    def test_peak_below_third_slot_rejects(self):
        with pytest.raises(NoMatch):
            small_spike_pattern(_ctx(0, 0, 150, 145), 0)

    def test_third_slot_cannot_reach_table_max(self, blank_ctx):
        top = blank_ctx.max_rate_price(2.0)
        with pytest.raises(NoMatch):
            small_spike_pattern(_ctx(0, 0, top), 0)

    def test_spike_start_out_of_range(self, blank_ctx):
        with pytest.raises(MalformedPhaseError):
            small_spike_pattern(blank_ctx, 8)


# ── Enumeration error handling ────────────────────────────────────────────────

class TestAttempt:
    def test_no_match_returns_none_quietly(self, caplog):
        def build():
            raise NoMatch(0, 200, 85, 90)

        with caplog.at_level(logging.DEBUG, logger="turnip_forecaster.engine.generators"):
            assert _attempt(build, "falling") is None
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_malformed_is_logged_as_error(self, caplog):
        def build():
            raise MalformedPhaseError("spike start must be 1..7, got 9")

        with caplog.at_level(logging.ERROR, logger="turnip_forecaster.engine.generators"):
            assert _attempt(build, "big_spike(start=9)") is None
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert "big_spike(start=9)" in errors[0].getMessage()

    def test_unexpected_errors_propagate(self):
        def build():
            raise KeyError("bug")

        with pytest.raises(KeyError):
            _attempt(build, "random(0, 2, 7, 3, 0)")
