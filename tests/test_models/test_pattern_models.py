"""Tests for DayPrice, Pattern and Forecast models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from turnip_forecaster.engine.aggregator import EMPTY_BOUNDS
from turnip_forecaster.models.forecast import Forecast
from turnip_forecaster.models.pattern import DayPrice, Pattern
from turnip_forecaster.taxonomy.pattern_taxonomy import PatternKind


def _pattern(kind: PatternKind = PatternKind.FALLING) -> Pattern:
    return Pattern(kind=kind, prices=tuple(DayPrice(min=40, max=90) for _ in range(12)))


class TestDayPrice:
    def test_valid_construction(self):
        d = DayPrice(min=80, max=90)
        assert (d.min, d.max) == (80, 90)
        assert not d.is_exact

    def test_collapsed_window_is_exact(self):
        assert DayPrice(min=95, max=95).is_exact

    def test_inverted_window_raises(self):
        with pytest.raises(ValidationError, match="must be <= max"):
            DayPrice(min=91, max=90)

    def test_negative_min_raises(self):
        with pytest.raises(ValidationError, match="non-negative"):
            DayPrice(min=-1, max=10)

    def test_frozen_immutable(self):
        d = DayPrice(min=1, max=2)
        with pytest.raises(Exception):
            d.min = 0


class TestPattern:
    def test_valid_construction(self):
        p = _pattern()
        assert p.kind == PatternKind.FALLING
        assert len(p.prices) == 12

    def test_kind_from_string(self):
        p = Pattern(kind="big_spike", prices=_pattern().prices)
        assert p.kind is PatternKind.BIG_SPIKE

    def test_unknown_kind_raises(self):
        with pytest.raises(ValidationError):
            Pattern(kind="sideways", prices=_pattern().prices)

    @pytest.mark.parametrize("length", [0, 11, 13])
    def test_wrong_length_raises(self, length):
        with pytest.raises(ValidationError, match="exactly 12"):
            Pattern(kind=PatternKind.RANDOM, prices=tuple(DayPrice(min=1, max=2) for _ in range(length)))


class TestForecast:
    def test_empty_forecast_is_valid(self):
        f = Forecast(base_price=100, observed=(0,) * 12, bounds=EMPTY_BOUNDS)
        assert not f.has_forecast
        assert f.kinds == ()

    def test_probabilities_must_match_kinds(self):
        with pytest.raises(ValidationError, match="pattern kinds present"):
            Forecast(
                base_price=100,
                observed=(0,) * 12,
                patterns=(_pattern(),),
                bounds=_pattern().prices,
                probabilities={PatternKind.RANDOM: 1.0},
            )

    def test_probabilities_must_sum_to_one(self):
        with pytest.raises(ValidationError, match="sum to 1.0"):
            Forecast(
                base_price=100,
                observed=(0,) * 12,
                patterns=(_pattern(),),
                bounds=_pattern().prices,
                probabilities={PatternKind.FALLING: 0.5},
            )

    def test_observed_length_checked(self):
        with pytest.raises(ValidationError, match="observed"):
            Forecast(base_price=100, observed=(0,) * 11, bounds=EMPTY_BOUNDS)

    def test_kinds_and_patterns_of(self):
        f = Forecast(
            base_price=100,
            observed=(0,) * 12,
            patterns=(_pattern(PatternKind.SMALL_SPIKE), _pattern(PatternKind.RANDOM),
                      _pattern(PatternKind.SMALL_SPIKE)),
            bounds=_pattern().prices,
            probabilities={PatternKind.RANDOM: 0.4, PatternKind.SMALL_SPIKE: 0.6},
        )
        assert f.kinds == (PatternKind.RANDOM, PatternKind.SMALL_SPIKE)
        assert len(f.patterns_of(PatternKind.SMALL_SPIKE)) == 2
        assert f.patterns_of(PatternKind.FALLING) == ()

    def test_json_round_trip_keeps_kinds(self, blank_forecast):
        restored = Forecast.model_validate_json(blank_forecast.model_dump_json())
        assert restored == blank_forecast
        assert set(restored.probabilities) == set(PatternKind)

    def test_probabilities_are_read_only(self, blank_forecast):
        with pytest.raises(TypeError):
            blank_forecast.probabilities[PatternKind.RANDOM] = 1.0
        with pytest.raises(AttributeError):
            blank_forecast.probabilities.clear()
        assert set(blank_forecast.probabilities) == set(PatternKind)

    def test_caller_dict_is_copied(self):
        probs = {PatternKind.FALLING: 1.0}
        f = Forecast(
            base_price=100,
            observed=(0,) * 12,
            patterns=(_pattern(),),
            bounds=_pattern().prices,
            probabilities=probs,
        )
        probs.clear()
        assert f.probabilities == {PatternKind.FALLING: 1.0}

    def test_model_dump_gives_plain_dict(self, blank_forecast):
        dumped = blank_forecast.model_dump()["probabilities"]
        assert type(dumped) is dict
        assert dumped == dict(blank_forecast.probabilities)

    @pytest.mark.parametrize("base_price", [89, 111])
    def test_base_price_range_checked(self, base_price):
        with pytest.raises(ValidationError, match="base_price"):
            Forecast(base_price=base_price, observed=(0,) * 12, bounds=EMPTY_BOUNDS)

    @pytest.mark.parametrize("price", [-1, 661])
    def test_observed_range_checked(self, price):
        observed = (0,) * 5 + (price,) + (0,) * 6
        with pytest.raises(ValidationError, match=r"observed\[5\]"):
            Forecast(base_price=100, observed=observed, bounds=EMPTY_BOUNDS)
