"""Tests for the SM-2 calculator."""

import pytest

from flashstudy.application.sr_calculator import SRCalculator
from flashstudy.domain.exceptions import InvalidArgumentError


@pytest.fixture
def calc():
    return SRCalculator()


def test_perfect_recall_on_new_card(calc):
    result = calc.calculate(5, 2.5, 0, 0)
    assert result.easiness_factor == pytest.approx(2.6)
    assert result.interval == 1
    assert result.repetitions == 1


def test_second_success_uses_six_days(calc):
    result = calc.calculate(4, 2.5, 1, 1)
    assert result.easiness_factor == pytest.approx(2.5)
    assert result.interval == 6
    assert result.repetitions == 2


def test_third_success_multiplies_previous_interval(calc):
    result = calc.calculate(5, 2.5, 6, 2)
    assert result.easiness_factor == pytest.approx(2.6)
    assert result.interval == round(6 * 2.6)
    assert result.repetitions == 3


def test_quality_three_lowers_ease(calc):
    result = calc.calculate(3, 2.5, 0, 0)
    assert result.easiness_factor == pytest.approx(2.36)
    assert result.interval == 1
    assert result.repetitions == 1


@pytest.mark.parametrize("quality", [0, 1, 2])
def test_lapse_resets_repetitions(calc, quality):
    result = calc.calculate(quality, 2.5, 15, 4)
    assert result.repetitions == 0
    assert result.interval == 1
    assert result.easiness_factor < 2.5


def test_ease_never_drops_below_floor(calc):
    result = calc.calculate(0, 1.3, 10, 3)
    assert result.easiness_factor == pytest.approx(1.3)


def test_ease_below_floor_is_raised_first(calc):
    low = calc.calculate(5, 0.5, 0, 0)
    floor = calc.calculate(5, 1.3, 0, 0)
    assert low.easiness_factor == pytest.approx(floor.easiness_factor)
    assert low.easiness_factor == pytest.approx(1.4)


def test_higher_quality_never_gives_lower_ease(calc):
    eases = [calc.calculate(q, 2.5, 6, 2).easiness_factor for q in range(6)]
    assert eases == sorted(eases)


def test_repeated_perfect_reviews_grow_interval(calc):
    ease, interval, reps = 2.5, 0, 0
    intervals = []
    for _ in range(5):
        result = calc.calculate(5, ease, interval, reps)
        ease, interval, reps = result.easiness_factor, result.interval, result.repetitions
        intervals.append(interval)
    assert intervals[:2] == [1, 6]
    assert intervals == sorted(intervals)
    assert reps == 5


@pytest.mark.parametrize("quality", [-1, 6, 100])
def test_quality_out_of_range(calc, quality):
    with pytest.raises(InvalidArgumentError):
        calc.calculate(quality, 2.5, 0, 0)


@pytest.mark.parametrize("quality", [3.0, "3", True])
def test_quality_must_be_int(calc, quality):
    with pytest.raises(InvalidArgumentError):
        calc.calculate(quality, 2.5, 0, 0)


def test_negative_interval_or_repetitions(calc):
    with pytest.raises(InvalidArgumentError):
        calc.calculate(4, 2.5, -1, 0)
    with pytest.raises(InvalidArgumentError):
        calc.calculate(4, 2.5, 0, -1)


def test_invalid_argument_is_a_value_error(calc):
    with pytest.raises(ValueError):
        calc.calculate(9, 2.5, 0, 0)
