from __future__ import annotations

import math

import numpy as np
import pytest

from fieldplot.domain import Domain, InvalidDomainError, build_domain


def test_build_domain_returns_count_evenly_spaced_values_including_endpoints() -> None:
    values = build_domain(-2, 2, 80)

    assert values.shape == (80,)
    assert values[0] == -2.0
    assert values[-1] == 2.0
    np.testing.assert_allclose(np.diff(values), 4.0 / 79)


def test_build_domain_accepts_symbolic_bounds() -> None:
    values = build_domain(0, "2*pi", 200)

    assert len(values) == 200
    assert values[-1] == pytest.approx(2 * math.pi)


def test_build_domain_minimum_two_samples_is_the_endpoints() -> None:
    np.testing.assert_array_equal(build_domain(1, 3, 2), [1.0, 3.0])


@pytest.mark.parametrize("count", [1, 0, -5])
def test_build_domain_rejects_too_few_samples(count: int) -> None:
    with pytest.raises(InvalidDomainError, match="at least 2 samples"):
        build_domain(0, 1, count)


@pytest.mark.parametrize(("start", "stop"), [(1, 1), (2, -2), ("pi", 3)])
def test_build_domain_rejects_empty_range(start, stop) -> None:
    with pytest.raises(InvalidDomainError, match="range is empty"):
        build_domain(start, stop, 10)


@pytest.mark.parametrize("count", [2.5, True, "ten", "3.5"])
def test_build_domain_rejects_non_integer_counts(count) -> None:
    with pytest.raises(InvalidDomainError, match="sample count"):
        build_domain(0, 1, count)


@pytest.mark.parametrize("bound", [float("nan"), float("inf"), "x + 1", "1 + 2*I"])
def test_build_domain_rejects_non_finite_or_non_real_bounds(bound) -> None:
    with pytest.raises(InvalidDomainError, match="finite real number"):
        build_domain(bound, 10, 5)


def test_integral_float_and_string_counts_are_accepted() -> None:
    assert len(build_domain(0, 1, 5.0)) == 5
    assert len(build_domain(0, 1, "7")) == 7


def test_invalid_domain_error_is_a_value_error() -> None:
    assert issubclass(InvalidDomainError, ValueError)


def test_domain_record_normalizes_and_exposes_step() -> None:
    domain = Domain("-1", 1, "5")

    assert domain.start == -1.0
    assert domain.count == 5
    assert len(domain) == 5
    assert domain.step == pytest.approx(0.5)
    np.testing.assert_allclose(domain.values, [-1.0, -0.5, 0.0, 0.5, 1.0])


def test_build_domain_spanning_most_of_float_range_stays_finite() -> None:
    values = build_domain(-1e308, 1e308, 5)

    assert np.isfinite(values).all()
    assert values[0] == -1e308
    assert values[-1] == 1e308
    assert values[2] == 0.0
    steps = np.diff(values)
    assert (steps > 0).all()
    np.testing.assert_allclose(steps, 5e307)
    assert Domain(-1e308, 1e308, 5).step == pytest.approx(5e307)


def test_domain_values_are_fresh_arrays() -> None:
    domain = Domain(0, 1, 3)
    first = domain.values
    first[0] = 42.0

    assert domain.values[0] == 0.0
