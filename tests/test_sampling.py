from __future__ import annotations

import logging
import math

import numpy as np
import pytest
import sympy as sp

from fieldplot.domain import build_domain
from fieldplot.sampling import (
    RADIAL_SINC_LIMIT,
    radial_sinc,
    radial_sinc_expr,
    sample_curve,
    sample_field,
)


def test_sample_field_shape_follows_axis_lengths() -> None:
    xs = build_domain(0, 1, 7)
    ys = build_domain(-3, 3, 11)

    field = sample_field(xs, ys, lambda x, y: x * y)

    assert field.shape == (7, 11)


def test_sample_field_entry_i_j_is_f_of_xs_i_and_ys_j() -> None:
    xs = np.array([0.0, 1.0, 2.0])
    ys = np.array([10.0, 20.0])

    field = sample_field(xs, ys, lambda x, y: 100 * x + y)

    for i, x in enumerate(xs):
        for j, y in enumerate(ys):
            assert field[i][j] == 100 * x + y


def test_radial_sinc_at_origin_is_the_limit_not_nan() -> None:
    value = radial_sinc(0.0, 0.0)

    assert not math.isnan(value)
    assert value == RADIAL_SINC_LIMIT == 1.0


def test_radial_sinc_matches_definition_away_from_origin() -> None:
    r = math.hypot(0.3, -1.2)
    assert radial_sinc(0.3, -1.2) == pytest.approx(math.sin(r) / r)


def test_radial_field_over_reference_domain() -> None:
    xs = build_domain(-2, 2, 80)
    ys = build_domain(-2, 2, 80)

    field = sample_field(xs, ys, radial_sinc)

    assert field.shape == (80, 80)
    assert np.isfinite(field).all()
    assert field.min() >= -1.0
    assert field.max() <= 1.0
    # 80 samples straddle the origin; the four central cells sit next to it.
    np.testing.assert_allclose(field[39:41, 39:41], 1.0, atol=1e-3)


def test_radial_field_contains_exact_limit_when_origin_is_sampled() -> None:
    xs = build_domain(-2, 2, 81)

    field = sample_field(xs, xs, radial_sinc)

    assert field[40, 40] == 1.0
    assert np.isfinite(field).all()


def test_sample_curve_sine_is_bounded() -> None:
    xs = build_domain(0, 2 * math.pi, 200)

    curve = sample_curve(xs, np.sin)

    assert curve.shape == (200,)
    assert curve.min() >= -1.0
    assert curve.max() <= 1.0
    assert curve[0] == pytest.approx(0.0)


def test_scalar_only_callables_fall_back_to_per_sample_evaluation() -> None:
    xs = build_domain(0, 1, 5)

    curve = sample_curve(xs, math.cos)
    field = sample_field(xs, xs, lambda x, y: math.atan2(y, x + 1))

    np.testing.assert_allclose(curve, np.cos(xs))
    assert field.shape == (5, 5)
    assert field[0, 4] == pytest.approx(math.atan2(1.0, 1.0))


def test_constant_callables_broadcast() -> None:
    xs = build_domain(0, 1, 4)

    np.testing.assert_array_equal(sample_curve(xs, lambda x: 3), [3.0] * 4)
    assert sample_field(xs, xs, lambda x, y: -1.5).shape == (4, 4)


def test_wrongly_shaped_vectorized_results_raise_value_error() -> None:
    xs = build_domain(0, 1, 4)
    ys = build_domain(0, 1, 3)

    with pytest.raises(ValueError, match=r"shape \(2,\)"):
        sample_curve(xs, lambda x: np.zeros(2))
    with pytest.raises(ValueError, match=r"expected \(4, 3\)"):
        sample_field(xs, ys, lambda x, y: x[:, 0])


def test_sympy_expressions_are_compiled() -> None:
    x, y = sp.symbols("x y")
    xs = build_domain(0, 1, 3)
    ys = build_domain(0, 2, 5)

    field = sample_field(xs, ys, x**2 + y)

    np.testing.assert_allclose(field, xs[:, None] ** 2 + ys[None, :])


def test_variables_fix_the_axis_order_of_sympy_expressions() -> None:
    x, y = sp.symbols("x y")
    xs = np.array([0.0, 1.0])
    ys = np.array([10.0, 20.0, 30.0])

    field = sample_field(xs, ys, x - y, variables=(y, x))

    # First axis binds y, second binds x.
    assert field[1, 2] == 30.0 - 1.0


def test_expression_with_missing_variable_needs_explicit_variables() -> None:
    x, y = sp.symbols("x y")
    xs = build_domain(0, 1, 3)

    with pytest.raises(ValueError, match="exactly 2 variable"):
        sample_field(xs, xs, sp.sin(x))

    field = sample_field(xs, xs, sp.sin(x), variables=(x, y))
    np.testing.assert_allclose(field[:, 2], np.sin(xs))


def test_unresolved_singularity_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    x = sp.Symbol("x")
    xs = build_domain(-1, 1, 3)

    with caplog.at_level(logging.WARNING, logger="fieldplot.sampling"):
        curve = sample_curve(xs, sp.sin(x) / x)

    assert math.isnan(curve[1])
    assert "1 non-finite sample" in caplog.text


def test_resolve_singularities_uses_symbolic_limit() -> None:
    x = sp.Symbol("x")
    xs = build_domain(-1, 1, 3)

    curve = sample_curve(xs, sp.sin(x) / x, resolve_singularities=True)

    assert curve[1] == 1.0
    assert curve[0] == pytest.approx(math.sin(1.0))


def test_resolve_singularities_on_symbolic_radial_field() -> None:
    x, y = sp.symbols("x y", real=True)
    xs = build_domain(-1, 1, 3)

    field = sample_field(xs, xs, radial_sinc_expr(x, y), variables=(x, y), resolve_singularities=True)

    assert field[1, 1] == pytest.approx(1.0)
    np.testing.assert_allclose(field, sample_field(xs, xs, radial_sinc))


def test_invalid_inputs_raise() -> None:
    xs = build_domain(0, 1, 3)

    with pytest.raises(TypeError, match="callable or a SymPy expression"):
        sample_curve(xs, 3.0)
    with pytest.raises(ValueError, match="one-dimensional"):
        sample_curve(np.zeros((2, 2)), np.sin)
    with pytest.raises(TypeError, match="only supported for SymPy"):
        sample_field(xs, xs, radial_sinc, variables=sp.symbols("x y"))
