"""Property-based tests for domain construction and field sampling."""

from __future__ import annotations

import numpy as np
import pytest

from fieldplot.domain import build_domain
from fieldplot.sampling import radial_sinc, sample_curve, sample_field

try:
    from hypothesis import given, settings
    from hypothesis import strategies as st
except ModuleNotFoundError:  # pragma: no cover - environment-specific fallback
    pytest.skip("hypothesis is required for property-based tests", allow_module_level=True)


STARTS = st.floats(min_value=-1e3, max_value=1e3, allow_nan=False, allow_infinity=False)
WIDTHS = st.floats(min_value=1e-3, max_value=1e3, allow_nan=False, allow_infinity=False)
COUNTS = st.integers(min_value=2, max_value=400)


@given(start=STARTS, width=WIDTHS, count=COUNTS)
def test_build_domain_is_evenly_spaced_with_exact_endpoints(start: float, width: float, count: int) -> None:
    stop = start + width
    values = build_domain(start, stop, count)

    assert values.shape == (count,)
    assert values[0] == start
    assert values[-1] == stop
    scale = max(1.0, abs(start), abs(stop))
    np.testing.assert_allclose(np.diff(values), width / (count - 1), rtol=1e-9, atol=1e-9 * scale)


@settings(max_examples=50)
@given(
    x_count=st.integers(min_value=2, max_value=40),
    y_count=st.integers(min_value=2, max_value=40),
    half_width=st.floats(min_value=0.1, max_value=50.0),
)
def test_radial_field_shape_and_bounds(x_count: int, y_count: int, half_width: float) -> None:
    xs = build_domain(-half_width, half_width, x_count)
    ys = build_domain(-half_width, half_width, y_count)

    field = sample_field(xs, ys, radial_sinc)

    assert field.shape == (x_count, y_count)
    assert np.isfinite(field).all()
    assert field.min() >= -1.0
    assert field.max() <= 1.0


@given(count=COUNTS, periods=st.integers(min_value=1, max_value=10))
def test_sine_curve_is_bounded(count: int, periods: int) -> None:
    xs = build_domain(0, 2 * np.pi * periods, count)

    curve = sample_curve(xs, np.sin)

    assert curve.shape == (count,)
    assert np.all(np.abs(curve) <= 1.0)
