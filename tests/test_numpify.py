from __future__ import annotations

import numpy as np
import pytest
import sympy as sp

from fieldplot.numpify import numpify, numpify_cached, ordered_symbols


def test_constant_expression_broadcasts_to_argument_shape() -> None:
    x = sp.Symbol("x")
    f = numpify(5, args=x)

    np.testing.assert_array_equal(f(np.array([1, 2, 3])), [5.0, 5.0, 5.0])


def test_bindings_inject_constants() -> None:
    x, a = sp.symbols("x a")
    g = numpify(a * x, args=x, bindings={a: 2.0})

    np.testing.assert_array_equal(g(np.array([1, 2, 3])), [2.0, 4.0, 6.0])


def test_default_argument_order_is_sorted_by_name() -> None:
    x, y = sp.symbols("x y")
    f = numpify(x - y)

    assert f(5.0, 2.0) == pytest.approx(3.0)


def test_generated_source_is_attached_to_docstring() -> None:
    x = sp.Symbol("x")
    f = numpify(sp.sin(x), args=x)

    assert "Source:" in f.__doc__
    assert "numpy.sin" in f.__doc__


def test_unbound_symbols_and_overlapping_bindings_are_rejected() -> None:
    x, a = sp.symbols("x a")

    with pytest.raises(ValueError, match="unbound symbols: a"):
        numpify(a * x, args=x)
    with pytest.raises(ValueError, match="overlap"):
        numpify(a * x, args=(x, a), bindings={a: 1.0})


def test_args_validation() -> None:
    x = sp.Symbol("x")
    expr = x + 1

    assert ordered_symbols(expr, x) == (x,)
    with pytest.raises(TypeError, match="only SymPy Symbols"):
        ordered_symbols(expr, ["x"])
    with pytest.raises(ValueError, match="repeat"):
        ordered_symbols(expr, (x, x))


def test_numpify_cached_reuses_compiled_function() -> None:
    x = sp.Symbol("x")

    assert numpify_cached(sp.cos(x), args=x) is numpify_cached(sp.cos(x), args=(x,))
