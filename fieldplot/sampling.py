"""Curve and field sampling over evenly spaced domains.

Purpose
-------
Evaluate a scalar function of one variable over a vector of samples
(:func:`sample_curve`) or of two variables over every ``(x, y)`` grid pair
(:func:`sample_field`). Functions may be plain Python callables or SymPy
expressions; the latter are compiled through :mod:`fieldplot.numpify`.

Concepts and structure
----------------------
- Grids are ``ij``-indexed: ``field[i, j] == f(xs[i], ys[j])`` and the result
  has shape ``(len(xs), len(ys))``.
- Callables are first called once on the whole mesh (vectorized path). When
  that raises ``TypeError`` or ``ValueError``, evaluation falls back to one
  call per sample. A scalar result is broadcast; any other shape than the
  mesh shape raises ``ValueError``.
- Evaluation runs under ``numpy.errstate`` so removable singularities such as
  ``0/0`` do not spam warnings. Non-finite samples that survive are logged.

Important gotchas
-----------------
- ``sin(r)/r`` has no value at the origin in floating point. Use
  :func:`radial_sinc`, which substitutes the limit ``1.0``, or pass a SymPy
  expression with ``resolve_singularities=True``.
- SymPy expressions with fewer free symbols than the sampler needs must name
  their variables explicitly via ``variables=``.

Examples
--------
>>> from fieldplot.domain import build_domain
>>> from fieldplot.sampling import radial_sinc, sample_field
>>> xs = build_domain(-2, 2, 81)
>>> field = sample_field(xs, xs, radial_sinc)
>>> field.shape
(81, 81)
>>> float(field[40, 40])
1.0
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence, Tuple, Union

import numpy as np
import sympy as sp

from .numpify import numpify_cached, ordered_symbols

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

FunctionLike = Union[Callable[..., Any], sp.Basic]

#: Value of ``sin(r)/r`` as ``r`` tends to zero.
RADIAL_SINC_LIMIT = 1.0


def radial_sinc(x: Any, y: Any) -> Any:
    """Return ``sin(r)/r`` with ``r = sqrt(x**2 + y**2)``, vectorized.

    The origin, where the quotient is ``0/0``, evaluates to
    :data:`RADIAL_SINC_LIMIT`. Results lie in ``[-1, 1]``.
    """
    r = np.hypot(np.asarray(x, dtype=float), np.asarray(y, dtype=float))
    at_origin = r == 0.0
    safe_r = np.where(at_origin, 1.0, r)
    values = np.where(at_origin, RADIAL_SINC_LIMIT, np.sin(safe_r) / safe_r)
    return values[()]


def radial_sinc_expr(x: sp.Symbol, y: sp.Symbol) -> sp.Expr:
    """Return the symbolic form of :func:`radial_sinc` (unguarded)."""
    r = sp.sqrt(x**2 + y**2)
    return sp.sin(r) / r


def _as_axis(values: Any, role: str) -> np.ndarray:
    axis = np.asarray(values, dtype=float)
    if axis.ndim != 1:
        raise ValueError(f"{role} must be one-dimensional, got shape {axis.shape}.")
    if axis.size == 0:
        raise ValueError(f"{role} must contain at least one sample.")
    return axis


def _compile(
    f: FunctionLike, arity: int, variables: Optional[Sequence[sp.Symbol]]
) -> Tuple[Callable[..., Any], Optional[sp.Basic], Tuple[sp.Symbol, ...]]:
    """Return ``(callable, symbolic_expr_or_None, symbols)`` for *f*."""
    if isinstance(f, sp.Basic):
        symbols = ordered_symbols(f, variables)
        if len(symbols) != arity:
            raise ValueError(
                f"Expression {f} needs exactly {arity} variable(s) for sampling, got "
                f"{tuple(s.name for s in symbols)}. Pass variables=... explicitly."
            )
        return numpify_cached(f, args=symbols), f, symbols
    if callable(f):
        if variables is not None:
            raise TypeError("variables= is only supported for SymPy expressions.")
        return f, None, ()
    raise TypeError(
        f"Expected a callable or a SymPy expression, got {type(f).__name__}."
    )


def _evaluate(fn: Callable[..., Any], args: Sequence[np.ndarray], shape: Tuple[int, ...]) -> np.ndarray:
    """Evaluate *fn* on broadcast sample arrays, falling back to per-sample calls if it raises."""
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        try:
            raw = fn(*args)
        except (TypeError, ValueError) as exc:
            logger.debug("vectorized call of %r failed (%s); evaluating per sample", fn, exc)
        else:
            values = np.array(raw, dtype=float)
            if values.shape == shape:
                return values
            if values.ndim == 0:
                return np.full(shape, float(values))
            raise ValueError(
                f"{getattr(fn, '__name__', fn)!r} returned an array of shape {values.shape}; "
                f"expected {shape} or a scalar."
            )

        return np.vectorize(fn, otypes=[float])(*args)


def _report_nonfinite(values: np.ndarray, what: str) -> None:
    bad = int(np.count_nonzero(~np.isfinite(values)))
    if bad:
        logger.warning("%s contains %d non-finite sample(s) out of %d", what, bad, values.size)


def _resolve_singularities(
    values: np.ndarray,
    expr: sp.Basic,
    symbols: Tuple[sp.Symbol, ...],
    axes: Sequence[np.ndarray],
) -> None:
    """Replace non-finite cells of *values* in place by symbolic limits.

    The limit is taken along the first variable (from above) with the
    remaining variables fixed at the cell coordinates. Cells whose limit is
    not a finite real number keep their value.
    """
    for index in np.argwhere(~np.isfinite(values)):
        point = [sp.Rational(float(axis[i])) for axis, i in zip(axes, index)]
        restricted = expr.subs(dict(zip(symbols[1:], point[1:])))
        try:
            limit = sp.limit(restricted, symbols[0], point[0])
        except (NotImplementedError, ValueError) as exc:
            logger.warning("no limit for %s at %s: %s", expr, tuple(point), exc)
            continue
        if limit.is_extended_real and limit.is_finite:
            values[tuple(index)] = float(limit)
            logger.debug("resolved %s at %s to limit %s", expr, tuple(point), limit)


def sample_curve(
    xs: Sequence[float],
    f: FunctionLike,
    *,
    variable: Optional[sp.Symbol] = None,
    resolve_singularities: bool = False,
) -> np.ndarray:
    """Evaluate ``f(x)`` for every sample in *xs*.

    Parameters
    ----------
    xs : sequence of float
        Ordered one-dimensional samples, typically from
        :func:`fieldplot.domain.build_domain`.
    f : callable or sympy.Expr
        Function of one variable. Vectorized NumPy callables are evaluated in
        one call; scalar callables (e.g. ``math.sin``) per sample.
    variable : sympy.Symbol, optional
        Variable of ``f`` when it is a SymPy expression. Defaults to its only
        free symbol.
    resolve_singularities : bool, default=False
        For SymPy expressions, replace non-finite samples by the symbolic limit.

    Returns
    -------
    numpy.ndarray
        Float array with the same length as *xs*.

    Raises
    ------
    TypeError
        If *f* is neither callable nor a SymPy expression.
    ValueError
        If *xs* is not one-dimensional, the expression has the wrong number
        of free symbols, or *f* returns an array that is neither a scalar nor
        the shape of *xs*.
    """
    x_axis = _as_axis(xs, "xs")
    fn, expr, symbols = _compile(f, 1, None if variable is None else (variable,))
    values = _evaluate(fn, (x_axis,), x_axis.shape)
    if resolve_singularities and expr is not None:
        _resolve_singularities(values, expr, symbols, (x_axis,))
    logger.debug("sample_curve %r -> shape %s", getattr(f, "__name__", f), values.shape)
    _report_nonfinite(values, f"curve {getattr(f, '__name__', f)}")
    return values


def sample_field(
    xs: Sequence[float],
    ys: Sequence[float],
    f: FunctionLike,
    *,
    variables: Optional[Sequence[sp.Symbol]] = None,
    resolve_singularities: bool = False,
) -> np.ndarray:
    """Evaluate ``f(x, y)`` on every grid pair of *xs* and *ys*.

    Parameters
    ----------
    xs, ys : sequence of float
        Ordered one-dimensional axis samples.
    f : callable or sympy.Expr
        Function of two variables.
    variables : sequence of sympy.Symbol, optional
        ``(x, y)`` order for SymPy expressions. Defaults to the free symbols
        sorted by name.
    resolve_singularities : bool, default=False
        For SymPy expressions, replace non-finite cells by the symbolic limit.

    Returns
    -------
    numpy.ndarray
        Array of shape ``(len(xs), len(ys))`` with ``out[i, j] = f(xs[i], ys[j])``.

    Examples
    --------
    >>> import numpy as np
    >>> sample_field([0.0, 1.0], [0.0, 2.0, 4.0], lambda x, y: x + y)
    array([[0., 2., 4.],
           [1., 3., 5.]])
    """
    x_axis = _as_axis(xs, "xs")
    y_axis = _as_axis(ys, "ys")
    fn, expr, symbols = _compile(f, 2, variables)
    grid_x, grid_y = np.meshgrid(x_axis, y_axis, indexing="ij")
    values = _evaluate(fn, (grid_x, grid_y), grid_x.shape)
    if resolve_singularities and expr is not None:
        _resolve_singularities(values, expr, symbols, (x_axis, y_axis))
    logger.debug("sample_field %r -> shape %s", getattr(f, "__name__", f), values.shape)
    _report_nonfinite(values, f"field {getattr(f, '__name__', f)}")
    return values


__all__ = [
    "RADIAL_SINC_LIMIT",
    "radial_sinc",
    "radial_sinc_expr",
    "sample_curve",
    "sample_field",
]
