"""
numpify: Compile SymPy expressions to NumPy-callable Python functions
====================================================================

Purpose
-------
Turn a SymPy expression into a callable Python function that evaluates using NumPy,
so symbolic functions can be sampled over a domain or a grid exactly like plain
vectorized callables.

- explicit argument order,
- fast vectorized evaluation via NumPy broadcasting,
- constants broadcast to the shape of the arguments,
- and inspectable generated source.

Public API
----------
- :func:`numpify`
- :func:`numpify_cached`
- :func:`ordered_symbols`

Examples
--------
>>> import numpy as np
>>> import sympy as sp
>>> from fieldplot.numpify import numpify
>>> x = sp.Symbol("x")

Constant compiled with broadcasting:
>>> f = numpify(5, args=x)
>>> f(np.array([1, 2, 3]))
array([5., 5., 5.])

Symbol binding (treat `a` as an injected constant):
>>> a = sp.Symbol("a")
>>> g = numpify(a * x, args=x, bindings={a: 2.0})
>>> g(np.array([1, 2, 3]))
array([2., 4., 6.])
"""

from __future__ import annotations

import logging
import textwrap
from functools import lru_cache
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Union, cast

import numpy as np
import sympy as sp
from sympy.printing.numpy import NumPyPrinter

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


__all__ = ["numpify", "numpify_cached", "ordered_symbols"]


ArgsSpec = Optional[Union[sp.Symbol, Iterable[sp.Symbol]]]


def numpify(
    expr: Any,
    *,
    args: ArgsSpec = None,
    bindings: Optional[Mapping[sp.Symbol, Any]] = None,
) -> Callable[..., Any]:
    """Compile a SymPy expression into a NumPy-evaluable Python function.

    Parameters
    ----------
    expr:
        A SymPy expression or anything convertible via :func:`sympy.sympify`.
    args:
        Symbols treated as *positional arguments* of the compiled function.

        - If None (default), uses all free symbols of ``expr`` sorted by name.
        - If a single Symbol, that symbol is the only argument.
        - If an iterable, argument order is preserved.
    bindings:
        Optional constant values for symbols that are not arguments, injected by
        name into the generated function body. Example: ``{a: 2.0}``.

    Returns
    -------
    Callable[..., Any]
        A generated function. The function includes its generated source in ``__doc__``.

    Raises
    ------
    TypeError
        If ``expr`` is not SymPy-compatible or ``args`` is not a Symbol or an
        iterable of Symbols.
    ValueError
        If ``expr`` contains unbound symbols, or bindings overlap with ``args``.

    Notes
    -----
    This function uses ``exec`` to define the generated function. Avoid calling it on
    untrusted expressions.
    """
    try:
        expr_sym = sp.sympify(expr)
    except Exception as e:
        raise TypeError(f"numpify expects a SymPy-compatible expression, got {type(expr)}") from e
    if not isinstance(expr_sym, sp.Basic):
        raise TypeError(f"numpify expects a SymPy expression, got {type(expr_sym)}")
    expr = cast(sp.Basic, expr_sym)

    args_tuple = ordered_symbols(expr, args)

    sym_bindings: Dict[str, Any] = {}
    for key, value in (bindings or {}).items():
        if not isinstance(key, sp.Symbol):
            raise TypeError(f"bindings keys must be SymPy Symbols, got {type(key)}")
        sym_bindings[key.name] = value

    free_names = {s.name for s in expr.free_symbols}
    arg_names_set = {a.name for a in args_tuple}
    missing_names = free_names - arg_names_set - set(sym_bindings.keys())
    if missing_names:
        missing_str = ", ".join(sorted(missing_names))
        args_str = ", ".join(a.name for a in args_tuple)
        raise ValueError(
            "Expression contains unbound symbols: "
            f"{missing_str}. Provide them in args=({args_str}) or bind via bindings={{symbol: value}}."
        )

    overlap = arg_names_set & set(sym_bindings.keys())
    if overlap:
        raise ValueError(
            "Symbol bindings overlap with args (would overwrite argument values): "
            + ", ".join(sorted(overlap))
        )

    printer = NumPyPrinter(settings={"user_functions": {}})

    arg_names = [a.name for a in args_tuple]
    expr_code = printer.doprint(expr)
    is_constant = not (expr.free_symbols & set(args_tuple))

    lines: list[str] = []
    lines.append("def _generated(" + ", ".join(arg_names) + "):")
    for nm in arg_names:
        lines.append(f"    {nm} = numpy.asarray({nm}, dtype=float)")
    for nm in sorted(sym_bindings.keys()):
        lines.append(f"    {nm} = _sym_bindings[{nm!r}]")

    if is_constant and arg_names:
        lines.append(f"    _shape = numpy.broadcast({', '.join(arg_names)}).shape")
        lines.append(f"    return ({expr_code}) + numpy.zeros(_shape)")
    else:
        lines.append(f"    return {expr_code}")

    src = "\n".join(lines)

    glb: Dict[str, Any] = {"numpy": np, "_sym_bindings": sym_bindings}
    loc: Dict[str, Any] = {}
    exec(src, glb, loc)
    fn = cast(Callable[..., Any], loc["_generated"])

    fn.__doc__ = textwrap.dedent(
        f"""
        Auto-generated NumPy function from SymPy expression.

        expr: {repr(expr)}
        args: {arg_names}

        Source:
        {src}
        """
    ).strip()

    logger.debug("numpify compiled %r with args=%s", expr, arg_names)
    return fn


@lru_cache(maxsize=128)
def _numpify_cached(expr: sp.Basic, args: Tuple[sp.Symbol, ...]) -> Callable[..., Any]:
    return numpify(expr, args=args)


def numpify_cached(expr: Any, *, args: ArgsSpec = None) -> Callable[..., Any]:
    """Cached variant of :func:`numpify` for binding-free expressions.

    SymPy expressions are hashable, so repeated sampling of the same expression
    (for example a static and an interactive rendering of one field) compiles once.
    """
    expr_sym = sp.sympify(expr)
    return _numpify_cached(expr_sym, ordered_symbols(expr_sym, args))


def ordered_symbols(expr: sp.Basic, args: ArgsSpec = None) -> Tuple[sp.Symbol, ...]:
    """Normalize args into a tuple of SymPy Symbols."""
    if args is None:
        return tuple(sorted(expr.free_symbols, key=lambda s: s.name))

    if isinstance(args, sp.Symbol):
        return (args,)

    try:
        args_tuple = tuple(args)
    except TypeError as e:
        raise TypeError("args must be a SymPy Symbol or an iterable of SymPy Symbols") from e

    for a in args_tuple:
        if not isinstance(a, sp.Symbol):
            raise TypeError(f"args must contain only SymPy Symbols, got {type(a)}")
    if len({a.name for a in args_tuple}) != len(args_tuple):
        raise ValueError(f"args must not repeat symbol names, got {args_tuple}")
    return cast(Tuple[sp.Symbol, ...], args_tuple)
