# === SECTION: InputConvert [id: InputConvert]===
from __future__ import annotations

import math
from typing import Any, Type, TypeVar

import sympy as sp

T = TypeVar("T", int, float)


def InputConvert(obj: Any, dest_type: Type[T] = float, truncate: bool = False) -> T:
    """
    Convert a domain bound or sample count `obj` to `dest_type`.

    Supported destination types:
    - float (strictly real, finite)
    - int

    Rules:
    - Booleans are rejected; ``True`` is not a sample count.
    - If `obj` is a number (Python or NumPy scalar): cast via float(obj).
    - If `obj` is a string:
        1) try float(s)
        2) else parse as a SymPy expression (e.g. ``"2*pi"``), then evaluate.
    - If `obj` is a SymPy expression: evaluate it numerically.

    Truncation Rules (`truncate`):
    - When converting Float -> Int:
        - If `truncate=True`: Truncate decimal part (e.g., 3.9 -> 3).
        - If `truncate=False`: Require exact integer (e.g., 3.0 -> 3, 3.1 -> Error).

    Raises
    ------
    NotImplementedError
        If dest_type is unsupported.
    ValueError
        If conversion fails, the value is complex or not finite, or it
        violates truncation rules.
    """
    if dest_type not in (float, int):
        raise NotImplementedError(
            f"Unsupported destination type: {dest_type!r}. Only float and int are supported."
        )

    def _coerce_real_value(x: float) -> T:
        if not math.isfinite(x):
            raise ValueError(f"Could not convert {obj!r} to {dest_type.__name__}: value is not finite.")

        if dest_type is float:
            return float(x)  # type: ignore[return-value]

        if not float(x).is_integer():
            if not truncate:
                raise ValueError(
                    f"Could not convert {obj!r} to int: value is not an exact integer."
                )
        return int(x)  # type: ignore[return-value]

    if isinstance(obj, bool):
        raise ValueError(f"Could not convert boolean {obj!r} to {dest_type.__name__}.")

    # Exact integers skip the float round trip so large counts stay exact.
    if dest_type is int and isinstance(obj, int):
        return obj  # type: ignore[return-value]

    if isinstance(obj, str):
        s = obj.strip()
        if s == "":
            raise ValueError(f"Cannot convert empty string to {dest_type.__name__}.")
        try:
            value = float(s)
        except ValueError:
            pass
        else:
            return _coerce_real_value(value)
        try:
            obj_sym = sp.sympify(s)
        except Exception as e:
            raise ValueError(
                f"Could not convert {obj!r} to {dest_type.__name__} (neither directly nor via SymPy)."
            ) from e
        return _coerce_sympy_value(obj, obj_sym, _coerce_real_value)

    if isinstance(obj, sp.Basic):
        return _coerce_sympy_value(obj, obj, _coerce_real_value)

    try:
        value = float(obj)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Could not convert {obj!r} to {dest_type.__name__}.") from e
    return _coerce_real_value(value)


def _coerce_sympy_value(original: Any, expr: Any, coerce: Any) -> Any:
    """Evaluate a SymPy object numerically and hand the real value to *coerce*."""
    if not isinstance(expr, sp.Basic) or expr.free_symbols:
        raise ValueError(f"Could not convert {original!r}: expression is not a closed numeric value.")
    try:
        val = complex(sp.N(expr))
    except (TypeError, ValueError) as e:
        raise ValueError(f"Could not convert {original!r} to a number.") from e
    if val.imag != 0:
        raise ValueError(f"Could not convert non-real {original!r}: imaginary part is non-zero.")
    return coerce(val.real)

# === END OF SECTION: InputConvert [id: InputConvert]===
