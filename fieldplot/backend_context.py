"""Backend context stack and defaults."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

from .backends import PlotBackend, PlotlyBackend

_BACKEND_STACK_LOCAL = threading.local()

_default_backend: Optional[PlotBackend] = None


def _backend_stack() -> list[PlotBackend]:
    """Return a thread-local backend stack."""
    stack = getattr(_BACKEND_STACK_LOCAL, "stack", None)
    if stack is None:
        stack = []
        _BACKEND_STACK_LOCAL.stack = stack
    return stack


def default_backend() -> PlotBackend:
    """Return the process-wide fallback backend (a :class:`PlotlyBackend` unless replaced)."""
    global _default_backend
    if _default_backend is None:
        _default_backend = PlotlyBackend()
    return _default_backend


def set_default_backend(backend: Optional[PlotBackend]) -> None:
    """Replace the process-wide fallback backend. ``None`` restores the Plotly default."""
    global _default_backend
    if backend is not None and not isinstance(backend, PlotBackend):
        raise TypeError(f"Expected a PlotBackend, got {type(backend).__name__}.")
    _default_backend = backend


def current_backend() -> PlotBackend:
    """Return the innermost backend activated with :func:`use_backend`.

    Returns
    -------
    PlotBackend
        The top of the thread-local stack, or :func:`default_backend` when no
        context is active.
    """
    stack = _backend_stack()
    if stack:
        return stack[-1]
    return default_backend()


def _pop_backend(backend: PlotBackend) -> None:
    """Remove a specific backend from the stack if present."""
    stack = _backend_stack()
    for i in range(len(stack) - 1, -1, -1):
        if stack[i] is backend:
            del stack[i]
            break


@contextmanager
def use_backend(backend: PlotBackend) -> Iterator[PlotBackend]:
    """Context manager that temporarily makes *backend* current.

    Parameters
    ----------
    backend : PlotBackend
        Backend used by :func:`fieldplot.artifact.render` calls that do not
        pass ``backend=`` explicitly.

    Yields
    ------
    PlotBackend
        The same backend passed in.
    """
    if not isinstance(backend, PlotBackend):
        raise TypeError(f"Expected a PlotBackend, got {type(backend).__name__}.")
    _backend_stack().append(backend)
    try:
        yield backend
    finally:
        _pop_backend(backend)


__all__ = ["current_backend", "default_backend", "set_default_backend", "use_backend"]
