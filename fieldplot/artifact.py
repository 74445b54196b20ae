"""Rendering traces into artifacts and persisting them to disk.

Purpose
-------
:func:`render` composes one or more traces with shared title/axis metadata
into an :class:`Artifact` through a :class:`~fieldplot.backends.PlotBackend`.
:func:`persist` writes the artifact to a file and closes it.

Concepts and structure
----------------------
An artifact has a short lifecycle: create (``render``) → optional preview
(``display``) → persist → closed. Once closed, the native figure is released
and any further use raises :class:`ArtifactClosedError`.

Important gotchas
-----------------
- The output format comes from ``fmt=``, else the path suffix, else the
  backend's ``default_format`` (the suffix is then appended).
- Unsupported formats fail before any file is created. Errors from the write
  itself propagate unchanged, leave the artifact open and leave no partial
  file behind; an existing file at the target is only replaced on success.

Examples
--------
>>> from fieldplot import build_domain, line_trace, render, persist, sample_curve
>>> import numpy as np
>>> xs = build_domain(0, "2*pi", 200)
>>> artifact = render([line_trace(xs, sample_curve(xs, np.sin), "sin(x)")])  # doctest: +SKIP
>>> persist(artifact, "sine.html")  # doctest: +SKIP
PosixPath('sine.html')
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from .backend_context import current_backend
from .backends import TEXT_FORMATS, PlotBackend
from .traces import LineTrace, PlotLayout, SurfaceTrace, Trace

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

PathLike = Union[str, "os.PathLike[str]"]

_FORMAT_ALIASES = {"htm": "html", "jpg": "jpeg"}


class ArtifactClosedError(RuntimeError):
    """Raised when a persisted (closed) artifact is used again."""


class Artifact:
    """A rendered plot owned by one backend.

    Parameters
    ----------
    figure : Any
        Native figure produced by ``backend.compose``.
    backend : PlotBackend
        Backend that built ``figure`` and knows how to write it.
    traces : tuple[Trace, ...]
        Traces the figure was built from.
    layout : PlotLayout
        Shared title/axis metadata.

    Notes
    -----
    End users typically call :func:`render` instead of instantiating
    ``Artifact`` directly.
    """

    def __init__(
        self,
        figure: Any,
        backend: PlotBackend,
        *,
        traces: tuple[Trace, ...],
        layout: PlotLayout,
    ) -> None:
        self._figure = figure
        self._backend = backend
        self._traces = traces
        self._layout = layout
        self._closed = False
        self._has_been_displayed = False

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"Artifact(backend={self._backend!r}, traces={len(self._traces)}, {state})"

    @property
    def figure(self) -> Any:
        """Return the backend-native figure object."""
        self._require_open()
        return self._figure

    @property
    def backend(self) -> PlotBackend:
        return self._backend

    @property
    def traces(self) -> tuple[Trace, ...]:
        return self._traces

    @property
    def layout(self) -> PlotLayout:
        return self._layout

    @property
    def dims(self) -> int:
        """``2`` for line charts, ``3`` for surfaces."""
        return self._traces[0].dims

    @property
    def closed(self) -> bool:
        return self._closed

    def _require_open(self) -> None:
        if self._closed:
            raise ArtifactClosedError(
                "Artifact has already been persisted and closed; call render() again for a new one."
            )

    def display(self) -> None:
        """Preview the artifact (inline in Jupyter, otherwise via the backend's display hook)."""
        self._require_open()
        self._backend.display(self._figure)
        self._has_been_displayed = True

    def _ipython_display_(self, **kwargs: Any) -> None:
        """
        Special method called by IPython to display the object.

        Parameters
        ----------
        **kwargs : Any
            Display keyword arguments forwarded by IPython (unused).
        """
        self.display()

    def save(self, path: PathLike, *, fmt: Optional[str] = None) -> Path:
        """Persist this artifact; see :func:`persist`."""
        return persist(self, path, fmt=fmt)

    def close(self) -> None:
        """Release the native figure. Closing twice is a no-op."""
        if self._closed:
            return
        self._backend.close(self._figure)
        self._closed = True

    def __enter__(self) -> "Artifact":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def render(
    traces: Union[Trace, Iterable[Trace]],
    layout: Optional[PlotLayout] = None,
    *,
    backend: Optional[PlotBackend] = None,
) -> Artifact:
    """Compose traces and layout metadata into an :class:`Artifact`.

    Parameters
    ----------
    traces : Trace or iterable of Trace
        One or more :class:`LineTrace` objects, or one or more
        :class:`SurfaceTrace` objects. Line and surface traces cannot be mixed.
    layout : PlotLayout, optional
        Title and axis labels. Defaults to ``PlotLayout()``.
    backend : PlotBackend, optional
        Backend to render with. Defaults to
        :func:`fieldplot.backend_context.current_backend`.

    Returns
    -------
    Artifact

    Raises
    ------
    TypeError
        If an element of *traces* is not a trace record.
    ValueError
        If *traces* is empty or mixes line and surface traces.
    """
    if isinstance(traces, (LineTrace, SurfaceTrace)):
        traces = (traces,)
    trace_tuple = tuple(traces)
    if not trace_tuple:
        raise ValueError("render() needs at least one trace.")
    for trace in trace_tuple:
        if not isinstance(trace, (LineTrace, SurfaceTrace)):
            raise TypeError(f"render() expects LineTrace or SurfaceTrace, got {type(trace).__name__}.")
    dims = {trace.dims for trace in trace_tuple}
    if len(dims) != 1:
        raise ValueError("render() cannot mix line and surface traces in one plot.")

    layout = layout if layout is not None else PlotLayout()
    backend = backend if backend is not None else current_backend()

    native = [
        backend.surface(trace) if isinstance(trace, SurfaceTrace) else backend.line(trace)
        for trace in trace_tuple
    ]
    figure = backend.compose(native, layout, dims.pop())
    logger.info("render(title=%r) traces=%d backend=%r", layout.title, len(trace_tuple), backend)
    return Artifact(figure, backend, traces=trace_tuple, layout=layout)


def _resolve_format(backend: PlotBackend, path: Path, fmt: Optional[str]) -> str:
    """Pick the output format from *fmt*, the path suffix, or the backend default."""
    if fmt is None:
        fmt = path.suffix[1:] if path.suffix else backend.default_format
    fmt = fmt.lower().lstrip(".")
    fmt = _FORMAT_ALIASES.get(fmt, fmt)
    if fmt not in backend.formats:
        raise ValueError(
            f"{type(backend).__name__} cannot write {fmt!r} files; supported formats: {', '.join(backend.formats)}."
        )
    return fmt


def persist(artifact: Artifact, path: PathLike, *, fmt: Optional[str] = None) -> Path:
    """Write *artifact* to *path* and close it.

    Parameters
    ----------
    artifact : Artifact
        Open artifact returned by :func:`render`.
    path : str or os.PathLike
        Destination file. The parent directory must exist. Without a suffix,
        the backend's default format is used and its suffix appended.
    fmt : str, optional
        Explicit output format, overriding the path suffix.

    Returns
    -------
    pathlib.Path
        The path actually written.

    Raises
    ------
    ArtifactClosedError
        If the artifact was already persisted.
    ValueError
        If the format is not supported by the artifact's backend.
    OSError
        If the file cannot be written.
    """
    artifact._require_open()
    target = Path(path)
    fmt = _resolve_format(artifact.backend, target, fmt)
    if not target.suffix:
        target = target.with_suffix(f".{fmt}")

    # The target only appears once the backend has written it completely.
    partial = target.with_name(f".{target.name}.part")
    try:
        if fmt in TEXT_FORMATS:
            with open(partial, "w", encoding="utf-8") as handle:
                artifact.backend.write(artifact.figure, handle, fmt)
        else:
            with open(partial, "wb") as handle:
                artifact.backend.write(artifact.figure, handle, fmt)
        os.replace(partial, target)
    except BaseException:
        partial.unlink(missing_ok=True)
        raise

    artifact.close()
    logger.info("persisted %s (%s)", target, fmt)
    return target


__all__ = ["Artifact", "ArtifactClosedError", "persist", "render"]
