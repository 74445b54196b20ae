"""Backend-neutral trace and layout specifications.

A trace is one renderable data series: a line (:class:`LineTrace`) or a
surface (:class:`SurfaceTrace`). Traces and :class:`PlotLayout` are plain
immutable records; turning them into library objects is the job of a
:class:`fieldplot.backends.PlotBackend`.

Style keywords and their aliases are resolved here so every backend sees the
same canonical values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

import numpy as np

NumberLike = Union[int, float]

PLOT_STYLE_OPTIONS: dict[str, str] = {
    "color": "Line color. Accepts CSS-like names (e.g., red), hex (#RRGGBB), or rgb()/rgba() strings.",
    "thickness": "Line width in pixels. Larger values draw thicker lines.",
    "width": "Alias for thickness.",
    "dash": "Line pattern. Supported values: solid, dot, dash, longdash, dashdot, longdashdot.",
    "opacity": "Overall trace opacity from 0.0 (fully transparent) to 1.0 (fully opaque).",
    "alpha": "Alias for opacity.",
    "colorscale": "Surface colour scale name (e.g., Viridis). Surfaces only.",
}

DASH_STYLES = ("solid", "dot", "dash", "longdash", "dashdot", "longdashdot")


def resolve_style_aliases(
    *,
    thickness: NumberLike | None,
    width: NumberLike | None,
    opacity: NumberLike | None,
    alpha: NumberLike | None,
) -> tuple[NumberLike | None, NumberLike | None]:
    """Resolve user-provided style aliases into canonical values.

    Raises
    ------
    ValueError
        If alias and canonical values are both provided with different values.
    """
    if width is not None:
        if thickness is not None and width != thickness:
            raise ValueError(
                "line_trace() received both thickness= and width= with different values; use only one."
            )
        thickness = width if thickness is None else thickness

    if alpha is not None:
        if opacity is not None and alpha != opacity:
            raise ValueError(
                "line_trace() received both opacity= and alpha= with different values; use only one."
            )
        opacity = alpha if opacity is None else opacity

    return thickness, opacity


def _readonly(values: Any, ndim: int, role: str) -> np.ndarray:
    array = np.array(values, dtype=float)
    if array.ndim != ndim:
        raise ValueError(f"{role} must be {ndim}-dimensional, got shape {array.shape}.")
    array.flags.writeable = False
    return array


def _check_opacity(opacity: Optional[float]) -> None:
    if opacity is not None and not 0.0 <= opacity <= 1.0:
        raise ValueError(f"opacity must lie in [0, 1], got {opacity!r}.")


@dataclass(frozen=True, eq=False)
class LineTrace:
    """Immutable record of one sampled curve.

    Parameters
    ----------
    x : numpy.ndarray
        Sample positions (read-only copy).
    y : numpy.ndarray
        Sampled values, same length as ``x`` (read-only copy).
    name : str
        Legend label.
    color : str or None
        Line color.
    thickness : float or None
        Line width in pixels.
    dash : str or None
        Line dash pattern, one of :data:`DASH_STYLES`.
    opacity : float or None
        Trace opacity from 0.0 to 1.0.
    """

    x: np.ndarray
    y: np.ndarray
    name: str = ""
    color: Optional[str] = None
    thickness: Optional[float] = None
    dash: Optional[str] = None
    opacity: Optional[float] = None

    dims = 2

    def __post_init__(self) -> None:
        x = _readonly(self.x, 1, "x")
        y = _readonly(self.y, 1, "y")
        if x.shape != y.shape:
            raise ValueError(f"x and y must have the same length, got {x.shape[0]} and {y.shape[0]}.")
        if self.dash is not None and self.dash not in DASH_STYLES:
            raise ValueError(f"dash must be one of {DASH_STYLES}, got {self.dash!r}.")
        if self.thickness is not None and self.thickness <= 0:
            raise ValueError(f"thickness must be positive, got {self.thickness!r}.")
        _check_opacity(self.opacity)
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)

    def __repr__(self) -> str:
        return f"LineTrace(name={self.name!r}, samples={self.x.shape[0]})"


@dataclass(frozen=True, eq=False)
class SurfaceTrace:
    """Immutable record of one sampled field.

    ``z[i, j]`` is the value at ``(x[i], y[j])``, so ``z.shape`` must equal
    ``(len(x), len(y))``.
    """

    x: np.ndarray
    y: np.ndarray
    z: np.ndarray
    name: str = ""
    colorscale: Optional[str] = None
    opacity: Optional[float] = None
    show_scale: bool = True

    dims = 3

    def __post_init__(self) -> None:
        x = _readonly(self.x, 1, "x")
        y = _readonly(self.y, 1, "y")
        z = _readonly(self.z, 2, "z")
        if z.shape != (x.shape[0], y.shape[0]):
            raise ValueError(
                f"z must have shape (len(x), len(y)) = {(x.shape[0], y.shape[0])}, got {z.shape}."
            )
        _check_opacity(self.opacity)
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)
        object.__setattr__(self, "z", z)

    def __repr__(self) -> str:
        return f"SurfaceTrace(name={self.name!r}, shape={self.z.shape})"


Trace = Union[LineTrace, SurfaceTrace]


@dataclass(frozen=True)
class PlotLayout:
    """Title and axis metadata shared by all traces of one plot."""

    title: str = ""
    x_label: str = "x"
    y_label: str = "y"
    z_label: str = "z"
    show_legend: Optional[bool] = None


def line_trace(
    x: Sequence[float],
    y: Sequence[float],
    name: str = "",
    *,
    color: Optional[str] = None,
    thickness: Optional[NumberLike] = None,
    width: Optional[NumberLike] = None,
    dash: Optional[str] = None,
    opacity: Optional[NumberLike] = None,
    alpha: Optional[NumberLike] = None,
) -> LineTrace:
    """Build a :class:`LineTrace`, resolving ``width``/``alpha`` aliases.

    See :data:`PLOT_STYLE_OPTIONS` for the keyword meanings.
    """
    thickness, opacity = resolve_style_aliases(
        thickness=thickness, width=width, opacity=opacity, alpha=alpha
    )
    return LineTrace(
        x=x,
        y=y,
        name=name,
        color=color,
        thickness=None if thickness is None else float(thickness),
        dash=dash,
        opacity=None if opacity is None else float(opacity),
    )


def surface_trace(
    x: Sequence[float],
    y: Sequence[float],
    z: Any,
    name: str = "",
    *,
    colorscale: Optional[str] = None,
    opacity: Optional[NumberLike] = None,
    show_scale: bool = True,
) -> SurfaceTrace:
    """Build a :class:`SurfaceTrace` from axis samples and a sampled field."""
    return SurfaceTrace(
        x=x,
        y=y,
        z=z,
        name=name,
        colorscale=colorscale,
        opacity=None if opacity is None else float(opacity),
        show_scale=show_scale,
    )


__all__ = [
    "DASH_STYLES",
    "PLOT_STYLE_OPTIONS",
    "LineTrace",
    "PlotLayout",
    "SurfaceTrace",
    "Trace",
    "line_trace",
    "resolve_style_aliases",
    "surface_trace",
]
