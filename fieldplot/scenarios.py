"""Reference plots: sine/cosine curves and the ``sin(r)/r`` surface.

Each scenario exists in a static flavour (Matplotlib, PNG) and an interactive
one (Plotly, self-contained HTML). Domain parameters are fixed module
constants.

Run all four from the command line with ``python -m fieldplot``.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Union

import numpy as np

from .artifact import persist, render
from .backends import MatplotlibBackend, PlotBackend, PlotlyBackend
from .domain import build_domain
from .sampling import radial_sinc, sample_curve, sample_field
from .traces import LineTrace, PlotLayout, SurfaceTrace, line_trace, surface_trace

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

PathLike = Union[str, Path]

CURVE_DOMAIN = (0.0, 2 * math.pi, 200)
SURFACE_DOMAIN = (-2.0, 2.0, 80)

CURVES_STATIC_FILE = "2d_curves.png"
CURVES_INTERACTIVE_FILE = "2d_interactive.html"
SURFACE_STATIC_FILE = "3d_surface.png"
SURFACE_INTERACTIVE_FILE = "3d_interactive.html"


def curve_traces() -> tuple[LineTrace, LineTrace]:
    """Return the ``sin(x)`` and ``cos(x)`` traces over ``[0, 2π]``."""
    xs = build_domain(*CURVE_DOMAIN)
    return (
        line_trace(xs, sample_curve(xs, np.sin), "sin(x)"),
        line_trace(xs, sample_curve(xs, np.cos), "cos(x)"),
    )


def surface_traces() -> tuple[SurfaceTrace]:
    """Return the ``sin(r)/r`` surface over ``[-2, 2]²``."""
    xs = build_domain(*SURFACE_DOMAIN)
    ys = build_domain(*SURFACE_DOMAIN)
    return (surface_trace(xs, ys, sample_field(xs, ys, radial_sinc), "sin(r)/r"),)


def _emit(traces, layout: PlotLayout, backend: PlotBackend, path: Path, show: bool) -> Path:
    artifact = render(traces, layout, backend=backend)
    if show:
        artifact.display()
    return persist(artifact, path)


def curves_static(directory: PathLike = ".", *, show: bool = False) -> Path:
    """Save the sine/cosine line chart as ``2d_curves.png``."""
    layout = PlotLayout(title="Sine and Cosine", x_label="x", y_label="y")
    return _emit(curve_traces(), layout, MatplotlibBackend(), Path(directory) / CURVES_STATIC_FILE, show)


def curves_interactive(directory: PathLike = ".", *, show: bool = False) -> Path:
    """Save the interactive sine/cosine chart as ``2d_interactive.html``."""
    layout = PlotLayout(title="Interactive Sine & Cosine", x_label="x", y_label="y")
    return _emit(curve_traces(), layout, PlotlyBackend(), Path(directory) / CURVES_INTERACTIVE_FILE, show)


def surface_static(directory: PathLike = ".", *, show: bool = False) -> Path:
    """Save the ``sin(r)/r`` surface as ``3d_surface.png``."""
    layout = PlotLayout(title="3D Surface: sin(r)/r", x_label="x", y_label="y", z_label="z")
    return _emit(surface_traces(), layout, MatplotlibBackend(), Path(directory) / SURFACE_STATIC_FILE, show)


def surface_interactive(directory: PathLike = ".", *, show: bool = False) -> Path:
    """Save the interactive ``sin(r)/r`` surface as ``3d_interactive.html``."""
    layout = PlotLayout(title="Interactive 3D Surface: sin(r)/r", x_label="x", y_label="y", z_label="z")
    return _emit(surface_traces(), layout, PlotlyBackend(), Path(directory) / SURFACE_INTERACTIVE_FILE, show)


def run_all(directory: PathLike = ".", *, show: bool = False) -> list[Path]:
    """Run every scenario and return the written paths in a stable order."""
    written = [
        scenario(directory, show=show)
        for scenario in (curves_static, curves_interactive, surface_static, surface_interactive)
    ]
    logger.info("wrote %d plot files to %s", len(written), Path(directory).resolve())
    return written


__all__ = [
    "CURVE_DOMAIN",
    "SURFACE_DOMAIN",
    "curve_traces",
    "curves_interactive",
    "curves_static",
    "run_all",
    "surface_interactive",
    "surface_static",
    "surface_traces",
]
