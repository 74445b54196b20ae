"""Plotting backends: trace constructors and figure composers.

Purpose
-------
A backend turns backend-neutral :mod:`fieldplot.traces` records into a native
figure of one plotting library and knows how to write that figure to an open
file handle. Rendering code only talks to the :class:`PlotBackend` capability
interface, so choosing a library means passing a different backend object,
never switching on a library name.

Concepts and structure
----------------------
- ``line(trace)`` / ``surface(trace)`` are the trace constructors. Their
  return value is opaque to callers and only consumed by ``compose``.
- ``compose(native_traces, layout, dims)`` builds the figure. ``dims`` is
  ``2`` for line charts and ``3`` for surfaces.
- ``write(figure, handle, fmt)`` serializes into an already opened handle;
  the caller owns opening and closing the file.
- ``formats`` lists what ``write`` understands; ``default_format`` is used
  when a path carries no suffix.

Implementations
---------------
- :class:`PlotlyBackend`: interactive ``plotly.graph_objects`` figures, saved
  as self-contained HTML. Static images go through ``Figure.to_image`` and
  need the optional ``kaleido`` engine.
- :class:`MatplotlibBackend`: static figures on the headless Agg canvas,
  saved as PNG (or SVG/PDF/JPEG).
"""

from __future__ import annotations

import logging
from functools import partial
from typing import IO, Any, Callable, Optional, Protocol, Sequence, runtime_checkable

import numpy as np
import plotly.graph_objects as go
from IPython.display import display
from matplotlib import colormaps
from matplotlib.figure import Figure as MplFigure
from mpl_toolkits.mplot3d import Axes3D  # noqa: F401  (registers the "3d" projection)

from .traces import LineTrace, PlotLayout, SurfaceTrace

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

#: Formats written through a text-mode handle; everything else is binary.
TEXT_FORMATS = frozenset({"html", "json"})


@runtime_checkable
class PlotBackend(Protocol):
    """Capability interface implemented by every plotting backend."""

    formats: tuple[str, ...]
    default_format: str

    def line(self, trace: LineTrace) -> Any: ...

    def surface(self, trace: SurfaceTrace) -> Any: ...

    def compose(self, native_traces: Sequence[Any], layout: PlotLayout, dims: int) -> Any: ...

    def write(self, figure: Any, handle: IO[Any], fmt: str) -> None: ...

    def display(self, figure: Any) -> None: ...

    def close(self, figure: Any) -> None: ...


# =============================================================================
# SECTION: Plotly [id: PlotlyBackend]
# =============================================================================

class PlotlyBackend:
    """Backend producing ``plotly.graph_objects.Figure`` objects.

    Parameters
    ----------
    include_plotlyjs : bool or str, default=True
        Forwarded to :meth:`plotly.graph_objects.Figure.write_html`. ``True``
        embeds plotly.js so the HTML file works offline.
    template : str or None, optional
        Plotly template name (e.g. ``"plotly_white"``).
    width, height : int or None, optional
        Figure size in pixels; also used for static image export.
    """

    formats = ("html", "json", "png", "jpeg", "webp", "svg", "pdf")
    default_format = "html"

    def __init__(
        self,
        *,
        include_plotlyjs: bool | str = True,
        template: Optional[str] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> None:
        self.include_plotlyjs = include_plotlyjs
        self.template = template
        self.width = width
        self.height = height

    def __repr__(self) -> str:
        return f"PlotlyBackend(template={self.template!r})"

    def line(self, trace: LineTrace) -> go.Scatter:
        line: dict[str, Any] = {}
        if trace.color is not None:
            line["color"] = trace.color
        if trace.thickness is not None:
            line["width"] = trace.thickness
        if trace.dash is not None:
            line["dash"] = trace.dash
        return go.Scatter(
            x=trace.x,
            y=trace.y,
            mode="lines",
            name=trace.name,
            line=line or None,
            opacity=trace.opacity,
        )

    def surface(self, trace: SurfaceTrace) -> go.Surface:
        # Plotly indexes surface z as z[row=y][col=x].
        return go.Surface(
            x=trace.x,
            y=trace.y,
            z=np.transpose(trace.z),
            name=trace.name,
            colorscale=trace.colorscale,
            opacity=trace.opacity,
            showscale=trace.show_scale,
        )

    def compose(self, native_traces: Sequence[Any], layout: PlotLayout, dims: int) -> go.Figure:
        layout_kwargs: dict[str, Any] = {
            "title": {"text": layout.title},
            "showlegend": layout.show_legend,
            "template": self.template,
            "width": self.width,
            "height": self.height,
        }
        if dims == 3:
            layout_kwargs["scene"] = {
                "xaxis": {"title": {"text": layout.x_label}},
                "yaxis": {"title": {"text": layout.y_label}},
                "zaxis": {"title": {"text": layout.z_label}},
            }
        else:
            layout_kwargs["xaxis"] = {"title": {"text": layout.x_label}}
            layout_kwargs["yaxis"] = {"title": {"text": layout.y_label}}
        return go.Figure(data=list(native_traces), layout=go.Layout(**layout_kwargs))

    def write(self, figure: go.Figure, handle: IO[Any], fmt: str) -> None:
        if fmt == "html":
            figure.write_html(handle, include_plotlyjs=self.include_plotlyjs, full_html=True)
        elif fmt == "json":
            handle.write(figure.to_json())
        elif fmt in self.formats:
            # Static export needs the optional kaleido engine.
            handle.write(figure.to_image(format=fmt, width=self.width, height=self.height))
        else:
            raise ValueError(f"PlotlyBackend cannot write format {fmt!r}; supported: {self.formats}.")

    def display(self, figure: go.Figure) -> None:
        display(figure)

    def close(self, figure: go.Figure) -> None:
        figure.data = ()


# =============================================================================
# SECTION: Matplotlib [id: MatplotlibBackend]
# =============================================================================

_MPL_DASHES: dict[str, Any] = {
    "solid": "-",
    "dot": ":",
    "dash": "--",
    "longdash": (0, (10, 4)),
    "dashdot": "-.",
    "longdashdot": (0, (10, 4, 2, 4)),
}

DrawFn = Callable[[Any], Any]


class MatplotlibBackend:
    """Backend producing headless ``matplotlib.figure.Figure`` objects.

    Figures are created without ``pyplot`` so nothing is registered with a GUI
    event loop and rendering works on machines without a display.

    Parameters
    ----------
    figsize : tuple[float, float], default=(6.4, 4.8)
        Figure size in inches.
    dpi : int, default=100
        Resolution used by :meth:`write` for raster formats.
    cmap : str, default="viridis"
        Colormap for surfaces without an explicit ``colorscale``.
    """

    formats = ("png", "svg", "pdf", "jpeg")
    default_format = "png"

    def __init__(
        self,
        *,
        figsize: tuple[float, float] = (6.4, 4.8),
        dpi: int = 100,
        cmap: str = "viridis",
    ) -> None:
        self.figsize = figsize
        self.dpi = dpi
        self.cmap = cmap

    def __repr__(self) -> str:
        return f"MatplotlibBackend(figsize={self.figsize!r}, dpi={self.dpi!r})"

    def line(self, trace: LineTrace) -> DrawFn:
        return partial(self._draw_line, trace)

    def surface(self, trace: SurfaceTrace) -> DrawFn:
        return partial(self._draw_surface, trace)

    def _draw_line(self, trace: LineTrace, ax: Any) -> Any:
        (artist,) = ax.plot(
            trace.x,
            trace.y,
            label=trace.name or None,
            color=trace.color,
            linewidth=trace.thickness,
            linestyle=_MPL_DASHES.get(trace.dash or "solid"),
            alpha=trace.opacity,
        )
        return artist

    def _draw_surface(self, trace: SurfaceTrace, ax: Any) -> Any:
        grid_x, grid_y = np.meshgrid(trace.x, trace.y, indexing="ij")
        artist = ax.plot_surface(
            grid_x,
            grid_y,
            trace.z,
            cmap=self._resolve_cmap(trace.colorscale),
            alpha=trace.opacity,
            linewidth=0,
            antialiased=True,
        )
        if trace.show_scale:
            ax.figure.colorbar(artist, ax=ax, shrink=0.6, pad=0.1)
        return artist

    def _resolve_cmap(self, colorscale: Optional[str]) -> str:
        if colorscale is None:
            return self.cmap
        # Plotly scale names are capitalized ("Viridis"); Matplotlib's are not.
        for candidate in (colorscale, colorscale.lower()):
            if candidate in colormaps:
                return candidate
        logger.debug("unknown colormap %r; using %r", colorscale, self.cmap)
        return self.cmap

    def compose(self, native_traces: Sequence[DrawFn], layout: PlotLayout, dims: int) -> MplFigure:
        figure = MplFigure(figsize=self.figsize)
        if dims == 3:
            ax = figure.add_subplot(projection="3d")
            ax.set_zlabel(layout.z_label)
        else:
            ax = figure.add_subplot()
        artists = [draw(ax) for draw in native_traces]
        ax.set_title(layout.title)
        ax.set_xlabel(layout.x_label)
        ax.set_ylabel(layout.y_label)
        has_labels = any(artist.get_label() and not artist.get_label().startswith("_") for artist in artists)
        show_legend = layout.show_legend if layout.show_legend is not None else (dims == 2 and has_labels)
        if show_legend:
            ax.legend()
        return figure

    def write(self, figure: MplFigure, handle: IO[Any], fmt: str) -> None:
        if fmt not in self.formats:
            raise ValueError(f"MatplotlibBackend cannot write format {fmt!r}; supported: {self.formats}.")
        figure.savefig(handle, format=fmt, dpi=self.dpi)

    def display(self, figure: MplFigure) -> None:
        display(figure)

    def close(self, figure: MplFigure) -> None:
        figure.clear()


__all__ = ["MatplotlibBackend", "PlotBackend", "PlotlyBackend", "TEXT_FORMATS"]
