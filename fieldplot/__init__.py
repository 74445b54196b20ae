"""Top-level public API for the ``fieldplot`` package.

This module re-exports the sampling and rendering surface so users can import
from a single namespace, for example:

>>> from fieldplot import build_domain, sample_field, radial_sinc  # doctest: +SKIP

It exposes both the pipeline steps (domain → samples → traces → artifact →
file) and the backend building blocks for custom integrations.
"""

from .artifact import Artifact, ArtifactClosedError, persist, render
from .backend_context import current_backend, default_backend, set_default_backend, use_backend
from .backends import MatplotlibBackend, PlotBackend, PlotlyBackend
from .domain import Domain, InvalidDomainError, build_domain
from .InputConvert import InputConvert
from .numpify import numpify, numpify_cached
from .sampling import RADIAL_SINC_LIMIT, radial_sinc, radial_sinc_expr, sample_curve, sample_field
from .traces import (
    PLOT_STYLE_OPTIONS,
    LineTrace,
    PlotLayout,
    SurfaceTrace,
    line_trace,
    surface_trace,
)
