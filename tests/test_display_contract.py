from __future__ import annotations

import sys
from unittest.mock import patch

import numpy as np

from fieldplot import MatplotlibBackend, PlotlyBackend, build_domain, line_trace, render, sample_curve
from fieldplot.scenarios import curves_interactive


def _traces():
    xs = build_domain(0, 1, 5)
    return [line_trace(xs, sample_curve(xs, np.exp), "exp")]


def test_render_is_display_side_effect_free() -> None:
    module = sys.modules[PlotlyBackend.__module__]
    with patch.object(module, "display") as mocked_display:
        render(_traces(), backend=PlotlyBackend())
        render(_traces(), backend=MatplotlibBackend())

    mocked_display.assert_not_called()


def test_display_hands_native_figure_to_ipython() -> None:
    artifact = render(_traces(), backend=PlotlyBackend())
    module = sys.modules[PlotlyBackend.__module__]

    with patch.object(module, "display") as mocked_display:
        artifact._ipython_display_()

    mocked_display.assert_called_once_with(artifact.figure)
    assert artifact._has_been_displayed is True


def test_scenario_show_previews_before_persisting(tmp_path) -> None:
    module = sys.modules[PlotlyBackend.__module__]
    with patch.object(module, "display") as mocked_display:
        path = curves_interactive(tmp_path, show=True)

    mocked_display.assert_called_once()
    assert path.exists()
