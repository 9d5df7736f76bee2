import logging

import plotly.graph_objects as go
import pytest
from optuna.study import StudyDirection
from optuna.trial import TrialState

from study_contour.contour.config import ContourConfig
from study_contour.utils.plotting import (
    axis_type,
    compute_contour,
    contour_layout,
    contour_traces,
    display_contour,
    layout_template,
    plot_contour,
    render_contour,
    reverse_colorscale,
)
from study_contour.utils.trials import StudySnapshot
from conftest import make_trial


class FakeTarget:
    def __init__(self, available=True):
        self.available = available
        self.figures = []

    def is_available(self):
        return self.available

    def react(self, fig):
        self.figures.append(fig)


def test_compute_contour(mixed_snapshot):
    data = compute_contour(mixed_snapshot, 0, "x", "y")
    assert data is not None
    assert not data.x_axis.is_cat
    assert data.y_axis.is_cat
    assert data.direction is StudyDirection.MINIMIZE
    assert data.grid.n_points == 3


def test_compute_contour_objective_out_of_range(mixed_snapshot):
    with pytest.raises(IndexError, match="out of range"):
        compute_contour(mixed_snapshot, 1, "x", "y")


def test_compute_contour_no_data():
    snap = StudySnapshot(
        name="empty",
        directions=(StudyDirection.MINIMIZE,),
        param_names=("x", "y"),
        trials=(make_trial(0, None, state=TrialState.RUNNING, x="1", y="2"),),
    )
    assert compute_contour(snap, 0, "x", "y") is None


def test_compute_contour_unknown_param_is_no_data(mixed_snapshot):
    assert compute_contour(mixed_snapshot, 0, "x", "nope") is None


def test_layout_hints():
    assert reverse_colorscale(StudyDirection.MINIMIZE) is False
    assert reverse_colorscale(StudyDirection.MAXIMIZE) is True
    assert layout_template("dark") == "plotly_dark"
    assert layout_template("light") == "plotly_white"


def test_unknown_mode_warns(caplog):
    with caplog.at_level(logging.WARNING, logger="study_contour.utils.plotting"):
        assert layout_template("sepia") == "plotly_white"
    assert "Unknown display mode" in caplog.text


def test_traces(mixed_snapshot):
    data = compute_contour(mixed_snapshot, 0, "x", "y")
    contour, scatter = contour_traces(data)
    assert isinstance(contour, go.Contour)
    assert contour.colorscale is not None
    assert contour.reversescale is False
    assert contour.connectgaps is True
    assert contour.line.smoothing == pytest.approx(1.3)
    assert contour.contours.coloring == "heatmap"
    assert list(contour.y) == list(data.grid.y_indices)
    assert [list(r) for r in contour.z] == data.grid.z

    assert isinstance(scatter, go.Scatter)
    assert scatter.mode == "markers"
    assert scatter.showlegend is False
    assert list(scatter.x) == [0.5, 1.5, 2.5]
    assert scatter.marker.color == "black"


def test_layout(mixed_snapshot):
    data = compute_contour(mixed_snapshot, 0, "x", "y")
    layout = contour_layout("x", "y", data=data, mode="dark")
    assert "type" not in layout["xaxis"]
    assert layout["yaxis"]["type"] == "category"
    assert layout["xaxis"]["title"]["text"] == "x"
    assert layout["margin"] == dict(l=50, t=0, r=50, b=50)
    assert layout["template"] == "plotly_dark"
    assert axis_type(data.y_axis) == "category"
    assert axis_type(data.x_axis) is None


def test_plot_contour_defaults_to_first_two_params(mixed_snapshot):
    fig = plot_contour(mixed_snapshot)
    assert len(fig.data) == 2
    assert fig.data[0].type == "contour"
    assert fig.data[1].type == "scatter"
    assert fig.layout.xaxis.title.text == "x"
    assert fig.layout.yaxis.title.text == "y"
    assert fig.layout.yaxis.type == "category"
    assert fig.layout.height == 450


def test_plot_contour_maximize_reverses_scale(two_point_trials):
    snap = StudySnapshot(
        name="max",
        directions=(StudyDirection.MINIMIZE, StudyDirection.MAXIMIZE),
        param_names=("x", "y"),
        trials=tuple(make_trial(t.number, (0.0, float(t.number)), x=t.param("x"), y=t.param("y"))
                     for t in two_point_trials),
    )
    assert plot_contour(snap, 0).data[0].reversescale is False
    assert plot_contour(snap, 1).data[0].reversescale is True


def test_plot_contour_without_data_has_no_traces():
    snap = StudySnapshot(name="none", directions=(StudyDirection.MINIMIZE,), param_names=(), trials=())
    fig = plot_contour(snap)
    assert len(fig.data) == 0


def test_plot_contour_custom_config(two_point_trials):
    snap = StudySnapshot(
        name="cfg", directions=(StudyDirection.MINIMIZE,), param_names=("x", "y"), trials=tuple(two_point_trials)
    )
    cfg = ContourConfig(padding_ratio=0.5, colorscale="Viridis", height=300)
    fig = plot_contour(snap, config=cfg)
    assert list(fig.data[0].x) == [0.0, 1.0, 3.0, 4.0]
    assert fig.layout.height == 300


def test_render_contour_skips_unavailable_target(mixed_snapshot):
    target = FakeTarget(available=False)
    assert render_contour(target, mixed_snapshot) is False
    assert target.figures == []


def test_render_contour_draws_on_available_target(mixed_snapshot):
    target = FakeTarget()
    assert render_contour(target, mixed_snapshot, mode="dark") is True
    assert len(target.figures) == 1
    assert len(target.figures[0].data) == 2


def test_display_contour_outside_notebook_is_noop(mixed_snapshot):
    assert display_contour(mixed_snapshot) is False
