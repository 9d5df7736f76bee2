from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

import plotly.graph_objects as go
from IPython import get_ipython
from IPython.display import HTML, display
from optuna.study import StudyDirection
from plotly.basedatatypes import BaseTraceType

import logging
_LOGGER = logging.getLogger(__name__)

from ..contour.axis import AxisInfo, get_axis_info
from ..contour.config import ContourConfig
from ..contour.grid import ContourGrid, build_grid, filter_trials
from .trials import StudySnapshot, default_axes

# -------------------------------------------------------------------------------
# CONTOUR DATA
# -------------------------------------------------------------------------------

@dataclass(frozen=True)
class ContourData:
    """Everything the figure needs: both axes, the grid and the objective direction."""
    x_axis: AxisInfo
    y_axis: AxisInfo
    grid: ContourGrid
    direction: StudyDirection
    objective_id: int


def compute_contour(
    snapshot: StudySnapshot,
    objective_id: int,
    x_param: str,
    y_param: str,
    *,
    config: Optional[ContourConfig] = None,
) -> Optional[ContourData]:
    """
    Classify both axes over *all* trials, then place the eligible ones on the grid.

    Returns None when no trial can be drawn (no eligible trial, or none of them
    reports both parameters).
    """
    if not (0 <= objective_id < snapshot.n_objectives):
        raise IndexError(
            f"objective_id {objective_id} out of range; study has {snapshot.n_objectives} objective(s)."
        )
    config = config or ContourConfig()
    trials = snapshot.trials

    eligible = filter_trials(trials, objective_id)
    if not eligible:
        _LOGGER.info("No complete trial with a finite value for objective %d; nothing to draw.", objective_id)
        return None

    x_axis = get_axis_info(trials, x_param, padding_ratio=config.padding_ratio)
    y_axis = get_axis_info(trials, y_param, padding_ratio=config.padding_ratio)
    grid = build_grid(x_axis, y_axis, eligible, objective_id)
    if grid is None or grid.n_points == 0:
        _LOGGER.info("No eligible trial reports both '%s' and '%s'; nothing to draw.", x_param, y_param)
        return None

    return ContourData(
        x_axis=x_axis,
        y_axis=y_axis,
        grid=grid,
        direction=snapshot.directions[objective_id],
        objective_id=objective_id,
    )


# -------------------------------------------------------------------------------
# LAYOUT HINTS
# -------------------------------------------------------------------------------

def axis_type(axis: AxisInfo) -> Optional[str]:
    """'category' for categorical axes; None lets plotly pick (linear)."""
    return "category" if axis.is_cat else None


def reverse_colorscale(direction: StudyDirection) -> bool:
    return direction != StudyDirection.MINIMIZE


def layout_template(mode: str) -> str:
    if mode == "dark":
        return "plotly_dark"
    if mode != "light":
        _LOGGER.warning("Unknown display mode '%s'; using the light template.", mode)
    return "plotly_white"


# -------------------------------------------------------------------------------
# FIGURE
# -------------------------------------------------------------------------------

def contour_traces(data: ContourData, config: Optional[ContourConfig] = None) -> List[BaseTraceType]:
    """The contour trace over the grid, plus the scatter overlay of observed points."""
    config = config or ContourConfig()
    grid = data.grid
    return [
        go.Contour(
            x=list(grid.x_indices),
            y=list(grid.y_indices),
            z=grid.z,
            colorscale=config.colorscale,
            connectgaps=config.connectgaps,
            hoverinfo="none",
            line=dict(smoothing=config.line_smoothing),
            reversescale=reverse_colorscale(data.direction),
            contours=dict(coloring="heatmap"),
        ),
        go.Scatter(
            x=list(grid.x_values),
            y=list(grid.y_values),
            marker=dict(
                line=dict(width=config.marker_line_width, color=config.marker_line_color),
                color=config.marker_color,
            ),
            mode="markers",
            showlegend=False,
        ),
    ]


def contour_layout(
    x_param: str,
    y_param: str,
    *,
    data: Optional[ContourData] = None,
    mode: str = "light",
    config: Optional[ContourConfig] = None,
) -> Dict[str, Any]:
    """Layout dict: per-axis title and type, margins and the light/dark template."""
    config = config or ContourConfig()
    xaxis: Dict[str, Any] = dict(title=dict(text=x_param))
    yaxis: Dict[str, Any] = dict(title=dict(text=y_param))
    if data is not None:
        if axis_type(data.x_axis):
            xaxis["type"] = axis_type(data.x_axis)
        if axis_type(data.y_axis):
            yaxis["type"] = axis_type(data.y_axis)
    return dict(
        xaxis=xaxis,
        yaxis=yaxis,
        margin=dict(config.margin),
        height=config.height,
        template=layout_template(mode),
    )


def plot_contour(
    snapshot: StudySnapshot,
    objective_id: int = 0,
    x_param: Optional[str] = None,
    y_param: Optional[str] = None,
    *,
    mode: str = "light",
    config: Optional[ContourConfig] = None,
) -> go.Figure:
    """
    Contour of one objective over two parameters.

    x/y default to the first two params of the study's union search space. With
    nothing to draw, the figure has no traces (layout only).
    """
    config = config or ContourConfig()
    default_x, default_y = default_axes(snapshot)
    x_param = x_param or default_x or ""
    y_param = y_param or default_y or ""

    data = compute_contour(snapshot, objective_id, x_param, y_param, config=config)
    traces = contour_traces(data, config) if data is not None else []
    fig = go.Figure(data=traces)
    fig.update_layout(**contour_layout(x_param, y_param, data=data, mode=mode, config=config))
    return fig


# -------------------------------------------------------------------------------
# RENDER TARGETS
# -------------------------------------------------------------------------------

class PlotTarget(Protocol):
    def is_available(self) -> bool: ...
    def react(self, fig: go.Figure) -> None: ...


def render_contour(
    target: PlotTarget,
    snapshot: StudySnapshot,
    objective_id: int = 0,
    x_param: Optional[str] = None,
    y_param: Optional[str] = None,
    *,
    mode: str = "light",
    config: Optional[ContourConfig] = None,
) -> bool:
    """Draw on ``target``; a no-op (returns False) when the target isn't available."""
    if not target.is_available():
        _LOGGER.debug("Render target not available; skipping contour.")
        return False
    fig = plot_contour(snapshot, objective_id, x_param, y_param, mode=mode, config=config)
    target.react(fig)
    return True


class NotebookTarget:
    """Displays figures in the running IPython session as self-contained HTML."""

    def is_available(self) -> bool:
        return get_ipython() is not None

    def react(self, fig: go.Figure) -> None:
        html = fig.to_html(include_plotlyjs="inline", full_html=False)  # offline, self-contained
        display(HTML(html))


def display_contour(
    snapshot: StudySnapshot,
    objective_id: int = 0,
    x_param: Optional[str] = None,
    y_param: Optional[str] = None,
    *,
    mode: str = "light",
    config: Optional[ContourConfig] = None,
) -> bool:
    return render_contour(NotebookTarget(), snapshot, objective_id, x_param, y_param, mode=mode, config=config)
