'''study_contour/__init__.py

Contour plots of optimization studies: axis classification, trial filtering,
grid building and plotly figures.'''

import logging

from .contour import AxisInfo, ContourConfig, ContourGrid, build_grid, filter_trials, get_axis_info, is_plottable
from .utils.plotting import ContourData, compute_contour, display_contour, plot_contour, render_contour
from .utils.trials import Param, StudySnapshot, Trial, snapshot_from_records, snapshot_from_study

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AxisInfo",
    "ContourConfig",
    "ContourData",
    "ContourGrid",
    "Param",
    "StudySnapshot",
    "Trial",
    "build_grid",
    "compute_contour",
    "display_contour",
    "filter_trials",
    "get_axis_info",
    "is_plottable",
    "plot_contour",
    "render_contour",
    "snapshot_from_records",
    "snapshot_from_study",
]
