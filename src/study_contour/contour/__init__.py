'''study_contour/contour/__init__.py

Expose axis classification, trial filtering and grid building at the package
level so users can import directly from study_contour.contour.'''

from .axis import AxisInfo, get_axis_info, is_numerical, parse_numeric, PADDING_RATIO
from .config import ContourConfig
from .grid import ContourGrid, build_grid, filter_trials, is_plottable

# Define what should be available when using `from study_contour.contour import *`
__all__ = [
    "AxisInfo",
    "ContourConfig",
    "ContourGrid",
    "PADDING_RATIO",
    "build_grid",
    "filter_trials",
    "get_axis_info",
    "is_numerical",
    "is_plottable",
    "parse_numeric",
]
