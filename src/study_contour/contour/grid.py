import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
from optuna.trial import TrialState

import logging
_LOGGER = logging.getLogger(__name__)

from ..utils.trials import Trial
from .axis import AxisInfo, AxisValue

# ---------------------------
# Trial filter
# ---------------------------

def is_plottable(trial: Trial, objective_id: int) -> bool:
    """Complete, reports the objective, and the value is not an infinity sentinel."""
    if trial.state != TrialState.COMPLETE or trial.values is None:
        return False
    if not (0 <= objective_id < len(trial.values)):
        return False
    value = trial.values[objective_id]
    return value is not None and math.isfinite(value)


def filter_trials(trials: Sequence[Trial], objective_id: int) -> list[tuple[int, Trial]]:
    """Eligible trials, each paired with its position in ``trials``."""
    return [(i, t) for i, t in enumerate(trials) if is_plottable(t, objective_id)]


# ---------------------------
# Grid
# ---------------------------

@dataclass
class ContourGrid:
    x_indices: tuple[AxisValue, ...]
    y_indices: tuple[AxisValue, ...]
    z: List[List[Optional[float]]]  # rows follow y_indices, columns x_indices
    x_values: List[AxisValue] = field(default_factory=list)
    y_values: List[AxisValue] = field(default_factory=list)

    @property
    def shape(self) -> tuple[int, int]:
        return len(self.y_indices), len(self.x_indices)

    @property
    def n_points(self) -> int:
        return len(self.x_values)

    def to_frame(self) -> pd.DataFrame:
        """z as a DataFrame (index = y, columns = x); unset cells are NaN."""
        arr = np.array(
            [[np.nan if c is None else c for c in row] for row in self.z],
            dtype=float,
        ).reshape(self.shape)
        return pd.DataFrame(arr, index=pd.Index(self.y_indices), columns=pd.Index(self.x_indices))


def build_grid(
    x_axis: AxisInfo,
    y_axis: AxisInfo,
    eligible: Sequence[tuple[int, Trial]],
    objective_id: int,
) -> Optional[ContourGrid]:
    """
    Place each eligible trial's objective value at its (y, x) cell.

    ``eligible`` comes from ``filter_trials`` over the same trial list the axes were
    built from; positions index into ``x_axis.values``/``y_axis.values``.
    Returns None when there is nothing to draw. On cell collisions the later
    trial wins.
    """
    if not eligible:
        return None

    x_pos = {v: i for i, v in enumerate(x_axis.indices)}
    y_pos = {v: i for i, v in enumerate(y_axis.indices)}

    z: List[List[Optional[float]]] = [[None] * len(x_axis.indices) for _ in y_axis.indices]
    x_values: List[AxisValue] = []
    y_values: List[AxisValue] = []

    skipped = 0
    for pos, trial in eligible:
        xv = x_axis.values[pos]
        yv = y_axis.values[pos]
        if xv is None or yv is None:
            skipped += 1
            continue
        try:
            xi, yi = x_pos[xv], y_pos[yv]
        except KeyError:
            raise ValueError(
                f"Trial {trial.number}: value not among axis indices "
                f"({x_axis.name}={xv!r}, {y_axis.name}={yv!r}); were both axes built from the same trials?"
            ) from None
        x_values.append(xv)
        y_values.append(yv)
        z[yi][xi] = trial.values[objective_id]

    if skipped:
        _LOGGER.warning(
            "%d eligible trial(s) skipped: missing '%s' or '%s'.", skipped, x_axis.name, y_axis.name
        )
    _LOGGER.debug("Built %dx%d contour grid with %d points.", len(z), len(x_axis.indices), len(x_values))

    return ContourGrid(
        x_indices=x_axis.indices,
        y_indices=y_axis.indices,
        z=z,
        x_values=x_values,
        y_values=y_values,
    )
