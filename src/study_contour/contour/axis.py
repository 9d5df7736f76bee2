import math
import re
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import numpy as np

import logging
_LOGGER = logging.getLogger(__name__)

from ..utils.trials import Trial

PADDING_RATIO = 0.05

AxisValue = float | str

# plain decimal literal with optional exponent; no digit-group underscores, no inf/nan spellings
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


@dataclass(frozen=True)
class AxisInfo:
    """
    Axis metadata for one plotted parameter.

    ``values`` has one entry per trial (same order as the trial list the axis was
    built from), ``None`` where the trial does not report the parameter. On a
    numeric axis the entries are floats, on a categorical axis the raw labels.
    ``indices`` are the distinct grid coordinates, in axis order.
    """
    name: str
    min: float
    max: float
    is_log: bool
    is_cat: bool
    indices: tuple[AxisValue, ...]
    values: tuple[Optional[AxisValue], ...]


def parse_numeric(raw: Any) -> Optional[float]:
    """Finite float the raw value converts to, else None."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        v = float(raw)
    elif isinstance(raw, str) and _DECIMAL_RE.fullmatch(raw.strip()):
        v = float(raw)
    else:
        return None
    return v if math.isfinite(v) else None


def is_numerical(trials: Sequence[Trial], param_name: str) -> bool:
    """
    True iff every trial reporting ``param_name`` reports a finite number.

    Trials without the parameter don't count against it. A single non-numeric
    observation turns the whole axis categorical, even if every other value is
    numeric.
    """
    for t in trials:
        raw = t.param(param_name)
        if raw is not None and parse_numeric(raw) is None:
            return False
    return True


def _numeric_axis(name: str, raw: Sequence[Optional[str]], padding_ratio: float) -> AxisInfo:
    values = tuple(None if r is None else parse_numeric(r) for r in raw)
    observed = np.asarray([v for v in values if v is not None], dtype=float)

    if observed.size == 0:
        return AxisInfo(name=name, min=0.0, max=0.0, is_log=False, is_cat=False, indices=(), values=values)

    lo = float(observed.min())
    hi = float(observed.max())
    padding = (hi - lo) * padding_ratio
    vmin, vmax = lo - padding, hi + padding

    indices: list[AxisValue] = [float(v) for v in np.unique(observed)]
    # synthetic boundaries, so the contour extends past the extreme samples;
    # skipped where the padding rounds away at large magnitudes
    if len(indices) >= 2:
        if vmin < indices[0]:
            indices.insert(0, vmin)
        if vmax > indices[-1]:
            indices.append(vmax)

    return AxisInfo(name=name, min=vmin, max=vmax, is_log=False, is_cat=False,
                    indices=tuple(indices), values=values)


def _categorical_axis(name: str, raw: Sequence[Optional[str]], padding_ratio: float) -> AxisInfo:
    values = tuple(raw)
    distinct = dict.fromkeys(values)  # keeps the missing marker as a category
    span = len(distinct) - (2 if None in distinct else 1)
    span = max(span, 0)
    padding = span * padding_ratio

    labels = [v for v in distinct if v is not None]
    indices = sorted(labels, key=lambda s: (s.lower(), s))

    return AxisInfo(name=name, min=-padding, max=span + padding, is_log=False, is_cat=True,
                    indices=tuple(indices), values=values)


def get_axis_info(trials: Sequence[Trial], param_name: str, *, padding_ratio: float = PADDING_RATIO) -> AxisInfo:
    """
    Classify ``param_name`` over ``trials`` and derive its AxisInfo.

    Build both axes of a plot from the same (unfiltered) trial list, so that
    ``values`` stay aligned by position.
    """
    if padding_ratio <= 0:
        raise ValueError(f"padding_ratio must be > 0, got {padding_ratio}.")
    raw = [t.param(param_name) for t in trials]
    if is_numerical(trials, param_name):
        axis = _numeric_axis(param_name, raw, padding_ratio)
    else:
        axis = _categorical_axis(param_name, raw, padding_ratio)

    _LOGGER.debug(
        "Axis '%s': %s, %d indices, range [%g, %g].",
        param_name, "categorical" if axis.is_cat else "numeric", len(axis.indices), axis.min, axis.max,
    )
    return axis
