from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

import logging
_LOGGER = logging.getLogger(__name__)


def _default_margin() -> Dict[str, int]:
    return dict(l=50, t=0, r=50, b=50)


@dataclass
class ContourConfig:
    """
    Configuration for building and drawing a contour plot.

    Grid
    ----
    padding_ratio: float = 0.05
        Fraction of the observed range added on each side of an axis.

    Contour trace
    -------------
    colorscale: str = "Blues"
        Plotly colour scale. Reversed automatically for maximized objectives.
    line_smoothing: float = 1.3
        Contour line smoothing, in plotly's [0, 1.3] range.
    connectgaps: bool = True
        Let plotly fill unset cells of the z matrix.

    Scatter overlay
    ---------------
    marker_color: str = "black"
    marker_line_color: str = "Grey"
    marker_line_width: float = 2.0

    Layout
    ------
    margin: dict = {l: 50, t: 0, r: 50, b: 50}
    height: int = 450
    """
    padding_ratio: float = 0.05

    colorscale: str = "Blues"
    line_smoothing: float = 1.3
    connectgaps: bool = True

    marker_color: str = "black"
    marker_line_color: str = "Grey"
    marker_line_width: float = 2.0

    margin: Dict[str, int] = field(default_factory=_default_margin)
    height: int = 450

    def __post_init__(self):
        if self.padding_ratio <= 0:
            raise ValueError("padding_ratio must be > 0.")
        if not (0.0 <= self.line_smoothing <= 1.3):
            raise ValueError("line_smoothing must be in [0, 1.3].")
        if self.marker_line_width < 0:
            raise ValueError("marker_line_width must be >= 0.")
        if self.height <= 0:
            raise ValueError("height must be a positive integer.")
        unknown = set(self.margin) - {"l", "t", "r", "b", "pad"}
        if unknown:
            raise ValueError(f"Unknown margin keys {sorted(unknown)}; allowed: l, t, r, b, pad.")
        # fill in unspecified sides from the defaults
        self.margin = {**_default_margin(), **self.margin}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "ContourConfig":
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise KeyError(f"Unknown config keys {sorted(unknown)}. Known: {sorted(known)}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ContourConfig":
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
        if data is not None and not isinstance(data, Mapping):
            raise ValueError(f"Config file {path!s} must contain a mapping at top level.")
        _LOGGER.debug("Loaded contour config from %s.", path)
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
