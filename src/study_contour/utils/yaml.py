import yaml
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any, Dict
import numpy as np
import pandas as pd

from ..contour.axis import AxisInfo
from ..contour.config import ContourConfig
from ..contour.grid import ContourGrid


class CustomSafeDumper(yaml.SafeDumper):
    pass

def _seq(d, seq):
    return d.represent_sequence(yaml.resolver.BaseResolver.DEFAULT_SEQUENCE_TAG, list(seq))

def _df_representer(dumper, df: pd.DataFrame):
    # NaN -> null so unset grid cells read back as missing
    data = [[None if pd.isna(v) else v for v in row] for row in df.to_numpy().tolist()]
    node = {
        "columns": df.columns.tolist(),
        "index": df.index.tolist(),
        "data": data,
    }
    return dumper.represent_mapping("!dataframe", node)

def grid_to_dict(grid: ContourGrid) -> Dict[str, Any]:
    return {
        "x_indices": list(grid.x_indices),
        "y_indices": list(grid.y_indices),
        "z": [list(row) for row in grid.z],
        "x_values": list(grid.x_values),
        "y_values": list(grid.y_values),
    }

def axis_to_dict(axis: AxisInfo) -> Dict[str, Any]:
    out = asdict(axis)
    out["indices"] = list(axis.indices)
    out["values"] = list(axis.values)
    return out

# stdlib
CustomSafeDumper.add_representer(tuple, _seq)
CustomSafeDumper.add_representer(set,   lambda d, v: _seq(d, sorted(v, key=str)))
CustomSafeDumper.add_representer(Path, lambda d, v: d.represent_str(str(v)))
# TrialState / StudyDirection and friends
CustomSafeDumper.add_multi_representer(Enum, lambda d, v: d.represent_str(v.name))

# numpy
CustomSafeDumper.add_multi_representer(np.integer,  lambda d, v: d.represent_int(int(v)))
CustomSafeDumper.add_multi_representer(np.floating, lambda d, v: d.represent_float(float(v)))
CustomSafeDumper.add_multi_representer(np.bool_,    lambda d, v: d.represent_bool(bool(v)))
CustomSafeDumper.add_multi_representer(np.ndarray,  lambda d, v: d.represent_list(v.tolist()))

# pandas
CustomSafeDumper.add_representer(pd.Series, lambda d, v: d.represent_list(v.tolist()))
CustomSafeDumper.add_representer(pd.Index,  lambda d, v: d.represent_list(v.tolist()))
CustomSafeDumper.add_representer(pd.DataFrame, _df_representer)

# study_contour
CustomSafeDumper.add_representer(ContourGrid,   lambda d, v: d.represent_dict(grid_to_dict(v)))
CustomSafeDumper.add_representer(AxisInfo,      lambda d, v: d.represent_dict(axis_to_dict(v)))
CustomSafeDumper.add_representer(ContourConfig, lambda d, v: d.represent_dict(v.to_dict()))

def safe_dump_yaml(data, stream=None, **kwargs):
    """YAML dump using CustomSafeDumper; returns a string if stream is None."""
    params = dict(allow_unicode=True, sort_keys=False, default_flow_style=False)
    params.update(kwargs)
    if stream is None:
        return yaml.dump(data, Dumper=CustomSafeDumper, **params)
    yaml.dump(data, stream, Dumper=CustomSafeDumper, **params)
