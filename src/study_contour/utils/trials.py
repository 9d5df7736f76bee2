import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import optuna
from optuna.study import StudyDirection
from optuna.trial import TrialState
import pandas as pd

import logging
_LOGGER = logging.getLogger(__name__)

# ---------------------------
# Snapshot model
# ---------------------------

@dataclass(frozen=True)
class Param:
    name: str
    value: str  # raw representation; may or may not parse as a number


@dataclass(frozen=True)
class Trial:
    """One optimization run, as read from a study snapshot."""
    number: int
    state: TrialState
    values: Optional[tuple[Optional[float], ...]] = None  # one per objective, ±inf kept as sentinels
    params: tuple[Param, ...] = ()

    def param(self, name: str) -> Optional[str]:
        for p in self.params:
            if p.name == name:
                return p.value
        return None


@dataclass(frozen=True)
class StudySnapshot:
    """
    Immutable view over a study: objective directions, the union search space
    (ordered param names) and the trials. Only ever read by the contour code.
    """
    name: str
    directions: tuple[StudyDirection, ...]
    param_names: tuple[str, ...]
    trials: tuple[Trial, ...] = field(default_factory=tuple)

    @property
    def n_objectives(self) -> int:
        return len(self.directions)


# ---------------------------
# Parsing helpers
# ---------------------------

_INF_STRINGS = {"inf": math.inf, "infinity": math.inf, "-inf": -math.inf, "-infinity": -math.inf}


def parse_state(value: TrialState | str) -> TrialState:
    if isinstance(value, TrialState):
        return value
    try:
        return TrialState[str(value).strip().upper()]
    except KeyError:
        raise ValueError(f"Unknown trial state '{value}'. Known: {[s.name for s in TrialState]}") from None


def parse_direction(value: StudyDirection | str) -> StudyDirection:
    if isinstance(value, StudyDirection):
        return value
    key = str(value).strip().lower()
    if key == "minimize":
        return StudyDirection.MINIMIZE
    if key == "maximize":
        return StudyDirection.MAXIMIZE
    raise ValueError(f"Invalid direction '{value}': choose 'minimize' or 'maximize'.")


def parse_objective_value(value: Any) -> Optional[float]:
    """Float for numbers, ±inf for the infinity sentinels, None stays None."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"Objective value must be numeric, got {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        key = value.strip().lower()
        if key in _INF_STRINGS:
            return _INF_STRINGS[key]
        try:
            return float(key)
        except ValueError:
            pass
    raise ValueError(f"Objective value must be numeric or an infinity sentinel, got {value!r}")


def _param_value_to_str(value: Any) -> str:
    # integers stored as floats (e.g. 3.0) keep their float repr; parse_numeric handles both
    return value if isinstance(value, str) else str(value)


def trial_from_record(record: Mapping[str, Any], number: Optional[int] = None) -> Trial:
    """
    Build a Trial from a JSON-like record:
    ``{"number": 0, "state": "Complete", "values": [1.0], "params": [{"name": "x", "value": "1"}]}``.
    ``params`` may also be a plain ``{name: value}`` mapping.
    """
    if "state" not in record:
        raise KeyError("trial record missing 'state'")
    num = record.get("number", number)
    if num is None:
        raise KeyError("trial record missing 'number' and no position given")

    raw_values = record.get("values")
    values = None if raw_values is None else tuple(parse_objective_value(v) for v in raw_values)

    raw_params = record.get("params") or []
    if isinstance(raw_params, Mapping):
        params = tuple(Param(str(k), _param_value_to_str(v)) for k, v in raw_params.items())
    else:
        params = tuple(Param(str(p["name"]), _param_value_to_str(p["value"])) for p in raw_params)

    return Trial(number=int(num), state=parse_state(record["state"]), values=values, params=params)


def _union_param_names(trials: Iterable[Trial]) -> tuple[str, ...]:
    seen: Dict[str, None] = {}
    for t in trials:
        for p in t.params:
            seen.setdefault(p.name, None)
    return tuple(seen)


def snapshot_from_records(payload: Mapping[str, Any]) -> StudySnapshot:
    """Build a StudySnapshot from an already-parsed study payload (dashboard-like shape)."""
    if "directions" not in payload:
        raise KeyError("study payload missing 'directions'")
    directions = tuple(parse_direction(d) for d in payload["directions"])
    if not directions:
        raise ValueError("study payload must declare at least one direction")

    trials = tuple(trial_from_record(r, number=i) for i, r in enumerate(payload.get("trials") or []))

    space = payload.get("union_search_space")
    if space is None:
        param_names = _union_param_names(trials)
    else:
        param_names = tuple(s["name"] if isinstance(s, Mapping) else str(s) for s in space)

    name = str(payload.get("name", payload.get("study_name", "")))
    _LOGGER.debug("Parsed study '%s': %d trials, %d params.", name, len(trials), len(param_names))
    return StudySnapshot(name=name, directions=directions, param_names=param_names, trials=trials)


def snapshot_from_study(study: optuna.study.Study) -> StudySnapshot:
    """Take a snapshot of a live Optuna study."""
    frozen = study.get_trials(deepcopy=False)

    # scan trials to collect the union search space (some trials may not have all)
    names: Dict[str, None] = {}
    for t in frozen:
        for name in t.distributions:
            names.setdefault(name, None)

    trials = tuple(
        Trial(
            number=t.number,
            state=t.state,
            values=None if t.values is None else tuple(float(v) for v in t.values),
            params=tuple(Param(k, _param_value_to_str(v)) for k, v in t.params.items()),
        )
        for t in frozen
    )
    return StudySnapshot(
        name=study.study_name,
        directions=tuple(study.directions),
        param_names=tuple(names),
        trials=trials,
    )


# ---------------------------
# Inspection
# ---------------------------

def default_axes(snapshot: StudySnapshot) -> tuple[Optional[str], Optional[str]]:
    """First and second param of the union search space, as the initial x/y selection."""
    names = snapshot.param_names
    x = names[0] if len(names) > 0 else None
    y = names[1] if len(names) > 1 else None
    return x, y


def trials_frame(snapshot: StudySnapshot) -> pd.DataFrame:
    """One row per trial with state, values_<i> and params_<name> columns (raw strings)."""
    rows: List[Dict[str, Any]] = []
    for t in snapshot.trials:
        row: Dict[str, Any] = {"number": t.number, "state": t.state.name}
        for i in range(snapshot.n_objectives):
            row[f"values_{i}"] = t.values[i] if t.values is not None and i < len(t.values) else None
        for name in snapshot.param_names:
            row[f"params_{name}"] = t.param(name)
        rows.append(row)

    columns: Sequence[str] = (
        ["number", "state"]
        + [f"values_{i}" for i in range(snapshot.n_objectives)]
        + [f"params_{n}" for n in snapshot.param_names]
    )
    return pd.DataFrame(rows, columns=list(columns))
