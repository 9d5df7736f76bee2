import pytest
from optuna.study import StudyDirection
from optuna.trial import TrialState

from study_contour.utils.trials import Param, StudySnapshot, Trial


def make_trial(number, values=(0.0,), state=TrialState.COMPLETE, **params):
    """Shorthand: make_trial(0, (5.0,), x="1", y="2")."""
    return Trial(
        number=number,
        state=state,
        values=None if values is None else tuple(values),
        params=tuple(Param(k, v) for k, v in params.items()),
    )


@pytest.fixture
def two_point_trials():
    return [
        make_trial(0, (5.0,), x="1", y="2"),
        make_trial(1, (7.0,), x="3", y="4"),
    ]


@pytest.fixture
def mixed_snapshot():
    # numeric x, categorical y, one failed trial and one -inf
    trials = (
        make_trial(0, (1.0,), x="0.5", y="adam"),
        make_trial(1, (2.0,), x="1.5", y="SGD"),
        make_trial(2, None, state=TrialState.FAIL, x="9.0", y="rmsprop"),
        make_trial(3, (float("-inf"),), x="4.0", y="adam"),
        make_trial(4, (3.0,), x="2.5", y="adam"),
    )
    return StudySnapshot(
        name="mixed",
        directions=(StudyDirection.MINIMIZE,),
        param_names=("x", "y"),
        trials=trials,
    )
