import typing

import study_contour
from study_contour.utils import plotting


def test_package_imports_and_exports():
    for name in study_contour.__all__:
        assert hasattr(study_contour, name), name
    assert callable(study_contour.plot_contour)


def test_plotting_annotations_resolve():
    hints = typing.get_type_hints(plotting.contour_traces)
    assert "return" in hints
