# tests/unit/test_interface.py
from __future__ import annotations

import numpy as np
import pytest

from fluidbc.boundary import Interface
from fluidbc.boundary.density import Density
from fluidbc.params import ParameterHandler


class _Minimal(Interface):
    """Implements only the required operation."""

    def fluid_pressure_gradient(self, boundary_id, inputs, outputs, result):
        for q in range(result.shape[0]):
            result[q] = np.arange(self.dim)


def test_specializations_are_distinct_and_cached():
    assert _Minimal[2] is _Minimal[2]
    assert _Minimal[2] is not _Minimal[3]
    assert _Minimal[2].dim == 2
    assert _Minimal[3].dim == 3
    assert issubclass(_Minimal[2], _Minimal)
    assert _Minimal[2].__name__ == "_Minimal[2]"


def test_specializations_are_per_class():
    assert Density[2] is not _Minimal[2]
    assert issubclass(Density[3], Density)
    assert not issubclass(Density[3], _Minimal)


def test_unspecialized_class_cannot_be_instantiated():
    with pytest.raises(TypeError, match=r"_Minimal\[2\]"):
        _Minimal()


def test_abstract_class_cannot_be_instantiated():
    class Incomplete(Interface):
        pass

    with pytest.raises(TypeError):
        Incomplete[2]()


@pytest.mark.parametrize("dim", [1, 4, "2"])
def test_unsupported_dimensions(dim):
    with pytest.raises(TypeError):
        _Minimal[dim]


def test_respecializing_is_rejected():
    assert _Minimal[2][2] is _Minimal[2]
    with pytest.raises(TypeError, match="already specialized"):
        _Minimal[2][3]


def test_default_hooks_are_noops():
    model = _Minimal[3]()
    prm = ParameterHandler()

    _Minimal[3].declare_parameters(prm)
    assert prm.to_toml().strip() == ""

    model.parse_parameters(prm)
    model.initialize()

    result = np.zeros((2, 3))
    model.fluid_pressure_gradient(7, None, None, result)
    np.testing.assert_array_equal(result, [[0, 1, 2], [0, 1, 2]])
