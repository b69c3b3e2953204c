# tests/unit/test_boundary_manager.py
from __future__ import annotations

import numpy as np
import pytest

from fluidbc.boundary import Interface, PluginRegistry
from fluidbc.boundary.density import Density
from fluidbc.errors import ContractViolationError, FluidBCError, ModelValidationError, UnknownModelError
from fluidbc.params import ParameterHandler
from fluidbc.runtime import (
    ConstantGravity, FluidPressureBoundary, MaterialModelInputs, MaterialModelOutputs,
    SimulatorAccess, SimulatorContext,
)

SECTION = "Boundary fluid pressure model"


class _Recorder(Interface):
    """Logs lifecycle calls into a class-level list."""
    calls: list = []

    def parse_parameters(self, prm):
        type(self).calls.append("parse_parameters")

    def initialize(self):
        type(self).calls.append("initialize")

    def fluid_pressure_gradient(self, boundary_id, inputs, outputs, result):
        result[:] = float(boundary_id)


class _NeedsContext(SimulatorAccess, Interface):
    def fluid_pressure_gradient(self, boundary_id, inputs, outputs, result):
        result[:] = 0.0


class _Shrinks(Interface):
    def fluid_pressure_gradient(self, boundary_id, inputs, outputs, result):
        result.resize((0, self.dim), refcheck=False)


class _NaN(Interface):
    def fluid_pressure_gradient(self, boundary_id, inputs, outputs, result):
        result[:] = np.nan


def _boundary(cls, name: str = "model", context=None, **kwargs) -> tuple[FluidPressureBoundary, ParameterHandler]:
    reg = PluginRegistry(2, default=name)
    reg.register(name, "test model", cls[2].declare_parameters, cls[2])
    bc = FluidPressureBoundary(reg, context, **kwargs)
    prm = ParameterHandler()
    bc.declare_parameters(prm)
    return bc, prm


def _batch(n: int, dim: int = 2):
    return MaterialModelInputs.empty(n, dim), MaterialModelOutputs(densities=np.ones(n))


def test_lifecycle_order():
    _Recorder.calls = []
    bc, prm = _boundary(_Recorder)
    model = bc.parse_parameters(prm)
    assert _Recorder.calls == ["parse_parameters", "initialize"]
    assert bc.model is model
    assert bc.model_name == "model"
    assert bc.is_ready


def test_evaluation_before_setup_is_contract_violation():
    bc, _ = _boundary(_Recorder)
    inputs, outputs = _batch(2)
    with pytest.raises(ContractViolationError, match="parse_parameters"):
        bc.fluid_pressure_gradient(0, inputs, outputs, bc.allocate_result(2))


def test_parse_before_declare_is_contract_violation():
    reg = PluginRegistry(2)
    bc = FluidPressureBoundary(reg)
    with pytest.raises(ContractViolationError, match="declare_parameters"):
        bc.parse_parameters(ParameterHandler())


def test_only_one_model_per_run():
    bc, prm = _boundary(_Recorder)
    bc.parse_parameters(prm)
    with pytest.raises(ContractViolationError, match="already active"):
        bc.parse_parameters(prm)


def test_unknown_selection_constructs_nothing():
    reg = PluginRegistry(2)
    reg.register("model", "test model", _Recorder[2].declare_parameters, _Recorder[2])
    bc = FluidPressureBoundary(reg)
    prm = ParameterHandler()
    bc.declare_parameters(prm)
    _Recorder.calls = []
    with pytest.raises(UnknownModelError):
        bc.parse_parameters(prm)
    assert _Recorder.calls == []
    assert not bc.is_ready


@pytest.mark.parametrize("n", [0, 1, 4096])
def test_result_length_matches_batch(n: int):
    bc, prm = _boundary(_Recorder)
    bc.parse_parameters(prm)
    inputs, outputs = _batch(n)
    result = bc.allocate_result(n)
    out = bc.fluid_pressure_gradient(5, inputs, outputs, result)
    assert out is result
    assert result.shape == (n, 2)
    np.testing.assert_array_equal(result, 5.0)


@pytest.mark.parametrize(
    "result",
    [np.zeros((2, 2)), np.zeros((3, 3)), np.zeros(3), [[0.0, 0.0]] * 3],
)
def test_mis_sized_result_is_rejected(result):
    bc, prm = _boundary(_Recorder)
    bc.parse_parameters(prm)
    inputs, outputs = _batch(3)
    with pytest.raises(ContractViolationError):
        bc.fluid_pressure_gradient(0, inputs, outputs, result)


def test_read_only_result_is_rejected():
    bc, prm = _boundary(_Recorder)
    bc.parse_parameters(prm)
    inputs, outputs = _batch(2)
    result = bc.allocate_result(2)
    result.flags.writeable = False
    with pytest.raises(ContractViolationError, match="read-only"):
        bc.fluid_pressure_gradient(0, inputs, outputs, result)


def test_mismatched_batches_are_rejected():
    bc, prm = _boundary(_Recorder)
    bc.parse_parameters(prm)
    inputs, _ = _batch(3)
    with pytest.raises(ContractViolationError, match="Material outputs"):
        bc.fluid_pressure_gradient(0, inputs, MaterialModelOutputs(np.ones(2)), bc.allocate_result(3))
    with pytest.raises(ContractViolationError, match="dim=3"):
        bc.fluid_pressure_gradient(0, MaterialModelInputs.empty(3, 3), MaterialModelOutputs(np.ones(3)), bc.allocate_result(3))


def test_model_needing_context_without_one():
    bc, prm = _boundary(_NeedsContext)
    with pytest.raises(ContractViolationError, match="simulator context"):
        bc.parse_parameters(prm)
    assert not bc.is_ready


def test_context_dimension_checked():
    reg = PluginRegistry(2)
    with pytest.raises(ContractViolationError):
        FluidPressureBoundary(reg, SimulatorContext(3, ConstantGravity([0.0, 0.0, -1.0])))


def test_guardrails_run_on_selected_model():
    bc, prm = _boundary(_Shrinks)
    with pytest.raises(ModelValidationError, match="resized"):
        bc.parse_parameters(prm)


def test_resize_caught_at_runtime_without_guardrails():
    bc, prm = _boundary(_Shrinks, validate_model=False)
    bc.parse_parameters(prm)
    inputs, outputs = _batch(2)
    with pytest.raises(ContractViolationError, match="resized"):
        bc.fluid_pressure_gradient(0, inputs, outputs, bc.allocate_result(2))


def test_non_finite_results():
    bc, prm = _boundary(_NaN, check_finite=True)
    bc.parse_parameters(prm)
    inputs, outputs = _batch(2)
    with pytest.raises(FluidBCError, match="non-finite"):
        bc.fluid_pressure_gradient(3, inputs, outputs, bc.allocate_result(2))

    unchecked, prm2 = _boundary(_NaN)
    unchecked.parse_parameters(prm2)
    result = unchecked.fluid_pressure_gradient(3, inputs, outputs, unchecked.allocate_result(2))
    assert np.isnan(result).all()


def test_model_errors_propagate():
    bc, prm = _boundary(Density, context=SimulatorContext(2, ConstantGravity([0.0, -1.0])))
    with prm.subsection(SECTION):
        with prm.subsection("Density"):
            prm.set("Density formulation", "fluid density")
    bc.parse_parameters(prm)
    inputs, outputs = _batch(1)
    with pytest.raises(FluidBCError, match="fluid densities"):
        bc.fluid_pressure_gradient(0, inputs, outputs, bc.allocate_result(1))
