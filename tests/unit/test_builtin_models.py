# tests/unit/test_builtin_models.py
from __future__ import annotations

import numpy as np
import pytest

from fluidbc.boundary import create_catalog
from fluidbc.boundary.density import Density
from fluidbc.boundary.uniform import Uniform
from fluidbc.errors import ConfigError, ContractViolationError, FluidBCError
from fluidbc.params import ParameterHandler
from fluidbc.runtime import (
    ConstantGravity, MaterialModelInputs, MaterialModelOutputs, SimulatorContext, VerticalGravity,
)


def _configured(cls, dim: int, values: dict | None = None):
    prm = ParameterHandler()
    cls[dim].declare_parameters(prm)
    if values:
        prm.parse_input_from_mapping(values)
    model = cls[dim]()
    model.parse_parameters(prm)
    return model


@pytest.mark.parametrize("jit", [True, False])
def test_density_solid_formulation(jit: bool):
    model = _configured(Density, 2, {"Density": {"Use JIT": jit}})
    model.initialize_simulator(SimulatorContext(2, ConstantGravity([0.0, -1.0])))
    model.initialize()

    inputs = MaterialModelInputs.empty(3, 2)
    outputs = MaterialModelOutputs(densities=[1.0, 2.0, 3.0], fluid_densities=[9.0, 9.0, 9.0])
    result = np.zeros((3, 2))
    model.fluid_pressure_gradient(0, inputs, outputs, result)
    np.testing.assert_allclose(result, [[0.0, -1.0], [0.0, -2.0], [0.0, -3.0]])


def test_density_fluid_formulation_3d():
    model = _configured(Density, 3, {"Density": {"Density formulation": "fluid density"}})
    model.initialize_simulator(SimulatorContext(3, VerticalGravity(10.0)))
    model.initialize()

    inputs = MaterialModelInputs.at_points([[0.0, 0.0, 1.0], [1.0, 1.0, 0.0]])
    outputs = MaterialModelOutputs(densities=[3300.0, 3300.0], fluid_densities=[2800.0, 3000.0])
    result = np.zeros((2, 3))
    model.fluid_pressure_gradient(1, inputs, outputs, result)
    np.testing.assert_allclose(result, [[0.0, 0.0, -28000.0], [0.0, 0.0, -30000.0]])


def test_density_fluid_formulation_without_fluid_densities():
    model = _configured(Density, 2, {"Density": {"Density formulation": "fluid density"}})
    model.initialize_simulator(SimulatorContext(2, VerticalGravity()))
    model.initialize()

    outputs = MaterialModelOutputs(densities=[1.0])
    with pytest.raises(FluidBCError, match="fluid densities"):
        model.fluid_pressure_gradient(0, MaterialModelInputs.empty(1, 2), outputs, np.zeros((1, 2)))


def test_density_rejects_unknown_formulation():
    with pytest.raises(ConfigError, match="solid density|fluid density"):
        _configured(Density, 2, {"Density": {"Density formulation": "melt density"}})


def test_density_needs_context_before_initialize():
    model = _configured(Density, 2)
    with pytest.raises(ContractViolationError, match="simulator context"):
        model.initialize()


def test_density_context_dimension_must_match():
    model = _configured(Density, 2)
    with pytest.raises(ContractViolationError, match="dim=2"):
        model.initialize_simulator(SimulatorContext(3, VerticalGravity()))


@pytest.mark.parametrize("dim", [2, 3])
def test_uniform_fills_every_row(dim: int):
    gradient = [float(i + 1) for i in range(dim)]
    model = _configured(Uniform, dim, {"Uniform": {"Gradient": gradient}})
    model.initialize()

    n = 5
    result = np.zeros((n, dim))
    model.fluid_pressure_gradient(0, MaterialModelInputs.empty(n, dim), MaterialModelOutputs(np.ones(n)), result)
    np.testing.assert_array_equal(result, np.tile(gradient, (n, 1)))


def test_uniform_default_is_zero():
    model = _configured(Uniform, 3, {"Uniform": {"Use JIT": False}})
    model.initialize()
    result = np.ones((2, 3))
    model.fluid_pressure_gradient(0, MaterialModelInputs.empty(2, 3), MaterialModelOutputs(np.ones(2)), result)
    np.testing.assert_array_equal(result, 0.0)


def test_uniform_gradient_length_must_match_dimension():
    with pytest.raises(ConfigError, match="Uniform.Gradient"):
        _configured(Uniform, 2, {"Uniform": {"Gradient": [0.0, 0.0, -1.0]}})


def test_parse_twice_gives_identical_state():
    prm = ParameterHandler()
    Uniform[2].declare_parameters(prm)
    prm.parse_input_from_mapping({"Uniform": {"Gradient": [1.0, -2.0]}})

    model = Uniform[2]()
    model.parse_parameters(prm)
    first = model.gradient.copy()
    model.parse_parameters(prm)
    np.testing.assert_array_equal(model.gradient, first)
    assert model.use_jit is True


def _created(name: str, jit: bool):
    """Built through the registry and called directly, without a host driver."""
    reg = create_catalog()[2]
    prm = ParameterHandler()
    reg.declare_parameters(prm)
    subsection = "Density" if name == "density" else "Uniform"
    prm.parse_input_from_mapping({
        "Boundary fluid pressure model": {"Plugin name": name, subsection: {"Use JIT": jit}},
    })
    model = reg.create(prm)
    with prm.subsection(reg.section):
        model.parse_parameters(prm)
    if isinstance(model, Density):
        model.initialize_simulator(SimulatorContext(2, ConstantGravity([0.0, -1.0])))
    model.initialize()
    return model


@pytest.mark.parametrize("jit", [True, False])
@pytest.mark.parametrize("name", ["density", "uniform"])
@pytest.mark.parametrize("n_rows", [2, 5])
def test_wrong_result_length_fails_loudly(name: str, jit: bool, n_rows: int):
    model = _created(name, jit)
    inputs = MaterialModelInputs.empty(3, 2)
    outputs = MaterialModelOutputs(densities=[1.0, 2.0, 3.0])
    result = np.full((n_rows, 2), 7.0)
    with pytest.raises(ContractViolationError, match="expected"):
        model.fluid_pressure_gradient(0, inputs, outputs, result)
    np.testing.assert_array_equal(result, 7.0)


@pytest.mark.parametrize("name", ["density", "uniform"])
def test_mismatched_material_batch_fails_loudly(name: str):
    model = _created(name, False)
    with pytest.raises(ContractViolationError, match="Material outputs"):
        model.fluid_pressure_gradient(
            0, MaterialModelInputs.empty(3, 2), MaterialModelOutputs(densities=[1.0]), np.zeros((3, 2)),
        )
