# src/fluidbc/__init__.py
from __future__ import annotations
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .errors import (
    FluidBCError, RegistrationError, DuplicateRegistrationError,
    ConfigError, UnknownModelError, ContractViolationError, ModelValidationError,
)
from .params import ParameterHandler
from .boundary import (
    SUPPORTED_DIMENSIONS, Interface, PluginCatalog, PluginRegistry, RegistryEntry,
    create_catalog, register_builtin_models,
)
from .runtime import (
    MaterialModelInputs, MaterialModelOutputs,
    ConstantGravity, VerticalGravity, SimulatorContext, SimulatorAccess,
    FluidPressureBoundary,
)


__all__ = [
    # Entry point
    "setup",
    # Contract and registry
    "SUPPORTED_DIMENSIONS", "Interface", "PluginRegistry", "PluginCatalog", "RegistryEntry",
    "create_catalog", "register_builtin_models",
    # Configuration
    "ParameterHandler",
    # Runtime
    "MaterialModelInputs", "MaterialModelOutputs",
    "ConstantGravity", "VerticalGravity", "SimulatorContext", "SimulatorAccess",
    "FluidPressureBoundary",
    # Errors
    "FluidBCError", "RegistrationError", "DuplicateRegistrationError",
    "ConfigError", "UnknownModelError", "ContractViolationError", "ModelValidationError",
]


def setup(
    parameters: Union[str, Path, Mapping[str, Any], None] = None,
    *,
    dim: int = 2,
    catalog: Optional[PluginCatalog] = None,
    context: Optional[SimulatorContext] = None,
    validate_model: bool = True,
    check_finite: bool = False,
) -> FluidPressureBoundary:
    """Declare, read and initialize a fluid pressure boundary model in one call.

    This combines the steps a host performs at startup: declare every
    registered model's parameters, read the input, create the selected
    model, let it parse its parameters and initialize it.

    Parameters:
        parameters: Where the input comes from:
            - None: use declared defaults only
            - Path or path string: a TOML parameter file
            - "inline: ..." string: TOML text after the prefix
            - Mapping: nested dict, tables as subsections
        dim: Spatial dimension of the simulation (2 or 3).
        catalog: Models to choose from (default: fresh catalog with built-ins).
        context: Simulator context (default: vertical gravity of 9.81).
        validate_model: Run static guardrails on the selected model.
        check_finite: Reject non-finite gradients after each evaluation.

    Returns:
        A `FluidPressureBoundary` owning the initialized model.

    Example::

        from fluidbc import setup, MaterialModelInputs, MaterialModelOutputs

        bc = setup('inline: ["Boundary fluid pressure model"]\\n"Plugin name" = "density"')
        inputs = MaterialModelInputs.at_points([[0.0, 1.0], [0.5, 1.0]])
        outputs = MaterialModelOutputs(densities=[3300.0, 3300.0])
        result = bc.allocate_result(2)
        bc.fluid_pressure_gradient(0, inputs, outputs, result)
    """
    if catalog is None:
        catalog = create_catalog()
    if context is None:
        context = SimulatorContext(dim=dim, gravity=VerticalGravity())

    prm = ParameterHandler()
    boundary = FluidPressureBoundary(
        catalog[dim], context, validate_model=validate_model, check_finite=check_finite,
    )
    boundary.declare_parameters(prm)

    if isinstance(parameters, Mapping):
        prm.parse_input_from_mapping(parameters)
    elif isinstance(parameters, str) and parameters.strip().startswith("inline:"):
        prm.parse_input_from_string(parameters.strip()[len("inline:"):], source="inline parameters")
    elif parameters is not None:
        prm.parse_input(parameters)

    boundary.parse_parameters(prm)
    return boundary
