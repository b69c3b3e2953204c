# src/fluidbc/runtime/manager.py
"""
Host-side owner of the active fluid pressure boundary model.

One instance per simulation run. It drives the lifecycle

    declare_parameters -> (input is read) -> parse_parameters
        -> fluid_pressure_gradient, repeatedly

where `parse_parameters` creates the configured model, lets it read its
parameters, attaches the simulator context and initializes it.
"""
from __future__ import annotations
import logging
from typing import Optional

import numpy as np

from fluidbc.boundary.base import Interface
from fluidbc.boundary.registry import PluginRegistry
from fluidbc.boundary.validate import check_model_class
from fluidbc.errors import ContractViolationError
from fluidbc.params import ParameterHandler
from .context import SimulatorAccess, SimulatorContext
from .guards import check_batch, check_finite, check_result_unchanged
from .material import MaterialModelInputs, MaterialModelOutputs

__all__ = ["FluidPressureBoundary"]

logger = logging.getLogger(__name__)


class FluidPressureBoundary:
    """
    Owns the single model selected for this run.

    Args:
        registry: The registry for the simulation's dimension.
        context: Simulator context attached to models that mix in
            `SimulatorAccess`. Required if the selected model needs it.
        validate_model: Run static guardrails on the selected model's
            `fluid_pressure_gradient` before it is used.
        check_finite: Reject non-finite gradients after every evaluation.
    """

    def __init__(
        self,
        registry: PluginRegistry,
        context: Optional[SimulatorContext] = None,
        *,
        validate_model: bool = True,
        check_finite: bool = False,
    ):
        if context is not None and context.dim != registry.dim:
            raise ContractViolationError(
                f"Simulator context has dim={context.dim}, registry has dim={registry.dim}"
            )
        self.registry = registry
        self.context = context
        self.validate_model = validate_model
        self.check_finite = check_finite
        self._model: Optional[Interface] = None
        self._model_name: Optional[str] = None
        self._declared = False

    @property
    def dim(self) -> int:
        return self.registry.dim

    @property
    def model(self) -> Interface:
        if self._model is None:
            raise ContractViolationError("No fluid pressure boundary model is active; call parse_parameters first")
        return self._model

    @property
    def model_name(self) -> Optional[str]:
        return self._model_name

    @property
    def is_ready(self) -> bool:
        return self._model is not None

    def declare_parameters(self, prm: ParameterHandler) -> None:
        self.registry.declare_parameters(prm)
        self._declared = True

    def parse_parameters(self, prm: ParameterHandler) -> Interface:
        """
        Create, configure and initialize the selected model.

        Nothing is kept if any step fails, so a failed setup never leaves a
        half-configured model behind.
        """
        if self._model is not None:
            raise ContractViolationError("A fluid pressure boundary model is already active for this run")
        if not self._declared:
            raise ContractViolationError("declare_parameters must run before parse_parameters")

        model = self.registry.create(prm)
        with prm.subsection(self.registry.section):
            name = prm.get(self.registry.selector)

        if self.validate_model:
            for issue in check_model_class(type(model), name):
                logger.warning("model %r: %s", name, issue)

        with prm.subsection(self.registry.section):
            model.parse_parameters(prm)
        if isinstance(model, SimulatorAccess):
            if self.context is None:
                raise ContractViolationError(
                    f"Model '{name}' needs a simulator context, but none was given"
                )
            model.initialize_simulator(self.context)
        model.initialize()

        self._model = model
        self._model_name = name
        logger.info("fluid pressure boundary model %r ready (dim=%d)", name, self.dim)
        return model

    def allocate_result(self, n_points: int) -> np.ndarray:
        return np.zeros((n_points, self.dim), dtype=np.float64)

    def fluid_pressure_gradient(
        self,
        boundary_id: int,
        inputs: MaterialModelInputs,
        outputs: MaterialModelOutputs,
        result: np.ndarray,
    ) -> np.ndarray:
        """Evaluate the active model on one batch; returns `result`."""
        model = self.model
        check_batch(self.dim, inputs, outputs, result)
        shape = result.shape
        model.fluid_pressure_gradient(boundary_id, inputs, outputs, result)
        check_result_unchanged(result, shape, self._model_name or type(model).__name__)
        if self.check_finite:
            check_finite(result, self._model_name or type(model).__name__, boundary_id)
        return result
