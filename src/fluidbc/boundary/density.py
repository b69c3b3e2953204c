# src/fluidbc/boundary/density.py
"""
Density-based fluid pressure gradient: rho * g at every boundary point.

Either the solid density or the fluid density reported by the material
model is used, selected by "Density formulation".
"""
from __future__ import annotations
from typing import TYPE_CHECKING

import numpy as np

from fluidbc.errors import FluidBCError
from fluidbc.jit import jit_compile
from fluidbc.params import Bool, Selection
from fluidbc.runtime.context import SimulatorAccess
from fluidbc.runtime.guards import check_batch
from .base import Interface
from .kernels import scale_rows

if TYPE_CHECKING:
    from fluidbc.params import ParameterHandler
    from fluidbc.runtime.material import MaterialModelInputs, MaterialModelOutputs

__all__ = ["Density", "DESCRIPTION"]

DESCRIPTION = (
    "A plugin that prescribes the fluid pressure gradient at the boundary "
    "based on the fluid or solid density from the material model, "
    "multiplied by the gravity vector."
)

SOLID = "solid density"
FLUID = "fluid density"


class Density(SimulatorAccess, Interface):
    """rho * g, with rho from the solid or the fluid phase."""

    def __init__(self) -> None:
        self.density_formulation = SOLID
        self.use_jit = True
        self._kernel = scale_rows

    @classmethod
    def declare_parameters(cls, prm: ParameterHandler) -> None:
        with prm.subsection("Density"):
            prm.declare_entry(
                "Density formulation",
                SOLID,
                Selection([SOLID, FLUID]),
                "The density formulation used to compute the fluid pressure gradient "
                "at the model boundary. 'solid density' prescribes the gradient as "
                "solid density times gravity (the lithostatic pressure), 'fluid "
                "density' as fluid density times gravity (the hydrostatic pressure).",
            )
            prm.declare_entry(
                "Use JIT",
                True,
                Bool(),
                "Whether to compile the per-point loop with numba.",
            )

    def parse_parameters(self, prm: ParameterHandler) -> None:
        with prm.subsection("Density"):
            self.density_formulation = prm.get("Density formulation")
            self.use_jit = prm.get_bool("Use JIT")

    def initialize(self) -> None:
        # Fail now rather than at the first boundary evaluation
        self.get_gravity_model()
        self._kernel = jit_compile(scale_rows, jit=self.use_jit).fn

    def fluid_pressure_gradient(
        self,
        boundary_id: int,
        inputs: MaterialModelInputs,
        outputs: MaterialModelOutputs,
        result: np.ndarray,
    ) -> None:
        check_batch(self.dim, inputs, outputs, result)
        if self.density_formulation == FLUID:
            if outputs.fluid_densities is None:
                raise FluidBCError(
                    "Density formulation 'fluid density' needs fluid densities, "
                    "but the material model did not provide any."
                )
            rho = outputs.fluid_densities
        else:
            rho = outputs.densities
        gravity = np.ascontiguousarray(
            self.get_gravity_model().gravity_vector(inputs.position), dtype=np.float64
        )
        self._kernel(rho, gravity, result)
