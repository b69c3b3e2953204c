# src/fluidbc/boundary/uniform.py
from __future__ import annotations
from typing import TYPE_CHECKING

import numpy as np

from fluidbc.jit import jit_compile
from fluidbc.params import Bool, Double, List
from fluidbc.runtime.guards import check_batch
from .base import Interface
from .kernels import fill_rows

if TYPE_CHECKING:
    from fluidbc.params import ParameterHandler
    from fluidbc.runtime.material import MaterialModelInputs, MaterialModelOutputs

__all__ = ["Uniform", "DESCRIPTION"]

DESCRIPTION = (
    "A plugin that prescribes the same fluid pressure gradient vector at "
    "every boundary point, independent of the material model."
)


class Uniform(Interface):
    """Constant gradient vector everywhere."""

    def __init__(self) -> None:
        self.gradient = np.zeros((self.dim,), dtype=np.float64)
        self.use_jit = True
        self._kernel = fill_rows

    @classmethod
    def declare_parameters(cls, prm: ParameterHandler) -> None:
        # Length depends on the dimension the class is specialized for
        with prm.subsection("Uniform"):
            prm.declare_entry(
                "Gradient",
                [0.0] * cls.dim,
                List(Double(), min_length=cls.dim, max_length=cls.dim),
                f"The fluid pressure gradient vector, {cls.dim} components. "
                "Units: Pa/m.",
            )
            prm.declare_entry(
                "Use JIT",
                True,
                Bool(),
                "Whether to compile the per-point loop with numba.",
            )

    def parse_parameters(self, prm: ParameterHandler) -> None:
        with prm.subsection("Uniform"):
            self.gradient = np.array(prm.get("Gradient"), dtype=np.float64)
            self.use_jit = prm.get_bool("Use JIT")

    def initialize(self) -> None:
        self._kernel = jit_compile(fill_rows, jit=self.use_jit).fn

    def fluid_pressure_gradient(
        self,
        boundary_id: int,
        inputs: MaterialModelInputs,
        outputs: MaterialModelOutputs,
        result: np.ndarray,
    ) -> None:
        check_batch(self.dim, inputs, outputs, result)
        self._kernel(self.gradient, result)
