# src/fluidbc/runtime/material.py
"""
Evaluation batches exchanged with the material model.

Both containers hold one row per evaluation point. They are produced by the
host (inputs) and by the material model (outputs); boundary models only read
them.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

import numpy as np

from fluidbc.errors import ContractViolationError

__all__ = ["MaterialModelInputs", "MaterialModelOutputs"]


def _as_float_array(name: str, value, ndim: int) -> np.ndarray:
    arr = np.asarray(value, dtype=np.float64)
    if arr.ndim != ndim:
        raise ContractViolationError(f"{name} must be {ndim}-D, got shape {arr.shape}")
    return arr


@dataclass
class MaterialModelInputs:
    """
    Material model inputs at a batch of evaluation points.

    position:    (N, dim) point coordinates
    temperature: (N,)
    pressure:    (N,)
    composition: (N, n_comp), n_comp may be 0
    """
    position: np.ndarray
    temperature: np.ndarray
    pressure: np.ndarray
    composition: np.ndarray

    def __post_init__(self) -> None:
        self.position = _as_float_array("position", self.position, 2)
        self.temperature = _as_float_array("temperature", self.temperature, 1)
        self.pressure = _as_float_array("pressure", self.pressure, 1)
        self.composition = _as_float_array("composition", self.composition, 2)
        n = self.position.shape[0]
        for name in ("temperature", "pressure", "composition"):
            if getattr(self, name).shape[0] != n:
                raise ContractViolationError(
                    f"{name} has {getattr(self, name).shape[0]} points, position has {n}"
                )

    @classmethod
    def empty(cls, n_points: int, dim: int, n_compositional_fields: int = 0) -> "MaterialModelInputs":
        return cls(
            position=np.zeros((n_points, dim)),
            temperature=np.zeros((n_points,)),
            pressure=np.zeros((n_points,)),
            composition=np.zeros((n_points, n_compositional_fields)),
        )

    @classmethod
    def at_points(cls, position) -> "MaterialModelInputs":
        pos = _as_float_array("position", position, 2)
        out = cls.empty(pos.shape[0], pos.shape[1])
        out.position = pos
        return out

    @property
    def n_evaluation_points(self) -> int:
        return int(self.position.shape[0])

    @property
    def dim(self) -> int:
        return int(self.position.shape[1])


@dataclass
class MaterialModelOutputs:
    """Material properties at the same points as the matching inputs."""
    densities: np.ndarray
    fluid_densities: Optional[np.ndarray] = None

    def __post_init__(self) -> None:
        self.densities = _as_float_array("densities", self.densities, 1)
        if self.fluid_densities is not None:
            self.fluid_densities = _as_float_array("fluid_densities", self.fluid_densities, 1)
            if self.fluid_densities.shape != self.densities.shape:
                raise ContractViolationError(
                    f"fluid_densities has {self.fluid_densities.shape[0]} points, "
                    f"densities has {self.densities.shape[0]}"
                )

    @property
    def n_evaluation_points(self) -> int:
        return int(self.densities.shape[0])
