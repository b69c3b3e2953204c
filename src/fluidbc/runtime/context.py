# src/fluidbc/runtime/context.py
"""
Shared simulation context handed to models that ask for it.

Models opt in by mixing in `SimulatorAccess`; the host attaches the context
after `parse_parameters` and before `initialize`.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol, Sequence

import numpy as np

from fluidbc.errors import ContractViolationError

__all__ = [
    "GravityModel", "ConstantGravity", "VerticalGravity",
    "SimulatorContext", "SimulatorAccess",
]


class GravityModel(Protocol):
    def gravity_vector(self, position: np.ndarray) -> np.ndarray:
        """Return gravity at each row of `position` as an (N, dim) array."""
        ...


class ConstantGravity:
    """The same gravity vector everywhere."""

    def __init__(self, vector: Sequence[float]):
        self.vector = np.asarray(vector, dtype=np.float64)
        if self.vector.ndim != 1:
            raise ValueError(f"gravity vector must be 1-D, got shape {self.vector.shape}")

    @property
    def dim(self) -> int:
        return int(self.vector.shape[0])

    def gravity_vector(self, position: np.ndarray) -> np.ndarray:
        n, dim = position.shape
        if dim != self.dim:
            raise ContractViolationError(
                f"gravity has dim={self.dim}, evaluation points have dim={dim}"
            )
        return np.broadcast_to(self.vector, (n, dim))


class VerticalGravity:
    """Gravity of fixed magnitude pointing down the last coordinate axis."""

    def __init__(self, magnitude: float = 9.81):
        self.magnitude = float(magnitude)

    def gravity_vector(self, position: np.ndarray) -> np.ndarray:
        out = np.zeros(position.shape, dtype=np.float64)
        if out.shape[1] > 0:
            out[:, -1] = -self.magnitude
        return out


@dataclass(frozen=True)
class SimulatorContext:
    dim: int
    gravity: GravityModel


class SimulatorAccess:
    """Mixin giving a model read access to the simulator context."""

    _simulator_context: SimulatorContext | None = None

    def initialize_simulator(self, context: SimulatorContext) -> None:
        dim = getattr(self, "dim", context.dim)
        if context.dim != dim:
            raise ContractViolationError(
                f"{type(self).__name__} is built for dim={dim}, context has dim={context.dim}"
            )
        self._simulator_context = context

    def get_context(self) -> SimulatorContext:
        if self._simulator_context is None:
            raise ContractViolationError(
                f"{type(self).__name__}: simulator context accessed before it was attached"
            )
        return self._simulator_context

    def get_gravity_model(self) -> GravityModel:
        return self.get_context().gravity
