# src/fluidbc/runtime/guards.py
from __future__ import annotations
import math

import numpy as np

from fluidbc.errors import ContractViolationError, FluidBCError
from fluidbc.jit import jit_compile
from .material import MaterialModelInputs, MaterialModelOutputs

__all__ = ["check_batch", "check_result_unchanged", "check_finite", "allfinite2d"]


def check_batch(
    dim: int,
    inputs: MaterialModelInputs,
    outputs: MaterialModelOutputs,
    result: np.ndarray,
) -> None:
    """Preconditions of one fluid_pressure_gradient call."""
    n = inputs.n_evaluation_points
    if outputs.n_evaluation_points != n:
        raise ContractViolationError(
            f"Material outputs have {outputs.n_evaluation_points} points, inputs have {n}"
        )
    if inputs.dim != dim:
        raise ContractViolationError(f"Evaluation points have dim={inputs.dim}, model has dim={dim}")
    if not isinstance(result, np.ndarray):
        raise ContractViolationError(
            f"Result must be a preallocated numpy array, got {type(result).__name__}"
        )
    if result.shape != (n, dim):
        raise ContractViolationError(
            f"Result has shape {result.shape}, expected {(n, dim)} "
            f"(one gradient per evaluation point)"
        )
    if not result.flags.writeable:
        raise ContractViolationError("Result array is read-only")


def check_result_unchanged(result: np.ndarray, shape: tuple, model_name: str) -> None:
    """Postcondition: the model filled `result` without resizing it."""
    if result.shape != shape:
        raise ContractViolationError(
            f"Model '{model_name}' resized the result array from {shape} to {result.shape}"
        )


def _allfinite2d_impl(x: np.ndarray) -> bool:
    n, m = x.shape
    for i in range(n):
        for j in range(m):
            if not math.isfinite(x[i, j]):
                return False
    return True


def allfinite2d(x: np.ndarray, *, jit: bool = True) -> bool:
    return bool(jit_compile(_allfinite2d_impl, jit=jit).fn(x))


def check_finite(result: np.ndarray, model_name: str, boundary_id: int, *, jit: bool = True) -> None:
    if not allfinite2d(result, jit=jit):
        bad = np.argwhere(~np.isfinite(result))
        q = int(bad[0, 0])
        raise FluidBCError(
            f"Model '{model_name}' produced a non-finite gradient on boundary {boundary_id} "
            f"at evaluation point {q}: {result[q].tolist()}"
        )
