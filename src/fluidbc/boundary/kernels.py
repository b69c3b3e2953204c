# src/fluidbc/boundary/kernels.py
"""
Per-point loops shared by the built-in models.

Kernels write into `out` in place and never allocate; they are plain
Python so `fluidbc.jit.jit_compile` can hand back either version.
"""
from __future__ import annotations
import numpy as np

__all__ = ["scale_rows", "fill_rows"]


def scale_rows(weights: np.ndarray, vectors: np.ndarray, out: np.ndarray) -> None:
    # out[q, :] = weights[q] * vectors[q, :]
    n, dim = out.shape
    for q in range(n):
        w = weights[q]
        for d in range(dim):
            out[q, d] = w * vectors[q, d]


def fill_rows(vector: np.ndarray, out: np.ndarray) -> None:
    n, dim = out.shape
    for q in range(n):
        for d in range(dim):
            out[q, d] = vector[d]
