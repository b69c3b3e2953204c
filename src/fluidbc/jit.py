# src/fluidbc/jit.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict

from numba import njit

# JIT toggle applied *only here*.
# With jit=False we hand back the original Python callable.

__all__ = ["JittedCallable", "jit_compile"]


@dataclass(frozen=True)
class JittedCallable:
    fn: Callable
    jitted: bool


_dispatchers: Dict[Callable, Callable] = {}


def jit_compile(fn: Callable, *, jit: bool = True) -> JittedCallable:
    """
    Centralized JIT compilation with consistent error handling.

    Behavior:
        - If jit=False: returns original Python function
        - If jit=True: returns a numba dispatcher, shared by every caller
          that asks for the same function
        - If numba rejects the function: raises RuntimeError with details

    Note that numba compiles lazily, so type errors inside the kernel surface
    on the first call rather than here.
    """
    if not jit:
        return JittedCallable(fn=fn, jitted=False)

    compiled = _dispatchers.get(fn)
    if compiled is None:
        try:
            compiled = njit(cache=False)(fn)
        except Exception as e:
            raise RuntimeError(
                f"JIT compilation with numba failed: {type(e).__name__}: {e}"
            ) from e
        _dispatchers[fn] = compiled
    return JittedCallable(fn=compiled, jitted=True)
