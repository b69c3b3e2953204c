# src/fluidbc/boundary/base.py
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, Dict

import numpy as np

if TYPE_CHECKING:
    from fluidbc.params import ParameterHandler
    from fluidbc.runtime.material import MaterialModelInputs, MaterialModelOutputs

__all__ = ["SUPPORTED_DIMENSIONS", "Interface"]

SUPPORTED_DIMENSIONS: tuple[int, ...] = (2, 3)


class Interface(ABC):
    """
    Base class for fluid pressure boundary models.

    A model is written once, dimension-independently, and used through its
    per-dimension specializations: ``Density[2]`` and ``Density[3]`` are
    distinct cached subclasses whose ``dim`` class attribute is fixed. Only
    specialized classes can be instantiated.

    Lifecycle driven by the host:
      1. ``declare_parameters(prm)``  (classmethod; called for every
         registered model, selected or not)
      2. construction by the registry factory
      3. ``parse_parameters(prm)``
      4. ``initialize()``
      5. ``fluid_pressure_gradient(...)`` any number of times

    Steps 1, 3 and 4 default to no-ops, so models without runtime parameters
    only implement ``fluid_pressure_gradient``.
    """

    dim: ClassVar[int] = 0
    _specializations: ClassVar[Dict[int, type]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        cls._specializations = {}

    def __class_getitem__(cls, dim: int) -> type:
        return cls.specialize(dim)

    def __new__(cls, *args, **kwargs):
        if not cls.dim:
            raise TypeError(
                f"{cls.__name__} is not specialized for a dimension; "
                f"use {cls.__name__}[2] or {cls.__name__}[3]"
            )
        return super().__new__(cls)

    @classmethod
    def specialize(cls, dim: int) -> type:
        """Return the subclass of `cls` bound to `dim` (created once)."""
        if cls.dim:
            if dim == cls.dim:
                return cls
            raise TypeError(f"{cls.__name__} is already specialized for dim={cls.dim}")
        if dim not in SUPPORTED_DIMENSIONS:
            raise TypeError(f"Unsupported dimension {dim!r}; expected one of {SUPPORTED_DIMENSIONS}")
        spec = cls._specializations.get(dim)
        if spec is None:
            spec = type(cls)(
                f"{cls.__name__}[{dim}]",
                (cls,),
                {
                    "dim": dim,
                    "__module__": cls.__module__,
                    "__qualname__": f"{cls.__qualname__}[{dim}]",
                    "__doc__": cls.__doc__,
                },
            )
            cls._specializations[dim] = spec
        return spec

    @classmethod
    def is_specialized(cls) -> bool:
        return bool(cls.dim)

    def initialize(self) -> None:
        """
        Called once after parse_parameters and after the simulator context
        (if any) is attached.
        """

    @classmethod
    def declare_parameters(cls, prm: ParameterHandler) -> None:
        """
        Declare the entries this model reads. The default declares nothing.

        Called inside the registry's section for every registered model, so
        it must be idempotent and must not assume this model is selected.
        """

    def parse_parameters(self, prm: ParameterHandler) -> None:
        """Read the entries declared by `declare_parameters`. Default: nothing."""

    @abstractmethod
    def fluid_pressure_gradient(
        self,
        boundary_id: int,
        inputs: MaterialModelInputs,
        outputs: MaterialModelOutputs,
        result: np.ndarray,
    ) -> None:
        """
        Compute the fluid pressure gradient at each evaluation point.

        Args:
            boundary_id: Boundary indicator of the segment being evaluated.
            inputs: Material model inputs at N points.
            outputs: Material model outputs at the same N points.
            result: Caller-allocated (N, dim) array; row q receives the
                gradient at point q. Fill it in place, never resize it.

        Typically ``outputs.densities[q]`` (or ``outputs.fluid_densities[q]``)
        times the gravity vector at point q.
        """
        ...
