# src/fluidbc/runtime/__init__.py
from .context import ConstantGravity, GravityModel, SimulatorAccess, SimulatorContext, VerticalGravity
from .manager import FluidPressureBoundary
from .material import MaterialModelInputs, MaterialModelOutputs

__all__ = [
    "MaterialModelInputs", "MaterialModelOutputs",
    "GravityModel", "ConstantGravity", "VerticalGravity",
    "SimulatorContext", "SimulatorAccess",
    "FluidPressureBoundary",
]
