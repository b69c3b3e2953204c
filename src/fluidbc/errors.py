# src/fluidbc/errors.py
from __future__ import annotations
from typing import Sequence

__all__ = [
    "FluidBCError",
    "RegistrationError",
    "DuplicateRegistrationError",
    "ConfigError",
    "UnknownModelError",
    "ContractViolationError",
    "ModelValidationError",
]


class FluidBCError(Exception):
    """Base error for the fluidbc package."""


class RegistrationError(FluidBCError):
    """Raised when a model cannot be added to a registry."""
    def __init__(self, message: str):
        super().__init__(message)


class DuplicateRegistrationError(RegistrationError):
    """Raised when a model name is registered twice for the same dimension."""
    def __init__(self, name: str, dim: int):
        self.name = name
        self.dim = dim
        super().__init__(
            f"Fluid pressure boundary model '{name}' is already registered for dim={dim}."
        )


class ConfigError(FluidBCError):
    """Raised when configuration input is malformed or invalid."""
    def __init__(self, message: str):
        super().__init__(message)


class UnknownModelError(ConfigError):
    """Raised when the configured model name is not registered."""
    def __init__(self, name: str | None, choices: Sequence[str], dim: int | None = None):
        self.name = name
        self.choices = list(choices)
        self.dim = dim
        where = f" for dim={dim}" if dim is not None else ""
        if name is None or name == "":
            msg = f"No fluid pressure boundary model selected{where}.\n"
        else:
            msg = f"Unknown fluid pressure boundary model name: '{name}'{where}\n"
        if self.choices:
            msg += "Valid names:\n"
            for c in self.choices:
                msg += f"  - {c}\n"
        else:
            msg += "No models are registered."
        super().__init__(msg)


class ContractViolationError(FluidBCError, AssertionError):
    """Raised when a host or model breaks the evaluation contract."""


class ModelValidationError(FluidBCError):
    """Raised when a model implementation violates evaluation guardrails."""
