# src/fluidbc/boundary/registry.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from fluidbc.errors import (
    ContractViolationError, DuplicateRegistrationError, RegistrationError, UnknownModelError,
)
from fluidbc.params import ParameterHandler, Selection
from .base import SUPPORTED_DIMENSIONS, Interface

__all__ = [
    "RegistryEntry", "ModelSelection", "PluginRegistry", "PluginCatalog",
    "DEFAULT_SECTION", "DEFAULT_SELECTOR",
]

logger = logging.getLogger(__name__)

DEFAULT_SECTION = "Boundary fluid pressure model"
DEFAULT_SELECTOR = "Plugin name"

DeclareFn = Callable[[ParameterHandler], None]
FactoryFn = Callable[[], Interface]


@dataclass(frozen=True)
class RegistryEntry:
    name: str
    description: str
    declare_parameters: DeclareFn
    factory: FactoryFn


class ModelSelection(Selection):
    """Selection over registered model names; mismatches are unknown-model errors."""

    def __init__(self, choices, dim: int | None = None):
        super().__init__(choices)
        self.dim = dim

    def mismatch(self, path, value, reason=""):
        return UnknownModelError(str(value), self.choices, self.dim)


class PluginRegistry:
    """
    Catalog of fluid pressure boundary models for one dimension.

    Entries are added with `register` during startup and never removed.
    The first `declare_parameters` call seals the registry: everything a
    parameter file may name must be known before the file is described.
    """

    def __init__(
        self,
        dim: int,
        *,
        section: str = DEFAULT_SECTION,
        selector: str = DEFAULT_SELECTOR,
        default: Optional[str] = None,
    ):
        if dim not in SUPPORTED_DIMENSIONS:
            raise ValueError(f"Unsupported dimension {dim!r}; expected one of {SUPPORTED_DIMENSIONS}")
        self.dim = dim
        self.section = section
        self.selector = selector
        self.default = default
        # name -> entry, in registration order
        self._entries: Dict[str, RegistryEntry] = {}
        self._sealed = False

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register(
        self,
        name: str,
        description: str,
        declare_parameters_function: DeclareFn,
        factory_function: FactoryFn,
    ) -> None:
        if self._sealed:
            raise RegistrationError(
                f"Cannot register '{name}' for dim={self.dim}: parameters were already declared."
            )
        if not isinstance(name, str) or not name.strip():
            raise RegistrationError(f"Model name must be a non-empty string, got {name!r}")
        if name != name.strip() or "|" in name:
            raise RegistrationError(f"Model name {name!r} has surrounding whitespace or '|'")
        if name in self._entries:
            raise DuplicateRegistrationError(name, self.dim)
        self._entries[name] = RegistryEntry(
            name=name,
            description=description,
            declare_parameters=declare_parameters_function,
            factory=factory_function,
        )
        logger.debug("registered fluid pressure boundary model %r (dim=%d)", name, self.dim)

    @property
    def sealed(self) -> bool:
        return self._sealed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def names(self) -> List[str]:
        return list(self._entries)

    def entries(self) -> Tuple[RegistryEntry, ...]:
        return tuple(self._entries.values())

    def description(self, name: str) -> str:
        return self._get(name).description

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def get_description_string(self) -> str:
        """Selector documentation: one paragraph per registered model."""
        lines = ["Select one of the following models:", ""]
        for entry in sorted(self._entries.values(), key=lambda e: e.name):
            lines.append(f"'{entry.name}': {entry.description}")
            lines.append("")
        return "\n".join(lines).rstrip()

    # ------------------------------------------------------------------
    # Parameter phases
    # ------------------------------------------------------------------
    def declare_parameters(self, prm: ParameterHandler) -> None:
        """
        Declare the selector and the entries of every registered model.

        Model declarations run inside this registry's section; each model
        typically opens its own subsection there.
        """
        self._sealed = True
        if self.default is not None and self.default not in self._entries:
            raise RegistrationError(
                f"Default model '{self.default}' is not registered for dim={self.dim}"
            )
        with prm.subsection(self.section):
            prm.declare_entry(
                self.selector,
                self.default,
                ModelSelection(sorted(self._entries), self.dim),
                self.get_description_string(),
            )
            for entry in self._entries.values():
                entry.declare_parameters(prm)

    declare_all_parameters = declare_parameters

    def create(self, prm: ParameterHandler) -> Interface:
        """
        Construct the model named by the selector entry.

        The returned model has neither parsed its parameters nor been
        initialized; the caller does both, in that order.
        """
        with prm.subsection(self.section):
            if not prm.is_declared(self.selector):
                # declare_parameters never ran on this handler
                raise UnknownModelError(None, sorted(self._entries), self.dim)
            name = prm.get(self.selector) if prm.is_set(self.selector) or self.default else None
        if name is None or name not in self._entries:
            raise UnknownModelError(name, sorted(self._entries), self.dim)
        model = self._entries[name].factory()
        model_dim = getattr(model, "dim", None)
        if not isinstance(model, Interface) or model_dim != self.dim:
            raise ContractViolationError(
                f"Factory for '{name}' built {type(model).__name__} (dim={model_dim}), "
                f"expected an Interface for dim={self.dim}"
            )
        logger.info("selected fluid pressure boundary model %r (dim=%d)", name, self.dim)
        return model

    def _get(self, name: str) -> RegistryEntry:
        try:
            return self._entries[name]
        except KeyError:
            raise UnknownModelError(name, sorted(self._entries), self.dim) from None


class PluginCatalog:
    """
    One `PluginRegistry` per supported dimension.

    `register_model` instantiates a dimension-independent model class for
    every dimension and registers each specialization in the matching
    registry:

        catalog = PluginCatalog()

        @catalog.plugin("uniform", "Constant gradient everywhere.")
        class Uniform(Interface):
            ...
    """

    def __init__(
        self,
        dims: Tuple[int, ...] = SUPPORTED_DIMENSIONS,
        *,
        section: str = DEFAULT_SECTION,
        selector: str = DEFAULT_SELECTOR,
        default: Optional[str] = None,
    ):
        self._registries: Dict[int, PluginRegistry] = {
            dim: PluginRegistry(dim, section=section, selector=selector, default=default)
            for dim in dims
        }

    @property
    def dims(self) -> Tuple[int, ...]:
        return tuple(self._registries)

    def __getitem__(self, dim: int) -> PluginRegistry:
        try:
            return self._registries[dim]
        except KeyError:
            raise KeyError(f"No registry for dim={dim}; available: {list(self._registries)}") from None

    def register_model(self, cls: type, name: str, description: str) -> type:
        """
        Register `cls[dim]` under `name` for every dimension of the catalog.

        A class already fixed to one dimension is registered for that
        dimension only.
        """
        if not (isinstance(cls, type) and issubclass(cls, Interface)):
            raise RegistrationError(f"{cls!r} does not derive from Interface")
        dims = (cls.dim,) if cls.is_specialized() else self.dims
        # Check every registry before inserting into any
        for dim in dims:
            registry = self[dim]
            if registry.sealed:
                raise RegistrationError(
                    f"Cannot register '{name}' for dim={dim}: parameters were already declared."
                )
            if name in registry:
                raise DuplicateRegistrationError(name, dim)
        for dim in dims:
            spec = cls.specialize(dim)
            self[dim].register(name, description, spec.declare_parameters, spec)
        return cls

    def plugin(self, name: str, description: str) -> Callable[[type], type]:
        def decorator(cls: type) -> type:
            return self.register_model(cls, name, description)
        return decorator
