# src/fluidbc/boundary/__init__.py
from .base import SUPPORTED_DIMENSIONS, Interface
from .registry import (
    DEFAULT_SECTION, DEFAULT_SELECTOR, ModelSelection, PluginCatalog, PluginRegistry, RegistryEntry,
)
from . import density, uniform

__all__ = [
    "SUPPORTED_DIMENSIONS", "Interface",
    "RegistryEntry", "ModelSelection", "PluginRegistry", "PluginCatalog",
    "DEFAULT_SECTION", "DEFAULT_SELECTOR",
    "BUILTIN_MODELS", "register_builtin_models", "create_catalog",
]

# (class, name, description) for every model shipped with the package
BUILTIN_MODELS = (
    (density.Density, "density", density.DESCRIPTION),
    (uniform.Uniform, "uniform", uniform.DESCRIPTION),
)


def register_builtin_models(catalog: PluginCatalog) -> PluginCatalog:
    for cls, name, description in BUILTIN_MODELS:
        catalog.register_model(cls, name, description)
    return catalog


def create_catalog(*, builtins: bool = True, default: str | None = "density") -> PluginCatalog:
    """
    Fresh catalog, optionally holding the built-in models.

    `default` names the model used when the input does not select one; it
    is ignored for a catalog without built-ins.
    """
    catalog = PluginCatalog(default=default if builtins else None)
    if builtins:
        register_builtin_models(catalog)
    return catalog
