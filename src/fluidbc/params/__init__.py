# src/fluidbc/params/__init__.py
from .handler import ParameterHandler
from .patterns import (
    Pattern, PatternMismatch, Anything, Bool, Integer, Double, Selection, List,
)

__all__ = [
    "ParameterHandler",
    "Pattern", "PatternMismatch", "Anything", "Bool", "Integer", "Double", "Selection", "List",
]
