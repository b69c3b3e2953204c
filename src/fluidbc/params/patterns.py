# src/fluidbc/params/patterns.py
"""
Validity patterns for parameter entries.

A pattern normalizes a raw value (as read from TOML or passed to `set`) into
the Python value handed to models, or rejects it. Rejection raises
`PatternMismatch`; the handler turns that into a user-facing error via
`Pattern.mismatch`, so patterns can pick their own error type.
"""
from __future__ import annotations
import math
from typing import Any, Iterable, Sequence

from fluidbc.errors import ConfigError

__all__ = [
    "Pattern", "PatternMismatch",
    "Anything", "Bool", "Integer", "Double", "Selection", "List",
]


class PatternMismatch(ValueError):
    """Internal signal: value does not satisfy the pattern."""


class Pattern:
    """Base class for entry validity patterns."""

    def validate(self, value: Any) -> Any:
        raise NotImplementedError

    def description(self) -> str:
        raise NotImplementedError

    def mismatch(self, path: str, value: Any, reason: str = "") -> ConfigError:
        msg = f"Invalid value {value!r} for entry '{path}': expected {self.description()}"
        if reason:
            msg += f" ({reason})"
        return ConfigError(msg)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.description()}>"


class Anything(Pattern):
    def validate(self, value: Any) -> Any:
        return value

    def description(self) -> str:
        return "[Anything]"


class Bool(Pattern):
    _TRUE = {"true", "yes", "on", "1"}
    _FALSE = {"false", "no", "off", "0"}

    def validate(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            low = value.strip().lower()
            if low in self._TRUE:
                return True
            if low in self._FALSE:
                return False
        raise PatternMismatch("not a boolean")

    def description(self) -> str:
        return "[Bool]"


class Integer(Pattern):
    def __init__(self, lower: int | None = None, upper: int | None = None):
        self.lower = lower
        self.upper = upper

    def validate(self, value: Any) -> int:
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool):
            raise PatternMismatch("booleans are not integers")
        if isinstance(value, int):
            out = value
        elif isinstance(value, str):
            try:
                out = int(value.strip())
            except ValueError as e:
                raise PatternMismatch("not an integer") from e
        else:
            raise PatternMismatch("not an integer")
        if self.lower is not None and out < self.lower:
            raise PatternMismatch(f"below lower bound {self.lower}")
        if self.upper is not None and out > self.upper:
            raise PatternMismatch(f"above upper bound {self.upper}")
        return out

    def description(self) -> str:
        lo = "-inf" if self.lower is None else str(self.lower)
        hi = "inf" if self.upper is None else str(self.upper)
        return f"[Integer range {lo}...{hi} (inclusive)]"


class Double(Pattern):
    def __init__(self, lower: float | None = None, upper: float | None = None):
        self.lower = lower
        self.upper = upper

    def validate(self, value: Any) -> float:
        if isinstance(value, bool):
            raise PatternMismatch("booleans are not numbers")
        if isinstance(value, (int, float)):
            out = float(value)
        elif isinstance(value, str):
            try:
                out = float(value.strip())
            except ValueError as e:
                raise PatternMismatch("not a number") from e
        else:
            raise PatternMismatch("not a number")
        if not math.isfinite(out):
            raise PatternMismatch("must be finite")
        if self.lower is not None and out < self.lower:
            raise PatternMismatch(f"below lower bound {self.lower}")
        if self.upper is not None and out > self.upper:
            raise PatternMismatch(f"above upper bound {self.upper}")
        return out

    def description(self) -> str:
        lo = "-MAX_DOUBLE" if self.lower is None else repr(float(self.lower))
        hi = "MAX_DOUBLE" if self.upper is None else repr(float(self.upper))
        return f"[Double {lo}...{hi} (inclusive)]"


class Selection(Pattern):
    def __init__(self, choices: Iterable[str]):
        self.choices: tuple[str, ...] = tuple(choices)

    def validate(self, value: Any) -> str:
        if not isinstance(value, str):
            raise PatternMismatch("not a string")
        out = value.strip()
        if out not in self.choices:
            raise PatternMismatch("not one of the allowed choices")
        return out

    def description(self) -> str:
        return f"[Selection {'|'.join(self.choices)} ]"


class List(Pattern):
    """
    A list of values that each satisfy `pattern`.

    Accepts a TOML array or a comma-separated string ("0, -9.81").
    """
    def __init__(
        self,
        pattern: Pattern,
        min_length: int = 0,
        max_length: int | None = None,
    ):
        self.pattern = pattern
        self.min_length = min_length
        self.max_length = max_length

    def validate(self, value: Any) -> list:
        items: Sequence[Any]
        if isinstance(value, str):
            stripped = value.strip()
            items = [] if not stripped else [s.strip() for s in stripped.split(",")]
        elif isinstance(value, (list, tuple)):
            items = value
        else:
            raise PatternMismatch("not a list")
        if len(items) < self.min_length:
            raise PatternMismatch(f"needs at least {self.min_length} items, got {len(items)}")
        if self.max_length is not None and len(items) > self.max_length:
            raise PatternMismatch(f"allows at most {self.max_length} items, got {len(items)}")
        out = []
        for i, item in enumerate(items):
            try:
                out.append(self.pattern.validate(item))
            except PatternMismatch as e:
                raise PatternMismatch(f"item {i}: {e}") from e
        return out

    def description(self) -> str:
        hi = "inf" if self.max_length is None else str(self.max_length)
        return (
            f"[List of <{self.pattern.description()}> "
            f"of length {self.min_length}...{hi} (inclusive)]"
        )
