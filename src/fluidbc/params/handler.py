# src/fluidbc/params/handler.py
"""
Hierarchical parameter store backed by TOML input.

Entries are declared first (name, default, pattern, documentation), grouped
in nested subsections, and only then filled from an input file. Reading a
value that was never declared is an error; so is supplying one.

    [Boundary fluid pressure model]
    "Plugin name" = "density"

    [Boundary fluid pressure model.Density]
    "Density formulation" = "fluid density"
"""
from __future__ import annotations
import difflib
import re
import warnings
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional

from fluidbc.errors import ConfigError
from .patterns import Anything, Pattern, PatternMismatch

try:
    import tomllib  # Python 3.11+
except ImportError:  # pragma: no cover - fallback for <3.11
    import tomli as tomllib  # type: ignore

__all__ = ["ParameterHandler"]

_SEP = "."


@dataclass
class _Entry:
    default: Any
    pattern: Pattern
    documentation: str = ""
    value: Any = None
    is_set: bool = False


@dataclass
class _Section:
    entries: Dict[str, _Entry] = field(default_factory=dict)
    subsections: Dict[str, "_Section"] = field(default_factory=dict)


class ParameterHandler:
    """
    Declare-then-parse configuration store.

    `declare_entry` and `get` operate relative to the current subsection,
    which is changed with `enter_subsection`/`leave_subsection` or the
    `subsection()` context manager.
    """

    def __init__(self) -> None:
        self._root = _Section()
        self._path: List[str] = []

    # ------------------------------------------------------------------
    # Scoping
    # ------------------------------------------------------------------
    def enter_subsection(self, name: str) -> None:
        if not name or _SEP in name:
            raise ConfigError(f"Invalid subsection name {name!r}")
        current = self._current()
        if name not in current.subsections:
            current.subsections[name] = _Section()
        self._path.append(name)

    def leave_subsection(self) -> None:
        if not self._path:
            raise ConfigError("leave_subsection() called at top level")
        self._path.pop()

    @contextmanager
    def subsection(self, name: str) -> Iterator["ParameterHandler"]:
        self.enter_subsection(name)
        try:
            yield self
        finally:
            self.leave_subsection()

    @property
    def current_path(self) -> tuple[str, ...]:
        return tuple(self._path)

    # ------------------------------------------------------------------
    # Declaration
    # ------------------------------------------------------------------
    def declare_entry(
        self,
        name: str,
        default: Any,
        pattern: Pattern | None = None,
        documentation: str = "",
    ) -> None:
        """
        Declare `name` in the current subsection.

        A default of None means the entry has no default and must be supplied
        before it is read. Redeclaring an entry replaces its pattern, default
        and documentation; a value that was already set survives if it still
        satisfies the new pattern.
        """
        pattern = pattern if pattern is not None else Anything()
        path = self._entry_path(name)
        if default is not None:
            try:
                default = pattern.validate(default)
            except PatternMismatch as e:
                raise ConfigError(
                    f"Default {default!r} of entry '{path}' does not match "
                    f"{pattern.description()}: {e}"
                ) from e

        section = self._current()
        old = section.entries.get(name)
        entry = _Entry(default=default, pattern=pattern, documentation=documentation)
        if old is not None and old.is_set:
            try:
                entry.value = pattern.validate(old.value)
                entry.is_set = True
            except PatternMismatch:
                warnings.warn(
                    f"Value {old.value!r} of entry '{path}' dropped: it does not match "
                    f"the redeclared pattern {pattern.description()}.",
                    RuntimeWarning,
                    stacklevel=2,
                )
        section.entries[name] = entry

    def is_declared(self, name: str) -> bool:
        return name in self._current().entries

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------
    def set(self, name: str, value: Any) -> None:
        entry = self._lookup(name)
        entry.value = self._validate(entry, self._entry_path(name), value)
        entry.is_set = True

    def get(self, name: str) -> Any:
        entry = self._lookup(name)
        if entry.is_set:
            return entry.value
        if entry.default is None:
            raise ConfigError(f"No value supplied for entry '{self._entry_path(name)}' and it has no default")
        return entry.default

    def get_bool(self, name: str) -> bool:
        return bool(self._typed(name, bool))

    def get_integer(self, name: str) -> int:
        return int(self._typed(name, int))

    def get_double(self, name: str) -> float:
        return float(self._typed(name, (int, float)))

    def is_set(self, name: str) -> bool:
        return self._lookup(name).is_set

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def parse_input(self, path: str | Path) -> None:
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Failed to read parameter file {path}: {e}") from e
        self.parse_input_from_string(text, source=str(path))

    def parse_input_from_string(self, text: str, *, source: str = "<string>") -> None:
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(_format_toml_error(text, e, source)) from e
        self.parse_input_from_mapping(data)

    def parse_input_from_mapping(self, data: Mapping[str, Any]) -> None:
        """Assign values from a nested mapping; tables are subsections."""
        self._assign(self._current(), list(self._path), data)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    def to_toml(self) -> str:
        """Render every declared entry with its documentation as TOML."""
        lines: List[str] = []
        self._render(self._root, [], lines)
        return "\n".join(lines).strip() + "\n"

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------
    def _current(self) -> _Section:
        section = self._root
        for name in self._path:
            section = section.subsections[name]
        return section

    def _entry_path(self, name: str) -> str:
        return _SEP.join([*self._path, name])

    def _lookup(self, name: str) -> _Entry:
        section = self._current()
        try:
            return section.entries[name]
        except KeyError:
            raise ConfigError(
                f"Entry '{self._entry_path(name)}' was not declared"
                + _hint(name, section.entries)
            ) from None

    def _typed(self, name: str, kind) -> Any:
        value = self.get(name)
        if isinstance(value, bool) and kind is not bool:
            raise ConfigError(f"Entry '{self._entry_path(name)}' holds a boolean, not a number")
        if not isinstance(value, kind):
            raise ConfigError(
                f"Entry '{self._entry_path(name)}' holds {type(value).__name__}, "
                f"not {getattr(kind, '__name__', 'a number')}"
            )
        return value

    @staticmethod
    def _validate(entry: _Entry, path: str, value: Any) -> Any:
        try:
            return entry.pattern.validate(value)
        except PatternMismatch as e:
            raise entry.pattern.mismatch(path, value, str(e)) from None

    def _assign(self, section: _Section, path: List[str], data: Mapping[str, Any]) -> None:
        for key, value in data.items():
            where = _SEP.join([*path, key])
            if isinstance(value, dict):
                sub = section.subsections.get(key)
                if sub is None:
                    raise ConfigError(
                        f"Subsection '{where}' was not declared" + _hint(key, section.subsections)
                    )
                self._assign(sub, [*path, key], value)
                continue
            entry = section.entries.get(key)
            if entry is None:
                raise ConfigError(f"Entry '{where}' was not declared" + _hint(key, section.entries))
            entry.value = self._validate(entry, where, value)
            entry.is_set = True

    def _render(self, section: _Section, path: List[str], lines: List[str]) -> None:
        if section.entries:
            if path:
                lines.append("[" + _SEP.join(_toml_key(p) for p in path) + "]")
            for name, entry in section.entries.items():
                if entry.documentation:
                    for doc_line in entry.documentation.splitlines():
                        lines.append(f"# {doc_line}".rstrip())
                lines.append(f"# {entry.pattern.description()}")
                value: Optional[Any] = entry.value if entry.is_set else entry.default
                if value is None:
                    lines.append(f"# {_toml_key(name)} = ")
                else:
                    lines.append(f"{_toml_key(name)} = {_toml_value(value)}")
            lines.append("")
        for name, sub in section.subsections.items():
            self._render(sub, [*path, name], lines)


def _hint(name: str, known: Mapping[str, Any]) -> str:
    close = difflib.get_close_matches(name, list(known), n=3)
    if close:
        return "\nHint: did you mean " + ", ".join(repr(c) for c in close) + "?"
    return ""


_BARE_KEY = re.compile(r"^[A-Za-z0-9_-]+$")


def _toml_key(key: str) -> str:
    return key if _BARE_KEY.match(key) else _toml_value(key)


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_toml_value(v) for v in value) + "]"
    raise ConfigError(f"Cannot render value {value!r} as TOML")


_TOML_POS = re.compile(r"at line (\d+), column (\d+)")


def _format_toml_error(text: str, err: Exception, source: str) -> str:
    """Point at the offending line of a TOML document."""
    msg = f"Failed to parse parameters from {source}: {err}"
    m = _TOML_POS.search(str(err))
    if not m:
        return msg
    line_no, col = int(m.group(1)), int(m.group(2))
    src_lines = text.splitlines()
    if not 1 <= line_no <= len(src_lines):
        return msg
    out = [msg]
    for i in range(max(1, line_no - 2), line_no + 1):
        marker = ">>>" if i == line_no else "   "
        out.append(f"{marker} {i:4d} | {src_lines[i - 1]}")
    out.append(" " * (4 + 4 + 3 + col - 1) + "^")
    return "\n".join(out)
