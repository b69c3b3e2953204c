# src/fluidbc/boundary/validate.py
"""
Static validation of fluid pressure boundary model implementations.

Guardrails enforced here, on the source of `fluid_pressure_gradient`:
- The result array is filled in place: never rebound, never resized
- Material model inputs/outputs are read-only
- Model attributes are not mutated during evaluation (the same model may be
  evaluated for several boundary segments concurrently)
"""
from __future__ import annotations
import ast
import inspect
import textwrap
from dataclasses import dataclass
from typing import List, Set

from fluidbc.errors import ModelValidationError

__all__ = [
    "ValidationIssue", "validate_model_class", "check_model_class",
]


@dataclass
class ValidationIssue:
    """A single validation warning or error."""
    severity: str  # "error" | "warning"
    message: str
    line: int | None = None

    def __str__(self) -> str:
        loc = f" (line {self.line})" if self.line else ""
        return f"{self.severity}{loc}: {self.message}"


# Array methods that change size or storage
RESIZING_METHODS = {"resize"}

# Calls that mutate a container in place
MUTATING_METHODS = {"append", "extend", "insert", "pop", "clear", "update", "setdefault", "fill", "sort"}


class EvaluationASTVisitor(ast.NodeVisitor):
    """AST visitor checking one fluid_pressure_gradient implementation."""

    def __init__(self, self_name: str, result_name: str, read_only: Set[str]):
        self.issues: List[ValidationIssue] = []
        self.self_name = self_name
        self.result_name = result_name
        self.read_only = read_only
        self._depth = 0

    def _add_error(self, msg: str, node: ast.AST) -> None:
        self.issues.append(ValidationIssue("error", msg, getattr(node, "lineno", None)))

    def _add_warning(self, msg: str, node: ast.AST) -> None:
        self.issues.append(ValidationIssue("warning", msg, getattr(node, "lineno", None)))

    def visit_Assign(self, node: ast.Assign) -> None:
        for target in node.targets:
            self._check_target(target)
        self.generic_visit(node)

    def visit_AugAssign(self, node: ast.AugAssign) -> None:
        self._check_target(node.target)
        self.generic_visit(node)

    def visit_AnnAssign(self, node: ast.AnnAssign) -> None:
        self._check_target(node.target)
        self.generic_visit(node)

    def visit_Call(self, node: ast.Call) -> None:
        func = node.func
        if isinstance(func, ast.Attribute):
            root = _root_name(func.value)
            if root == self.result_name and func.attr in RESIZING_METHODS:
                self._add_error(
                    f"Result array '{self.result_name}' must not be resized ({func.attr}())", node
                )
            elif root in self.read_only and func.attr in MUTATING_METHODS | RESIZING_METHODS:
                self._add_error(f"Material model data '{root}' is read-only ({func.attr}())", node)
            elif root == self.self_name and isinstance(func.value, ast.Attribute) and func.attr in MUTATING_METHODS:
                self._add_warning(
                    f"Model state '{_dotted(func.value)}' mutated during evaluation ({func.attr}()); "
                    f"evaluation may run concurrently",
                    node,
                )
        self.generic_visit(node)

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        # Only the outermost definition is checked; nested helpers are skipped
        if self._depth:
            return
        self._depth += 1
        for stmt in node.body:
            self.visit(stmt)
        self._depth -= 1

    def _check_target(self, target: ast.AST) -> None:
        if isinstance(target, (ast.Tuple, ast.List)):
            for elt in target.elts:
                self._check_target(elt)
            return
        if isinstance(target, ast.Starred):
            self._check_target(target.value)
            return

        if isinstance(target, ast.Name):
            if target.id == self.result_name:
                self._add_error(
                    f"Result array '{self.result_name}' must be filled in place, not rebound",
                    target,
                )
            elif target.id in self.read_only:
                self._add_warning(f"Parameter '{target.id}' rebound inside evaluation", target)
            return

        root = _root_name(target)
        if root in self.read_only:
            self._add_error(f"Material model data '{root}' is read-only ('{_dotted(target)}')", target)
        elif root == self.self_name:
            self._add_warning(
                f"Model state '{_dotted(target)}' written during evaluation; "
                f"evaluation may run concurrently",
                target,
            )
        elif root == self.result_name and isinstance(target, ast.Attribute):
            self._add_error(
                f"Result array '{self.result_name}' attribute '{target.attr}' must not be assigned",
                target,
            )


def _root_name(node: ast.AST) -> str | None:
    while isinstance(node, (ast.Attribute, ast.Subscript)):
        node = node.value
    return node.id if isinstance(node, ast.Name) else None


def _dotted(node: ast.AST) -> str:
    try:
        return ast.unparse(node)
    except Exception:
        return _root_name(node) or "?"


def validate_model_class(cls: type, model_name: str) -> List[ValidationIssue]:
    """
    Validate the `fluid_pressure_gradient` implementation of `cls`.

    Models whose source is unavailable (built with exec, defined interactively,
    compiled) cannot be checked; that yields a single warning, not an error.
    """
    fn = getattr(cls, "fluid_pressure_gradient", None)
    if fn is None or getattr(fn, "__isabstractmethod__", False):
        return [ValidationIssue("error", f"'{model_name}' does not implement fluid_pressure_gradient")]

    try:
        source = inspect.getsource(fn)
    except (OSError, TypeError) as e:
        return [ValidationIssue("warning", f"source of '{model_name}' not available, guardrails skipped ({e})")]

    try:
        tree = ast.parse(textwrap.dedent(source))
    except SyntaxError as e:
        return [ValidationIssue("warning", f"source of '{model_name}' could not be parsed, guardrails skipped ({e})")]

    func = next(
        (n for n in ast.walk(tree) if isinstance(n, (ast.FunctionDef, ast.AsyncFunctionDef))),
        None,
    )
    if func is None:
        return [ValidationIssue("warning", f"no function definition found for '{model_name}', guardrails skipped")]

    params = [a.arg for a in func.args.posonlyargs + func.args.args]
    if len(params) < 5:
        return [ValidationIssue(
            "error",
            f"'{model_name}'.fluid_pressure_gradient must take "
            f"(self, boundary_id, inputs, outputs, result); got ({', '.join(params)})",
            func.lineno,
        )]
    self_name, _, inputs_name, outputs_name, result_name = params[:5]

    visitor = EvaluationASTVisitor(self_name, result_name, {inputs_name, outputs_name})
    visitor.visit(func)
    return visitor.issues


def check_model_class(cls: type, model_name: str, *, strict: bool = False) -> List[ValidationIssue]:
    """
    Run the guardrails on `cls` and raise for anything fatal.

    Errors are always fatal; with `strict=True` warnings are too. The
    remaining (non-fatal) issues are returned so the caller can log them.
    """
    issues = validate_model_class(cls, model_name)
    fatal = [iss for iss in issues if strict or iss.severity == "error"]
    if fatal:
        kind = "rejected" if any(iss.severity == "error" for iss in fatal) else "rejected (strict)"
        raise ModelValidationError(
            f"Model '{model_name}' {kind} by evaluation guardrails:\n"
            + "\n".join(f"  {iss}" for iss in fatal)
        )
    return issues
