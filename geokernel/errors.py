"""Exception types raised by the geometry kernel.

Geometric degeneracy (parallel lines, a point inside a circle, a collapsed
conic) is never reported through these classes; such cases produce ``None`` or
empty results.  The exceptions below flag programming errors on the host side.
"""

from __future__ import annotations

from typing import Sequence


class GeoKernelError(Exception):
    """Base class for kernel errors."""


class DependencyMismatchError(GeoKernelError, ValueError):
    """Raised when an element's dependency list disagrees with its definition."""

    def __init__(self, element_id: str, declared: Sequence[str], referenced: Sequence[str]):
        self.element_id = element_id
        self.declared = tuple(declared)
        self.referenced = tuple(referenced)
        super().__init__(
            f"element {element_id!r} declares dependencies {sorted(set(self.declared))} "
            f"but its definition references {sorted(set(self.referenced))}"
        )


class DependencyCycleError(GeoKernelError):
    """Raised when the dependency graph contains (or would contain) a cycle."""

    def __init__(self, cycle: Sequence[str]):
        self.cycle = tuple(cycle)
        super().__init__("dependency cycle: " + " -> ".join(self.cycle))


class UnknownElementError(GeoKernelError, KeyError):
    """Raised by lifecycle helpers asked to act on an id that is not stored."""

    def __init__(self, element_id: str):
        self.element_id = element_id
        super().__init__(element_id)

    def __str__(self) -> str:
        return f"unknown element {self.element_id!r}"


class ExpressionError(GeoKernelError, ValueError):
    """Raised when a function-graph expression cannot be compiled."""

    def __init__(self, expression: str, reason: str):
        self.expression = expression
        self.reason = reason
        super().__init__(f"cannot compile expression {expression!r}: {reason}")


__all__ = [
    "GeoKernelError",
    "DependencyMismatchError",
    "DependencyCycleError",
    "UnknownElementError",
    "ExpressionError",
]
