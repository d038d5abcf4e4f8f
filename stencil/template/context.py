"""
Evaluation context for one render call.

A flat, read-only snapshot of name → value bindings.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterator, List, Mapping, Union


class EvaluationContext:
    """
    Read-only variable bindings for a single render.

    Bindings are copied at construction, so later changes to the caller's
    mapping do not leak into a render in progress. A name bound to None is
    defined; `is_defined` tells it apart from a name that was never bound.
    """

    def __init__(self, bindings: Union[EvaluationContext, Mapping[str, Any], None] = None):
        """
        Args:
            bindings: Variable name → value, or another context to copy
        """
        if isinstance(bindings, EvaluationContext):
            bindings = bindings.bindings
        self._vars: Mapping[str, Any] = MappingProxyType(dict(bindings or {}))

    def get(self, name: str) -> Any:
        """Returns the bound value, or None for an unbound name."""
        return self._vars.get(name)

    def is_defined(self, name: str) -> bool:
        return name in self._vars

    def names(self) -> List[str]:
        return sorted(self._vars)

    @property
    def bindings(self) -> Mapping[str, Any]:
        """Read-only view of all bindings."""
        return self._vars

    def __contains__(self, name: object) -> bool:
        return name in self._vars

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)

    def __repr__(self) -> str:
        return f"EvaluationContext({', '.join(self.names())})"


__all__ = ["EvaluationContext"]
