"""
Protocols for value capability dispatch.

Member access, method calls and indexing in references are resolved
through a ValueAdapter chosen per value type, so the evaluator never
depends on a particular introspection mechanism.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from ..errors import EvaluationErrorKind


class ResolutionError(Exception):
    """
    Raised by adapters when a capability cannot be resolved.

    The evaluator turns it into an EvaluationError carrying the
    template line of the failing reference.
    """

    def __init__(self, kind: EvaluationErrorKind, name: str, message: str):
        super().__init__(message)
        self.kind = kind
        self.name = name
        self.message = message


@runtime_checkable
class ValueAdapter(Protocol):
    """
    Capability interface for one family of value types.

    Every method either returns the resolved value or raises ResolutionError.
    Picking one of several candidates silently is not allowed: ambiguous
    method matches must raise with kind AMBIGUOUS_METHOD.
    """

    def get_member(self, value: Any, name: str) -> Any:
        """
        Resolves `$value.name`.

        Args:
            value: Receiver, never None
            name: Member name
        """
        ...

    def call_method(self, value: Any, name: str, args: Sequence[Any]) -> Any:
        """
        Resolves and invokes `$value.name(args...)`.

        Args:
            value: Receiver, never None
            name: Method name
            args: Already evaluated arguments, in source order
        """
        ...

    def get_index(self, value: Any, key: Any) -> Any:
        """
        Resolves `$value[key]`.

        Absent keys and out-of-range positions raise, never return None.
        """
        ...


__all__ = ["ResolutionError", "ValueAdapter"]
