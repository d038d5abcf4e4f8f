"""
Base exception for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from StencilUserError.

Programming errors and bugs should NOT inherit from StencilUserError;
they will propagate with full tracebacks.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class StencilUserError(Exception):
    """
    Base class for all user-facing errors in stencil.

    These errors indicate problems that the user can fix:
    template syntax, missing or mistyped bindings, malformed config files.
    """
    pass


class ParseError(StencilUserError):
    """
    Template syntax error.

    Attributes:
        message: What went wrong
        line: 1-based line number where the parser stopped
        context: Up to 20 characters following the error position, or "EOF"
        source_name: Optional template name for diagnostics
    """

    def __init__(self, message: str, line: int, context: str, source_name: Optional[str] = None):
        self.message = message
        self.line = line
        self.context = context
        self.source_name = source_name
        where = f"{source_name}: " if source_name else ""
        super().__init__(f"{where}{message}, on line {line}, at text starting: {context}")


class EvaluationErrorKind(Enum):
    """Categories of render-time failures."""
    UNDEFINED_VARIABLE = "undefined_variable"
    NULL_VALUE = "null_value"
    UNRESOLVED_MEMBER = "unresolved_member"
    UNRESOLVED_METHOD = "unresolved_method"
    AMBIGUOUS_METHOD = "ambiguous_method"
    INVALID_INDEX = "invalid_index"
    INVOCATION_FAILED = "invocation_failed"


class EvaluationError(StencilUserError):
    """
    Failure while evaluating a reference during render.

    Attributes:
        message: What went wrong
        kind: Failure category
        name: The offending variable, member or method name
        line: Line of the reference in the template (0 if unknown)
    """

    def __init__(self, message: str, kind: EvaluationErrorKind, name: str, line: int = 0):
        self.message = message
        self.kind = kind
        self.name = name
        self.line = line
        super().__init__(f"In expression on line {line}: {message}")


class ConfigError(StencilUserError):
    """Malformed configuration or variable file, with the offending field path."""
    pass


__all__ = [
    "StencilUserError",
    "ParseError",
    "EvaluationErrorKind",
    "EvaluationError",
    "ConfigError",
]
