"""
stencil: a minimal reference-template engine.
"""

from __future__ import annotations

from .errors import (
    ConfigError,
    EvaluationError,
    EvaluationErrorKind,
    ParseError,
    StencilUserError,
)
from .template import (
    EvaluationContext,
    NullPolicy,
    Template,
    parse_template,
    parse_template_file,
    register_adapter,
    render_template,
)

__all__ = [
    "StencilUserError",
    "ParseError",
    "EvaluationError",
    "EvaluationErrorKind",
    "ConfigError",
    "EvaluationContext",
    "NullPolicy",
    "Template",
    "parse_template",
    "parse_template_file",
    "render_template",
    "register_adapter",
]
