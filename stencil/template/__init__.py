"""
Template engine: parsing, AST and rendering.
"""

from __future__ import annotations

from .adapters import (
    AdapterRegistry,
    MethodSpec,
    MethodTableAdapter,
    ReflectiveAdapter,
    get_registry,
    register_adapter,
)
from .context import EvaluationContext
from .cursor import Cursor
from .evaluator import ReferenceEvaluator, evaluate_expression
from .nodes import (
    ConstantNode,
    EofNode,
    IndexReferenceNode,
    MemberReferenceNode,
    MethodReferenceNode,
    NodeType,
    PlainReferenceNode,
    ReferenceNode,
    TemplateNode,
    TextNode,
)
from .parser import TemplateParser
from .protocols import ResolutionError, ValueAdapter
from .template import (
    NullPolicy,
    Template,
    parse_template,
    parse_template_file,
    render_template,
)

__all__ = [
    # Parsing
    "Cursor",
    "TemplateParser",
    "Template",
    "parse_template",
    "parse_template_file",
    "render_template",
    "NullPolicy",
    # AST
    "NodeType",
    "TemplateNode",
    "TextNode",
    "EofNode",
    "ConstantNode",
    "ReferenceNode",
    "PlainReferenceNode",
    "MemberReferenceNode",
    "MethodReferenceNode",
    "IndexReferenceNode",
    # Evaluation
    "EvaluationContext",
    "ReferenceEvaluator",
    "evaluate_expression",
    "ValueAdapter",
    "ResolutionError",
    "AdapterRegistry",
    "ReflectiveAdapter",
    "MethodTableAdapter",
    "MethodSpec",
    "get_registry",
    "register_adapter",
]
