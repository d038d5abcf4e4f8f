"""
Parsed templates and rendering.

Public API of the engine: parse a template once, render it any number of
times with fresh bindings.
"""

from __future__ import annotations

import io
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, List, Mapping, Optional, Set, TextIO, Union

from ..errors import EvaluationError, EvaluationErrorKind
from .adapters import AdapterRegistry
from .context import EvaluationContext
from .evaluator import ReferenceEvaluator
from .nodes import (
    EofNode,
    ExpressionNode,
    IndexReferenceNode,
    MethodReferenceNode,
    MemberReferenceNode,
    ReferenceNode,
    TemplateAST,
    TextNode,
    format_ast_tree,
)

logger = logging.getLogger(__name__)


class NullPolicy(Enum):
    """What a reference that evaluates to None renders as."""
    ERROR = "error"
    EMPTY = "empty"


def to_text(value: Any) -> str:
    """Natural textual form of a non-null value: booleans as true/false, everything else via str()."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    return str(value)


def _walk_references(node: ExpressionNode) -> Iterator[ReferenceNode]:
    """Yields every reference reachable from `node`, including those in arguments and indices."""
    if not isinstance(node, ReferenceNode):
        return
    yield node
    if isinstance(node, (MemberReferenceNode, MethodReferenceNode, IndexReferenceNode)):
        yield from _walk_references(node.lhs)
    if isinstance(node, MethodReferenceNode):
        for arg in node.args:
            yield from _walk_references(arg)
    if isinstance(node, IndexReferenceNode):
        yield from _walk_references(node.index)


class Template:
    """
    Immutable parsed template.

    Holds the node sequence produced by the parser; the last node is always
    the single EofNode. Safe to render concurrently as long as every call
    gets its own context.
    """

    __slots__ = ("_nodes", "_name")

    def __init__(self, nodes: TemplateAST, name: Optional[str] = None):
        nodes = tuple(nodes)
        if not nodes or not isinstance(nodes[-1], EofNode):
            raise ValueError("Template node sequence must end with an EofNode")
        if any(isinstance(node, EofNode) for node in nodes[:-1]):
            raise ValueError("Template node sequence must contain exactly one EofNode")
        self._nodes = nodes
        self._name = name

    @classmethod
    def parse(cls, stream: TextIO, name: Optional[str] = None) -> Template:
        """
        Parses a template from a text stream. The stream is not closed.

        Raises:
            ParseError: On the first syntax error
        """
        from .parser import TemplateParser

        return TemplateParser(stream, name).parse()

    @classmethod
    def from_string(cls, text: str, name: Optional[str] = None) -> Template:
        return cls.parse(io.StringIO(text), name)

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def nodes(self) -> TemplateAST:
        """All nodes, including the trailing EofNode."""
        return self._nodes

    def references(self) -> Iterator[ReferenceNode]:
        """Top-level reference nodes in source order."""
        for node in self._nodes:
            if isinstance(node, ReferenceNode):
                yield node

    def variable_names(self) -> Set[str]:
        """Names of all variables the template reads, including those inside arguments and indices."""
        names: Set[str] = set()
        for reference in self.references():
            for nested in _walk_references(reference):
                names.add(nested.base.name)
        return names

    def render(
        self,
        context: Union[EvaluationContext, Mapping[str, Any], None] = None,
        *,
        null_policy: NullPolicy = NullPolicy.ERROR,
        adapters: Optional[AdapterRegistry] = None,
    ) -> str:
        """
        Renders the template in a single left-to-right pass.

        Args:
            context: Bindings for this render; a plain mapping is snapshotted
                into a fresh EvaluationContext
            null_policy: How references evaluating to None are rendered
            adapters: Capability registry (defaults to the process-wide one)

        Returns:
            Rendered text

        Raises:
            EvaluationError: On the first failing reference; nothing is returned
        """
        if not isinstance(context, EvaluationContext):
            context = EvaluationContext(context)

        evaluator = ReferenceEvaluator(context, adapters)
        parts: List[str] = []

        for node in self._nodes:
            if isinstance(node, TextNode):
                parts.append(node.text)
            elif isinstance(node, ReferenceNode):
                parts.append(self._render_reference(evaluator, node, null_policy))
            elif isinstance(node, EofNode):
                break
            else:
                raise TypeError(f"Unexpected node in template: {type(node).__name__}")

        logger.debug(f"Rendered template {self._name or '<string>'} with {len(context)} bindings")
        return "".join(parts)

    @staticmethod
    def _render_reference(evaluator: ReferenceEvaluator, node: ReferenceNode, null_policy: NullPolicy) -> str:
        value = evaluator.evaluate(node)
        if value is None:
            if null_policy == NullPolicy.EMPTY:
                return ""
            raise EvaluationError(
                f"Reference {node} evaluated to null",
                EvaluationErrorKind.NULL_VALUE,
                str(node) if isinstance(node, IndexReferenceNode) else node.name,
                node.line,
            )
        return to_text(value)

    def format_tree(self) -> str:
        return format_ast_tree(self._nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Template):
            return NotImplemented
        return self._nodes == other._nodes

    def __hash__(self) -> int:
        return hash(self._nodes)

    def __repr__(self) -> str:
        return f"Template({self._name or '<string>'}, {len(self._nodes)} nodes)"


def parse_template(text: str, name: Optional[str] = None) -> Template:
    """
    Convenience function for parsing template text.

    Args:
        text: Template source
        name: Optional name for diagnostics

    Returns:
        Parsed template
    """
    return Template.from_string(text, name)


def parse_template_file(path: Union[str, Path], encoding: str = "utf-8") -> Template:
    """Parses a template file; the file is opened and closed here."""
    path = Path(path)
    with path.open("r", encoding=encoding) as f:
        return Template.parse(f, name=str(path))


def render_template(
    text: str,
    bindings: Optional[Mapping[str, Any]] = None,
    *,
    null_policy: NullPolicy = NullPolicy.ERROR,
) -> str:
    """Parses and renders in one step."""
    return parse_template(text).render(bindings, null_policy=null_policy)


__all__ = [
    "NullPolicy",
    "Template",
    "to_text",
    "parse_template",
    "parse_template_file",
    "render_template",
]
