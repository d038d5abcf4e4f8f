"""
AST nodes for templates.

Defines an immutable node hierarchy: literal text, the end-of-input sentinel,
constant expressions and reference chains. Reference chains are
left-recursive: every suffix node owns the reference to its left as `lhs`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple, Union


class NodeType(Enum):
    """Node kinds in the template AST."""
    TEXT = "text"
    EOF = "eof"
    CONSTANT = "constant"
    PLAIN_REF = "plain_ref"
    MEMBER_REF = "member_ref"
    METHOD_REF = "method_ref"
    INDEX_REF = "index_ref"


@dataclass(frozen=True)
class TemplateNode(ABC):
    """Base class for all template AST nodes."""

    @abstractmethod
    def get_type(self) -> NodeType:
        """Returns the node kind."""
        pass

    def __str__(self) -> str:
        return self._to_string()

    @abstractmethod
    def _to_string(self) -> str:
        """Template source form of the node."""
        pass


@dataclass(frozen=True)
class TextNode(TemplateNode):
    """
    Literal text in the template.

    Emitted into the output verbatim.
    """
    text: str
    line: int = field(default=0, compare=False)

    def get_type(self) -> NodeType:
        return NodeType.TEXT

    def _to_string(self) -> str:
        return self.text


@dataclass(frozen=True)
class EofNode(TemplateNode):
    """End-of-input sentinel. Terminates every parsed node sequence and is never rendered."""
    line: int = field(default=0, compare=False)

    def get_type(self) -> NodeType:
        return NodeType.EOF

    def _to_string(self) -> str:
        return ""


@dataclass(frozen=True)
class ExpressionNode(TemplateNode, ABC):
    """Anything that can appear as a method argument or an index: a constant or a reference."""
    pass


@dataclass(frozen=True)
class ConstantNode(ExpressionNode):
    """String, integer or boolean literal: "abc", -17, true."""
    value: Union[str, int, bool]
    line: int = field(default=0, compare=False)

    def get_type(self) -> NodeType:
        return NodeType.CONSTANT

    def _to_string(self) -> str:
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        if isinstance(self.value, str):
            return f'"{self.value}"'
        return str(self.value)


@dataclass(frozen=True)
class ReferenceNode(ExpressionNode, ABC):
    """Base class for `$`-introduced references."""

    @property
    @abstractmethod
    def base(self) -> PlainReferenceNode:
        """The plain variable reference at the root of the chain."""
        pass


@dataclass(frozen=True)
class PlainReferenceNode(ReferenceNode):
    """A variable: $name"""
    name: str
    line: int = field(default=0, compare=False)

    def get_type(self) -> NodeType:
        return NodeType.PLAIN_REF

    @property
    def base(self) -> PlainReferenceNode:
        return self

    def _to_string(self) -> str:
        return f"${self.name}"


@dataclass(frozen=True)
class MemberReferenceNode(ReferenceNode):
    """Property access on a prior reference: $x.name"""
    lhs: ReferenceNode
    name: str
    line: int = field(default=0, compare=False)

    def get_type(self) -> NodeType:
        return NodeType.MEMBER_REF

    @property
    def base(self) -> PlainReferenceNode:
        return self.lhs.base

    def _to_string(self) -> str:
        return f"{self.lhs}.{self.name}"


@dataclass(frozen=True)
class MethodReferenceNode(ReferenceNode):
    """Method call on a prior reference: $x.name(arg, ...)"""
    lhs: ReferenceNode
    name: str
    args: Tuple[ExpressionNode, ...] = ()
    line: int = field(default=0, compare=False)

    def get_type(self) -> NodeType:
        return NodeType.METHOD_REF

    @property
    def base(self) -> PlainReferenceNode:
        return self.lhs.base

    def _to_string(self) -> str:
        args = ", ".join(str(arg) for arg in self.args)
        return f"{self.lhs}.{self.name}({args})"


@dataclass(frozen=True)
class IndexReferenceNode(ReferenceNode):
    """Indexing of a prior reference: $x[index]"""
    lhs: ReferenceNode
    index: ExpressionNode
    line: int = field(default=0, compare=False)

    def get_type(self) -> NodeType:
        return NodeType.INDEX_REF

    @property
    def base(self) -> PlainReferenceNode:
        return self.lhs.base

    def _to_string(self) -> str:
        return f"{self.lhs}[{self.index}]"


# Parsed node sequence
TemplateAST = Tuple[TemplateNode, ...]


def node_to_dict(node: TemplateNode) -> Dict[str, Any]:
    """JSON-friendly form of a node, used by `stencil ast --json`."""
    node_type = node.get_type()
    data: Dict[str, Any] = {"type": node_type.value}

    if isinstance(node, TextNode):
        data["text"] = node.text
    elif isinstance(node, ConstantNode):
        data["value"] = node.value
    elif isinstance(node, PlainReferenceNode):
        data["name"] = node.name
    elif isinstance(node, MemberReferenceNode):
        data["lhs"] = node_to_dict(node.lhs)
        data["name"] = node.name
    elif isinstance(node, MethodReferenceNode):
        data["lhs"] = node_to_dict(node.lhs)
        data["name"] = node.name
        data["args"] = [node_to_dict(arg) for arg in node.args]
    elif isinstance(node, IndexReferenceNode):
        data["lhs"] = node_to_dict(node.lhs)
        data["index"] = node_to_dict(node.index)

    return data


def format_ast_tree(ast: TemplateAST, indent: int = 0) -> str:
    """Formats the AST as a tree for debugging."""
    lines: List[str] = []
    prefix = "  " * indent

    for node in ast:
        if isinstance(node, TextNode):
            # Only the head of long text, for readability
            text_preview = repr(node.text[:50] + "..." if len(node.text) > 50 else node.text)
            lines.append(f"{prefix}TextNode({text_preview})")
        elif isinstance(node, EofNode):
            lines.append(f"{prefix}EofNode")
        elif isinstance(node, ConstantNode):
            lines.append(f"{prefix}ConstantNode({node.value!r})")
        elif isinstance(node, PlainReferenceNode):
            lines.append(f"{prefix}PlainReferenceNode({node.name})")
        elif isinstance(node, MemberReferenceNode):
            lines.append(f"{prefix}MemberReferenceNode(.{node.name})")
            lines.append(format_ast_tree((node.lhs,), indent + 1))
        elif isinstance(node, MethodReferenceNode):
            lines.append(f"{prefix}MethodReferenceNode(.{node.name}/{len(node.args)})")
            lines.append(format_ast_tree((node.lhs,), indent + 1))
            if node.args:
                lines.append(f"{prefix}  args:")
                lines.append(format_ast_tree(node.args, indent + 2))
        elif isinstance(node, IndexReferenceNode):
            lines.append(f"{prefix}IndexReferenceNode")
            lines.append(format_ast_tree((node.lhs,), indent + 1))
            lines.append(f"{prefix}  index:")
            lines.append(format_ast_tree((node.index,), indent + 2))
        else:
            lines.append(f"{prefix}{type(node).__name__}")

    return "\n".join(lines)


__all__ = [
    "NodeType",
    "TemplateNode",
    "TextNode",
    "EofNode",
    "ExpressionNode",
    "ConstantNode",
    "ReferenceNode",
    "PlainReferenceNode",
    "MemberReferenceNode",
    "MethodReferenceNode",
    "IndexReferenceNode",
    "TemplateAST",
    "node_to_dict",
    "format_ast_tree",
]
