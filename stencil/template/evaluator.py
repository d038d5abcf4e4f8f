"""
Reference evaluator.

Walks a reference chain left to right against an EvaluationContext: the
base variable is resolved first, then every suffix is applied to the
previous result through the value's adapter.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, cast

from ..errors import EvaluationError, EvaluationErrorKind
from .adapters import AdapterRegistry, get_registry
from .context import EvaluationContext
from .nodes import (
    ConstantNode,
    ExpressionNode,
    IndexReferenceNode,
    MemberReferenceNode,
    MethodReferenceNode,
    NodeType,
    PlainReferenceNode,
)
from .protocols import ResolutionError


class ReferenceEvaluator:
    """
    Evaluates expression nodes to Python values.

    Accepts an expression AST and a context, returns the resolved value or
    raises EvaluationError.
    """

    def __init__(self, context: EvaluationContext, adapters: Optional[AdapterRegistry] = None):
        """
        Args:
            context: Variable bindings for this render
            adapters: Capability registry (defaults to the process-wide one)
        """
        self.context = context
        self.adapters = adapters or get_registry()

    def evaluate(self, node: ExpressionNode) -> Any:
        """
        Evaluates an expression.

        Args:
            node: Constant or reference node

        Returns:
            The resolved value; may be None when a variable is bound to None

        Raises:
            EvaluationError: Undefined variable, unresolved member or method,
                invalid index, or a suffix applied to None
        """
        node_type = node.get_type()

        if node_type == NodeType.CONSTANT:
            return cast(ConstantNode, node).value
        elif node_type == NodeType.PLAIN_REF:
            return self._evaluate_plain(cast(PlainReferenceNode, node))
        elif node_type == NodeType.MEMBER_REF:
            return self._evaluate_member(cast(MemberReferenceNode, node))
        elif node_type == NodeType.METHOD_REF:
            return self._evaluate_method(cast(MethodReferenceNode, node))
        elif node_type == NodeType.INDEX_REF:
            return self._evaluate_index(cast(IndexReferenceNode, node))
        else:
            raise TypeError(f"Not an expression node: {node_type}")

    def _evaluate_plain(self, node: PlainReferenceNode) -> Any:
        if not self.context.is_defined(node.name):
            raise EvaluationError(
                f"Undefined reference ${node.name}",
                EvaluationErrorKind.UNDEFINED_VARIABLE,
                node.name,
                node.line,
            )
        return self.context.get(node.name)

    def _evaluate_member(self, node: MemberReferenceNode) -> Any:
        receiver = self.evaluate(node.lhs)
        if receiver is None:
            raise self._null_error(node.name, f"Cannot get member {node.name} of null value {node.lhs}", node.line)

        adapter = self.adapters.adapter_for(receiver)
        return self._resolve(node.line, adapter.get_member, receiver, node.name)

    def _evaluate_method(self, node: MethodReferenceNode) -> Any:
        receiver = self.evaluate(node.lhs)
        if receiver is None:
            raise self._null_error(node.name, f"Cannot invoke method {node.name} on null value {node.lhs}", node.line)

        args: List[Any] = [self.evaluate(arg) for arg in node.args]
        adapter = self.adapters.adapter_for(receiver)
        return self._resolve(node.line, adapter.call_method, receiver, node.name, args)

    def _evaluate_index(self, node: IndexReferenceNode) -> Any:
        receiver = self.evaluate(node.lhs)
        if receiver is None:
            raise self._null_error(str(node.lhs), f"Cannot index null value {node.lhs}", node.line)

        key = self.evaluate(node.index)
        adapter = self.adapters.adapter_for(receiver)
        return self._resolve(node.line, adapter.get_index, receiver, key)

    @staticmethod
    def _resolve(line: int, func: Callable[..., Any], *args: Any) -> Any:
        try:
            return func(*args)
        except ResolutionError as e:
            raise EvaluationError(e.message, e.kind, e.name, line) from e

    @staticmethod
    def _null_error(name: str, message: str, line: int) -> EvaluationError:
        return EvaluationError(message, EvaluationErrorKind.NULL_VALUE, name, line)


def evaluate_expression(node: ExpressionNode, context: EvaluationContext) -> Any:
    """
    Convenience function for evaluating a single expression.

    Args:
        node: Expression AST
        context: Variable bindings

    Returns:
        Resolved value
    """
    return ReferenceEvaluator(context).evaluate(node)


__all__ = ["ReferenceEvaluator", "evaluate_expression"]
