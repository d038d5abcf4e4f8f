"""Tests for the reference evaluator."""

import pytest

from stencil.errors import EvaluationError, EvaluationErrorKind
from stencil.template.adapters import AdapterRegistry, MethodTableAdapter
from stencil.template.context import EvaluationContext
from stencil.template.evaluator import ReferenceEvaluator, evaluate_expression
from stencil.template.nodes import (
    ConstantNode,
    IndexReferenceNode,
    MemberReferenceNode,
    MethodReferenceNode,
    PlainReferenceNode,
)
from stencil.template.template import parse_template


class Recorder:
    """Records the order in which its methods are called."""

    def __init__(self):
        self.calls = []

    def mark(self, label: str) -> str:
        self.calls.append(label)
        return label

    def pair(self, a: str, b: str) -> str:
        return a + b


def expr(text: str):
    """Parses a template holding one reference and returns that reference."""
    return parse_template(text).nodes[0]


class TestReferenceEvaluator:

    def setup_method(self):
        self.recorder = Recorder()
        self.context = EvaluationContext({
            "user": {"name": "Ada", "tags": ["math", "engines"]},
            "items": [],
            "nothing": None,
            "rec": self.recorder,
            "key": "name",
            "i": 1,
        })
        self.evaluator = ReferenceEvaluator(self.context)

    def test_constant(self):
        assert self.evaluator.evaluate(ConstantNode(5)) == 5

    def test_plain_reference(self):
        assert self.evaluator.evaluate(PlainReferenceNode("i")) == 1

    def test_null_binding_evaluates_to_none(self):
        assert self.evaluator.evaluate(PlainReferenceNode("nothing")) is None

    def test_undefined_variable(self):
        with pytest.raises(EvaluationError) as exc:
            self.evaluator.evaluate(PlainReferenceNode("missing", line=3))
        err = exc.value
        assert err.kind == EvaluationErrorKind.UNDEFINED_VARIABLE
        assert err.name == "missing"
        assert err.line == 3
        assert str(err) == "In expression on line 3: Undefined reference $missing"

    def test_member_chain(self):
        assert self.evaluator.evaluate(expr("$user.name")) == "Ada"

    def test_index_with_reference(self):
        assert self.evaluator.evaluate(expr("$user.tags[$i]")) == "engines"
        assert self.evaluator.evaluate(expr("$user[$key]")) == "Ada"

    def test_method_with_nested_arguments(self):
        assert self.evaluator.evaluate(expr('$rec.pair($user.name, "!")')) == "Ada!"

    def test_arguments_are_evaluated_left_to_right(self):
        self.evaluator.evaluate(expr('$rec.pair($rec.mark("a"), $rec.mark("b"))'))
        assert self.recorder.calls == ["a", "b"]

    def test_empty_list_index(self):
        with pytest.raises(EvaluationError) as exc:
            self.evaluator.evaluate(expr("$items[0]"))
        assert exc.value.kind == EvaluationErrorKind.INVALID_INDEX

    def test_suffix_on_null_value(self):
        for text in ("$nothing.x", "$nothing.f()", "$nothing[0]"):
            with pytest.raises(EvaluationError) as exc:
                self.evaluator.evaluate(expr(text))
            assert exc.value.kind == EvaluationErrorKind.NULL_VALUE

    def test_unresolved_member_carries_line(self):
        node = MemberReferenceNode(PlainReferenceNode("i"), "nope", line=9)
        with pytest.raises(EvaluationError) as exc:
            self.evaluator.evaluate(node)
        err = exc.value
        assert err.kind == EvaluationErrorKind.UNRESOLVED_MEMBER
        assert err.name == "nope"
        assert err.line == 9

    def test_unresolved_method(self):
        node = MethodReferenceNode(PlainReferenceNode("rec"), "mark", (ConstantNode(1),))
        with pytest.raises(EvaluationError) as exc:
            self.evaluator.evaluate(node)
        assert exc.value.kind == EvaluationErrorKind.UNRESOLVED_METHOD

    def test_undefined_variable_in_index(self):
        node = IndexReferenceNode(PlainReferenceNode("user"), PlainReferenceNode("k"))
        with pytest.raises(EvaluationError) as exc:
            self.evaluator.evaluate(node)
        assert exc.value.name == "k"

    def test_custom_registry(self):
        registry = AdapterRegistry()
        registry.register(Recorder, MethodTableAdapter().add_member("count", lambda r: len(r.calls)))
        evaluator = ReferenceEvaluator(self.context, registry)
        assert evaluator.evaluate(expr("$rec.count")) == 0

    def test_evaluate_expression(self):
        assert evaluate_expression(expr("$user.tags[0]"), self.context) == "math"
