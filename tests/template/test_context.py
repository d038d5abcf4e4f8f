"""Tests for EvaluationContext."""

import pytest

from stencil.template.context import EvaluationContext


class TestEvaluationContext:

    def test_get_and_is_defined(self):
        ctx = EvaluationContext({"a": 1, "n": None})
        assert ctx.get("a") == 1
        assert ctx.is_defined("a")
        assert ctx.is_defined("n")
        assert ctx.get("n") is None
        assert not ctx.is_defined("missing")
        assert ctx.get("missing") is None

    def test_empty_context(self):
        ctx = EvaluationContext()
        assert len(ctx) == 0
        assert ctx.names() == []

    def test_bindings_are_snapshotted(self):
        source = {"a": 1}
        ctx = EvaluationContext(source)
        source["a"] = 2
        source["b"] = 3
        assert ctx.get("a") == 1
        assert "b" not in ctx

    def test_bindings_are_read_only(self):
        ctx = EvaluationContext({"a": 1})
        with pytest.raises(TypeError):
            ctx.bindings["a"] = 2

    def test_names_are_sorted(self):
        ctx = EvaluationContext({"b": 1, "a": 2, "c": 3})
        assert ctx.names() == ["a", "b", "c"]
        assert sorted(ctx) == ["a", "b", "c"]
        assert len(ctx) == 3

    def test_repr(self):
        assert repr(EvaluationContext({"y": 1, "x": 2})) == "EvaluationContext(x, y)"

    def test_copy_of_context(self):
        original = EvaluationContext({"ab": 1, "n": None})
        ctx = EvaluationContext(original)
        assert ctx.names() == ["ab", "n"]
        assert ctx.is_defined("ab")
        assert ctx.get("ab") == 1
        assert ctx.is_defined("n")
        assert not ctx.is_defined("a")
