"""
Value adapters and their registry.

ReflectiveAdapter resolves members, methods and indices on ordinary Python
objects. MethodTableAdapter resolves them from explicitly registered tables,
which is how overloaded methods are exposed. AdapterRegistry picks the
adapter for a value by walking the MRO of its type.
"""

from __future__ import annotations

import inspect
import logging
import types
import typing
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..errors import EvaluationErrorKind
from .protocols import ResolutionError, ValueAdapter

logger = logging.getLogger(__name__)


def _type_name(value: Any) -> str:
    tp = type(value)
    if tp.__module__ == "builtins":
        return tp.__qualname__
    return f"{tp.__module__}.{tp.__qualname__}"


def _describe(value: Any) -> str:
    text = repr(value)
    if len(text) > 60:
        text = text[:57] + "..."
    return f"{text}, a {_type_name(value)}"


def value_matches(expected: Any, value: Any) -> bool:
    """
    Checks an argument against a parameter annotation.

    Unannotated and unrecognised annotations accept anything. An int is
    accepted where a float is expected; a bool is never accepted as an int.
    """
    if expected is None or expected is Any or expected is inspect.Parameter.empty:
        return True

    origin = typing.get_origin(expected)
    if origin is typing.Union or origin is types.UnionType:
        return any(value_matches(arg, value) for arg in typing.get_args(expected))
    if origin is not None:
        return not isinstance(origin, type) or isinstance(value, origin)

    if expected is float:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if expected is int:
        return isinstance(value, int) and not isinstance(value, bool)
    if isinstance(expected, type):
        return isinstance(value, expected)
    return True


def _type_hints(func: Callable[..., Any]) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(func)
    except (NameError, TypeError, AttributeError):
        # Unresolvable string annotations: fall back to arity-only checking
        return {}


def signature_accepts(func: Callable[..., Any], args: Sequence[Any]) -> bool:
    """
    True if `func` can be called with `args` by arity and annotated types.

    Builtins without signature metadata are assumed compatible; the call
    itself then reports a mismatch.
    """
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return True

    try:
        bound = sig.bind(*args)
    except TypeError:
        return False

    hints = _type_hints(func)
    for param_name, arg in bound.arguments.items():
        param = sig.parameters[param_name]
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        if not value_matches(hints.get(param_name), arg):
            return False
    return True


def invoke(func: Callable[..., Any], name: str, args: Sequence[Any]) -> Any:
    """Calls `func`, reporting any exception it raises as INVOCATION_FAILED."""
    try:
        return func(*args)
    except Exception as e:
        raise ResolutionError(
            EvaluationErrorKind.INVOCATION_FAILED,
            name,
            f"Method {name} raised {type(e).__name__}: {e}",
        ) from e


def lookup_attribute(value: Any, name: str) -> Any:
    """
    getattr() that returns None for a missing attribute.

    Any other exception, typically from a property, is reported as
    INVOCATION_FAILED.
    """
    try:
        return getattr(value, name)
    except AttributeError:
        return None
    except Exception as e:
        raise ResolutionError(
            EvaluationErrorKind.INVOCATION_FAILED,
            name,
            f"Property {name} raised {type(e).__name__}: {e}",
        ) from e


def may_return_bool(func: Callable[..., Any]) -> bool:
    """False only when the return annotation rules out a bool."""
    returns = _type_hints(func).get("return")
    return returns is None or value_matches(returns, True)


class ReflectiveAdapter:
    """
    Default adapter based on Python attribute introspection.

    Members resolve, in order, to: a mapping key, a public non-method
    attribute or property, then a zero-argument getter named get_<name>,
    get<Name>, is_<name> or is<Name> (the is* forms only when they return
    a bool). Names starting with '_' are never resolved.
    """

    def get_member(self, value: Any, name: str) -> Any:
        if name.startswith("_"):
            raise ResolutionError(
                EvaluationErrorKind.UNRESOLVED_MEMBER,
                name,
                f"Member {name} is private and cannot be accessed on {_describe(value)}",
            )

        if isinstance(value, Mapping) and name in value:
            return value[name]

        try:
            attr = getattr(value, name)
        except AttributeError:
            attr = None
        except Exception as e:
            raise ResolutionError(
                EvaluationErrorKind.INVOCATION_FAILED,
                name,
                f"Property {name} raised {type(e).__name__}: {e}",
            ) from e
        else:
            if not inspect.isroutine(attr):
                return attr

        found, result = self._call_getter(value, name)
        if found:
            return result

        raise ResolutionError(
            EvaluationErrorKind.UNRESOLVED_MEMBER,
            name,
            f"Member {name} does not correspond to a public attribute or getter of {_describe(value)}",
        )

    def _call_getter(self, value: Any, name: str) -> Tuple[bool, Any]:
        capitalized = name[0].upper() + name[1:]
        candidates = (
            (f"get_{name}", False),
            (f"get{capitalized}", False),
            (f"is_{name}", True),
            (f"is{capitalized}", True),
        )
        for method_name, must_be_bool in candidates:
            method = lookup_attribute(value, method_name)
            if not inspect.isroutine(method) or not signature_accepts(method, ()):
                continue
            if must_be_bool and not may_return_bool(method):
                continue
            result = invoke(method, method_name, ())
            if must_be_bool and not isinstance(result, bool):
                # is-prefixed methods that do not return a bool are not getters
                continue
            return True, result
        return False, None

    def call_method(self, value: Any, name: str, args: Sequence[Any]) -> Any:
        if name.startswith("_"):
            raise ResolutionError(
                EvaluationErrorKind.UNRESOLVED_METHOD,
                name,
                f"Method {name} is private and cannot be called on {_describe(value)}",
            )

        method = lookup_attribute(value, name)
        if method is None or not callable(method):
            raise ResolutionError(
                EvaluationErrorKind.UNRESOLVED_METHOD,
                name,
                f"No method {name} in {_type_name(value)}",
            )

        if not signature_accepts(method, args):
            raise ResolutionError(
                EvaluationErrorKind.UNRESOLVED_METHOD,
                name,
                f"Parameters for method {name} of {_type_name(value)} have wrong types: {list(args)!r}",
            )

        return invoke(method, name, args)

    def get_index(self, value: Any, key: Any) -> Any:
        if isinstance(value, Mapping):
            try:
                present = key in value
            except TypeError:
                present = False
            if not present:
                raise ResolutionError(
                    EvaluationErrorKind.INVALID_INDEX,
                    repr(key),
                    f"Key {key!r} is not present in {_type_name(value)}",
                )
            return value[key]

        if isinstance(value, Sequence):
            if not isinstance(key, int) or isinstance(key, bool):
                raise ResolutionError(
                    EvaluationErrorKind.INVALID_INDEX,
                    repr(key),
                    f"List index is not an integer: {key!r}",
                )
            if not 0 <= key < len(value):
                raise ResolutionError(
                    EvaluationErrorKind.INVALID_INDEX,
                    repr(key),
                    f"List index {key} is not valid for list of size {len(value)}",
                )
            return value[key]

        if hasattr(type(value), "__getitem__"):
            try:
                return value[key]
            except Exception as e:
                raise ResolutionError(
                    EvaluationErrorKind.INVALID_INDEX,
                    repr(key),
                    f"Cannot index {_describe(value)} with {key!r}: {type(e).__name__}: {e}",
                ) from e

        # $x[$k] is equivalent to $x.get($k) for anything else
        if callable(lookup_attribute(value, "get")):
            result = self.call_method(value, "get", (key,))
            if result is None:
                raise ResolutionError(
                    EvaluationErrorKind.INVALID_INDEX,
                    repr(key),
                    f"Key {key!r} is not present in {_type_name(value)}",
                )
            return result

        raise ResolutionError(
            EvaluationErrorKind.INVALID_INDEX,
            repr(key),
            f"Cannot index {_describe(value)}",
        )


@dataclass(frozen=True)
class MethodSpec:
    """
    One overload in a MethodTableAdapter.

    `func` is called as func(receiver, *args).
    """
    name: str
    param_types: Tuple[Any, ...]
    func: Callable[..., Any]

    def accepts(self, args: Sequence[Any]) -> bool:
        if len(self.param_types) != len(args):
            return False
        return all(value_matches(tp, arg) for tp, arg in zip(self.param_types, args))

    def __str__(self) -> str:
        params = ", ".join(getattr(tp, "__name__", str(tp)) for tp in self.param_types)
        return f"{self.name}({params})"


class MethodTableAdapter:
    """
    Adapter backed by explicit member and method tables.

    Several overloads may share a name; a call resolves to the single
    overload whose arity and parameter types accept the arguments. Names
    missing from the tables go to `fallback` when one is given.
    """

    def __init__(
        self,
        methods: Iterable[MethodSpec] = (),
        members: Optional[Dict[str, Callable[[Any], Any]]] = None,
        indexer: Optional[Callable[[Any, Any], Any]] = None,
        fallback: Optional[ValueAdapter] = None,
    ):
        self._methods: Dict[str, List[MethodSpec]] = {}
        self._members: Dict[str, Callable[[Any], Any]] = dict(members or {})
        self._indexer = indexer
        self.fallback = fallback
        for spec in methods:
            self._methods.setdefault(spec.name, []).append(spec)

    def add_method(self, name: str, param_types: Iterable[Any], func: Callable[..., Any]) -> MethodTableAdapter:
        self._methods.setdefault(name, []).append(MethodSpec(name, tuple(param_types), func))
        return self

    def add_member(self, name: str, getter: Callable[[Any], Any]) -> MethodTableAdapter:
        self._members[name] = getter
        return self

    def get_member(self, value: Any, name: str) -> Any:
        getter = self._members.get(name)
        if getter is not None:
            return invoke(getter, name, (value,))
        if self.fallback is not None:
            return self.fallback.get_member(value, name)
        raise ResolutionError(
            EvaluationErrorKind.UNRESOLVED_MEMBER,
            name,
            f"Member {name} is not registered for {_type_name(value)}",
        )

    def call_method(self, value: Any, name: str, args: Sequence[Any]) -> Any:
        specs = self._methods.get(name)
        if not specs:
            if self.fallback is not None:
                return self.fallback.call_method(value, name, args)
            raise ResolutionError(
                EvaluationErrorKind.UNRESOLVED_METHOD,
                name,
                f"No method {name} in {_type_name(value)}",
            )

        compatible = [spec for spec in specs if spec.accepts(args)]
        if not compatible:
            raise ResolutionError(
                EvaluationErrorKind.UNRESOLVED_METHOD,
                name,
                f"Parameters for method {name} of {_type_name(value)} have wrong types: {list(args)!r}",
            )
        if len(compatible) > 1:
            candidates = ", ".join(str(spec) for spec in compatible)
            raise ResolutionError(
                EvaluationErrorKind.AMBIGUOUS_METHOD,
                name,
                f"Ambiguous invocation of {name} on {_type_name(value)}, could be one of: {candidates}",
            )
        return invoke(compatible[0].func, name, (value, *args))

    def get_index(self, value: Any, key: Any) -> Any:
        if self._indexer is not None:
            return invoke(self._indexer, "[]", (value, key))
        if self.fallback is not None:
            return self.fallback.get_index(value, key)
        raise ResolutionError(
            EvaluationErrorKind.INVALID_INDEX,
            repr(key),
            f"Indexing is not registered for {_type_name(value)}",
        )


class AdapterRegistry:
    """
    Maps value types to adapters.

    Lookup walks the MRO of the value's type, so an adapter registered for
    a base class also serves its subclasses. Unregistered types use the
    fallback adapter.
    """

    def __init__(self, fallback: Optional[ValueAdapter] = None):
        self._adapters: Dict[type, ValueAdapter] = {}
        self.fallback: ValueAdapter = fallback or ReflectiveAdapter()

    def register(self, value_type: type, adapter: ValueAdapter) -> None:
        if value_type in self._adapters:
            logger.warning(f"Adapter for '{value_type.__qualname__}' overwrites existing adapter")
        self._adapters[value_type] = adapter
        logger.debug(f"Registered {type(adapter).__name__} for {value_type.__qualname__}")

    def unregister(self, value_type: type) -> None:
        self._adapters.pop(value_type, None)

    def adapter_for(self, value: Any) -> ValueAdapter:
        for klass in type(value).__mro__:
            adapter = self._adapters.get(klass)
            if adapter is not None:
                return adapter
        return self.fallback

    def copy(self) -> AdapterRegistry:
        clone = AdapterRegistry(self.fallback)
        clone._adapters = dict(self._adapters)
        return clone


_default_registry = AdapterRegistry()


def get_registry() -> AdapterRegistry:
    """Process-wide registry used when a render is not given one."""
    return _default_registry


def register_adapter(value_type: type, adapter: ValueAdapter) -> None:
    _default_registry.register(value_type, adapter)


__all__ = [
    "ReflectiveAdapter",
    "MethodSpec",
    "MethodTableAdapter",
    "AdapterRegistry",
    "get_registry",
    "register_adapter",
    "value_matches",
    "signature_accepts",
]
