# FluentSearch - Field Accessors
# ==============================
"""
Field accessors: reusable, inspectable projections from a record to a value.

An accessor is a Lambda whose body reads a value out of the record bound to
its Parameter. Accessors are built from:

- a dotted path string:        FieldAccessor.of("address.city")
- a callable, traced once:     FieldAccessor.of(lambda x: x.address.city)
- an existing FieldAccessor:   returned unchanged

Tracing calls the function with a recording proxy. Attribute access,
subscripts and method calls are recorded as nodes; anything that needs a
real value (truthiness, str(), iteration) is rejected up front.
"""

import logging
from typing import Any, Callable, Union

from ..errors import InvalidArgumentError
from .nodes import (
    Call,
    Constant,
    Item,
    Lambda,
    Member,
    MethodCall,
    Node,
    Parameter,
    describe,
    free_parameters,
)

logger = logging.getLogger(__name__)


class _Tracer:
    """Recording proxy handed to selector callables."""

    __slots__ = ("_node",)

    def __init__(self, node: Node):
        object.__setattr__(self, "_node", node)

    def __getattr__(self, name: str) -> "_Tracer":
        if name.startswith("__"):
            raise AttributeError(name)
        return _Tracer(Member(self._node, name))

    def __getitem__(self, key) -> "_Tracer":
        return _Tracer(Item(self._node, key))

    def __call__(self, *args, **kwargs) -> "_Tracer":
        if kwargs:
            raise InvalidArgumentError("selector", "keyword arguments cannot be recorded")
        if not isinstance(self._node, Member):
            raise InvalidArgumentError("selector", "only methods of a field can be called")
        arg_nodes = tuple(_to_node(a) for a in args)
        return _Tracer(MethodCall(self._node.target, self._node.name, arg_nodes))

    def __setattr__(self, name, value):
        raise InvalidArgumentError("selector", "selectors must not assign to records")

    def __bool__(self):
        raise InvalidArgumentError(
            "selector", "selectors cannot branch on field values"
        )

    def __iter__(self):
        raise InvalidArgumentError("selector", "selectors cannot iterate field values")

    def __str__(self):
        raise InvalidArgumentError(
            "selector", "use fluentsearch.text(value) instead of str(value)"
        )

    def __repr__(self) -> str:
        return f"<tracer {describe(self._node)}>"


def _to_node(value: Any) -> Node:
    if isinstance(value, _Tracer):
        return value._node
    return Constant(value)


def text(value: Any) -> Any:
    """
    Text form of a value.

    Inside a selector this records a conversion to string, so
    ``lambda x: text(x.id)`` selects the identifier as text. Outside a
    selector it behaves like ``str`` but keeps None as None.
    """
    if isinstance(value, _Tracer):
        return _Tracer(Call("text", (value._node,)))
    if value is None:
        return None
    return str(value)


class FieldAccessor:
    """
    A projection from a record to a (usually string) value.

    Immutable. Equality is structural: two accessors are equal when their
    bodies are equal, which requires them to share a Parameter (see unify).
    """

    __slots__ = ("_lambda", "_label")

    def __init__(self, function: Lambda, label: str = None):
        self._lambda = function
        self._label = label or describe(function.body)

    @property
    def parameter(self) -> Parameter:
        return self._lambda.parameter

    @property
    def body(self) -> Node:
        return self._lambda.body

    @property
    def function(self) -> Lambda:
        return self._lambda

    @property
    def label(self) -> str:
        return self._label

    @classmethod
    def of(cls, selector: Union["FieldAccessor", str, Callable[[Any], Any]]) -> "FieldAccessor":
        """Build an accessor from a path string, a callable or an accessor."""
        if selector is None:
            raise InvalidArgumentError("selector", "a field selector is required")
        if isinstance(selector, FieldAccessor):
            return selector
        if isinstance(selector, str):
            return cls.from_path(selector)
        if callable(selector):
            return cls.from_callable(selector)
        raise InvalidArgumentError(
            "selector", f"expected a field name or callable, got {type(selector).__name__}"
        )

    @classmethod
    def from_path(cls, path: str) -> "FieldAccessor":
        """Accessor for a dotted attribute path such as ``"address.city"``."""
        parts = path.split(".")
        if not path or any(not p.strip() for p in parts):
            raise InvalidArgumentError("selector", f"malformed field path {path!r}")

        parameter = Parameter()
        node: Node = parameter
        for part in parts:
            node = Member(node, part.strip())
        return cls(Lambda(parameter, node), label=path)

    @classmethod
    def for_field(cls, name: Any) -> "FieldAccessor":
        """
        Accessor for one top-level field; dots in ``name`` are not split.

        Non-string names (e.g. integer DataFrame column labels) are read
        by key.
        """
        parameter = Parameter()
        if isinstance(name, str):
            return cls(Lambda(parameter, Member(parameter, name)), label=name)
        return cls(Lambda(parameter, Item(parameter, name)), label=str(name))

    @classmethod
    def from_callable(cls, selector: Callable[[Any], Any]) -> "FieldAccessor":
        """Accessor recorded by calling ``selector`` with a tracing proxy."""
        parameter = Parameter()
        try:
            result = selector(_Tracer(parameter))
        except InvalidArgumentError:
            raise
        except (AttributeError, TypeError) as e:
            raise InvalidArgumentError("selector", f"selector could not be traced: {e}") from e

        if not isinstance(result, _Tracer):
            raise InvalidArgumentError(
                "selector", "selector must return a value read from the record"
            )
        body = result._node
        if body is parameter:
            raise InvalidArgumentError("selector", "selector must project a field, not the record")

        accessor = cls(Lambda(parameter, body))
        logger.debug(f"Traced selector {selector!r} as {accessor.label}")
        return accessor

    def __eq__(self, other) -> bool:
        if not isinstance(other, FieldAccessor):
            return NotImplemented
        return self._lambda == other._lambda

    def __hash__(self) -> int:
        return hash(self._lambda)

    def __repr__(self) -> str:
        return f"FieldAccessor({self._label})"


def ensure_single_parameter(accessor: FieldAccessor) -> None:
    """Check that an accessor's body only references its own parameter."""
    found = free_parameters(accessor.body)
    if any(p is not accessor.parameter for p in found):
        raise InvalidArgumentError(
            "selector", f"{accessor.label} references a parameter it does not bind"
        )
