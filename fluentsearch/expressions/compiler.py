# FluentSearch - Expression Compiler
# ==================================
"""
Turns expression trees into plain Python callables.

Compilation walks the tree once and produces nested closures. Projection
nodes (field reads, method calls, conversions) that are structurally equal
share a slot in a per-record cache, so a field searched for several terms
is read and lower-cased once per record.

Evaluation is null-safe: a None anywhere along a projection yields None,
and the string tests treat None as "no match".
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..errors import InvalidArgumentError
from .nodes import (
    BinaryOp,
    Call,
    Constant,
    Item,
    Lambda,
    Member,
    MethodCall,
    Node,
    NodeVisitor,
    Parameter,
    describe,
)

logger = logging.getLogger(__name__)


def _lower(value):
    return None if value is None else value.lower()


def _text(value):
    return None if value is None else str(value)


def _contains(value, term) -> bool:
    return value is not None and term is not None and term in value


def _starts_with(value, term) -> bool:
    return value is not None and term is not None and value.startswith(term)


def _coalesce(*values):
    for value in values:
        if value is not None:
            return value
    return None


def default_functions(distance: Optional[Callable[[str, str], int]] = None) -> Dict[str, Callable]:
    """Function table for Call nodes."""
    if distance is None:
        from ..levenshtein.processor import get_distance_function
        distance = get_distance_function()

    return {
        "lower": _lower,
        "text": _text,
        "contains": _contains,
        "starts_with": _starts_with,
        "coalesce": _coalesce,
        "levenshtein": distance,
    }


# Call functions whose result is a projected value worth caching per record
CACHED_FUNCTIONS = {"lower", "text", "coalesce"}

# Call functions whose first argument must be a string (or None)
TEXT_ARGUMENT_FUNCTIONS = {"lower"}


class _Frame:
    """Per-record evaluation state."""

    __slots__ = ("record", "cache")

    def __init__(self, record, slots: int):
        self.record = record
        self.cache: List[Any] = [_MISSING] * slots


_MISSING = object()


class Compiler(NodeVisitor):
    """
    Compiles nodes bound to one Parameter into closures over a _Frame.

    Example:
        compiler = Compiler(predicate.parameter)
        test = compiler.compile_lambda(predicate)
        matches = [r for r in records if test(r)]
    """

    def __init__(self, parameter: Parameter, functions: Optional[Dict[str, Callable]] = None):
        self.parameter = parameter
        self.functions = functions if functions is not None else default_functions()
        self._slots: Dict[Node, int] = {}

    def compile_lambda(self, function: Lambda) -> Callable[[Any], Any]:
        """Compile a single Lambda into ``f(record)``."""
        return self._finish([self._bind(function)])[0]

    def compile_many(self, functions: Sequence[Lambda]) -> Callable[[Any], tuple]:
        """
        Compile several Lambdas sharing one projection cache.

        The returned callable evaluates all of them against a record and
        returns a tuple of results in input order.
        """
        compiled = [self._bind(f) for f in functions]
        slots = len(self._slots)

        def evaluate(record):
            frame = _Frame(record, slots)
            return tuple(fn(frame) for fn in compiled)

        return evaluate

    def _bind(self, function: Lambda):
        if function.parameter is not self.parameter:
            raise InvalidArgumentError(
                "expression", "expression is not bound to the compiler's parameter"
            )
        return self.visit(function.body)

    def _finish(self, compiled):
        slots = len(self._slots)
        return [lambda record, fn=fn: fn(_Frame(record, slots)) for fn in compiled]

    def _cached(self, node: Node, compute):
        try:
            slot = self._slots.setdefault(node, len(self._slots))
        except TypeError:
            # unhashable constant somewhere below; evaluate uncached
            return compute

        def read(frame: _Frame):
            value = frame.cache[slot]
            if value is _MISSING:
                value = compute(frame)
                frame.cache[slot] = value
            return value

        return read

    def visit_Parameter(self, node: Parameter):
        if node is not self.parameter:
            raise InvalidArgumentError("expression", f"unbound parameter {node!r}")
        return lambda frame: frame.record

    def visit_Constant(self, node: Constant):
        value = node.value
        return lambda frame: value

    def visit_Member(self, node: Member):
        target = self.visit(node.target)
        name = node.name

        def read_member(frame):
            obj = target(frame)
            if obj is None:
                return None
            if isinstance(obj, Mapping):
                return obj.get(name)
            return getattr(obj, name)

        return self._cached(node, read_member)

    def visit_Item(self, node: Item):
        target = self.visit(node.target)
        key = node.key

        def read_item(frame):
            obj = target(frame)
            if obj is None:
                return None
            if isinstance(obj, Mapping):
                return obj.get(key)
            return obj[key]

        return self._cached(node, read_item)

    def visit_MethodCall(self, node: MethodCall):
        target = self.visit(node.target)
        args = [self.visit(a) for a in node.args]
        method = node.method

        def call_method(frame):
            obj = target(frame)
            if obj is None:
                return None
            return getattr(obj, method)(*(a(frame) for a in args))

        return self._cached(node, call_method)

    def visit_Call(self, node: Call):
        try:
            function = self.functions[node.function]
        except KeyError:
            raise InvalidArgumentError("expression", f"unknown function {node.function!r}") from None
        args = [self.visit(a) for a in node.args]

        if node.function in TEXT_ARGUMENT_FUNCTIONS:
            field = describe(node.args[0])
            text_function = function

            def function(value, *rest):
                if value is not None and not isinstance(value, str):
                    raise InvalidArgumentError(
                        "field",
                        f"{field} holds {type(value).__name__} values; "
                        f"select text({field}) to search it as text"
                    )
                return text_function(value, *rest)

        def call(frame):
            return function(*(a(frame) for a in args))

        if node.function in CACHED_FUNCTIONS:
            return self._cached(node, call)
        return call

    def visit_BinaryOp(self, node: BinaryOp):
        left = self.visit(node.left)
        right = self.visit(node.right)

        if node.op == "and":
            return lambda frame: bool(left(frame)) and bool(right(frame))
        if node.op == "or":
            return lambda frame: bool(left(frame)) or bool(right(frame))
        if node.op == "eq":
            return lambda frame: left(frame) == right(frame)
        raise InvalidArgumentError("expression", f"unknown operator {node.op!r}")

    def generic_visit(self, node: Node):
        raise InvalidArgumentError("expression", f"cannot compile {type(node).__name__}")


def compile_predicate(predicate: Lambda, functions: Optional[Dict[str, Callable]] = None) -> Callable[[Any], bool]:
    """Compile a boolean Lambda into ``test(record) -> bool``."""
    test = Compiler(predicate.parameter, functions).compile_lambda(predicate)
    return lambda record: bool(test(record))
