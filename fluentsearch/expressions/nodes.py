# FluentSearch - Expression Nodes
# ===============================
"""
Expression tree used to describe field projections and predicates.

Nodes are immutable and compare structurally, with one exception:
a Parameter is only ever equal to itself. Two trees that read the same
field through the same Parameter are therefore equal and hash alike,
which lets the evaluator share projections between leaf conditions.

Traversal follows the shape of the standard library's ``ast`` module:
NodeVisitor dispatches to ``visit_<ClassName>`` and NodeTransformer
rebuilds the tree from the values its visit methods return.
"""

import dataclasses
from dataclasses import dataclass
from typing import Any, Tuple


class Node:
    """Base class for all expression nodes."""

    def children(self) -> Tuple["Node", ...]:
        """Direct child nodes, in evaluation order."""
        return ()


@dataclass(frozen=True, eq=False)
class Parameter(Node):
    """The bound input symbol of a Lambda. Compared by identity."""
    name: str = "x"

    def __repr__(self) -> str:
        return f"Parameter({self.name}@{id(self):x})"


@dataclass(frozen=True)
class Constant(Node):
    """A literal value."""
    value: Any


@dataclass(frozen=True)
class Member(Node):
    """Attribute access (or key lookup on mapping records)."""
    target: Node
    name: str

    def children(self) -> Tuple[Node, ...]:
        return (self.target,)


@dataclass(frozen=True)
class Item(Node):
    """Subscript access, ``target[key]``."""
    target: Node
    key: Any

    def children(self) -> Tuple[Node, ...]:
        return (self.target,)


@dataclass(frozen=True)
class MethodCall(Node):
    """A method invoked on a projected value, e.g. ``x.name.strip()``."""
    target: Node
    method: str
    args: Tuple[Node, ...] = ()

    def children(self) -> Tuple[Node, ...]:
        return (self.target,) + self.args


@dataclass(frozen=True)
class Call(Node):
    """A built-in function from the evaluator's function table."""
    function: str
    args: Tuple[Node, ...]

    def children(self) -> Tuple[Node, ...]:
        return self.args


@dataclass(frozen=True)
class BinaryOp(Node):
    """Boolean connective or equality: ``and``, ``or``, ``eq``."""
    op: str
    left: Node
    right: Node

    def children(self) -> Tuple[Node, ...]:
        return (self.left, self.right)


@dataclass(frozen=True)
class Lambda:
    """A single-parameter function: the root of every accessor and predicate."""
    parameter: Parameter
    body: Node


BINARY_OPERATORS = frozenset({"and", "or", "eq"})


class NodeVisitor:
    """Walks a tree and dispatches on node class name."""

    def visit(self, node: Node):
        method = getattr(self, f"visit_{type(node).__name__}", self.generic_visit)
        return method(node)

    def generic_visit(self, node: Node):
        for child in node.children():
            self.visit(child)


class NodeTransformer(NodeVisitor):
    """
    Rebuilds a tree bottom-up.

    generic_visit replaces every Node-valued field (including nodes held in
    tuples) with the result of visiting it. Subclasses override visit
    methods for the node kinds they rewrite.
    """

    def generic_visit(self, node: Node) -> Node:
        changes = {}
        for f in dataclasses.fields(node):
            value = getattr(node, f.name)
            if isinstance(value, Node):
                changes[f.name] = self.visit(value)
            elif isinstance(value, tuple) and any(isinstance(v, Node) for v in value):
                changes[f.name] = tuple(
                    self.visit(v) if isinstance(v, Node) else v for v in value
                )
        if not changes:
            return node
        return dataclasses.replace(node, **changes)


def walk(node: Node):
    """Yield every node in the tree, parents before children."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children()))


def free_parameters(node: Node) -> Tuple[Parameter, ...]:
    """Distinct Parameter nodes referenced by the tree, in first-seen order."""
    seen = []
    for current in walk(node):
        if isinstance(current, Parameter) and not any(current is p for p in seen):
            seen.append(current)
    return tuple(seen)


def and_join(left, right: Node) -> Node:
    """AND two conditions; a missing left side yields the right side."""
    if left is None:
        return right
    return BinaryOp("and", left, right)


def or_join(left, right: Node) -> Node:
    """OR two conditions; a missing left side yields the right side."""
    if left is None:
        return right
    return BinaryOp("or", left, right)


def describe(node: Node) -> str:
    """Readable rendering of a tree, used in log messages and reprs."""
    if isinstance(node, Parameter):
        return node.name
    if isinstance(node, Constant):
        return repr(node.value)
    if isinstance(node, Member):
        return f"{describe(node.target)}.{node.name}"
    if isinstance(node, Item):
        return f"{describe(node.target)}[{node.key!r}]"
    if isinstance(node, MethodCall):
        args = ", ".join(describe(a) for a in node.args)
        return f"{describe(node.target)}.{node.method}({args})"
    if isinstance(node, Call):
        args = ", ".join(describe(a) for a in node.args)
        return f"{node.function}({args})"
    if isinstance(node, BinaryOp):
        symbol = {"and": "and", "or": "or", "eq": "=="}[node.op]
        return f"({describe(node.left)} {symbol} {describe(node.right)})"
    return repr(node)
