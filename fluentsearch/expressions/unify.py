# FluentSearch - Parameter Unification
# ====================================
"""
Rebinds independently built accessors to one shared Parameter.

Every accessor is created with a private Parameter. Before several
accessors can be combined into one predicate they must all read from the
same bound record, so each body is rewritten with its own Parameter
replaced by the canonical one. Nothing else in the tree changes.
"""

from typing import Iterable, List

from .accessor import FieldAccessor, ensure_single_parameter
from .nodes import Lambda, Node, NodeTransformer, Parameter


class ParameterSwapper(NodeTransformer):
    """Replaces one Parameter with another throughout a tree."""

    def __init__(self, old: Parameter, new: Parameter):
        self.old = old
        self.new = new

    def visit_Parameter(self, node: Parameter) -> Node:
        if node is self.old:
            return self.new
        return node


def swap_parameter(body: Node, old: Parameter, new: Parameter) -> Node:
    """Rewrite ``body`` so that references to ``old`` point at ``new``."""
    if old is new:
        return body
    return ParameterSwapper(old, new).visit(body)


def unify(accessor: FieldAccessor, parameter: Parameter) -> FieldAccessor:
    """
    Return an accessor structurally identical to ``accessor`` but bound to
    ``parameter``.

    The input accessor is not modified. Unifying an accessor that is
    already bound to ``parameter`` returns it as is.
    """
    if accessor.parameter is parameter:
        return accessor
    ensure_single_parameter(accessor)
    body = swap_parameter(accessor.body, accessor.parameter, parameter)
    return FieldAccessor(Lambda(parameter, body), label=accessor.label)


def unify_all(accessors: Iterable[FieldAccessor], parameter: Parameter) -> List[FieldAccessor]:
    """Unify each accessor to ``parameter``, preserving order."""
    return [unify(a, parameter) for a in accessors]
