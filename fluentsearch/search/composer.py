# FluentSearch Search - Predicate Composer
# ========================================
"""
Builds compound predicates from fields and search terms.

For one chain stage, every (term, field) pair yields a leaf condition and
the leaves are OR-joined: a record matches when ANY field satisfies the
test for ANY term. Stages are AND-joined by the chain, so each chained
call narrows the result.

String tests are case-insensitive: both sides are lower-cased. A None
field value never matches.
"""

import logging
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence

from ..errors import InvalidArgumentError
from ..expressions import (
    BinaryOp,
    Call,
    Constant,
    FieldAccessor,
    Node,
    Parameter,
    or_join,
    unify,
)

logger = logging.getLogger(__name__)


class SearchOperation(Enum):
    """Leaf condition kinds."""
    CONTAINS = "contains"          # lower(field) contains lower(term)
    STARTS_WITH = "starts_with"    # lower(field) starts with lower(term)
    IS_EQUAL = "is_equal"          # lower(field) == lower(term)
    EQUAL_TO = "equal_to"          # field == value, exact and type-preserving


def _flatten(values: Iterable[Any]) -> List[Any]:
    flat = []
    for value in values:
        if isinstance(value, (list, tuple, set, frozenset)):
            flat.extend(value)
        else:
            flat.append(value)
    return flat


def normalize_terms(terms: Iterable[Any]) -> List[str]:
    """
    Clean a term set.

    Lists and tuples are flattened one level. None, empty and
    whitespace-only terms are dropped; the remaining terms are kept
    verbatim.

    Raises:
        InvalidArgumentError: if a term is not a string
    """
    cleaned = []
    for term in _flatten(terms):
        if term is None:
            continue
        if not isinstance(term, str):
            raise InvalidArgumentError(
                "terms", f"search terms must be strings, got {type(term).__name__}"
            )
        if not term.strip():
            continue
        cleaned.append(term)
    return cleaned


def normalize_values(values: Iterable[Any]) -> List[Any]:
    """Values for exact equality: flattened one level, None dropped."""
    return [v for v in _flatten(values) if v is not None]


def build_leaf(operation: SearchOperation, field: Node, term: Any) -> Node:
    """Leaf condition comparing one projected field against one term."""
    if operation == SearchOperation.EQUAL_TO:
        return BinaryOp("eq", field, Constant(term))

    lowered_field = Call("lower", (field,))
    lowered_term = Constant(term.lower())
    if operation == SearchOperation.CONTAINS:
        return Call("contains", (lowered_field, lowered_term))
    if operation == SearchOperation.STARTS_WITH:
        return Call("starts_with", (lowered_field, lowered_term))
    if operation == SearchOperation.IS_EQUAL:
        return BinaryOp("eq", lowered_field, lowered_term)
    raise InvalidArgumentError("operation", f"unsupported operation {operation!r}")


class PredicateComposer:
    """
    Composes OR-joined leaf conditions over accessors bound to one Parameter.

    Example:
        composer = PredicateComposer(parameter)
        condition = composer.compose(SearchOperation.CONTAINS, fields, ["cd", "jk"])
    """

    def __init__(self, parameter: Parameter):
        self.parameter = parameter

    def compose(self,
                operation: SearchOperation,
                fields: Sequence[FieldAccessor],
                terms: Sequence[Any]) -> Optional[Node]:
        """
        Build the condition for one chain stage.

        Args:
            operation: The leaf test to apply
            fields: Accessors to test (unified to this composer's parameter)
            terms: Already-normalized terms or values

        Returns:
            The OR-joined condition, or None when there is nothing to test
        """
        if not fields or not terms:
            return None

        bodies = [unify(f, self.parameter).body for f in fields]

        condition = None
        for term in terms:
            for body in bodies:
                condition = or_join(condition, build_leaf(operation, body, term))

        logger.debug(
            f"Composed {operation.value} condition over {len(bodies)} fields x {len(terms)} terms"
        )
        return condition
