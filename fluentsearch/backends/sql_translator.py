# FluentSearch Backends - SQL Translator
# ======================================
"""
Translates expression trees into DuckDB SQL.

Field reads become quoted column references, constants become ``?``
parameters (never inlined), and the built-in functions map onto DuckDB's
``lower``, ``contains``, ``starts_with``, ``coalesce`` and
``levenshtein``. Boolean tests are wrapped in ``coalesce(..., false)`` so a
NULL column is a non-match rather than an unknown.
"""

import logging
import re
from typing import Any, List, Tuple

from ..errors import InvalidArgumentError, UnsupportedExpressionError
from ..expressions import (
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
)

logger = logging.getLogger(__name__)


# Table names: optional schema qualifier, identifier characters only
VALID_TABLE_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")

# No-argument string methods with a direct DuckDB equivalent
METHOD_FUNCTIONS = {
    "lower": "lower",
    "upper": "upper",
    "strip": "trim",
    "lstrip": "ltrim",
    "rstrip": "rtrim",
}

BACKEND = "DuckDB"


def quote_identifier(name: str) -> str:
    """Double-quote an identifier, escaping embedded quotes."""
    escaped = str(name).replace('"', '""')
    return f'"{escaped}"'


def validate_table_name(name: str) -> str:
    """Return a quoted table reference, or raise for anything unsafe."""
    if not name or not isinstance(name, str) or not VALID_TABLE_PATTERN.match(name):
        raise InvalidArgumentError("table", f"invalid table name {name!r}")
    return ".".join(quote_identifier(part) for part in name.split("."))


class SqlTranslator(NodeVisitor):
    """
    Renders nodes bound to one Parameter as SQL.

    Parameters collected while translating are kept in ``params`` in the
    order their placeholders appear.

    Example:
        translator = SqlTranslator(predicate.parameter)
        where = translator.translate(predicate)
        conn.execute(f"SELECT * FROM t WHERE {where}", translator.params)
    """

    def __init__(self, parameter: Parameter):
        self.parameter = parameter
        self.params: List[Any] = []

    def translate(self, function: Lambda) -> str:
        if function.parameter is not self.parameter:
            raise InvalidArgumentError("expression", "expression is not bound to the query parameter")
        return self.visit(function.body)

    def visit_Parameter(self, node: Parameter) -> str:
        raise UnsupportedExpressionError(node, BACKEND)

    def visit_Constant(self, node: Constant) -> str:
        self.params.append(node.value)
        if isinstance(node.value, str):
            # typed so overloaded functions (contains, starts_with) resolve at prepare time
            return "CAST(? AS VARCHAR)"
        return "?"

    def visit_Member(self, node: Member) -> str:
        if node.target is self.parameter:
            return quote_identifier(node.name)
        # struct field access
        return f"({self.visit(node.target)}).{quote_identifier(node.name)}"

    def visit_Item(self, node: Item) -> str:
        if node.target is self.parameter and isinstance(node.key, str):
            return quote_identifier(node.key)
        raise UnsupportedExpressionError(node, BACKEND)

    def visit_MethodCall(self, node: MethodCall) -> str:
        function = METHOD_FUNCTIONS.get(node.method)
        if function is None or node.args:
            raise UnsupportedExpressionError(node, BACKEND)
        return f"{function}({self.visit(node.target)})"

    def visit_Call(self, node: Call) -> str:
        args = [self.visit(a) for a in node.args]

        if node.function == "lower":
            return f"lower({args[0]})"
        if node.function == "text":
            return f"CAST({args[0]} AS VARCHAR)"
        if node.function == "contains":
            return f"coalesce(contains({args[0]}, {args[1]}), false)"
        if node.function == "starts_with":
            return f"coalesce(starts_with({args[0]}, {args[1]}), false)"
        if node.function == "coalesce":
            return f"coalesce({', '.join(args)})"
        if node.function == "levenshtein":
            return f"levenshtein({args[0]}, {args[1]})"
        raise UnsupportedExpressionError(node, BACKEND)

    def visit_BinaryOp(self, node: BinaryOp) -> str:
        left = self.visit(node.left)
        right = self.visit(node.right)

        if node.op == "and":
            return f"({left} AND {right})"
        if node.op == "or":
            return f"({left} OR {right})"
        if node.op == "eq":
            return f"coalesce(({left} = {right}), false)"
        raise UnsupportedExpressionError(node, BACKEND)

    def generic_visit(self, node: Node) -> str:
        raise UnsupportedExpressionError(node, BACKEND)


def translate_predicate(predicate: Lambda) -> Tuple[str, List[Any]]:
    """Translate a boolean Lambda into a WHERE fragment and its parameters."""
    translator = SqlTranslator(predicate.parameter)
    return translator.translate(predicate), translator.params
