# FluentSearch Expressions Module
# ===============================
"""
Expression trees for field projections and predicates.

Components:
- nodes: Immutable tagged-variant nodes plus visitor/transformer bases
- FieldAccessor: Reusable record-to-value projections built from paths or callables
- unify: Rebinds accessors to one shared Parameter so they can be combined
- Compiler: Evaluates trees against records in Python
"""

from .nodes import (
    Node,
    Parameter,
    Constant,
    Member,
    Item,
    MethodCall,
    Call,
    BinaryOp,
    Lambda,
    NodeVisitor,
    NodeTransformer,
    and_join,
    or_join,
    describe,
    free_parameters,
)

from .accessor import (
    FieldAccessor,
    text,
)

from .unify import (
    ParameterSwapper,
    swap_parameter,
    unify,
    unify_all,
)

from .compiler import (
    Compiler,
    compile_predicate,
    default_functions,
)


__all__ = [
    # Nodes
    "Node",
    "Parameter",
    "Constant",
    "Member",
    "Item",
    "MethodCall",
    "Call",
    "BinaryOp",
    "Lambda",
    "NodeVisitor",
    "NodeTransformer",
    "and_join",
    "or_join",
    "describe",
    "free_parameters",

    # Accessors
    "FieldAccessor",
    "text",

    # Unification
    "ParameterSwapper",
    "swap_parameter",
    "unify",
    "unify_all",

    # Compiler
    "Compiler",
    "compile_predicate",
    "default_functions",
]
