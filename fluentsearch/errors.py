# FluentSearch - Errors
# =====================
"""
Exception hierarchy for FluentSearch.

Argument problems are raised when a chain is built, never deferred to
enumeration. Failures raised by an execution backend (DuckDB, pandas) are
not wrapped and reach the caller unchanged.
"""

from typing import Optional


class SearchError(Exception):
    """Base exception for FluentSearch errors."""
    pass


class InvalidArgumentError(SearchError, ValueError):
    """Raised when a required argument is missing or malformed."""

    def __init__(self, argument: str, reason: Optional[str] = None):
        self.argument = argument
        self.reason = reason
        message = f"Invalid argument '{argument}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnsupportedExpressionError(SearchError):
    """Raised when an expression node cannot be translated for a backend."""

    def __init__(self, node, backend: str):
        self.node = node
        self.backend = backend
        super().__init__(
            f"Expression {node!r} cannot be translated for the {backend} backend. "
            "Use a plain field path or a supported string method."
        )


class EmptySequenceError(SearchError, LookupError):
    """Raised by first() when the result sequence has no elements."""
    pass
