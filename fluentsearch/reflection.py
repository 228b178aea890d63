# FluentSearch - Field Discovery
# ==============================
"""
Finds the string-valued fields of a record type for search-all mode.

Supported record types:
- pydantic models (model_fields)
- dataclasses
- NamedTuple classes and other classes with type annotations

A field counts as a string field when it is annotated ``str`` or
``Optional[str]``. Results are memoized per type.
"""

import dataclasses
import logging
import types
import typing
from functools import lru_cache
from typing import Any, Dict, Iterable, Mapping, Tuple, Union

from pydantic import BaseModel

logger = logging.getLogger(__name__)


def is_string_annotation(annotation: Any) -> bool:
    """True for ``str``, ``Optional[str]`` and ``str | None``."""
    if annotation is str:
        return True
    args = typing.get_args(annotation)
    if args and _is_union(annotation):
        non_null = [a for a in args if a is not type(None)]
        return len(non_null) == 1 and non_null[0] is str
    return False


def _is_union(annotation: Any) -> bool:
    origin = typing.get_origin(annotation)
    if origin is Union:
        return True
    union_type = getattr(types, "UnionType", None)
    return union_type is not None and origin is union_type


def _annotations(record_type: type) -> Dict[str, Any]:
    if isinstance(record_type, type) and issubclass(record_type, BaseModel):
        return {name: info.annotation for name, info in record_type.model_fields.items()}

    try:
        hints = typing.get_type_hints(record_type)
    except (NameError, TypeError) as e:
        logger.warning(f"Could not resolve type hints for {record_type.__name__}: {e}")
        hints = dict(getattr(record_type, "__annotations__", {}))

    if dataclasses.is_dataclass(record_type):
        return {f.name: hints.get(f.name, f.type) for f in dataclasses.fields(record_type)}
    return {name: hint for name, hint in hints.items() if not name.startswith("_")}


@lru_cache(maxsize=256)
def string_fields_of(record_type: type) -> Tuple[str, ...]:
    """
    Names of the string-valued fields of ``record_type``, in declaration order.

    Args:
        record_type: A pydantic model, dataclass, NamedTuple or annotated class

    Returns:
        Tuple of field names (empty if none are declared as strings)
    """
    fields = tuple(
        name for name, annotation in _annotations(record_type).items()
        if is_string_annotation(annotation)
    )
    logger.debug(f"Discovered string fields of {record_type.__name__}: {fields}")
    return fields


def string_keys_of(records: Iterable[Mapping]) -> Tuple[str, ...]:
    """
    Text keys of mapping records (used when no type is declared).

    A key counts when every non-None value seen for it is a string, so a
    key that is None in the first record is still searched.
    """
    is_text: Dict[str, bool] = {}
    for record in records:
        for key, value in record.items():
            if not isinstance(key, str):
                continue
            if value is None:
                is_text.setdefault(key, True)
            else:
                is_text[key] = is_text.get(key, True) and isinstance(value, str)
    return tuple(key for key, text_only in is_text.items() if text_only)
