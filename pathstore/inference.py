"""Infer a schema from an example value."""

import math
from typing import Any

from .paths import MISSING
from .types import (
    AnyType,
    BooleanType,
    DictionaryType,
    ListType,
    NullableType,
    NumberType,
    StringType,
    Type,
    UnionType,
)


def infer_type(value: Any) -> Type:
    """Build a Type that the example value satisfies, seeded with it as default.

    Lists infer a Union over their elements' types (a single-member Union for
    homogeneous lists, Any for empty ones). Dicts infer a field per key.

    Example:
        infer_type({"n": 0, "tags": ["a"], "owner": None})
        # DictionaryType(fields=['n', 'tags', 'owner'])
    """
    if isinstance(value, bool):
        return BooleanType(value)
    if isinstance(value, str):
        return StringType(default=value)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            # NaN and infinity are never valid numbers
            return AnyType(value)
        return NumberType(default=value)
    if isinstance(value, (list, tuple)):
        value = list(value)
        if not value:
            return ListType(AnyType(), default=value)
        element = UnionType([infer_type(item) for item in value])
        return ListType(element, default=value)
    if isinstance(value, dict):
        return DictionaryType({key: infer_type(item) for key, item in value.items()})
    if value is None:
        return NullableType(undefined=False)
    if value is MISSING:
        return NullableType(null=False)
    return AnyType(value)
