"""Schema types for validating nested JSON-compatible values.

A Type describes which values are valid and carries a default value that is
itself valid. Validation reports the exact key-paths that failed, relative to
the value being validated; an empty path means the value as a whole.

Example:
    from pathstore import types as t

    settings = t.dictionary({
        "version": t.number(default=1, min=0, integer=True),
        "theme": t.string(default="light", pattern=r"^(light|dark)$"),
        "recent": t.list_(t.string()),
    })

    settings.default_value
    # {'version': 1, 'theme': 'light', 'recent': []}

    settings.validate({"version": -1, "theme": "light", "recent": [], "x": 0})
    # ValidationResult(valid=False, paths=[['x'], ['version']])

Every variant is tagged with a TypeKind and validated through one dispatch
table, so the set of variants is closed.
"""

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from .exceptions import (
    InvalidDefaultValueError,
    InvalidPathError,
    InvalidSchemaOptionsError,
)
from .paths import MISSING, Path, clone

_UNSET = object()


class TypeKind(Enum):
    """Tag for each schema variant."""

    ANY = "any"
    BOOLEAN = "boolean"
    STRING = "string"
    NUMBER = "number"
    NULLABLE = "nullable"
    DICTIONARY = "dictionary"
    LIST = "list"
    UNION = "union"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a value.

    A failed result always has at least one path. Truthiness follows `valid`.
    """

    valid: bool
    paths: List[List[str]] = field(default_factory=list)

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(True)

    @classmethod
    def failed(cls, paths: Optional[List[List[str]]] = None) -> "ValidationResult":
        return cls(False, paths or [[]])

    def __bool__(self) -> bool:
        return self.valid


class Type:
    """Base class for schema nodes.

    Subclasses set `kind` and their own options; `validate` dispatches on
    `kind`. Constructors call `_check_default()` once options are in place.
    """

    kind: TypeKind
    default_value: Any

    def validate(self, value: Any) -> ValidationResult:
        """Validate a value against this Type.

        Args:
            value: Candidate value (MISSING for an absent value)

        Returns:
            ValidationResult with failing paths relative to `value`
        """
        return _VALIDATORS[self.kind](self, value)

    def is_valid(self, value: Any) -> bool:
        return self.validate(value).valid

    def default(self) -> Any:
        """Return a fresh deep copy of the default value."""
        return clone(self.default_value)

    def _check_default(self) -> None:
        if not self.validate(self.default_value).valid:
            raise InvalidDefaultValueError(self.kind.value, self.default_value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(default={self.default_value!r})"


class AnyType(Type):
    """Accepts every value."""

    kind = TypeKind.ANY

    def __init__(self, default: Any = None):
        self.default_value = default


class BooleanType(Type):
    kind = TypeKind.BOOLEAN

    def __init__(self, default: bool = False):
        self.default_value = default
        self._check_default()


class StringType(Type):
    """A string with optional length bounds and regex.

    The pattern uses search semantics, so anchor it to match the whole string.
    """

    kind = TypeKind.STRING

    def __init__(
        self,
        default: str = "",
        min_length: int = 0,
        max_length: Optional[int] = None,
        pattern: Union[str, re.Pattern, None] = None,
    ):
        if max_length is not None and min_length > max_length:
            raise InvalidSchemaOptionsError(
                f"min_length {min_length} exceeds max_length {max_length}"
            )
        self.default_value = default
        self.min_length = min_length
        self.max_length = max_length
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self._check_default()


class NumberType(Type):
    """An int or float within [min, max], optionally integral.

    Booleans are not numbers here, and neither NaN nor infinity validates.
    """

    kind = TypeKind.NUMBER

    def __init__(
        self,
        default: Union[int, float] = 0,
        min: float = -math.inf,
        max: float = math.inf,
        integer: bool = False,
    ):
        if min > max:
            raise InvalidSchemaOptionsError(f"min {min} exceeds max {max}")
        self.default_value = default
        self.min = min
        self.max = max
        self.integer = integer
        self._check_default()


class NullableType(Type):
    """Accepts None (`null`) and/or MISSING (`undefined`).

    Without an explicit default the default is None, or MISSING when None is
    not accepted.
    """

    kind = TypeKind.NULLABLE

    def __init__(self, default: Any = _UNSET, null: bool = True, undefined: bool = True):
        if not (null or undefined):
            raise InvalidSchemaOptionsError(
                "Nullable must accept at least one of null and undefined"
            )
        self.null = null
        self.undefined = undefined
        if default is _UNSET:
            self.default_value = None if null else MISSING
        else:
            self.default_value = default
            self._check_default()


class DictionaryType(Type):
    """A dict with a fixed set of fields.

    With `fields=None` any dict is accepted. Otherwise keys outside `fields`
    are reported as single-key paths and each declared field is validated by
    its own Type, with failures prefixed by the field name. A declared field
    that is absent is validated as MISSING.
    """

    kind = TypeKind.DICTIONARY

    def __init__(self, fields: Optional[Mapping[str, Type]] = None, default: Any = _UNSET):
        if fields is not None:
            for key, field_type in fields.items():
                if not isinstance(field_type, Type):
                    raise InvalidSchemaOptionsError(
                        f"Field {key!r} is not a Type: {field_type!r}"
                    )
            fields = dict(fields)
        self.fields: Optional[Dict[str, Type]] = fields

        if default is _UNSET:
            self.default_value = self._build_default()
        else:
            self.default_value = default
        self._check_default()

    def _build_default(self) -> Dict[str, Any]:
        if not self.fields:
            return {}
        return {
            key: field_type.default()
            for key, field_type in self.fields.items()
            if field_type.default_value is not MISSING
        }

    def __repr__(self) -> str:
        names = list(self.fields) if self.fields is not None else None
        return f"DictionaryType(fields={names!r})"


class ListType(Type):
    """A list whose every element satisfies `element`.

    Element failures are not sub-pathed: the list is reported as a whole.
    """

    kind = TypeKind.LIST

    def __init__(self, element: Optional[Type] = None, default: Any = _UNSET):
        if element is None:
            element = AnyType()
        if not isinstance(element, Type):
            raise InvalidSchemaOptionsError(f"List element is not a Type: {element!r}")
        self.element = element
        self.default_value = [] if default is _UNSET else default
        self._check_default()


class UnionType(Type):
    """Valid when any member validates; members are tried in order.

    The default is the first member's default unless given.
    """

    kind = TypeKind.UNION

    def __init__(self, members: Sequence[Type], default: Any = _UNSET):
        members = list(members)
        if not members:
            raise InvalidSchemaOptionsError("Union requires at least one member")
        for member in members:
            if not isinstance(member, Type):
                raise InvalidSchemaOptionsError(f"Union member is not a Type: {member!r}")
        self.members = members
        self.default_value = members[0].default() if default is _UNSET else default
        self._check_default()

    def __repr__(self) -> str:
        return f"UnionType(members={self.members!r})"


# Validators, one per kind

def _validate_any(type_: AnyType, value: Any) -> ValidationResult:
    return ValidationResult.ok()


def _validate_boolean(type_: BooleanType, value: Any) -> ValidationResult:
    return _result(isinstance(value, bool))


def _validate_string(type_: StringType, value: Any) -> ValidationResult:
    return _result(
        isinstance(value, str)
        and len(value) >= type_.min_length
        and (type_.max_length is None or len(value) <= type_.max_length)
        and (type_.pattern is None or type_.pattern.search(value) is not None)
    )


def _validate_number(type_: NumberType, value: Any) -> ValidationResult:
    return _result(
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and (isinstance(value, int) or math.isfinite(value))
        and type_.min <= value <= type_.max
        and (not type_.integer or value % 1 == 0)
    )


def _validate_nullable(type_: NullableType, value: Any) -> ValidationResult:
    if value is None:
        return _result(type_.null)
    if value is MISSING:
        return _result(type_.undefined)
    return ValidationResult.failed()


def _validate_dictionary(type_: DictionaryType, value: Any) -> ValidationResult:
    if not isinstance(value, dict):
        return ValidationResult.failed()
    fields = type_.fields
    if fields is None:
        return ValidationResult.ok()

    paths: List[List[str]] = [[key] for key in value if key not in fields]
    for key, field_type in fields.items():
        result = field_type.validate(value.get(key, MISSING))
        if not result.valid:
            paths.extend([key] + path for path in result.paths)
    return _result(not paths, paths)


def _validate_list(type_: ListType, value: Any) -> ValidationResult:
    return _result(
        isinstance(value, list)
        and all(type_.element.validate(element).valid for element in value)
    )


def _validate_union(type_: UnionType, value: Any) -> ValidationResult:
    return _result(any(member.validate(value).valid for member in type_.members))


def _result(valid: bool, paths: Optional[List[List[str]]] = None) -> ValidationResult:
    return ValidationResult.ok() if valid else ValidationResult.failed(paths)


_VALIDATORS: Dict[TypeKind, Callable[[Any, Any], ValidationResult]] = {
    TypeKind.ANY: _validate_any,
    TypeKind.BOOLEAN: _validate_boolean,
    TypeKind.STRING: _validate_string,
    TypeKind.NUMBER: _validate_number,
    TypeKind.NULLABLE: _validate_nullable,
    TypeKind.DICTIONARY: _validate_dictionary,
    TypeKind.LIST: _validate_list,
    TypeKind.UNION: _validate_union,
}


# Type paths

def _field_type(type_: Type, key: Any) -> Optional[Type]:
    if isinstance(type_, DictionaryType) and type_.fields is not None:
        return type_.fields.get(str(key))
    return None


def get_type_by_path(type_: Type, path: Path) -> Type:
    """Find the Type declared at a path.

    Raises:
        InvalidPathError: If any key is not a declared Dictionary field
    """
    current = type_
    for key in path:
        child = _field_type(current, key)
        if child is None:
            raise InvalidPathError(path, key)
        current = child
    return current


def test_type_path(type_: Type, path: Path) -> bool:
    """Check whether every key of a path is a declared Dictionary field."""
    current = type_
    for key in path:
        child = _field_type(current, key)
        if child is None:
            return False
        current = child
    return True


# Not a pytest test function
test_type_path.__test__ = False


# Factories

def any_(default: Any = None) -> AnyType:
    return AnyType(default)


def boolean(default: bool = False) -> BooleanType:
    return BooleanType(default)


def string(default: str = "", **options) -> StringType:
    return StringType(default, **options)


def number(default: Union[int, float] = 0, **options) -> NumberType:
    return NumberType(default, **options)


def nullable(default: Any = _UNSET, **options) -> NullableType:
    return NullableType(default, **options)


def dictionary(fields: Optional[Mapping[str, Type]] = None, default: Any = _UNSET) -> DictionaryType:
    return DictionaryType(fields, default)


def list_(element: Optional[Type] = None, default: Any = _UNSET) -> ListType:
    return ListType(element, default)


def union(*members: Type, default: Any = _UNSET) -> UnionType:
    return UnionType(members, default)
