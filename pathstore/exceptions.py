"""Exceptions for the pathstore package."""

from typing import Any, List, Optional, Sequence


class StoreError(Exception):
    """Base exception for all pathstore errors."""

    pass


class InvalidPathError(StoreError, KeyError):
    """A path walked past a non-indexable value or an undeclared field."""

    def __init__(self, path: Sequence[Any], key: Any = None):
        self.path = list(path)
        self.key = key
        message = f"Invalid path: {self.path!r}"
        if key is not None:
            message += f" (cannot resolve {key!r})"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class CircularReferenceError(StoreError, ValueError):
    """The same object was met twice while deep-copying a value."""

    def __init__(self, path: Sequence[Any]):
        self.path = list(path)
        super().__init__(f"Circular reference at path: {self.path!r}")


class InvalidDefaultValueError(StoreError, ValueError):
    """A Type's default value does not satisfy the Type itself."""

    def __init__(self, kind: str, default: Any):
        self.kind = kind
        self.default = default
        super().__init__(f"Invalid default value for {kind}: {default!r}")


class InvalidSchemaOptionsError(StoreError, ValueError):
    """A Type was constructed with contradictory options."""

    pass


class InvalidOptionsError(StoreError, ValueError):
    """Store options failed validation."""

    pass


class ValidationError(StoreError):
    """A value failed validation and no notifier or auto-fix handled it."""

    def __init__(self, paths: List[List[str]], separator: str = "."):
        self.paths = [list(path) for path in paths]
        rendered = ", ".join(separator.join(str(k) for k in p) for p in self.paths)
        super().__init__(f"Invalid value at paths: {rendered or '(root)'}")


class ConflictError(StoreError):
    """The backing storage changed since this store last read or wrote it."""

    def __init__(self, name: str, new_source: Optional[str], old_source: Optional[str]):
        self.name = name
        self.new_source = new_source
        self.old_source = old_source
        super().__init__(f"Sources conflicted for store: {name}")


class SerializationError(StoreError):
    """Failed to serialize or deserialize a value."""

    pass
