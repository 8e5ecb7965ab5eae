"""Configuration for Store instances."""

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .exceptions import InvalidOptionsError
from .types import Type

InvalidCallback = Callable[[List[List[str]]], None]
ConflictCallback = Callable[[Optional[str], Optional[str]], None]


@dataclass(frozen=True)
class StoreOptions:
    """Immutable Store configuration, validated once at construction.

    Attributes:
        type: Schema for the stored value. When omitted and `default_value`
            is given, a schema is inferred from the default (see `infer_type`).
        default_value: Seed value used when nothing is stored. Defaults to the
            schema's default when a schema is given.
        infer_type: Infer a schema from `default_value` when `type` is None.
        delay: Save debounce in milliseconds; 0 saves synchronously.
        lazy_load: Skip the initial load in the constructor.
        strict_load: Reserved; not consulted by `load()`.
        secure: Check for conflicting writes before every save.
        auto_fix: Repair invalid loaded values instead of rejecting them.
        on_invalid: Called with the failing key-paths of a load or set.
        on_conflict: Called with (current source, last-known source) when a
            save is pre-empted. Without it a conflict raises ConflictError;
            for a debounced save that happens on the timer thread, where it
            is logged at ERROR and the earlier set() has already returned.
        path_separator: Separator for string selectors.

    Example:
        options = StoreOptions(type=schema, delay=0)
        quiet = options.replace(on_invalid=lambda paths: None)
    """

    type: Optional[Type] = None
    default_value: Any = None
    infer_type: bool = True
    delay: float = 100
    lazy_load: bool = False
    strict_load: bool = True
    secure: bool = True
    auto_fix: bool = True
    on_invalid: Optional[InvalidCallback] = None
    on_conflict: Optional[ConflictCallback] = None
    path_separator: str = "."

    def __post_init__(self):
        if self.type is not None and not isinstance(self.type, Type):
            raise InvalidOptionsError(f"type must be a Type, got {self.type!r}")
        if isinstance(self.delay, bool) or not isinstance(self.delay, (int, float)):
            raise InvalidOptionsError(f"delay must be a number, got {self.delay!r}")
        if self.delay < 0:
            raise InvalidOptionsError(f"delay must not be negative, got {self.delay}")
        if not isinstance(self.path_separator, str) or not self.path_separator:
            raise InvalidOptionsError("path_separator must be a non-empty string")
        for name in ("on_invalid", "on_conflict"):
            callback = getattr(self, name)
            if callback is not None and not callable(callback):
                raise InvalidOptionsError(f"{name} must be callable")

    def replace(self, **changes) -> "StoreOptions":
        """Return a copy with some fields changed."""
        try:
            return dataclasses.replace(self, **changes)
        except TypeError as e:
            raise InvalidOptionsError(str(e))
