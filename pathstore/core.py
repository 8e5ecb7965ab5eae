"""Core Store class: a schema-validated, path-addressable persisted value."""

import logging
import threading
from typing import Any, List, Optional

from .backends import StorageBackend, connect, default_backend
from .exceptions import ConflictError, SerializationError, ValidationError
from .inference import infer_type
from .options import StoreOptions
from .paths import (
    Path,
    Selector,
    clone,
    delete_by_path,
    get_by_path,
    is_container,
    join_path,
    parse_path,
    set_by_path,
    test_path,
)
from .scheduling import Debouncer
from .serialization import Serializer
from .types import Type, ValidationResult, get_type_by_path, test_type_path

logger = logging.getLogger(__name__)

_UNSET = object()


class Store:
    """A single persisted value with per-path validated access.

    The Store reads the serialized value stored under `name`, validates it
    against its schema, repairs or rejects invalid parts, and then serves
    reads and writes by key-path. Every accepted write schedules a debounced
    save. Before saving, the backend's current content is compared with the
    last content this Store read or wrote, so a concurrent writer is
    reported instead of overwritten.

    Example:
        from pathstore import Store, MemoryBackend, types as t

        backend = MemoryBackend()
        backend.connect()

        schema = t.dictionary({
            "version": t.number(default=1, min=0, integer=True),
            "str": t.string(default="Hello, world!"),
            "n": t.number(),
        })
        store = Store("settings", backend, type=schema, delay=0)

        store.get()               # {'version': 1, 'str': 'Hello, world!', 'n': 0}
        store.set("n", 5)         # True
        store.set("n", lambda n: n + 1)
        store.set("version", -1)  # False, value unchanged
        store.reset("n")          # True, n is 0 again
    """

    def __init__(
        self,
        name: str,
        backend: StorageBackend,
        options: Optional[StoreOptions] = None,
        **overrides,
    ):
        """Create a Store and, unless `lazy_load` is set, load it.

        Args:
            name: Key the value is persisted under
            backend: Storage backend to read and write
            options: Store configuration
            **overrides: StoreOptions fields, applied on top of `options`

        Raises:
            InvalidOptionsError: If the options fail validation
        """
        if options is None:
            options = StoreOptions()
        if overrides:
            options = options.replace(**overrides)

        self.name = name
        self.options = options
        self._backend = backend
        self._owns_backend = False
        self._serializer = Serializer()
        self._lock = threading.RLock()
        self._debouncer = Debouncer(self.save)

        self._value: Any = None
        self._old_source: Optional[str] = None

        self.type: Optional[Type] = options.type
        self.default_value: Any = options.default_value
        # Checks loads when there is a default but no schema
        self._shape: Optional[Type] = None

        if self.type is not None:
            if self.default_value is None:
                self.default_value = self.type.default_value
        elif self.default_value is not None:
            if options.infer_type:
                self.type = infer_type(self.default_value)
            else:
                self._shape = infer_type(self.default_value)

        if not options.lazy_load:
            self.load()

    # Properties

    @property
    def value(self) -> Any:
        """The whole current value."""
        return self._value

    @property
    def source(self) -> Optional[str]:
        """The last serialized content this Store read from or wrote to storage."""
        return self._old_source

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    @property
    def save_pending(self) -> bool:
        """Whether a debounced save is waiting to run."""
        return self._debouncer.pending

    # Notifications

    def _invalid(self, paths: List[Path]) -> None:
        """Report failing paths to on_invalid, or raise when nothing handles them."""
        separator = self.options.path_separator
        logger.debug(
            "Invalid value in store %s at: %s",
            self.name,
            ", ".join(join_path(path, separator) for path in paths),
        )
        if self.options.on_invalid is not None:
            self.options.on_invalid(paths)
        elif not self.options.auto_fix:
            raise ValidationError(paths, separator)

    def _conflict(self, new_source: Optional[str], old_source: Optional[str]) -> None:
        logger.warning("Conflicting write detected for store %s", self.name)
        if self.options.on_conflict is not None:
            self.options.on_conflict(new_source, old_source)
        else:
            raise ConflictError(self.name, new_source, old_source)

    # Persistence

    def _get_default_value(self) -> Any:
        default = self.default_value
        return clone(default) if is_container(default) else default

    def _request_save(self) -> None:
        self._debouncer.schedule(self.options.delay)

    def check_conflict(self) -> bool:
        """Compare storage with the last-known source.

        Calls on_conflict (or raises ConflictError without one) on divergence.

        Returns:
            True if storage changed since this Store last read or wrote it
        """
        with self._lock:
            new_source = self._backend.get(self.name)
            if new_source != self._old_source:
                self._conflict(new_source, self._old_source)
                return True
            return False

    def save(self) -> bool:
        """Write the current value to storage.

        With `secure` enabled, a conflicting external write aborts the save
        and leaves storage untouched.

        Returns:
            True if the value was written, False on conflict

        Raises:
            ConflictError: On conflict when no on_conflict callback is set
        """
        with self._lock:
            if self.options.secure and self.check_conflict():
                return False
            source = self._serializer.dumps(self._value)
            self._backend.put(self.name, source)
            self._old_source = source
            logger.debug("Saved store %s", self.name)
            return True

    def flush(self) -> bool:
        """Run a pending debounced save now.

        Returns:
            True if a save was pending
        """
        return self._debouncer.flush()

    def load(self, source: Any = _UNSET) -> bool:
        """Load, validate and (optionally) repair the stored value.

        Args:
            source: Serialized value to load instead of reading storage;
                None means nothing is stored

        Returns:
            True if a value was loaded; False if it was rejected, or if there
            is nothing stored and nothing to default to. A failed load leaves
            the Store unchanged.

        Raises:
            ValidationError: If the value is invalid, auto_fix is off and no
                on_invalid callback is set
        """
        with self._lock:
            if source is _UNSET:
                source = self._backend.get(self.name)
            shape = self.type if self.type is not None else self._shape
            default = self._get_default_value()

            if source is None:
                if shape is None and default is None:
                    logger.debug("Nothing stored and no default for store %s", self.name)
                    return False
                value = default
                result = shape.validate(value) if shape is not None else ValidationResult.ok()
            else:
                try:
                    value = self._serializer.loads(source)
                except SerializationError as e:
                    logger.warning("Unreadable source for store %s: %s", self.name, e)
                    value = None
                    result = ValidationResult.failed()
                else:
                    if shape is not None:
                        result = shape.validate(value)
                    else:
                        result = ValidationResult.ok()

            repaired = False
            if not result.valid:
                self._invalid(result.paths)
                if not self.options.auto_fix:
                    return False
                value = self._repair(value, result.paths)
                if value is _UNSET:
                    return False
                repaired = True
                logger.info(
                    "Repaired %d invalid path(s) in store %s", len(result.paths), self.name
                )

            self._old_source = source
            self._value = value
            if source is None or repaired:
                self._request_save()
            return True

    def _repair(self, value: Any, paths: List[Path]) -> Any:
        """Replace failing paths with defaults, or drop ones no longer declared."""
        separator = self.options.path_separator
        type_ = self.type
        if type_ is not None:
            if any(not path for path in paths):
                return type_.default()
            for path in paths:
                if test_type_path(type_, path):
                    set_by_path(value, path, get_type_by_path(type_, path).default())
                else:
                    logger.warning(
                        "Dropping undeclared field %s from store %s",
                        join_path(path, separator),
                        self.name,
                    )
                    delete_by_path(value, path)
            return value

        default = self._get_default_value()
        if default is None:
            return _UNSET
        if any(not path for path in paths):
            return default
        for path in paths:
            if test_path(default, path):
                set_by_path(value, path, get_by_path(default, path))
            else:
                delete_by_path(value, path)
        return value

    # Path access

    def get(self, selector: Selector = None) -> Any:
        """Read the value at a path.

        Args:
            selector: Key sequence or separator-joined string; None or ""
                for the whole value

        Returns:
            The value at the path (MISSING for an absent key)

        Raises:
            InvalidPathError: If the path walks through a non-container
        """
        path = parse_path(selector, self.options.path_separator)
        with self._lock:
            if not path:
                return self._value
            return get_by_path(self._value, path)

    def set(self, selector: Selector, patch: Any) -> bool:
        """Validate and write a value at a path, then schedule a save.

        Args:
            selector: Key sequence or separator-joined string; None or ""
                replaces the whole value
            patch: The new value, or a callable that receives the current
                value at the path and returns the new one; containers are
                passed as copies

        Returns:
            True if the value was accepted; False if it failed validation
            (on_invalid receives the failing absolute paths)

        Raises:
            InvalidPathError: If the path walks through a non-container
            ValidationError: On invalid input when auto_fix is off and no
                on_invalid callback is set
        """
        path = parse_path(selector, self.options.path_separator)
        with self._lock:
            if callable(patch):
                current = get_by_path(self._value, path) if path else self._value
                # A rejected update must leave the live value untouched
                candidate = patch(clone(current) if is_container(current) else current)
            else:
                candidate = patch

            if self.type is not None:
                if not test_type_path(self.type, path):
                    self._invalid([path])
                    return False
                result = get_type_by_path(self.type, path).validate(candidate)
                if not result.valid:
                    self._invalid([path + sub_path for sub_path in result.paths])
                    return False

            if path:
                set_by_path(self._value, path, candidate)
            else:
                self._value = candidate
            self._request_save()
            return True

    def reset(self, selector: Selector = None) -> bool:
        """Restore the default at a path, then schedule a save.

        Args:
            selector: Key sequence or separator-joined string; None or ""
                resets the whole value

        Returns:
            True if a reset happened; False if the path does not resolve in
            the current value or there is neither a schema nor a default

        Raises:
            InvalidPathError: If the path is not declared by the schema
        """
        path = parse_path(selector, self.options.path_separator)
        with self._lock:
            if not test_path(self._value, path):
                return False
            if self.type is not None:
                if path:
                    set_by_path(self._value, path, get_type_by_path(self.type, path).default())
                else:
                    self._value = self.type.default()
            elif self.default_value is not None:
                if path:
                    set_by_path(self._value, path, clone(get_by_path(self.default_value, path)))
                else:
                    self._value = self._get_default_value()
            else:
                return False
            self._request_save()
            return True

    # Lifecycle

    def close(self) -> None:
        """Run any pending save and release a backend opened by open_store().

        The backend is released even when the pending save raises.
        """
        try:
            self.flush()
        finally:
            if self._owns_backend:
                self._backend.close()

    def __enter__(self) -> "Store":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()

    def __repr__(self) -> str:
        return f"Store({self.name!r}, backend={type(self._backend).__name__})"


def open_store(
    name: str,
    url: Optional[str] = None,
    options: Optional[StoreOptions] = None,
    **overrides,
) -> Store:
    """Open a Store on a backend given by URL.

    Without a URL the process-wide in-memory backend is used. A backend
    opened from a URL is closed with the Store.

    Args:
        name: Key the value is persisted under
        url: Backend URL (see `pathstore.backends.connect`)
        options: Store configuration
        **overrides: StoreOptions fields

    Example:
        with open_store("settings", "sqlite:///app.db", type=schema) as store:
            store.set("n", 5)
    """
    if url is None:
        return Store(name, default_backend(), options, **overrides)

    backend = connect(url)
    try:
        store = Store(name, backend, options, **overrides)
    except Exception:
        backend.close()
        raise
    store._owns_backend = True
    return store
