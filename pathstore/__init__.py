"""
pathstore - Schema-validated, path-addressable persisted values.

A Store holds one JSON-compatible value under a key in a storage backend.
It validates the stored value against a schema on load, repairs invalid
parts from the schema's defaults, serves reads and writes by key-path with
per-write validation, debounces saves, and detects conflicting writes by
other stores sharing the same backend.

Quick Start:
    from pathstore import open_store, types as t

    schema = t.dictionary({
        "version": t.number(default=1, min=0, integer=True),
        "theme": t.string(default="light"),
    })

    with open_store("settings", "sqlite:///app.db", type=schema) as store:
        store.set("theme", "dark")
        print(store.get("theme"))  # dark

Submodules:
    pathstore.types - Schema types and validation
    pathstore.paths - Key-path helpers and deep copy
    pathstore.backends - Storage backends (memory, SQLite)
"""

from . import types
from .backends import MemoryBackend, SQLiteBackend, StorageBackend, connect, default_backend
from .core import Store, open_store
from .exceptions import (
    CircularReferenceError,
    ConflictError,
    InvalidDefaultValueError,
    InvalidOptionsError,
    InvalidPathError,
    InvalidSchemaOptionsError,
    SerializationError,
    StoreError,
    ValidationError,
)
from .inference import infer_type
from .options import StoreOptions
from .paths import MISSING, clone, parse_path
from .serialization import Serializer
from .types import Type, TypeKind, ValidationResult

__all__ = [
    # Main API
    "Store",
    "StoreOptions",
    "open_store",
    # Schema
    "types",
    "Type",
    "TypeKind",
    "ValidationResult",
    "infer_type",
    # Values and paths
    "MISSING",
    "clone",
    "parse_path",
    "Serializer",
    # Backends
    "StorageBackend",
    "MemoryBackend",
    "SQLiteBackend",
    "connect",
    "default_backend",
    # Exceptions
    "StoreError",
    "InvalidPathError",
    "CircularReferenceError",
    "InvalidDefaultValueError",
    "InvalidSchemaOptionsError",
    "InvalidOptionsError",
    "ValidationError",
    "ConflictError",
    "SerializationError",
]

__version__ = "0.1.0"
