"""JSON serialization of stored values."""

import json
from typing import Any

from .exceptions import SerializationError
from .paths import MISSING


class Serializer:
    """Serialize values to and from their persisted JSON form.

    The persisted form is the plain JSON of the value: no envelope, version
    tag or checksum. Output is compact and keeps key order, so a valid source
    loaded and dumped again is byte-identical.

    MISSING is never written: it is dropped from dicts and becomes null in
    lists. Callables are dropped the same way.

    Example:
        serializer = Serializer()

        serializer.dumps({"n": 1, "tags": ["a"]})  # '{"n":1,"tags":["a"]}'
        serializer.loads('{"n":1}')                 # {'n': 1}
    """

    def __init__(self, indent: Any = None, sort_keys: bool = False):
        """Initialize the serializer.

        Args:
            indent: Passed to json.dumps; None gives compact output
            sort_keys: If True, sort dictionary keys on output
        """
        self.indent = indent
        self.sort_keys = sort_keys

    def dumps(self, value: Any) -> str:
        """Serialize a value to a JSON string.

        Raises:
            SerializationError: If the value is not JSON-compatible, including
                NaN and infinity
        """
        data = self._to_json_compatible(value)
        separators = (",", ":") if self.indent is None else (",", ": ")
        try:
            return json.dumps(
                data,
                ensure_ascii=False,
                allow_nan=False,
                separators=separators,
                indent=self.indent,
                sort_keys=self.sort_keys,
            )
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to serialize value: {e}")

    def loads(self, source: str) -> Any:
        """Deserialize a JSON string.

        Raises:
            SerializationError: If the source is not valid JSON
        """
        try:
            return json.loads(source, parse_constant=_reject_constant)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to deserialize source: {e}")

    def _to_json_compatible(self, value: Any) -> Any:
        """Convert a value to JSON-compatible format."""
        if value is MISSING:
            return None
        if value is None or isinstance(value, (str, int, float, bool)):
            return value
        if isinstance(value, (list, tuple)):
            return [
                None if callable(v) else self._to_json_compatible(v) for v in value
            ]
        if isinstance(value, dict):
            return {
                str(k): self._to_json_compatible(v)
                for k, v in value.items()
                if v is not MISSING and not callable(v)
            }
        raise SerializationError(f"Cannot serialize type: {type(value)}")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Out of range float value {name} is not JSON")
