"""Tests for Serializer."""

import pytest

from pathstore import MISSING, Serializer
from pathstore.exceptions import SerializationError


class TestSerializer:
    """Tests for Serializer."""

    def test_compact_output(self):
        """Output has no whitespace and keeps key order."""
        serializer = Serializer()
        source = serializer.dumps({"version": 1, "str": "Hello, world!", "n": 0})
        assert source == '{"version":1,"str":"Hello, world!","n":0}'

    def test_source_reproduced(self):
        """A loaded source dumps back to the same string."""
        serializer = Serializer()
        source = '{"b":[1,2.5,null,true],"a":{"é":"ü"}}'
        assert serializer.dumps(serializer.loads(source)) == source

    def test_missing_dropped(self):
        """MISSING is dropped from dicts and becomes null in lists."""
        serializer = Serializer()
        assert serializer.dumps({"a": MISSING, "b": [MISSING]}) == '{"b":[null]}'

    def test_callables_dropped(self):
        """Functions are never written."""
        serializer = Serializer()
        assert serializer.dumps({"f": len, "n": 1}) == '{"n":1}'

    def test_tuples_written_as_lists(self):
        """Tuples serialize as JSON arrays."""
        assert Serializer().dumps((1, 2)) == "[1,2]"

    def test_indent(self):
        """indent produces readable output."""
        serializer = Serializer(indent=2, sort_keys=True)
        assert serializer.dumps({"b": 1, "a": 2}) == '{\n  "a": 2,\n  "b": 1\n}'

    def test_unsupported_type(self):
        """Non-JSON values raise SerializationError."""
        with pytest.raises(SerializationError):
            Serializer().dumps({"s": {1, 2}})

    def test_malformed_source(self):
        """Malformed JSON raises SerializationError."""
        with pytest.raises(SerializationError):
            Serializer().loads("{not json")

    def test_non_finite_numbers_rejected(self):
        """NaN and infinities have no JSON form and are never written."""
        serializer = Serializer()
        with pytest.raises(SerializationError):
            serializer.dumps({"n": float("inf")})
        with pytest.raises(SerializationError):
            serializer.dumps([float("nan")])

    def test_non_finite_literals_rejected(self):
        """Sources using the Infinity/NaN extensions are not JSON."""
        with pytest.raises(SerializationError):
            Serializer().loads('{"n":Infinity}')
        with pytest.raises(SerializationError):
            Serializer().loads("[NaN]")
