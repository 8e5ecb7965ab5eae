"""Tests for infer_type()."""

import math

from pathstore import infer_type
from pathstore.paths import MISSING
from pathstore.types import (
    AnyType,
    BooleanType,
    DictionaryType,
    ListType,
    NullableType,
    NumberType,
    StringType,
    UnionType,
)


class TestInferType:
    """Tests for schema inference from example values."""

    def test_scalars(self):
        """Scalars infer their own variant seeded with the example."""
        boolean = infer_type(True)
        assert isinstance(boolean, BooleanType)
        assert boolean.default_value is True

        string = infer_type("hi")
        assert isinstance(string, StringType)
        assert string.default_value == "hi"

        number = infer_type(2.5)
        assert isinstance(number, NumberType)
        assert number.default_value == 2.5
        assert number.validate(-100).valid

    def test_none_and_missing(self):
        """None allows only null; MISSING allows only undefined."""
        null = infer_type(None)
        assert isinstance(null, NullableType)
        assert null.validate(None).valid
        assert not null.validate(MISSING).valid

        undefined = infer_type(MISSING)
        assert isinstance(undefined, NullableType)
        assert undefined.validate(MISSING).valid
        assert not undefined.validate(None).valid

    def test_homogeneous_list(self):
        """Lists infer a Union over element types and keep the example as default."""
        inferred = infer_type([1, 2])
        assert isinstance(inferred, ListType)
        assert isinstance(inferred.element, UnionType)
        assert inferred.default_value == [1, 2]
        assert inferred.validate([5, 6, 7]).valid
        assert not inferred.validate(["a"]).valid

    def test_heterogeneous_list(self):
        """Mixed lists accept any of the element kinds."""
        inferred = infer_type([1, "a", True])
        assert inferred.validate(["b", 3, False]).valid
        assert not inferred.validate([None]).valid

    def test_empty_list(self):
        """An empty list accepts any elements."""
        inferred = infer_type([])
        assert isinstance(inferred, ListType)
        assert isinstance(inferred.element, AnyType)
        assert inferred.validate([1, "x"]).valid

    def test_dict(self):
        """Dicts infer one field per key."""
        example = {"n": 0, "name": "x", "tags": ["a"], "owner": None, "nested": {"on": False}}
        inferred = infer_type(example)

        assert isinstance(inferred, DictionaryType)
        assert set(inferred.fields) == {"n", "name", "tags", "owner", "nested"}
        assert inferred.default_value == example
        assert inferred.validate(example).valid
        assert inferred.validate({"n": 3, "name": "y", "tags": [], "owner": None, "nested": {"on": True}}).valid

        result = inferred.validate({"n": "3", "name": "y", "tags": [], "owner": None, "nested": {"on": 1}})
        assert result.paths == [["n"], ["nested", "on"]]

    def test_other_values(self):
        """Unsupported kinds infer Any seeded with the value."""
        marker = object()
        inferred = infer_type(marker)
        assert isinstance(inferred, AnyType)
        assert inferred.default_value is marker

    def test_nan(self):
        """NaN cannot seed a Number."""
        inferred = infer_type(math.nan)
        assert isinstance(inferred, AnyType)

    def test_infinity(self):
        """Infinities cannot seed a Number either."""
        inferred = infer_type(-math.inf)
        assert isinstance(inferred, AnyType)
        assert inferred.default_value == -math.inf

    def test_large_int(self):
        """Ints beyond float range still infer a Number."""
        inferred = infer_type(10 ** 400)
        assert isinstance(inferred, NumberType)
