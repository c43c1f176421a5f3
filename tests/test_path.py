"""Path resolution and coercion tests."""

from decimal import Decimal
from typing import Any

import pytest

from propbind._errors import NullNestedPropertyError
from propbind._typing import PropertyKind, PropertyType
from propbind.dynamic import DynamicRecord
from propbind.path import PathDescriptor, PathResolver, Skip, coerce_value, parse_segment


def _echo(value, target_type):
    return (value, target_type)


class TestParseSegment:
    @pytest.mark.parametrize(
        "segment,expected",
        [
            ("name", ("name", -1, None)),
            ("items[2]", ("items", 2, None)),
            ("attrs(color)", ("attrs", -1, "color")),
            ("attrs()", ("attrs", -1, "")),
            ("attrs(a b)", ("attrs", -1, "a b")),
            ("items[0]", ("items", 0, None)),
        ],
    )
    def test_well_formed(self, segment, expected):
        assert parse_segment(segment) == expected

    @pytest.mark.parametrize(
        "segment,expected",
        [
            ("items[x]", ("items", -1, None)),
            ("items[-3]", ("items", -1, None)),
            ("items[2", ("items", -1, None)),
            ("items[]", ("items", -1, None)),
            ("attrs(color", ("attrs", -1, None)),
        ],
    )
    def test_malformed_is_lenient(self, segment, expected):
        assert parse_segment(segment) == expected


class TestResolve:
    def test_simple(self, invoice):
        resolved = PathResolver().resolve(invoice, "amount")
        assert resolved == PathDescriptor(invoice, "amount", "amount")
        assert not resolved.is_indexed
        assert not resolved.is_mapped

    def test_nested(self, invoice):
        resolved = PathResolver().resolve(invoice, "lines[1].sku")
        assert resolved.target is invoice.lines[1]
        assert resolved.property_name == "sku"

    def test_indexed_and_mapped(self, invoice):
        resolver = PathResolver()
        indexed = resolver.resolve(invoice, "items[2]")
        assert indexed.is_indexed
        assert indexed.index == 2
        mapped = resolver.resolve(invoice, "attributes(size)")
        assert mapped.is_mapped
        assert mapped.key == "size"

    def test_missing_intermediate_skips(self, invoice):
        resolved = PathResolver().resolve(invoice, "missing.sub")
        assert isinstance(resolved, Skip)
        assert resolved.path == "missing.sub"

    def test_null_intermediate_raises(self, invoice):
        with pytest.raises(NullNestedPropertyError):
            PathResolver().resolve(invoice, "shipping.city")

    def test_final_segment_not_checked(self, invoice):
        resolved = PathResolver().resolve(invoice, "billing.nope")
        assert isinstance(resolved, PathDescriptor)
        assert resolved.property_name == "nope"


class TestDeclaredType:
    def test_annotation(self, invoice):
        resolver = PathResolver()
        declared = resolver.declared_type(resolver.resolve(invoice, "amount"))
        assert declared == PropertyType(Decimal)

    def test_unknown_property_skips(self, invoice):
        resolver = PathResolver()
        declared = resolver.declared_type(resolver.resolve(invoice, "billing.nope"))
        assert isinstance(declared, Skip)

    def test_dynamic_catalog(self, product_schema):
        record = DynamicRecord(product_schema)
        resolver = PathResolver()
        declared = resolver.declared_type(resolver.resolve(record, "sizes(m)"))
        assert declared == PropertyType(dict[str, int], PropertyKind.MAPPED, int)
        missing = resolver.declared_type(resolver.resolve(record, "color"))
        assert isinstance(missing, Skip)


class TestCoerceValue:
    def test_scalar(self):
        assert coerce_value(PropertyType(int), "5", -1, _echo) == ("5", int)

    def test_scalar_from_array_takes_first(self):
        assert coerce_value(PropertyType(int), ["7", "8"], -1, _echo) == ("7", int)

    def test_scalar_from_empty_array(self):
        assert coerce_value(PropertyType(int), [], -1, _echo) == (None, int)

    def test_array_from_string(self):
        assert coerce_value(PropertyType(list[int]), "5", -1, _echo) == [("5", int)]

    def test_array_from_array(self):
        assert coerce_value(PropertyType(list[int]), ["1", None], -1, _echo) == [
            ("1", int),
            (None, int),
        ]

    def test_tuple_array(self):
        result = coerce_value(PropertyType(tuple[int, ...]), ("1", "2"), -1, _echo)
        assert result == (("1", int), ("2", int))

    def test_bare_list_uses_any(self):
        assert coerce_value(PropertyType(list), ["a"], -1, _echo) == [("a", Any)]

    def test_indexed_element(self):
        assert coerce_value(PropertyType(list[int]), "5", 2, _echo) == ("5", int)
        assert coerce_value(PropertyType(list[int]), ["7", "8"], 0, _echo) == ("7", int)

    def test_mapped_value(self):
        declared = PropertyType(dict[str, int], PropertyKind.MAPPED, int)
        assert coerce_value(declared, "3", -1, _echo) == ("3", int)

    def test_bare_type(self):
        assert coerce_value(Decimal, "1.5", -1, _echo) == ("1.5", Decimal)

    @pytest.mark.parametrize("value", [5, None, Decimal("1"), [1, 2], {"a": "b"}])
    def test_non_string_passes_through(self, value):
        assert coerce_value(PropertyType(int), value, -1, _echo) is value


class TestResolveTuples:
    @pytest.mark.parametrize(
        "path,expected",
        [
            ("a.b[3]", ("b", 3, None)),
            ("a.b(k)", ("b", -1, "k")),
            ("a.b", ("b", -1, None)),
            ("a.b[oops]", ("b", -1, None)),
            ("a.b(k", ("b", -1, None)),
        ],
    )
    def test_descriptor_fields(self, path, expected):
        root = {"a": {"b": [0, 1, 2, 3]}}
        resolved = PathResolver().resolve(root, path)
        assert resolved.target is root["a"]
        assert (resolved.property_name, resolved.index, resolved.key) == expected
