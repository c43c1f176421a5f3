"""Dynamic schema and record tests."""

from decimal import Decimal

import pytest

from propbind._errors import ConversionError, NoSuchPropertyError, PropertyAccessError
from propbind.accessor import PropertyKind, ReflectiveAccessor
from propbind.dynamic import DynamicObject, DynamicProperty, DynamicRecord, SchemaCatalog


class TestDynamicProperty:
    def test_defaults_to_string(self):
        prop = DynamicProperty("name")
        assert prop.type is str
        assert not prop.is_indexed
        assert not prop.is_mapped

    def test_indexed_and_mapped(self):
        assert DynamicProperty("tags", list[str]).is_indexed
        assert DynamicProperty("sizes", dict[str, int]).is_mapped


class TestDynamicSchema:
    def test_catalog(self, product_schema):
        assert isinstance(product_schema, SchemaCatalog)
        assert len(product_schema) == 5
        assert product_schema.property_type("price") is Decimal
        assert product_schema.property_type("nope") is None
        assert product_schema.get_property("stock") == DynamicProperty("stock", int)

    def test_properties_is_a_copy(self, product_schema):
        product_schema.properties.clear()
        assert len(product_schema.properties) == 5

    def test_new_record(self, product_schema):
        record = product_schema.new_record(name="chair", stock=3)
        assert isinstance(record, DynamicRecord)
        assert isinstance(record, DynamicObject)
        assert record.get("name") == "chair"
        assert record.get("price") is None


class TestDynamicRecord:
    def test_unknown_property(self, product_schema):
        record = DynamicRecord(product_schema)
        with pytest.raises(NoSuchPropertyError):
            record.get("color")
        with pytest.raises(NoSuchPropertyError):
            record.set("color", "red")

    def test_type_checked(self, product_schema):
        record = DynamicRecord(product_schema)
        with pytest.raises(ConversionError, match="not assignable"):
            record.set("stock", "three")
        record.set("stock", None)
        assert record.get("stock") is None

    def test_containers_created_lazily(self, product_schema):
        record = DynamicRecord(product_schema)
        assert record.get("tags") == []
        assert record.get("sizes") == {}

    def test_mapped(self, product_schema):
        record = DynamicRecord(product_schema)
        record.set("sizes", 4, key="xl")
        assert record.get("sizes", key="xl") == 4
        assert record.contains("sizes", "xl")
        record.remove("sizes", "xl")
        assert not record.contains("sizes", "xl")
        assert record.get("sizes", key="xl") is None

    def test_mapped_value_type_checked(self, product_schema):
        record = DynamicRecord(product_schema)
        with pytest.raises(ConversionError):
            record.set("sizes", "big", key="xl")

    def test_indexed(self, product_schema):
        record = DynamicRecord(product_schema, tags=["a", "b"])
        record.set("tags", "z", index=1)
        assert record.get("tags", index=1) == "z"
        assert record.get("tags") == ["a", "z"]

    def test_index_out_of_range(self, product_schema):
        record = DynamicRecord(product_schema)
        with pytest.raises(PropertyAccessError):
            record.set("tags", "a", index=0)
        with pytest.raises(PropertyAccessError):
            record.get("tags", index=0)

    def test_accessor_delegates(self, product_schema):
        record = DynamicRecord(product_schema)
        accessor = ReflectiveAccessor()
        accessor.set(record, "name", "lamp")
        assert accessor.get(record, "name") == "lamp"
        declared = accessor.declared_type(record, "sizes")
        assert declared.kind is PropertyKind.MAPPED
        assert declared.resolved_type is int
        assert accessor.declared_type(record, "color") is None
