"""Nested path grammar and reflective accessor tests."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import ClassVar

import pytest

from propbind._errors import (
    InvalidPropertyPathError,
    NoSuchPropertyError,
    NullNestedPropertyError,
    PropertyAccessError,
)
from propbind.accessor import (
    PathSegment,
    PropertyAccessor,
    PropertyKind,
    PropertyType,
    ReflectiveAccessor,
    Selector,
    parse_path,
)


@dataclass
class Tag:
    label: str = ""


@dataclass
class Product:
    name: str = ""
    price: Decimal | None = None
    tags: list[Tag] = field(default_factory=list)
    sizes: dict[str, int] = field(default_factory=dict)
    origin: Tag | None = None
    kind: ClassVar[str] = "product"
    _secret: str = "hidden"

    @property
    def display(self) -> str:
        return self.name.title()

    def describe(self):
        return self.name


class Legacy:
    def __init__(self):
        self.count = 3
        self.missing = None


class TestParsePath:
    def test_simple(self):
        assert parse_path("name") == (PathSegment("name"),)

    def test_nested_with_selectors(self):
        assert parse_path("order.lines[2].attrs(color)") == (
            PathSegment("order"),
            PathSegment("lines", (Selector(index=2),)),
            PathSegment("attrs", (Selector(key="color"),)),
        )

    def test_chained_selectors(self):
        assert parse_path("grid[1][0]") == (
            PathSegment("grid", (Selector(index=1), Selector(index=0))),
        )

    def test_key_may_contain_dots(self):
        assert parse_path("attrs(a.b)") == (PathSegment("attrs", (Selector(key="a.b"),)),)

    def test_empty_key(self):
        assert parse_path("attrs()") == (PathSegment("attrs", (Selector(key=""),)),)

    @pytest.mark.parametrize("path", ["", "a..b", ".a", "a.", "a[x]", "a[1", "a(b", "a[-1]"])
    def test_malformed(self, path):
        with pytest.raises(InvalidPropertyPathError, match="invalid property path"):
            parse_path(path)

    def test_malformed_is_no_such_property(self):
        with pytest.raises(NoSuchPropertyError):
            parse_path("a..b")


class TestResolveNested:
    def test_attributes_and_selectors(self):
        product = Product(tags=[Tag("a"), Tag("b")], sizes={"m": 2})
        root = {"product": product}
        accessor = ReflectiveAccessor()
        assert accessor.resolve_nested(root, "product.tags[1].label") == "b"
        assert accessor.resolve_nested(root, "product.sizes(m)") == 2
        assert accessor.resolve_nested(root, "product.sizes(x)") is None

    def test_unknown_property(self):
        with pytest.raises(NoSuchPropertyError):
            ReflectiveAccessor().resolve_nested(Product(), "nope.label")

    def test_null_intermediate(self):
        with pytest.raises(NullNestedPropertyError, match="null nested property value"):
            ReflectiveAccessor().resolve_nested(Product(), "origin.label")

    def test_index_out_of_range(self):
        with pytest.raises(PropertyAccessError):
            ReflectiveAccessor().resolve_nested(Product(), "tags[3]")


class TestDeclaredType:
    def test_annotation(self):
        accessor = ReflectiveAccessor()
        assert accessor.declared_type(Product(), "name") == PropertyType(str)

    def test_optional_is_unwrapped(self):
        assert ReflectiveAccessor().declared_type(Product(), "price") == PropertyType(Decimal)

    def test_list_is_plain_array(self):
        declared = ReflectiveAccessor().declared_type(Product(), "tags")
        assert declared.kind is PropertyKind.PLAIN
        assert declared.type == list[Tag]

    def test_dict_is_mapped(self):
        declared = ReflectiveAccessor().declared_type(Product(), "sizes")
        assert declared == PropertyType(dict[str, int], PropertyKind.MAPPED, int)
        assert declared.resolved_type is int

    def test_property_return_annotation(self):
        assert ReflectiveAccessor().declared_type(Product(), "display") == PropertyType(str)

    def test_unannotated_uses_value_type(self):
        accessor = ReflectiveAccessor()
        assert accessor.declared_type(Legacy(), "count") == PropertyType(int)
        assert accessor.declared_type(Legacy(), "missing") is None

    def test_not_properties(self):
        accessor = ReflectiveAccessor()
        assert accessor.declared_type(Product(), "describe") is None
        assert accessor.declared_type(Product(), "_secret") is None
        assert accessor.declared_type(Product(), "kind") == PropertyType(str)
        assert accessor.declared_type(Product(), "nope") is None

    def test_mapping_keys(self):
        assert ReflectiveAccessor().declared_type({"a": 1.5}, "a") == PropertyType(float)


class TestGetSet:
    def test_protocol(self):
        assert isinstance(ReflectiveAccessor(), PropertyAccessor)

    def test_plain(self):
        product = Product()
        accessor = ReflectiveAccessor()
        accessor.set(product, "name", "chair")
        assert accessor.get(product, "name") == "chair"

    def test_indexed(self):
        product = Product(tags=[Tag("a"), Tag("b")])
        accessor = ReflectiveAccessor()
        accessor.set(product, "tags", Tag("z"), index=1)
        assert accessor.get(product, "tags", index=1) == Tag("z")

    def test_mapped(self):
        product = Product()
        accessor = ReflectiveAccessor()
        accessor.set(product, "sizes", 4, key="xl")
        assert accessor.get(product, "sizes", key="xl") == 4
        assert product.sizes == {"xl": 4}

    def test_index_wins_over_key(self):
        product = Product(tags=[Tag("a")])
        ReflectiveAccessor().set(product, "tags", Tag("b"), index=0, key="ignored")
        assert product.tags == [Tag("b")]

    def test_mapping_target(self):
        target = {}
        ReflectiveAccessor().set(target, "a", 1)
        assert target == {"a": 1}

    def test_unknown_property(self):
        with pytest.raises(NoSuchPropertyError):
            ReflectiveAccessor().set(Product(), "nope", 1)
        with pytest.raises(NoSuchPropertyError):
            ReflectiveAccessor().get(Product(), "describe")

    def test_read_only_property(self):
        with pytest.raises(PropertyAccessError, match="property access failed"):
            ReflectiveAccessor().set(Product(), "display", "x")

    def test_index_out_of_range(self):
        with pytest.raises(PropertyAccessError):
            ReflectiveAccessor().set(Product(), "tags", Tag(), index=5)

    def test_null_container(self):
        with pytest.raises(PropertyAccessError):
            ReflectiveAccessor().set(Product(), "origin", "x", key="k")
