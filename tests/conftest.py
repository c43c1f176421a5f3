"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

import pytest
from babel import Locale

from propbind import ConversionFacade, ConverterRegistry
from propbind.dynamic import DynamicProperty, DynamicSchema
from propbind.types import Short


@dataclass
class Address:
    street: str = ""
    city: str = ""
    zip_code: int = 0


@dataclass
class Line:
    sku: str = ""
    quantity: Short = 0
    price: Decimal = Decimal(0)


@dataclass
class Invoice:
    number: int = 0
    amount: Decimal = Decimal(0)
    rate: float = 0.0
    issued: date | None = None
    items: list[str] = field(default_factory=lambda: ["a", "b", "c"])
    counts: list[int] = field(default_factory=list)
    attributes: dict[str, int] = field(default_factory=dict)
    lines: list[Line] = field(default_factory=lambda: [Line("x"), Line("y")])
    billing: Address | None = field(default_factory=Address)
    shipping: Address | None = None


@pytest.fixture
def en_us():
    return Locale.parse("en_US")


@pytest.fixture
def de_de():
    return Locale.parse("de_DE")


@pytest.fixture
def registry():
    return ConverterRegistry(default_locale="en_US")


@pytest.fixture
def facade(registry):
    return ConversionFacade(registry)


@pytest.fixture
def invoice():
    return Invoice()


@pytest.fixture
def product_schema():
    return DynamicSchema(
        "product",
        [
            DynamicProperty("name"),
            DynamicProperty("price", Decimal),
            DynamicProperty("stock", int),
            DynamicProperty("tags", list[str]),
            DynamicProperty("sizes", dict[str, int]),
        ],
    )
