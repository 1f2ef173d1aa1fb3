from pathlib import Path

import pytest

from ir.schema import FieldDescriptor, RelationDescriptor, RelationKind, Relations, TableSchema

SAMPLE_METADATA = Path(__file__).resolve().parent.parent / 'schema' / 'tables.json'


def make_table(name, fields, relations=()):
    return TableSchema(
        name=name,
        fields=tuple(FieldDescriptor(*f) if isinstance(f, tuple) else FieldDescriptor(f, 'String') for f in fields),
        relations=Relations.of(*relations),
    )


@pytest.fixture
def product():
    return make_table(
        'Product',
        [('id', 'UUID', False, False), 'name', ('price', 'BigFloat')],
        [RelationDescriptor('supplier', RelationKind.BELONGS_TO, 'Supplier')],
    )


@pytest.fixture
def supplier():
    return make_table(
        'Supplier',
        [('id', 'UUID', False, False), 'name', 'email'],
        [RelationDescriptor('products', RelationKind.HAS_MANY, 'Product')],
    )


@pytest.fixture
def order():
    return make_table(
        'Order',
        [
            ('id', 'UUID', False, False),
            ('number', 'String', False, False),
            ('leadTime', 'Interval', False, True, True),
        ],
        [
            RelationDescriptor('lineItems', RelationKind.HAS_MANY, 'LineItem'),
            RelationDescriptor('customer', RelationKind.BELONGS_TO, 'Person'),
        ],
    )


@pytest.fixture
def line_item():
    return make_table(
        'LineItem',
        ['id', 'sku', ('qty', 'Int'), ('location', 'GeometryPoint', False, True, True)],
        [RelationDescriptor('order', RelationKind.BELONGS_TO, 'Order')],
    )


@pytest.fixture
def person():
    return make_table(
        'Person',
        ['id', 'fullName', 'email'],
        [
            RelationDescriptor('passport', RelationKind.HAS_ONE, 'Passport'),
            RelationDescriptor('favoriteProducts', RelationKind.MANY_TO_MANY, 'Product'),
        ],
    )


@pytest.fixture
def all_tables(product, supplier, order, line_item, person):
    return [product, supplier, order, line_item, person]
