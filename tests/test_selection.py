import pytest
from graphql import print_ast

from compiler.selection_compiler import NESTED_RELATION_FIRST, compile_selection
from ir.errors import (
    InvalidIdentifierError,
    InvalidSelectionError,
    UnknownFieldError,
    UnknownRelatedTableError,
    UnknownRelationError,
    UnsupportedFieldTypeError,
)
from ir.schema import FieldDescriptor, TableSchema
from ir.selection import LEAF, Leaf, Nested, parse_selection, selection_to_dict


def _names(nodes):
    return [n.name.value for n in nodes]


def _text(nodes):
    return '\n'.join(print_ast(n) for n in nodes)


def test_parse_selection_builds_tagged_variants():
    spec = parse_selection({'id': True, 'draft': False, 'supplier': {'select': {'name': True}}})
    assert spec == {'id': LEAF, 'supplier': Nested({'name': LEAF})}
    assert isinstance(spec['id'], Leaf)


@pytest.mark.parametrize('raw', [
    {'id': 1},
    {'id': 'yes'},
    {'supplier': {'fields': {'id': True}}},
    {'supplier': {'select': {'id': True}, 'variables': {}}},
])
def test_parse_selection_rejects_other_shapes(raw):
    with pytest.raises(InvalidSelectionError):
        parse_selection(raw)


def test_parse_selection_rejects_bad_names():
    with pytest.raises(InvalidIdentifierError):
        parse_selection({'id } evil {': True})


def test_selection_round_trips_to_dict():
    raw = {'id': True, 'supplier': {'select': {'name': True}}}
    assert selection_to_dict(parse_selection(raw)) == raw


def test_default_selection_has_no_relations(product, all_tables):
    nodes = compile_selection(product, all_tables)
    assert _names(nodes) == ['id', 'name', 'price']


def test_default_selection_expands_composites(order, all_tables):
    text = _text(compile_selection(order, all_tables))
    assert 'leadTime {' in text
    assert 'lineItems' not in text
    assert 'customer' not in text


def test_singular_relation_is_inlined(product, all_tables):
    spec = parse_selection({'id': True, 'name': True, 'supplier': {'select': {'id': True, 'name': True}}})
    text = _text(compile_selection(product, all_tables, spec))
    assert text == 'id\nname\nsupplier {\n  id\n  name\n}'


def test_plural_relation_is_bounded_connection(order, all_tables):
    spec = parse_selection({'lineItems': {'select': {'sku': True, 'qty': True}}})
    text = _text(compile_selection(order, all_tables, spec))
    assert text == (
        f'lineItems(first: {NESTED_RELATION_FIRST}) {{\n'
        '  nodes {\n'
        '    sku\n'
        '    qty\n'
        '  }\n'
        '}'
    )


def test_many_to_many_is_bounded(person, all_tables):
    spec = parse_selection({'favoriteProducts': {'select': {'name': True}}})
    text = _text(compile_selection(person, all_tables, spec))
    assert text.startswith('favoriteProducts(first: 20) {')
    assert 'nodes {' in text


def test_nested_expandable_field_in_relation(order, all_tables):
    spec = parse_selection({'lineItems': {'select': {'location': True}}})
    text = _text(compile_selection(order, all_tables, spec))
    assert 'location {' in text
    assert 'srid' in text


def test_relation_leaf_uses_related_default(product, all_tables):
    spec = parse_selection({'supplier': True})
    text = _text(compile_selection(product, all_tables, spec))
    assert text == 'supplier {\n  id\n  name\n  email\n}'


def test_deep_nesting(line_item, all_tables):
    spec = parse_selection({
        'order': {'select': {'number': True, 'customer': {'select': {'fullName': True}}}},
    })
    text = _text(compile_selection(line_item, all_tables, spec))
    assert 'order {' in text
    assert 'customer {' in text
    assert 'fullName' in text


def test_unknown_field(product, all_tables):
    with pytest.raises(UnknownFieldError) as err:
        compile_selection(product, all_tables, parse_selection({'color': True}))
    assert err.value.field_name == 'color'


def test_nested_select_on_plain_field(product, all_tables):
    with pytest.raises(UnknownRelationError):
        compile_selection(product, all_tables, parse_selection({'name': {'select': {'id': True}}}))


def test_relation_to_absent_table(person, all_tables):
    with pytest.raises(UnknownRelatedTableError):
        compile_selection(person, all_tables, parse_selection({'passport': {'select': {'id': True}}}))


def test_unsupported_type_in_default_selection():
    table = TableSchema('Region', (FieldDescriptor('area', 'Raster', requires_expansion=True),))
    with pytest.raises(UnsupportedFieldTypeError):
        compile_selection(table, [table])


def test_payload_variant_drops_relations(product, all_tables):
    spec = parse_selection({'id': True, 'supplier': {'select': {'id': True}}})
    nodes = compile_selection(product, all_tables, spec, exclude_relations=True)
    assert _names(nodes) == ['id']


def test_empty_selection_is_rejected(product, all_tables):
    with pytest.raises(InvalidSelectionError):
        compile_selection(product, all_tables, {})


def test_relation_only_payload_falls_back_to_default(product, all_tables):
    nodes = compile_selection(product, all_tables, parse_selection({'supplier': True}), exclude_relations=True)
    assert _names(nodes) == ['id', 'name', 'price']
