import pytest

from compiler.query_compiler import compile_count, compile_find_one, compile_query
from ir.errors import InvalidOptionsError, UnknownFieldError
from ir.options import OrderBy, QueryOptions
from ir.selection import parse_selection


def test_default_query_text(product, all_tables):
    doc = compile_query(product, all_tables)
    assert doc.operation_name == 'productsQuery'
    assert doc.text == (
        'query productsQuery {\n'
        '  products {\n'
        '    totalCount\n'
        '    nodes {\n'
        '      id\n'
        '      name\n'
        '      price\n'
        '    }\n'
        '  }\n'
        '}'
    )
    assert doc.variables == {}


def test_compilation_is_deterministic(order, all_tables):
    spec = parse_selection({'id': True, 'lineItems': {'select': {'sku': True}}})
    options = QueryOptions(limit=10, where={'number': {'equalTo': 'A1'}}, order_by=['NUMBER_ASC'])
    first = compile_query(order, all_tables, spec, options)
    second = compile_query(order, all_tables, spec, options)
    assert first.text == second.text
    assert first.digest == second.digest


def test_offset_pagination_variables(product, all_tables):
    doc = compile_query(product, all_tables, options=QueryOptions(limit=25, offset=50))
    assert 'query productsQuery($first: Int, $offset: Int) {' in doc.text
    assert 'products(first: $first, offset: $offset) {' in doc.text
    assert 'pageInfo' not in doc.text
    assert doc.variables == {'first': 25, 'offset': 50}


def test_cursor_pagination_adds_page_info(product, all_tables):
    doc = compile_query(product, all_tables, options=QueryOptions(limit=10, after='Y3Vyc29y'))
    assert '$after: Cursor' in doc.text
    assert 'after: $after' in doc.text
    for name in ('hasNextPage', 'hasPreviousPage', 'startCursor', 'endCursor'):
        assert name in doc.text


def test_page_info_on_request(product, all_tables):
    doc = compile_query(product, all_tables, options=QueryOptions(include_page_info=True))
    assert 'pageInfo {' in doc.text


def test_filter_and_order_by_types(person, all_tables):
    options = QueryOptions(where={'email': {'endsWith': '.com'}}, order_by=[OrderBy('fullName', 'desc'), 'ID_ASC'])
    doc = compile_query(person, all_tables, options=options)
    assert '$filter: PersonFilter' in doc.text
    assert '$orderBy: [PeopleOrderBy!]!' in doc.text
    assert 'people(filter: $filter, orderBy: $orderBy) {' in doc.text
    assert doc.variables['orderBy'] == ['FULL_NAME_DESC', 'ID_ASC']
    assert doc.variables['filter'] == {'email': {'endsWith': '.com'}}


def test_empty_order_by_leaves_no_trace(product, all_tables):
    doc = compile_query(product, all_tables, options=QueryOptions(order_by=[], where=None))
    assert 'orderBy' not in doc.text
    assert 'filter' not in doc.text
    assert doc.variables == {}


def test_offset_with_cursor_is_rejected(product, all_tables):
    with pytest.raises(InvalidOptionsError):
        compile_query(product, all_tables, options=QueryOptions(offset=10, before='abc'))


@pytest.mark.parametrize('options', [{'limit': -1}, {'offset': 'ten'}, {'sortBy': ['x']}])
def test_invalid_options(product, all_tables, options):
    with pytest.raises(InvalidOptionsError):
        compile_query(product, all_tables, options=QueryOptions.from_dict(options))


def test_options_from_dict_accepts_camel_case():
    options = QueryOptions.from_dict({
        'first': 5,
        'includePageInfo': True,
        'orderBy': [{'field': 'createdAt', 'direction': 'desc'}, 'NAME_ASC'],
    })
    assert options.limit == 5
    assert options.include_page_info
    assert options.order_by == [OrderBy('createdAt', 'desc'), 'NAME_ASC']


def test_unknown_direction():
    with pytest.raises(InvalidOptionsError):
        OrderBy('name', 'sideways')


def test_errors_raise_before_text(product, all_tables):
    with pytest.raises(UnknownFieldError):
        compile_query(product, all_tables, parse_selection({'nope': True}), QueryOptions(limit=1))


def test_find_one(order, all_tables):
    doc = compile_find_one(order, all_tables, pk_value='8f2c')
    assert doc.operation_name == 'orderQuery'
    assert 'query orderQuery($id: UUID!) {' in doc.text
    assert 'order(id: $id) {' in doc.text
    assert 'nodes' not in doc.text
    assert 'leadTime {' in doc.text
    assert doc.variables == {'id': '8f2c'}


def test_find_one_custom_key(product, all_tables):
    doc = compile_find_one(product, all_tables, parse_selection({'name': True}), pk_field='sku', pk_type='String')
    assert '($sku: String!)' in doc.text
    assert 'product(sku: $sku) {' in doc.text


def test_count_without_filter(product):
    doc = compile_count(product)
    assert doc.text == 'query productsCountQuery {\n  products {\n    totalCount\n  }\n}'


def test_count_with_filter(product):
    doc = compile_count(product, QueryOptions(where={'name': {'includes': 'x'}}))
    assert 'query productsCountQuery($filter: ProductFilter) {' in doc.text
    assert 'products(filter: $filter) {' in doc.text
    assert doc.variables == {'filter': {'name': {'includes': 'x'}}}


def test_limit_and_first_must_agree():
    with pytest.raises(InvalidOptionsError):
        QueryOptions.from_dict({'limit': 10, 'first': 20})
    assert QueryOptions.from_dict({'limit': 10, 'first': 10}).limit == 10
