import logging
from typing import Iterable, Optional

from compiler import naming
from compiler.fields import ExpansionRegistry, field_node
from compiler.render import (
    CompiledDocument,
    bound_argument,
    list_type,
    named_type,
    operation,
    render,
    variable_definition,
)
from compiler.selection_compiler import compile_selection
from ir.options import OrderBy, QueryOptions
from ir.schema import TableSchema, check_identifier
from ir.selection import SelectionSpec

log = logging.getLogger(__name__)

PAGE_INFO_FIELDS = ('hasNextPage', 'hasPreviousPage', 'startCursor', 'endCursor')


def order_by_values(order_by):
    values = []
    for item in order_by:
        if isinstance(item, OrderBy):
            values.append(naming.order_by_value(item.field, item.direction))
        else:
            values.append(item)
    return values


def _query_variables(table: TableSchema, options: QueryOptions):
    """Yield (variable name, type node, value) for every option that is set."""
    if options.limit is not None:
        yield 'first', named_type('Int'), options.limit
    if options.offset is not None:
        yield 'offset', named_type('Int'), options.offset
    if options.after is not None:
        yield 'after', named_type('Cursor'), options.after
    if options.before is not None:
        yield 'before', named_type('Cursor'), options.before
    if options.where:
        yield 'filter', named_type(naming.filter_type_name(table)), options.where
    if options.order_by:
        enum_type = named_type(naming.order_by_type_name(table), non_null=True)
        yield 'orderBy', list_type(enum_type, non_null=True), order_by_values(options.order_by)


def compile_query(
    table: TableSchema,
    all_tables: Iterable[TableSchema],
    spec: Optional[SelectionSpec] = None,
    options: Optional[QueryOptions] = None,
    registry: Optional[ExpansionRegistry] = None,
) -> CompiledDocument:
    """Compile a connection query over ``table``.

    Variables are declared only for options that are present; an empty
    ``order_by`` or missing ``where`` leaves no trace in the document.
    """
    options = (options or QueryOptions()).check()
    plural = naming.plural_name(table)
    log.debug("compiling %s query (spec=%s)", plural, 'default' if spec is None else sorted(spec))
    nodes = compile_selection(table, all_tables, spec, registry=registry)

    definitions, arguments, values = [], [], {}
    for name, type_node, value in _query_variables(table, options):
        definitions.append(variable_definition(name, type_node))
        arguments.append(bound_argument(name))
        values[name] = value

    connection = [field_node('totalCount'), field_node('nodes', nodes)]
    if options.include_page_info or options.uses_cursor:
        connection.append(field_node('pageInfo', [field_node(n) for n in PAGE_INFO_FIELDS]))

    document = operation('query', f"{plural}Query", plural, connection,
                         variable_definitions=definitions, arguments=arguments)
    return render(document, values)


def compile_find_one(
    table: TableSchema,
    all_tables: Iterable[TableSchema],
    spec: Optional[SelectionSpec] = None,
    pk_field: str = 'id',
    pk_type: str = 'UUID',
    pk_value=None,
    registry: Optional[ExpansionRegistry] = None,
) -> CompiledDocument:
    """Fetch a single row by primary key; the row is selected directly, not via a connection."""
    check_identifier(pk_field, 'field')
    check_identifier(pk_type, 'type')
    singular = naming.singular_name(table)
    nodes = compile_selection(table, all_tables, spec, registry=registry)
    document = operation(
        'query', f"{singular}Query", singular, nodes,
        variable_definitions=[variable_definition(pk_field, named_type(pk_type, non_null=True))],
        arguments=[bound_argument(pk_field)],
    )
    return render(document, {pk_field: pk_value} if pk_value is not None else None)


def compile_count(table: TableSchema, options: Optional[QueryOptions] = None) -> CompiledDocument:
    options = (options or QueryOptions()).check()
    plural = naming.plural_name(table)
    definitions, arguments, values = [], [], {}
    if options.where:
        definitions.append(variable_definition('filter', named_type(naming.filter_type_name(table))))
        arguments.append(bound_argument('filter'))
        values['filter'] = options.where
    document = operation('query', f"{plural}CountQuery", plural, [field_node('totalCount')],
                         variable_definitions=definitions, arguments=arguments)
    return render(document, values)
