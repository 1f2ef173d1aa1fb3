"""Create / update / delete documents.

Every mutation declares exactly one variable, ``$input``, typed after the
table. Payload selections never include relations, and delete returns only
``clientMutationId``.

When the caller passes no values the document is compiled as a template and
its variable bag is empty; ``input`` is filled in later with the
``*_variables`` builders.
"""
import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

from compiler import naming
from compiler.fields import ExpansionRegistry, field_node
from compiler.relations import non_relational_fields
from compiler.render import CompiledDocument, bound_argument, named_type, operation, render, variable_definition
from compiler.selection_compiler import compile_selection
from ir.errors import InvalidOptionsError, UnknownFieldError
from ir.options import MutationOptions
from ir.schema import TableSchema

log = logging.getLogger(__name__)

DELETE_PAYLOAD_FIELD = 'clientMutationId'


@dataclass(frozen=True)
class InputField:
    name: str
    wire_type: str
    is_array: bool
    required: bool


def input_shape(table: TableSchema, operation_kind: str) -> List[InputField]:
    """Writable fields of ``table`` as the backend's input object sees them.

    For ``patch`` every field is optional whatever its nullability.
    """
    if operation_kind not in ('create', 'patch'):
        raise ValueError(f"unknown input operation '{operation_kind}'")
    partial = operation_kind == 'patch'
    return [
        InputField(f.name, f.wire_type, f.is_array, required=not partial and not f.nullable)
        for f in non_relational_fields(table)
    ]


def _check_keys(table: TableSchema, values: Mapping[str, Any], operation_kind: str):
    writable = {f.name for f in input_shape(table, operation_kind)}
    for key in values:
        if key not in writable:
            raise UnknownFieldError(table.name, key)


def create_variables(table: TableSchema, values: Mapping[str, Any]):
    _check_keys(table, values, 'create')
    return {'input': {naming.singular_name(table): dict(values)}}


def update_variables(table: TableSchema, row_id, patch: Mapping[str, Any]):
    _check_keys(table, patch, 'patch')
    return {'input': {'id': row_id, 'patch': dict(patch)}}


def delete_variables(row_id):
    return {'input': {'id': row_id}}


def _mutation(action: str, input_type: str, table: TableSchema, payload, variables) -> CompiledDocument:
    root = naming.mutation_field_name(action, table)
    document = operation(
        'mutation', f"{root}Mutation", root, payload,
        variable_definitions=[variable_definition('input', named_type(input_type, non_null=True))],
        arguments=[bound_argument('input')],
    )
    return render(document, variables)


def _entity_payload(table, all_tables, options, registry):
    options = options or MutationOptions()
    nodes = compile_selection(table, all_tables, options.field_selection,
                              exclude_relations=True, registry=registry)
    return [field_node(naming.singular_name(table), nodes)]


def compile_create(
    table: TableSchema,
    all_tables: Iterable[TableSchema] = (),
    options: Optional[MutationOptions] = None,
    values: Optional[Mapping[str, Any]] = None,
    registry: Optional[ExpansionRegistry] = None,
) -> CompiledDocument:
    payload = _entity_payload(table, all_tables, options, registry)
    variables = create_variables(table, values) if values is not None else None
    return _mutation('create', naming.create_input_type_name(table), table, payload, variables)


def compile_update(
    table: TableSchema,
    all_tables: Iterable[TableSchema] = (),
    options: Optional[MutationOptions] = None,
    row_id=None,
    patch: Optional[Mapping[str, Any]] = None,
    registry: Optional[ExpansionRegistry] = None,
) -> CompiledDocument:
    if patch is not None and row_id is None:
        raise InvalidOptionsError(f"update on '{table.name}' has a patch but no row id")
    payload = _entity_payload(table, all_tables, options, registry)
    variables = None
    if row_id is not None:
        variables = update_variables(table, row_id, patch or {})
    return _mutation('update', naming.update_input_type_name(table), table, payload, variables)


def compile_delete(
    table: TableSchema,
    all_tables: Iterable[TableSchema] = (),
    options: Optional[MutationOptions] = None,
    row_id=None,
) -> CompiledDocument:
    if options is not None and options.field_selection is not None:
        log.debug("ignoring field selection for delete on %s", table.name)
    variables = delete_variables(row_id) if row_id is not None else None
    return _mutation('delete', naming.delete_input_type_name(table), table,
                     [field_node(DELETE_PAYLOAD_FIELD)], variables)
