"""Turn a selection spec into an ordered list of GraphQL field nodes.

The same walk serves queries and mutation payloads. Payloads pass
``exclude_relations=True``: relation keys are dropped without error, since the
caller already holds the input it sent and nested reads would only add
round-trips. A payload left empty after dropping them falls back to the
default selection.
"""
import logging
from typing import Iterable, List, Optional

from graphql.language import ast as gql_ast

from compiler.fields import ExpansionRegistry, classify_field, field_node, name_node
from compiler.relations import (
    Cardinality,
    classify_relation,
    find_relation,
    non_relational_fields,
    resolve_referenced_table,
)
from ir.errors import InvalidSelectionError, UnknownFieldError, UnknownRelationError
from ir.schema import RelationDescriptor, TableSchema
from ir.selection import Nested, SelectionSpec

log = logging.getLogger(__name__)

# Page size for nested plural relations. Fixed: callers cannot lift it.
NESTED_RELATION_FIRST = 20


def default_selection(table: TableSchema, registry: Optional[ExpansionRegistry] = None) -> List[gql_ast.FieldNode]:
    """Every non-relation field; composite types expanded, relations never included."""
    return [classify_field(table.name, f, registry).to_ast() for f in non_relational_fields(table)]


def compile_selection(
    table: TableSchema,
    all_tables: Iterable[TableSchema],
    spec: Optional[SelectionSpec] = None,
    exclude_relations: bool = False,
    registry: Optional[ExpansionRegistry] = None,
) -> List[gql_ast.FieldNode]:
    all_tables = tuple(all_tables)
    if spec is None:
        nodes = default_selection(table, registry)
    else:
        nodes = []
        for key, value in spec.items():
            relation = find_relation(table, key)
            if relation is not None:
                if exclude_relations:
                    log.debug("dropping relation %s.%s from payload selection", table.name, key)
                    continue
                nested = value.select if isinstance(value, Nested) else None
                nodes.append(_relation_node(table, relation, all_tables, nested, registry))
                continue

            field = table.get_field(key)
            if field is None:
                raise UnknownFieldError(table.name, key)
            if isinstance(value, Nested):
                raise UnknownRelationError(table.name, key)
            nodes.append(classify_field(table.name, field, registry).to_ast())

    if not nodes and exclude_relations:
        log.debug("payload selection on %s named only relations; using default fields", table.name)
        nodes = default_selection(table, registry)
    if not nodes:
        raise InvalidSelectionError(f"Selection on table '{table.name}' selects no fields")
    return nodes


def _relation_node(table, relation: RelationDescriptor, all_tables, nested, registry) -> gql_ast.FieldNode:
    related = resolve_referenced_table(table, relation, all_tables)
    inner = compile_selection(related, all_tables, nested, registry=registry)

    if classify_relation(relation) is Cardinality.SINGULAR:
        return field_node(relation.field_name, inner)

    first = gql_ast.ArgumentNode(
        name=name_node('first'),
        value=gql_ast.IntValueNode(value=str(NESTED_RELATION_FIRST)),
    )
    return field_node(relation.field_name, [field_node('nodes', inner)], arguments=[first])
