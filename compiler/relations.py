"""Relation lookups. Every "is this a relation" question goes through here."""
from enum import Enum
from typing import Iterable, List, Optional

from ir.errors import UnknownRelatedTableError
from ir.schema import FieldDescriptor, RelationDescriptor, RelationKind, TableSchema


class Cardinality(Enum):
    SINGULAR = 'singular'
    PLURAL = 'plural'


_SINGULAR_KINDS = frozenset({RelationKind.BELONGS_TO, RelationKind.HAS_ONE})


def classify_relation(relation: RelationDescriptor) -> Cardinality:
    if relation.kind in _SINGULAR_KINDS:
        return Cardinality.SINGULAR
    return Cardinality.PLURAL


def find_relation(table: TableSchema, field_name: str) -> Optional[RelationDescriptor]:
    for rel in table.relations:
        if rel.field_name == field_name:
            return rel
    return None


def is_relational_field(table: TableSchema, field_name: str) -> bool:
    return find_relation(table, field_name) is not None


def non_relational_fields(table: TableSchema) -> List[FieldDescriptor]:
    """Fields that are not shadowed by a relation of the same name."""
    rel_names = {rel.field_name for rel in table.relations}
    return [f for f in table.fields if f.name not in rel_names]


def resolve_referenced_table(table: TableSchema, relation: RelationDescriptor,
                             all_tables: Iterable[TableSchema]) -> TableSchema:
    for candidate in all_tables:
        if candidate.name == relation.referenced_table:
            return candidate
    raise UnknownRelatedTableError(table.name, relation.field_name, relation.referenced_table)
