"""Convert the introspection ``_meta`` payload into TableSchema values."""
from typing import Any, Iterable, List, Mapping, Optional

from ir.schema import (
    FieldDescriptor,
    RelationDescriptor,
    RelationKind,
    Relations,
    TableSchema,
    WireType,
)

# Postgres types whose GraphQL representation is always a composite object.
EXPANDABLE_PG_TYPES = frozenset({'geometry', 'geography', 'interval'})

# relation kind -> (metadata key, key holding the referenced table)
_RELATION_SOURCES = (
    (RelationKind.BELONGS_TO, 'belongsTo', 'references'),
    (RelationKind.HAS_ONE, 'hasOne', 'referencedBy'),
    (RelationKind.HAS_MANY, 'hasMany', 'referencedBy'),
    (RelationKind.MANY_TO_MANY, 'manyToMany', 'rightTable'),
)


def requires_expansion(gql_type: str, pg_type: Optional[str]) -> bool:
    if WireType.lookup(gql_type) is not None:
        return True
    return (pg_type or '').lower() in EXPANDABLE_PG_TYPES


def field_from_meta(raw: Mapping[str, Any]) -> FieldDescriptor:
    ftype = raw.get('type') or {}
    gql_type = ftype.get('gqlType') or 'String'
    # metadata sometimes carries the non-null marker on the type name
    nullable = not gql_type.endswith('!')
    gql_type = gql_type.rstrip('!')
    if 'isNotNull' in ftype:
        nullable = not ftype['isNotNull']
    return FieldDescriptor(
        name=raw['name'],
        wire_type=gql_type,
        is_array=bool(ftype.get('isArray')),
        nullable=nullable,
        requires_expansion=requires_expansion(gql_type, ftype.get('pgType')),
    )


def _referenced_name(value) -> str:
    if isinstance(value, Mapping):
        return value.get('name') or ''
    return value or ''


def table_from_meta(raw: Mapping[str, Any]) -> TableSchema:
    relations_raw = raw.get('relations') or {}
    relations: List[RelationDescriptor] = []
    for kind, key, ref_key in _RELATION_SOURCES:
        for rel in relations_raw.get(key) or []:
            if not rel or not rel.get('fieldName'):
                continue
            referenced = _referenced_name(rel.get(ref_key))
            if not referenced:
                continue
            relations.append(RelationDescriptor(rel['fieldName'], kind, referenced))
    return TableSchema(
        name=raw['name'],
        fields=tuple(field_from_meta(f) for f in raw.get('fields') or [] if f),
        relations=Relations.of(*relations),
    )


def load_tables(payload: Any) -> List[TableSchema]:
    """Accept ``{"_meta": {"tables": [...]}}``, ``{"tables": [...]}`` or a bare list."""
    tables: Iterable[Any] = payload
    if isinstance(payload, Mapping):
        if '_meta' in payload:
            payload = payload['_meta'] or {}
        tables = payload.get('tables') or []
    return [table_from_meta(t) for t in tables if t]
