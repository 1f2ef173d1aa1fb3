import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple

from ir.errors import InvalidIdentifierError

_NAME_RE = re.compile(r'^[_A-Za-z][_0-9A-Za-z]*$')


def check_identifier(name, kind='identifier'):
    """Return ``name`` if it is a valid GraphQL name, raise otherwise."""
    if not isinstance(name, str) or not _NAME_RE.match(name):
        raise InvalidIdentifierError(name, kind)
    return name


class WireType(str, Enum):
    """Composite wire types that must be requested with a sub-selection."""
    INTERVAL = 'Interval'
    GEOMETRY_POINT = 'GeometryPoint'
    GEOMETRY_LINE_STRING = 'GeometryLineString'
    GEOMETRY_POLYGON = 'GeometryPolygon'
    GEOMETRY_MULTI_POINT = 'GeometryMultiPoint'
    GEOMETRY_MULTI_LINE_STRING = 'GeometryMultiLineString'
    GEOMETRY_MULTI_POLYGON = 'GeometryMultiPolygon'
    GEOMETRY_COLLECTION = 'GeometryGeometryCollection'
    GEOMETRY_INTERFACE = 'GeometryInterface'
    GEOGRAPHY_POINT = 'GeographyPoint'
    GEOGRAPHY_LINE_STRING = 'GeographyLineString'
    GEOGRAPHY_POLYGON = 'GeographyPolygon'
    GEOGRAPHY_MULTI_POINT = 'GeographyMultiPoint'
    GEOGRAPHY_MULTI_LINE_STRING = 'GeographyMultiLineString'
    GEOGRAPHY_MULTI_POLYGON = 'GeographyMultiPolygon'
    GEOGRAPHY_COLLECTION = 'GeographyGeometryCollection'
    GEOGRAPHY_INTERFACE = 'GeographyInterface'

    @classmethod
    def lookup(cls, name) -> Optional['WireType']:
        try:
            return cls(name)
        except ValueError:
            return None


class RelationKind(str, Enum):
    BELONGS_TO = 'belongsTo'
    HAS_ONE = 'hasOne'
    HAS_MANY = 'hasMany'
    MANY_TO_MANY = 'manyToMany'


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    wire_type: str
    is_array: bool = False
    nullable: bool = True
    requires_expansion: bool = False

    def __post_init__(self):
        check_identifier(self.name, 'field')
        check_identifier(self.wire_type, 'type')


@dataclass(frozen=True)
class RelationDescriptor:
    field_name: str
    kind: RelationKind
    referenced_table: str

    def __post_init__(self):
        check_identifier(self.field_name, 'relation')
        check_identifier(self.referenced_table, 'table')
        object.__setattr__(self, 'kind', RelationKind(self.kind))


@dataclass(frozen=True)
class Relations:
    belongs_to: Tuple[RelationDescriptor, ...] = ()
    has_one: Tuple[RelationDescriptor, ...] = ()
    has_many: Tuple[RelationDescriptor, ...] = ()
    many_to_many: Tuple[RelationDescriptor, ...] = ()

    def __iter__(self) -> Iterator[RelationDescriptor]:
        yield from self.belongs_to
        yield from self.has_one
        yield from self.has_many
        yield from self.many_to_many

    @classmethod
    def of(cls, *relations: RelationDescriptor) -> 'Relations':
        """Group a flat list of relations by kind, keeping their order."""
        groups: Dict[RelationKind, list] = {kind: [] for kind in RelationKind}
        for rel in relations:
            groups[rel.kind].append(rel)
        return cls(
            belongs_to=tuple(groups[RelationKind.BELONGS_TO]),
            has_one=tuple(groups[RelationKind.HAS_ONE]),
            has_many=tuple(groups[RelationKind.HAS_MANY]),
            many_to_many=tuple(groups[RelationKind.MANY_TO_MANY]),
        )


@dataclass(frozen=True)
class TableSchema:
    name: str
    fields: Tuple[FieldDescriptor, ...] = ()
    relations: Relations = field(default_factory=Relations)

    def __post_init__(self):
        check_identifier(self.name, 'table')
        object.__setattr__(self, 'fields', tuple(self.fields))

    def get_field(self, name: str) -> Optional[FieldDescriptor]:
        for f in self.fields:
            if f.name == name:
                return f
        return None
