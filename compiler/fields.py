"""Field classification and sub-selection generators for composite wire types."""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Optional, Union

from graphql.language import ast as gql_ast

from ir.errors import UnsupportedFieldTypeError
from ir.schema import FieldDescriptor, WireType

Generator = Callable[[FieldDescriptor], gql_ast.FieldNode]


def name_node(value: str) -> gql_ast.NameNode:
    return gql_ast.NameNode(value=value)


def field_node(name: str, selections=None, arguments=()) -> gql_ast.FieldNode:
    selection_set = None
    if selections is not None:
        selection_set = gql_ast.SelectionSetNode(selections=tuple(selections))
    return gql_ast.FieldNode(
        name=name_node(name),
        arguments=tuple(arguments),
        directives=(),
        selection_set=selection_set,
    )


def _subfields(*names) -> Generator:
    def generate(field: FieldDescriptor) -> gql_ast.FieldNode:
        return field_node(field.name, [field_node(n) for n in names])
    return generate


interval_ast = _subfields('seconds', 'minutes', 'hours', 'days', 'months', 'years')
geometry_point_ast = _subfields('geojson', 'srid', 'x', 'y')
geometry_ast = _subfields('geojson', 'srid')
geography_point_ast = _subfields('geojson', 'srid', 'longitude', 'latitude')


@dataclass(frozen=True)
class Scalar:
    field: FieldDescriptor

    def to_ast(self) -> gql_ast.FieldNode:
        return field_node(self.field.name)


@dataclass(frozen=True)
class Expandable:
    field: FieldDescriptor
    generator: Generator

    def to_ast(self) -> gql_ast.FieldNode:
        return self.generator(self.field)


FieldClass = Union[Scalar, Expandable]


class ExpansionRegistry:
    """Append-only map of composite wire type -> sub-selection generator."""

    def __init__(self, generators: Optional[Dict[WireType, Generator]] = None):
        self._generators: Dict[WireType, Generator] = {}
        self._frozen = False
        for wire_type, gen in (generators or {}).items():
            self.register(wire_type, gen)

    def register(self, wire_type: WireType, generator: Generator):
        if self._frozen:
            raise RuntimeError('expansion registry is frozen')
        wire_type = WireType(wire_type)
        if wire_type in self._generators:
            raise ValueError(f"generator for {wire_type.value} is already registered")
        self._generators[wire_type] = generator
        return generator

    def freeze(self) -> 'ExpansionRegistry':
        self._frozen = True
        return self

    def get(self, wire_type: str) -> Optional[Generator]:
        key = WireType.lookup(wire_type)
        if key is None:
            return None
        return self._generators.get(key)

    def generators(self):
        return MappingProxyType(self._generators)


def default_registry() -> ExpansionRegistry:
    shape_types = (
        WireType.GEOMETRY_LINE_STRING,
        WireType.GEOMETRY_POLYGON,
        WireType.GEOMETRY_MULTI_POINT,
        WireType.GEOMETRY_MULTI_LINE_STRING,
        WireType.GEOMETRY_MULTI_POLYGON,
        WireType.GEOMETRY_COLLECTION,
        WireType.GEOMETRY_INTERFACE,
        WireType.GEOGRAPHY_LINE_STRING,
        WireType.GEOGRAPHY_POLYGON,
        WireType.GEOGRAPHY_MULTI_POINT,
        WireType.GEOGRAPHY_MULTI_LINE_STRING,
        WireType.GEOGRAPHY_MULTI_POLYGON,
        WireType.GEOGRAPHY_COLLECTION,
        WireType.GEOGRAPHY_INTERFACE,
    )
    registry = ExpansionRegistry({
        WireType.INTERVAL: interval_ast,
        WireType.GEOMETRY_POINT: geometry_point_ast,
        WireType.GEOGRAPHY_POINT: geography_point_ast,
    })
    for wire_type in shape_types:
        registry.register(wire_type, geometry_ast)
    return registry.freeze()


DEFAULT_REGISTRY = default_registry()


def classify_field(table_name: str, field: FieldDescriptor, registry: Optional[ExpansionRegistry] = None) -> FieldClass:
    if not field.requires_expansion:
        return Scalar(field)
    generator = (registry or DEFAULT_REGISTRY).get(field.wire_type)
    if generator is None:
        raise UnsupportedFieldTypeError(table_name, field.name, field.wire_type)
    return Expandable(field, generator)
