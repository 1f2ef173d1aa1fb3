"""Higher-level field selections (presets and include/exclude lists).

These resolve to a plain selection spec before compilation; nothing here
touches the document directly.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from compiler.relations import find_relation, is_relational_field, non_relational_fields, resolve_referenced_table
from ir.errors import InvalidSelectionError
from ir.schema import TableSchema
from ir.selection import LEAF, Nested, SelectionSpec

PRESETS = ('minimal', 'display', 'all', 'full')

MAX_RELATED_FIELDS = 8
PREFERRED_DISPLAY_FIELDS = (
    'displayName',
    'fullName',
    'preferredName',
    'nickname',
    'firstName',
    'lastName',
    'username',
    'email',
    'name',
    'title',
    'label',
    'slug',
    'code',
    'createdAt',
    'updatedAt',
)


@dataclass(frozen=True)
class SimpleFieldSelection:
    select: Optional[Sequence[str]] = None
    include: Mapping[str, Union[bool, Sequence[str]]] = field(default_factory=dict)
    include_relations: Sequence[str] = ()
    exclude: Sequence[str] = ()
    max_depth: Optional[int] = None

    @classmethod
    def from_dict(cls, raw: Mapping) -> 'SimpleFieldSelection':
        return cls(
            select=raw.get('select'),
            include=raw.get('include') or {},
            include_relations=raw.get('includeRelations', raw.get('include_relations')) or (),
            exclude=raw.get('exclude') or (),
            max_depth=raw.get('maxDepth', raw.get('max_depth')),
        )


FieldSelection = Union[str, SimpleFieldSelection]


def _scalar_names(table: TableSchema) -> List[str]:
    return [f.name for f in non_relational_fields(table)]


def related_display_fields(table: TableSchema, relation_name: str,
                           all_tables: Iterable[TableSchema]) -> SelectionSpec:
    """A small, display-oriented selection on the table a relation points at."""
    relation = find_relation(table, relation_name)
    related = resolve_referenced_table(table, relation, all_tables)
    scalars = _scalar_names(related)
    available = set(scalars)

    picked: List[str] = []
    for name in ('id', 'nodeId', *PREFERRED_DISPLAY_FIELDS, *scalars):
        if len(picked) >= MAX_RELATED_FIELDS:
            break
        if name in available and name not in picked:
            picked.append(name)
    return {name: LEAF for name in picked}


def preset_selection(table: TableSchema, all_tables: Iterable[TableSchema], preset: str) -> SelectionSpec:
    scalars = _scalar_names(table)
    if preset == 'minimal':
        names = scalars[:3]
    elif preset == 'display':
        names = scalars[:max(5, len(scalars) // 2)]
    elif preset in ('all', 'full'):
        names = scalars
    else:
        raise InvalidSelectionError(f"Unknown field selection preset '{preset}'")

    spec: Dict[str, object] = {name: LEAF for name in names}
    if preset == 'full':
        for rel in table.relations:
            spec[rel.field_name] = Nested(related_display_fields(table, rel.field_name, all_tables))
    return spec


def _custom_selection(table, all_tables, selection: SimpleFieldSelection) -> SelectionSpec:
    spec: Dict[str, object] = {}
    names = selection.select if selection.select is not None else _scalar_names(table)
    for name in names:
        if table.get_field(name) is not None:
            spec[name] = LEAF

    for rel_name in selection.include_relations:
        if is_relational_field(table, rel_name):
            spec[rel_name] = Nested(related_display_fields(table, rel_name, all_tables))

    for rel_name, wanted in selection.include.items():
        if not is_relational_field(table, rel_name):
            continue
        if wanted is True:
            spec[rel_name] = Nested(related_display_fields(table, rel_name, all_tables))
        elif isinstance(wanted, (list, tuple)):
            spec[rel_name] = Nested({name: LEAF for name in wanted})

    for name in selection.exclude:
        spec.pop(name, None)
    return spec


def resolve_field_selection(table: TableSchema, all_tables: Iterable[TableSchema],
                            selection: Optional[FieldSelection] = None) -> SelectionSpec:
    all_tables = tuple(all_tables)
    if selection is None:
        return preset_selection(table, all_tables, 'display')
    if isinstance(selection, str):
        return preset_selection(table, all_tables, selection)
    if isinstance(selection, Mapping):
        selection = SimpleFieldSelection.from_dict(selection)
    return _custom_selection(table, all_tables, selection)


def validate_field_selection(selection: FieldSelection, table: TableSchema) -> List[str]:
    if isinstance(selection, str):
        return []
    if isinstance(selection, Mapping):
        selection = SimpleFieldSelection.from_dict(selection)

    errors = []
    field_names = {f.name for f in table.fields}
    for name in selection.select or ():
        if name not in field_names:
            errors.append(f"Field '{name}' does not exist in table '{table.name}'")
    for name in [*selection.include_relations, *selection.include]:
        if not is_relational_field(table, name):
            errors.append(f"Field '{name}' is not a relational field in table '{table.name}'")
    for name in selection.exclude:
        if name not in field_names:
            errors.append(f"Exclude field '{name}' does not exist in table '{table.name}'")
    if selection.max_depth is not None:
        if not isinstance(selection.max_depth, int) or not 0 <= selection.max_depth <= 5:
            errors.append('maxDepth must be a number between 0 and 5')
    return errors


def available_relations(table: TableSchema):
    return [(rel.field_name, rel.kind.value, rel.referenced_table) for rel in table.relations]
