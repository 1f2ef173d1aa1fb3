from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Union

from ir.errors import InvalidOptionsError
from ir.selection import SelectionSpec, parse_selection

_DIRECTIONS = ('asc', 'desc')


@dataclass(frozen=True)
class OrderBy:
    field: str
    direction: str = 'asc'

    def __post_init__(self):
        if self.direction.lower() not in _DIRECTIONS:
            raise InvalidOptionsError(f"Unknown order direction '{self.direction}' for '{self.field}'")


OrderByItem = Union[str, OrderBy]


@dataclass(frozen=True)
class QueryOptions:
    limit: Optional[int] = None
    offset: Optional[int] = None
    after: Optional[str] = None
    before: Optional[str] = None
    where: Optional[Mapping[str, Any]] = None
    order_by: List[OrderByItem] = field(default_factory=list)
    include_page_info: bool = False

    @property
    def uses_cursor(self) -> bool:
        return self.after is not None or self.before is not None

    def check(self):
        """Raise InvalidOptionsError for option combinations the backend rejects."""
        if self.offset is not None and self.uses_cursor:
            raise InvalidOptionsError('offset pagination cannot be combined with after/before cursors')
        for name in ('limit', 'offset'):
            value = getattr(self, name)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 0):
                raise InvalidOptionsError(f"{name} must be a non-negative integer, got {value!r}")
        return self

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Any]]) -> 'QueryOptions':
        """Build options from a JSON-style dict (camelCase or snake_case keys)."""
        if not raw:
            return cls()
        raw = dict(raw)
        limit = raw.pop('limit', None)
        first = raw.pop('first', None)
        if limit is not None and first is not None and limit != first:
            raise InvalidOptionsError(f"limit ({limit!r}) and first ({first!r}) disagree")
        order_by = raw.pop('orderBy', raw.pop('order_by', None)) or []
        include_page_info = raw.pop('includePageInfo', raw.pop('include_page_info', False))
        opts = cls(
            limit=limit if limit is not None else first,
            offset=raw.pop('offset', None),
            after=raw.pop('after', None),
            before=raw.pop('before', None),
            where=raw.pop('where', None),
            order_by=[_parse_order_item(item) for item in order_by],
            include_page_info=bool(include_page_info),
        )
        if raw:
            raise InvalidOptionsError(f"Unknown query options: {sorted(raw)}")
        return opts


def _parse_order_item(item) -> OrderByItem:
    if isinstance(item, (str, OrderBy)):
        return item
    if isinstance(item, Mapping) and 'field' in item:
        return OrderBy(item['field'], item.get('direction', 'asc'))
    raise InvalidOptionsError(f"Invalid orderBy entry: {item!r}")


@dataclass(frozen=True)
class MutationOptions:
    field_selection: Optional[SelectionSpec] = None

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Any]]) -> 'MutationOptions':
        if not raw:
            return cls()
        raw = dict(raw)
        selection = raw.pop('fieldSelection', raw.pop('field_selection', None))
        if raw:
            raise InvalidOptionsError(f"Unknown mutation options: {sorted(raw)}")
        return cls(field_selection=parse_selection(selection))
