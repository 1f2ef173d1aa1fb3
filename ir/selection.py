"""Selection spec: which fields and relations a document should request.

Callers usually hand us loosely-typed nested dicts such as::

    {"id": True, "supplier": {"select": {"id": True, "name": True}}}

``parse_selection`` turns that into the tagged form (``Leaf`` / ``Nested``)
and rejects every other shape at the boundary.
"""
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from ir.errors import InvalidSelectionError
from ir.schema import check_identifier


@dataclass(frozen=True)
class Leaf:
    pass


LEAF = Leaf()


@dataclass(frozen=True)
class Nested:
    select: 'SelectionSpec'


Selection = Union[Leaf, Nested]
SelectionSpec = Mapping[str, Selection]


def parse_selection(raw: Optional[Mapping[str, Any]], _path: str = '') -> Optional[SelectionSpec]:
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise InvalidSelectionError(f"Selection at '{_path or '<root>'}' must be a mapping, got {type(raw).__name__}")

    spec = {}
    for key, value in raw.items():
        check_identifier(key, 'field')
        path = f"{_path}.{key}" if _path else key
        if isinstance(value, (Leaf, Nested)):
            spec[key] = value
        elif value is True:
            spec[key] = LEAF
        elif value is False:
            continue
        elif isinstance(value, Mapping) and set(value) == {'select'}:
            nested = parse_selection(value['select'], path)
            spec[key] = Nested(nested)
        else:
            raise InvalidSelectionError(
                f"Selection for '{path}' must be true, false or {{'select': {{...}}}}, got {value!r}"
            )
    return spec


def selection_to_dict(spec: Optional[SelectionSpec]):
    """Inverse of ``parse_selection``; used for logging and JSON output."""
    if spec is None:
        return None
    out = {}
    for key, value in spec.items():
        if isinstance(value, Nested):
            out[key] = {'select': selection_to_dict(value.select)}
        else:
            out[key] = True
    return out
