"""Filter a caller's value bag before it becomes a mutation's ``$input``.

Rules, per key:

* missing (``MISSING``) values are always dropped;
* ``None`` means "clear this field" only when the field is dirty. For create
  it additionally requires dirty tracking to be on;
* ``""`` follows the same rule as ``None``;
* lists are kept, including empty ones;
* dicts are filtered recursively and dropped if nothing is left;
* without dirty tracking, primitives equal to their ``default_values`` entry
  are dropped.

Dirty paths use dots (``settings.theme``); a dirty parent makes its children
dirty.
"""
from typing import Any, Iterable, Mapping, Optional, Set

OPERATIONS = ('create', 'update', 'patch')


class _Missing:
    def __repr__(self):
        return 'MISSING'


MISSING = _Missing()


def _ancestor_dirty(dirty: Set[str], path: str) -> bool:
    if path in dirty:
        return True
    parts = path.split('.')
    return any('.'.join(parts[:i]) in dirty for i in range(1, len(parts)))


def _has_dirty_children(dirty: Set[str], prefix: str) -> bool:
    return any(p == prefix or p.startswith(prefix + '.') for p in dirty)


def _nested_get(values: Mapping[str, Any], path: str):
    current: Any = values
    for part in path.split('.'):
        if not isinstance(current, Mapping):
            return MISSING
        current = current.get(part, MISSING)
    return current


def prepare_mutation_input(
    values: Mapping[str, Any],
    operation: str,
    dirty_fields: Optional[Iterable[str]] = None,
    default_values: Optional[Mapping[str, Any]] = None,
    always_include: Iterable[str] = (),
    exclude: Iterable[str] = (),
    _prefix: str = '',
):
    if operation not in OPERATIONS:
        raise ValueError(f"unknown operation '{operation}', expected one of {OPERATIONS}")
    dirty = set(dirty_fields) if dirty_fields is not None else None
    always_include = set(always_include)
    exclude = set(exclude)
    tracking = dirty is not None

    result = {}
    for key, value in values.items():
        path = f"{_prefix}.{key}" if _prefix else key
        is_dirty = _ancestor_dirty(dirty, path) if tracking else True

        if key in exclude or path in exclude:
            continue
        if key in always_include or path in always_include:
            result[key] = value
            continue
        if value is MISSING:
            continue

        if value is None or value == '':
            if operation == 'create':
                keep = tracking and is_dirty
            else:
                keep = is_dirty
            if keep:
                result[key] = value
            continue

        if isinstance(value, (list, tuple)):
            if tracking and not is_dirty and not _has_dirty_children(dirty, path):
                continue
            result[key] = value
            continue

        if isinstance(value, Mapping):
            if tracking and not is_dirty and not _has_dirty_children(dirty, path):
                continue
            nested = prepare_mutation_input(
                value, operation, dirty, default_values, always_include, exclude, _prefix=path,
            )
            if nested:
                result[key] = nested
            continue

        if tracking and not is_dirty:
            continue
        if not tracking and default_values is not None and value == _nested_get(default_values, path):
            continue
        result[key] = value
    return result


def prepare_create_input(values, **options):
    return prepare_mutation_input(values, 'create', **options)


def prepare_update_input(values, **options):
    return prepare_mutation_input(values, 'update', **options)


def prepare_patch_input(values, dirty_fields, **options):
    return prepare_mutation_input(values, 'patch', dirty_fields=dirty_fields, **options)
