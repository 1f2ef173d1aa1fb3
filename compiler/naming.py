"""Wire-level names derived from a table name.

These reproduce the backend's inflection rules; a mismatch is only visible as a
"type not found" error from the server, so keep them byte-for-byte.
"""
import re

import inflection


def _name(table):
    return getattr(table, 'name', table)


def plural_name(table) -> str:
    """``ActionGoal`` -> ``actionGoals``, ``Person`` -> ``people``."""
    return inflection.pluralize(inflection.camelize(_name(table), False))


def singular_name(table) -> str:
    return inflection.camelize(_name(table), False)


def type_name(table) -> str:
    return inflection.camelize(_name(table))


def order_by_type_name(table) -> str:
    plural = plural_name(table)
    return f"{plural[0].upper()}{plural[1:]}OrderBy"


def filter_type_name(table) -> str:
    return f"{type_name(table)}Filter"


def create_input_type_name(table) -> str:
    return f"Create{type_name(table)}Input"


def update_input_type_name(table) -> str:
    return f"Update{type_name(table)}Input"


def delete_input_type_name(table) -> str:
    return f"Delete{type_name(table)}Input"


def patch_type_name(table) -> str:
    return f"{type_name(table)}Patch"


def mutation_field_name(action, table) -> str:
    return f"{action}{type_name(table)}"


def order_by_value(field_name, direction='asc') -> str:
    """``createdAt`` desc -> ``CREATED_AT_DESC``."""
    snake = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', field_name)
    return f"{snake.upper()}_{direction.upper()}"
