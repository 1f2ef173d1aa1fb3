import argparse
import json
import logging
import sys

from compiler.mutation_compiler import compile_create, compile_delete, compile_update
from compiler.query_compiler import compile_count, compile_find_one, compile_query
from ir.errors import InvalidMetadataError
from ir.metadata import load_tables
from ir.options import MutationOptions, QueryOptions
from ir.selection import parse_selection, selection_to_dict
from ir.validator import validate_tables
from pipeline import config

log = logging.getLogger(__name__)

OPERATIONS = ('query', 'find-one', 'count', 'create', 'update', 'delete')


def load_schema(path=None):
    path = path or config.METADATA_PATH
    with open(path, 'r') as f:
        tables = load_tables(json.load(f))
    errors = validate_tables(tables)
    if errors:
        raise InvalidMetadataError(errors)
    log.info("loaded %d tables from %s", len(tables), path)
    return tables


def find_table(tables, name):
    for table in tables:
        if table.name == name:
            return table
    raise ValueError(f"Unknown table '{name}'; known tables: {sorted(t.name for t in tables)}")


def process(operation, table_name, select=None, options=None, tables=None, metadata_path=None,
            values=None, row_id=None, patch=None):
    """Compile one document. ``select``, ``options``, ``values`` and ``patch`` are JSON-style dicts.

    ``row_id`` feeds find-one, update and delete; without it (or ``values`` for
    create) the document is a template with an empty variable bag.
    """
    if operation not in OPERATIONS:
        raise ValueError(f"Unknown operation '{operation}', expected one of {OPERATIONS}")
    if tables is None:
        tables = load_schema(metadata_path)
    table = find_table(tables, table_name)
    spec = parse_selection(select)

    if operation == 'query':
        doc = compile_query(table, tables, spec, QueryOptions.from_dict(options))
    elif operation == 'find-one':
        doc = compile_find_one(table, tables, spec, pk_value=row_id)
    elif operation == 'count':
        doc = compile_count(table, QueryOptions.from_dict(options))
    else:
        mutation_options = MutationOptions.from_dict(options)
        if spec is not None:
            mutation_options = MutationOptions(field_selection=spec)
        if operation == 'create':
            doc = compile_create(table, tables, mutation_options, values=values)
        elif operation == 'update':
            doc = compile_update(table, tables, mutation_options, row_id=row_id, patch=patch)
        else:
            doc = compile_delete(table, tables, mutation_options, row_id=row_id)

    log.info("compiled %s for %s (%s)", doc.operation_name, table.name, doc.digest[:12])
    return {
        'operation': operation,
        'table': table.name,
        'select': selection_to_dict(spec),
        'document': doc,
    }


def main(argv=None):
    parser = argparse.ArgumentParser(description="Compile GraphQL request documents from table metadata.")
    parser.add_argument('operation', choices=OPERATIONS)
    parser.add_argument('table')
    parser.add_argument('--select', type=json.loads, default=None, help='selection spec as JSON')
    parser.add_argument('--options', type=json.loads, default=None, help='query/mutation options as JSON')
    parser.add_argument('--metadata', default=None, help='path to the _meta JSON payload')
    parser.add_argument('--values', type=json.loads, default=None, help='create values as JSON')
    parser.add_argument('--id', dest='row_id', default=None, help='row id for find-one/update/delete')
    parser.add_argument('--patch', type=json.loads, default=None, help='update patch as JSON')
    args = parser.parse_args(argv)

    config.configure_logging()
    try:
        out = process(args.operation, args.table, args.select, args.options, metadata_path=args.metadata,
                      values=args.values, row_id=args.row_id, patch=args.patch)
    except (ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    doc = out['document']
    print(doc.text)
    print('\n--- Variables ---')
    print(json.dumps(doc.variables, indent=2, sort_keys=True))
    return 0


if __name__ == '__main__':
    sys.exit(main())
