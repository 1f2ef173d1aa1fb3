def validate_tables(tables):
    """Validate that a table set is closed under its relations."""
    errors = []

    names = [t.name for t in tables]
    seen = set()
    for name in names:
        if name in seen:
            errors.append(f"Duplicate table: {name}")
        seen.add(name)

    for table in tables:
        field_names = set()
        for f in table.fields:
            if f.name in field_names:
                errors.append(f"Duplicate field '{f.name}' on table {table.name}")
            field_names.add(f.name)

        rel_names = set()
        for rel in table.relations:
            if rel.field_name in rel_names:
                errors.append(f"Duplicate relation '{rel.field_name}' on table {table.name}")
            rel_names.add(rel.field_name)
            # relations must point inside the supplied set
            if rel.referenced_table not in seen:
                errors.append(
                    f"Relation '{rel.field_name}' on table {table.name} references unknown table: {rel.referenced_table}"
                )

    return errors
