"""Errors raised while compiling request documents.

Every error is raised before any text is rendered. They subclass ValueError so
callers that only care about "bad input" can keep catching ValueError.
"""


class CompileError(ValueError):
    pass


class InvalidIdentifierError(CompileError):
    def __init__(self, name, kind='identifier'):
        self.name = name
        self.kind = kind
        super().__init__(f"Invalid {kind} name: {name!r}")


class UnknownFieldError(CompileError):
    def __init__(self, table, field_name):
        self.table = table
        self.field_name = field_name
        super().__init__(f"Field '{field_name}' does not exist on table '{table}'")


class UnknownRelationError(CompileError):
    def __init__(self, table, field_name):
        self.table = table
        self.field_name = field_name
        super().__init__(
            f"Field '{field_name}' on table '{table}' is not a relation; nested selection is not allowed"
        )


class UnknownRelatedTableError(CompileError):
    def __init__(self, table, field_name, referenced_table):
        self.table = table
        self.field_name = field_name
        self.referenced_table = referenced_table
        super().__init__(
            f"Relation '{table}.{field_name}' references unknown table '{referenced_table}'"
        )


class UnsupportedFieldTypeError(CompileError):
    def __init__(self, table, field_name, wire_type):
        self.table = table
        self.field_name = field_name
        self.wire_type = wire_type
        super().__init__(
            f"No sub-selection registered for type '{wire_type}' (field '{table}.{field_name}')"
        )


class InvalidOptionsError(CompileError):
    pass


class InvalidSelectionError(CompileError):
    pass


class InvalidMetadataError(CompileError):
    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__(f"Table metadata validation failed: {self.errors}")
