"""Document assembly helpers and the canonical text renderer.

Rendering is ``graphql.print_ast`` over nodes whose names were validated on the
way in, so identical ASTs always print identically and no caller string is
ever interpolated into the text.
"""
import hashlib
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Sequence

from graphql import print_ast
from graphql.language import ast as gql_ast

from compiler.fields import field_node, name_node

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledDocument:
    operation_name: str
    text: str
    variables: Dict[str, Any] = field(default_factory=dict)

    @property
    def digest(self) -> str:
        return hashlib.sha256(self.text.encode('utf-8')).hexdigest()

    def __str__(self):
        return self.text


def named_type(name: str, non_null: bool = False):
    node = gql_ast.NamedTypeNode(name=name_node(name))
    if non_null:
        return gql_ast.NonNullTypeNode(type=node)
    return node


def list_type(item, non_null: bool = False):
    node = gql_ast.ListTypeNode(type=item)
    if non_null:
        return gql_ast.NonNullTypeNode(type=node)
    return node


def variable(name: str) -> gql_ast.VariableNode:
    return gql_ast.VariableNode(name=name_node(name))


def variable_definition(name: str, type_node) -> gql_ast.VariableDefinitionNode:
    return gql_ast.VariableDefinitionNode(
        variable=variable(name),
        type=type_node,
        default_value=None,
        directives=(),
    )


def bound_argument(name: str) -> gql_ast.ArgumentNode:
    """``name: $name``"""
    return gql_ast.ArgumentNode(name=name_node(name), value=variable(name))


def operation(kind: str, name: str, root_field: str, selections: Sequence[gql_ast.FieldNode],
              variable_definitions=(), arguments=()) -> gql_ast.DocumentNode:
    op = gql_ast.OperationDefinitionNode(
        operation=gql_ast.OperationType(kind),
        name=name_node(name),
        variable_definitions=tuple(variable_definitions),
        directives=(),
        selection_set=gql_ast.SelectionSetNode(
            selections=(field_node(root_field, selections, arguments=arguments),)
        ),
    )
    return gql_ast.DocumentNode(definitions=(op,))


def render(document: gql_ast.DocumentNode, variables=None) -> CompiledDocument:
    op = document.definitions[0]
    compiled = CompiledDocument(
        operation_name=op.name.value,
        text=print_ast(document),
        variables=dict(variables or {}),
    )
    log.debug("rendered %s (%s) variables=%s", compiled.operation_name, compiled.digest[:12],
              sorted(compiled.variables))
    return compiled
