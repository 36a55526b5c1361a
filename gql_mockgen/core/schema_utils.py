"""Small helpers over graphql-core schema objects."""

from collections.abc import Iterator

from graphql import (
    GraphQLNamedType,
    GraphQLObjectType,
    GraphQLSchema,
    InlineFragmentNode,
    SelectionSetNode,
    is_interface_type,
    is_object_type,
    is_scalar_type,
)

# Built-in scalars with canned generators; everything else needs config.
PRIMITIVE_SCALARS = ("ID", "String", "Int", "Float", "Boolean")


def root_type_for(schema: GraphQLSchema, operation: str) -> GraphQLObjectType | None:
    """Return the root type for 'query', 'mutation' or 'subscription'."""
    if operation == "query":
        return schema.query_type
    if operation == "mutation":
        return schema.mutation_type
    if operation == "subscription":
        return schema.subscription_type
    return None


def concrete_type_for(
    schema: GraphQLSchema,
    named_type: GraphQLNamedType,
    selection_set: SelectionSetNode | None = None,
) -> GraphQLNamedType:
    """Pick the concrete object type a mock of ``named_type`` represents.

    Object types are their own concrete type. An interface resolves to the
    first implementation named by an inline fragment in ``selection_set``,
    else to its first implementation in schema order, or to itself if it has
    none.
    """
    if is_interface_type(named_type):
        implementations = schema.get_possible_types(named_type)
        if implementations:
            by_name = {implementation.name: implementation for implementation in implementations}
            for condition in inline_fragment_conditions(selection_set):
                if condition in by_name:
                    return by_name[condition]
            return implementations[0]
    return named_type


def inline_fragment_conditions(selection_set: SelectionSetNode | None) -> Iterator[str]:
    """Type conditions of inline fragments in ``selection_set``, in document order."""
    if selection_set is None:
        return
    for selection in selection_set.selections:
        if isinstance(selection, InlineFragmentNode):
            if selection.type_condition is not None:
                yield selection.type_condition.name.value
            yield from inline_fragment_conditions(selection.selection_set)


def has_fields(named_type: GraphQLNamedType) -> bool:
    return is_object_type(named_type) or is_interface_type(named_type)


def custom_scalar_names(schema: GraphQLSchema) -> list[str]:
    """Names of the non built-in scalars declared by the schema, in schema order."""
    return [
        name
        for name, named_type in schema.type_map.items()
        if is_scalar_type(named_type)
        and name not in PRIMITIVE_SCALARS
        and not name.startswith("__")
    ]


def applies_to(
    condition: str | None,
    concrete: GraphQLNamedType,
    parent: GraphQLNamedType | None = None,
) -> bool:
    """Whether an inline fragment with type ``condition`` applies to ``concrete``."""
    if condition is None or condition == concrete.name:
        return True
    if parent is not None and condition == parent.name:
        return True
    if is_object_type(concrete):
        return any(interface.name == condition for interface in concrete.interfaces)
    return False
