"""Builds concrete mock objects for operations and fragments.

Example:
    builder = MockObjectBuilder(schema, scalars, resolver, unions)
    mocks = builder.build_for_type(schema.query_type, operation.selection_set,
                                   "GetTodosQuery", registry)
    mocks[0].mock_value
    # {"__typename": "Query", "todos": [{"__typename": "Todo", "id": "...", ...}]}

Lists are mocked as single-element arrays. A union field reached from an
object forks the result: each variant becomes its own named mock holding the
fields built so far plus that variant.
"""

from typing import Any

from graphql import (
    GraphQLNamedType,
    GraphQLSchema,
    SelectionSetNode,
    get_named_type,
    get_nullable_type,
    is_enum_type,
    is_list_type,
    is_scalar_type,
    is_union_type,
)

from .fragments import SelectionSetResolver
from .ir import FragmentRegistry, NamedMock
from .scalars import ScalarMockGenerator
from .schema_utils import concrete_type_for, has_fields
from .unions import UnionVariantExpander


class MockObjectBuilder:
    """Walks a selection set top-down and assembles mock values."""

    def __init__(
        self,
        schema: GraphQLSchema,
        scalars: ScalarMockGenerator,
        resolver: SelectionSetResolver,
        unions: UnionVariantExpander,
    ):
        self.schema = schema
        self.scalars = scalars
        self.resolver = resolver
        self.unions = unions
        unions.set_builder(self)

    def build_for_type(
        self,
        graphql_type: GraphQLNamedType,
        selection_set: SelectionSetNode | None,
        name_hint: str,
        fragment_registry: FragmentRegistry,
    ) -> list[NamedMock]:
        """Build the named mocks for a selection on ``graphql_type``.

        Args:
            graphql_type: Named type the selection applies to
            selection_set: The selection
            name_hint: Name for the base mock; variants append ``As<Type>``
            fragment_registry: Fragments available for spread expansion

        Returns:
            The base mock (unless it holds nothing but ``__typename``)
            followed by one mock per union variant reached through a field
        """
        if is_union_type(graphql_type):
            return self.unions.process_union_type(graphql_type, selection_set, name_hint, fragment_registry)

        resolved = self.resolver.resolve(selection_set, fragment_registry)
        concrete = concrete_type_for(self.schema, graphql_type, resolved)
        result: dict[str, Any] = {"__typename": concrete.name}
        forks: list[NamedMock] = []

        for key, field in self.resolver.collect_fields(resolved, concrete, graphql_type).items():
            field_def = self._field_definition(concrete, graphql_type, field.name.value)
            if field_def is None:
                continue

            field_type = field_def.type
            named = get_named_type(field_type)
            is_list = is_list_type(get_nullable_type(field_type))

            if is_union_type(named) and field.selection_set is not None:
                variants = self.unions.process_union_type(named, field.selection_set, name_hint, fragment_registry)
                for variant in variants:
                    value = [variant.mock_value] if is_list else variant.mock_value
                    forks.append(NamedMock(variant.name, concrete.name, {**result, key: value}))
                continue

            result[key] = self._field_value(named, is_list, field.selection_set, name_hint, fragment_registry)

        if len(result) == 1:
            return forks
        return [NamedMock(name_hint, concrete.name, result), *forks]

    def _field_definition(self, concrete: GraphQLNamedType, declared: GraphQLNamedType, field_name: str):
        field_def = concrete.fields.get(field_name)
        if field_def is None and declared is not concrete:
            field_def = declared.fields.get(field_name)
        return field_def

    def _field_value(
        self,
        named: GraphQLNamedType,
        is_list: bool,
        selection_set: SelectionSetNode | None,
        name_hint: str,
        fragment_registry: FragmentRegistry,
    ) -> Any:
        if is_scalar_type(named):
            value = self.scalars.generate(named.name)
        elif is_enum_type(named):
            value = next(iter(named.values), None)
        elif has_fields(named) and selection_set is not None:
            nested = self.build_for_type(named, selection_set, name_hint, fragment_registry)
            if nested:
                value = nested[0].mock_value
            else:
                value = {"__typename": concrete_type_for(self.schema, named, selection_set).name}
        else:
            # Complex field selected without a sub-selection
            return None
        return [value] if is_list else value
