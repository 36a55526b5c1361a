"""Detection of nested object shapes that deserve their own builder.

A shape is identified by its type name plus the sorted response keys selected
on it. Shapes that occur more than once, or that select at least
COMPLEX_FIELD_THRESHOLD fields, get a dedicated builder so tests can override
them independently.
"""

from graphql import GraphQLNamedType, GraphQLSchema, SelectionSetNode, get_named_type

from .fragments import SelectionSetResolver
from .ir import FragmentRegistry, NestedTypeInfo, NestedTypeUsage
from .naming import capitalize
from .schema_utils import concrete_type_for, has_fields

COMPLEX_FIELD_THRESHOLD = 3


class NestedTypeCollector:
    """Collects builder-worthy nested shapes from a selection tree."""

    def __init__(self, schema: GraphQLSchema, resolver: SelectionSetResolver):
        self.schema = schema
        self.resolver = resolver

    def collect(
        self,
        parent_type: GraphQLNamedType,
        selection_set: SelectionSetNode | None,
        operation_name: str,
        fragment_registry: FragmentRegistry,
        usage: NestedTypeUsage | None = None,
    ) -> list[NestedTypeInfo]:
        """Return the builder-worthy shapes under ``selection_set``.

        Args:
            parent_type: Type the selection applies to
            selection_set: The selection to scan
            operation_name: Prefix for builder names (``a<Operation><Type>``)
            fragment_registry: Fragments available for spread expansion
            usage: Accumulator to continue counting into; a fresh one is
                used when omitted

        Returns:
            Builder-worthy shapes sorted by type name
        """
        usage = self.accumulate(usage or NestedTypeUsage(), parent_type, selection_set, fragment_registry)
        return self.builder_worthy(usage, operation_name)

    def accumulate(
        self,
        usage: NestedTypeUsage,
        parent_type: GraphQLNamedType,
        selection_set: SelectionSetNode | None,
        fragment_registry: FragmentRegistry,
    ) -> NestedTypeUsage:
        """Count every nested shape under ``selection_set`` into ``usage``."""
        resolved = self.resolver.resolve(selection_set, fragment_registry)
        self._walk(usage, parent_type, resolved, frozenset({parent_type.name}))
        return usage

    def _walk(
        self,
        usage: NestedTypeUsage,
        parent_type: GraphQLNamedType,
        selection_set: SelectionSetNode | None,
        visited: frozenset[str],
    ) -> None:
        if selection_set is None or not has_fields(parent_type):
            return
        concrete = concrete_type_for(self.schema, parent_type, selection_set)

        for field in self.resolver.collect_fields(selection_set, concrete, parent_type).values():
            field_def = concrete.fields.get(field.name.value) or parent_type.fields.get(field.name.value)
            if field_def is None or not field.selection_set:
                continue
            named = get_named_type(field_def.type)
            if not has_fields(named) or named.name in visited:
                continue

            nested_concrete = concrete_type_for(self.schema, named, field.selection_set)
            selected = self.resolver.collect_fields(field.selection_set, nested_concrete, named)
            field_names = tuple(sorted(key for key in selected if key != "__typename"))
            if field_names:
                usage.record(
                    NestedTypeInfo(
                        type_name=nested_concrete.name,
                        builder_name=f"a{nested_concrete.name}",
                        selection_set=field.selection_set,
                        graphql_type=named,
                        field_names=field_names,
                    )
                )
            self._walk(usage, named, field.selection_set, visited | {named.name, nested_concrete.name})

    def builder_worthy(self, usage: NestedTypeUsage, operation_name: str) -> list[NestedTypeInfo]:
        """Filter ``usage`` down to shapes worth a builder and name them.

        A second shape of an already named type gets a numeric suffix.
        """
        worthy = [
            info
            for info in usage.patterns.values()
            if info.usage_count > 1 or len(info.field_names) >= COMPLEX_FIELD_THRESHOLD
        ]
        worthy.sort(key=lambda info: info.type_name)

        prefix = capitalize(operation_name)
        seen: dict[str, int] = {}
        for info in worthy:
            seen[info.type_name] = seen.get(info.type_name, 0) + 1
            suffix = str(seen[info.type_name]) if seen[info.type_name] > 1 else ""
            info.builder_name = f"a{prefix}{info.type_name}{suffix}"
        return worthy
