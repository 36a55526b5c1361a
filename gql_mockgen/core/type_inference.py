"""Schema-driven type inference for selections.

Maps a GraphQL type plus the selection made on it to a SemanticTypeInfo,
without looking at any mock value, and renders that description as a
TypeScript type.
"""

from collections.abc import Callable
from dataclasses import replace

from graphql import (
    GraphQLNamedType,
    GraphQLOutputType,
    GraphQLSchema,
    InlineFragmentNode,
    SelectionSetNode,
    is_enum_type,
    is_list_type,
    is_non_null_type,
    is_scalar_type,
    is_union_type,
)

from .fragments import SelectionSetResolver
from .ir import FragmentRegistry, SemanticTypeInfo
from .schema_utils import concrete_type_for, has_fields
from .typescript import render_struct, string_literal

# Returns the name of a declared type to reference instead of a structure
TypeReference = Callable[[SemanticTypeInfo], str | None]

_SCALAR_TYPE_STRINGS = {
    "String": "string",
    "ID": "string",
    "Int": "number",
    "Float": "number",
    "Boolean": "boolean",
}


def scalar_type_string(scalar_name: str) -> str:
    """TypeScript type for a scalar.

    Custom scalars are approximated from their name: anything mentioning
    "json" is ``any``, everything else (dates included) is ``string``.
    """
    if scalar_name in _SCALAR_TYPE_STRINGS:
        return _SCALAR_TYPE_STRINGS[scalar_name]
    if "json" in scalar_name.lower():
        return "any"
    return "string"


class TypeInferenceService:
    """Infers SemanticTypeInfo from schema types and selections."""

    def __init__(self, schema: GraphQLSchema, resolver: SelectionSetResolver):
        self.schema = schema
        self.resolver = resolver

    def analyze(
        self,
        graphql_type: GraphQLOutputType,
        selection_set: SelectionSetNode | None = None,
        fragment_registry: FragmentRegistry | None = None,
    ) -> SemanticTypeInfo:
        """Describe the shape a selection on ``graphql_type`` produces.

        Args:
            graphql_type: Field or root type, possibly wrapped in List/NonNull
            selection_set: Selection made on the type, if any
            fragment_registry: Fragments available for spread expansion

        Returns:
            The semantic description of the selection
        """
        resolved = self.resolver.resolve(selection_set, fragment_registry or {})
        return self._analyze(graphql_type, resolved)

    def _analyze(self, graphql_type: GraphQLOutputType, selection_set: SelectionSetNode | None) -> SemanticTypeInfo:
        if is_non_null_type(graphql_type):
            return self._analyze(graphql_type.of_type, selection_set).as_non_null()
        if is_list_type(graphql_type):
            element = self._analyze(graphql_type.of_type, selection_set)
            # An unexpanded complex element mocks to a bare null, not [null]
            if element.type_string == "null":
                return element
            return replace(element, is_array=True, is_nullable=True)
        return self._analyze_named(graphql_type, selection_set)

    def _analyze_named(self, named_type: GraphQLNamedType, selection_set: SelectionSetNode | None) -> SemanticTypeInfo:
        if is_scalar_type(named_type):
            return SemanticTypeInfo(scalar_type_string(named_type.name))

        if is_enum_type(named_type):
            values = [string_literal(value) for value in named_type.values]
            return SemanticTypeInfo(" | ".join(values) if values else "string")

        if has_fields(named_type):
            if selection_set is None:
                return SemanticTypeInfo("null")
            concrete = concrete_type_for(self.schema, named_type, selection_set)
            return SemanticTypeInfo(
                "object",
                object_fields=self._object_fields(concrete, selection_set, named_type),
            )

        if is_union_type(named_type):
            if selection_set is None:
                return SemanticTypeInfo("null")
            return SemanticTypeInfo("object", union_variants=self._union_variants(named_type, selection_set))

        return SemanticTypeInfo("unknown")

    def _object_fields(
        self,
        concrete: GraphQLNamedType,
        selection_set: SelectionSetNode,
        parent: GraphQLNamedType | None = None,
    ) -> dict[str, SemanticTypeInfo]:
        fields = {"__typename": SemanticTypeInfo(string_literal(concrete.name), is_nullable=False)}
        for key, field in self.resolver.collect_fields(selection_set, concrete, parent).items():
            field_def = concrete.fields.get(field.name.value)
            if field_def is None and parent is not None:
                field_def = parent.fields.get(field.name.value)
            if field_def is None:
                continue
            fields[key] = self._analyze(field_def.type, field.selection_set)
        return fields

    def _union_variants(self, union_type, selection_set: SelectionSetNode) -> dict[str, dict[str, SemanticTypeInfo]]:
        members = {member.name: member for member in union_type.types}
        variants: dict[str, dict[str, SemanticTypeInfo]] = {}
        for selection in selection_set.selections:
            if not isinstance(selection, InlineFragmentNode) or selection.type_condition is None:
                continue
            member = members.get(selection.type_condition.name.value)
            if member is None:
                continue
            fields = self._object_fields(member, selection.selection_set)
            variants.setdefault(member.name, {}).update(fields)
        return variants

    def generate_type_string(self, info: SemanticTypeInfo, reference: TypeReference | None = None) -> str:
        """Render ``info`` as a TypeScript type.

        Args:
            info: The description to render
            reference: Optional lookup returning a declared type name to use
                in place of an object structure
        """
        return self._render(info, reference, 0)

    def _render(self, info: SemanticTypeInfo, reference: TypeReference | None, depth: int) -> str:
        body = self._render_body(info, reference, depth)
        return f"Array<{body}>" if info.is_array else body

    def _render_body(self, info: SemanticTypeInfo, reference: TypeReference | None, depth: int) -> str:
        if info.object_fields is not None:
            name = reference(info) if reference else None
            if name:
                return name
            entries = {key: self._render(field, reference, depth + 1) for key, field in info.object_fields.items()}
            return render_struct(entries, depth)
        if info.union_variants:
            variants = [
                self._render_body(SemanticTypeInfo("object", object_fields=fields), reference, depth)
                for fields in info.union_variants.values()
            ]
            return " | ".join(variants)
        if info.union_variants is not None:
            return "never"
        return info.type_string
