"""Intermediate Representation (IR) for mock generation.

This module defines the dataclasses that flow between the pipeline stages:
named mocks produced by the builder, semantic type descriptions produced by
type inference, nested builder candidates and the final code artifacts.
"""

from dataclasses import dataclass, field, replace
from typing import Any

from graphql import (
    DocumentNode,
    FragmentDefinitionNode,
    GraphQLNamedType,
    SelectionSetNode,
)

# A fragment name -> definition mapping, shared by every stage of a run.
FragmentRegistry = dict[str, FragmentDefinitionNode]


@dataclass
class NamedMock:
    """One concrete mock value plus the name it is emitted under."""
    name: str
    type_name: str  # GraphQL type this mock represents
    mock_value: dict[str, Any]


@dataclass
class SemanticTypeInfo:
    """Shape/typing of a selection, independent of any concrete mock value.

    ``object_fields`` is set for object/interface selections, ``union_variants``
    for union selections (variant type name -> that variant's fields).
    """
    type_string: str
    is_array: bool = False
    is_nullable: bool = True
    object_fields: dict[str, "SemanticTypeInfo"] | None = None
    union_variants: dict[str, dict[str, "SemanticTypeInfo"]] | None = None

    def as_non_null(self) -> "SemanticTypeInfo":
        return replace(self, is_nullable=False)

    @property
    def typename(self) -> str | None:
        """The concrete ``__typename`` literal of an object shape, if any."""
        if not self.object_fields or "__typename" not in self.object_fields:
            return None
        return self.object_fields["__typename"].type_string.strip('"')


@dataclass
class NestedTypeInfo:
    """A nested object shape that deserves its own builder."""
    type_name: str
    builder_name: str
    selection_set: SelectionSetNode
    graphql_type: GraphQLNamedType
    usage_count: int = 1
    # Response keys selected on the shape, sorted; used to match mock values
    field_names: tuple[str, ...] = ()

    @property
    def structural_key(self) -> str:
        return f"{self.type_name}:{','.join(self.field_names)}"


@dataclass
class NestedTypeUsage:
    """Accumulator for nested-shape usage, scoped to one collection run."""
    patterns: dict[str, NestedTypeInfo] = field(default_factory=dict)

    def record(self, info: NestedTypeInfo) -> None:
        existing = self.patterns.get(info.structural_key)
        if existing is None:
            self.patterns[info.structural_key] = info
        else:
            existing.usage_count += 1


@dataclass
class SchemaContext:
    """Schema-side information the emitter uses to derive declared types."""
    parent_type: GraphQLNamedType
    selection_set: SelectionSetNode
    fragment_registry: FragmentRegistry = field(default_factory=dict)


@dataclass
class GeneratedCodeArtifact:
    """Emitted text for one operation or fragment, variants included."""
    operation_name: str
    operation_type: str  # 'query', 'mutation', 'subscription' or 'fragment'
    generated_code: str


@dataclass
class DocumentFile:
    """A parsed GraphQL document and where it came from."""
    location: str
    document: DocumentNode | None = None

