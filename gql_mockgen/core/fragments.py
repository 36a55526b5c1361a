"""Fragment registry and selection-set resolution.

Fragment spreads are expanded in place from a registry that spans every input
document. Spreads that cannot be found fall back to a guess based on the
fragment's name (``AuthorFragment`` -> ``Author``) and select a few of that
type's scalar fields, unless strict fragment resolution is enabled.
"""

import logging
from collections.abc import Iterable

from graphql import (
    DocumentNode,
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    GraphQLNamedType,
    GraphQLSchema,
    InlineFragmentNode,
    NameNode,
    SelectionNode,
    SelectionSetNode,
    get_named_type,
    is_scalar_type,
)

from .errors import UnresolvedFragmentError
from .ir import FragmentRegistry
from .schema_utils import applies_to, has_fields

logger = logging.getLogger(__name__)

# Naming-convention suffixes stripped to guess a fragment's type; first match wins
FRAGMENT_NAME_SUFFIXES = ("Fragment", "Fields", "Details", "Info", "Data", "Props")

# Number of scalar fields selected for an unresolved fragment
SYNTHETIC_FIELD_LIMIT = 3


def build_fragment_registry(documents: Iterable[DocumentNode | None]) -> FragmentRegistry:
    """Collect every fragment definition across all documents."""
    registry: FragmentRegistry = {}
    for document in documents:
        if document is None:
            continue
        for definition in document.definitions:
            if isinstance(definition, FragmentDefinitionNode):
                registry[definition.name.value] = definition
    return registry


def type_name_from_fragment_name(fragment_name: str) -> str | None:
    """Guess the GraphQL type a fragment applies to from its name."""
    for suffix in FRAGMENT_NAME_SUFFIXES:
        if fragment_name.endswith(suffix):
            return fragment_name[: -len(suffix)] or None
    return fragment_name


def response_key(field: FieldNode) -> str:
    """The key a field occupies in a response: its alias, else its name."""
    return field.alias.value if field.alias else field.name.value


def with_selection_set(
    selection: FieldNode | InlineFragmentNode,
    selection_set: SelectionSetNode | None,
) -> FieldNode | InlineFragmentNode:
    """Build a new node like ``selection`` with a different selection set.

    AST nodes are immutable in newer graphql-core releases, so a fresh node is
    constructed rather than assigning to a copy.
    """
    if isinstance(selection, FieldNode):
        return FieldNode(
            alias=selection.alias,
            name=selection.name,
            arguments=selection.arguments,
            directives=selection.directives,
            selection_set=selection_set,
            loc=selection.loc,
        )
    return InlineFragmentNode(
        type_condition=selection.type_condition,
        directives=selection.directives,
        selection_set=selection_set,
        loc=selection.loc,
    )


class SelectionSetResolver:
    """Expands fragment spreads into self-contained selection sets."""

    def __init__(self, schema: GraphQLSchema, strict: bool = False):
        """Initialize the resolver.

        Args:
            schema: Schema used for the unresolved-fragment fallback
            strict: Raise UnresolvedFragmentError instead of guessing fields
        """
        self.schema = schema
        self.strict = strict

    def resolve(
        self,
        selection_set: SelectionSetNode | None,
        registry: FragmentRegistry,
    ) -> SelectionSetNode | None:
        """Return a copy of ``selection_set`` with every spread expanded.

        Inline fragments are kept (with resolved contents) so union handling
        still sees them. The input nodes are never modified.
        """
        return self._resolve(selection_set, registry, frozenset())

    def _resolve(
        self,
        selection_set: SelectionSetNode | None,
        registry: FragmentRegistry,
        expanding: frozenset[str],
    ) -> SelectionSetNode | None:
        if selection_set is None:
            return None
        selections: list[SelectionNode] = []
        for selection in selection_set.selections:
            if isinstance(selection, FragmentSpreadNode):
                selections.extend(self._expand_spread(selection, registry, expanding))
            elif isinstance(selection, (FieldNode, InlineFragmentNode)):
                resolved = self._resolve(selection.selection_set, registry, expanding)
                selections.append(with_selection_set(selection, resolved))
        return SelectionSetNode(selections=tuple(selections), loc=selection_set.loc)

    def _expand_spread(
        self,
        spread: FragmentSpreadNode,
        registry: FragmentRegistry,
        expanding: frozenset[str],
    ) -> list[SelectionNode]:
        name = spread.name.value
        if name in expanding:
            logger.debug("Dropping recursive spread of fragment %s", name)
            return []

        fragment = registry.get(name)
        if fragment is None:
            if self.strict:
                raise UnresolvedFragmentError(name)
            return self._synthesize_fields(name)

        resolved = self._resolve(fragment.selection_set, registry, expanding | {name})
        return list(resolved.selections)

    def _synthesize_fields(self, fragment_name: str) -> list[SelectionNode]:
        type_name = type_name_from_fragment_name(fragment_name)
        named_type = self.schema.get_type(type_name) if type_name else None
        if named_type is None or not has_fields(named_type):
            logger.debug("Fragment %s not found and no type matches; dropping it", fragment_name)
            return []

        logger.debug("Fragment %s not found; selecting scalar fields of %s", fragment_name, type_name)
        scalar_fields = [
            field_name
            for field_name, field_def in named_type.fields.items()
            if is_scalar_type(get_named_type(field_def.type))
        ]
        return [
            FieldNode(name=NameNode(value=field_name), arguments=(), directives=())
            for field_name in scalar_fields[:SYNTHETIC_FIELD_LIMIT]
        ]

    def collect_fields(
        self,
        selection_set: SelectionSetNode | None,
        concrete: GraphQLNamedType,
        parent: GraphQLNamedType | None = None,
    ) -> dict[str, FieldNode]:
        """Flatten a resolved selection set into response key -> field.

        Inline fragments are merged when they apply to ``concrete``. A field
        selected more than once keeps its first position, with sub-selections
        combined.
        """
        fields: dict[str, FieldNode] = {}
        if selection_set is not None:
            self._collect_into(fields, selection_set, concrete, parent)
        return fields

    def _collect_into(
        self,
        fields: dict[str, FieldNode],
        selection_set: SelectionSetNode,
        concrete: GraphQLNamedType,
        parent: GraphQLNamedType | None,
    ) -> None:
        for selection in selection_set.selections:
            if isinstance(selection, FieldNode):
                key = response_key(selection)
                existing = fields.get(key)
                if existing is None:
                    fields[key] = selection
                elif existing.selection_set and selection.selection_set:
                    combined = SelectionSetNode(
                        selections=tuple(existing.selection_set.selections)
                        + tuple(selection.selection_set.selections)
                    )
                    fields[key] = with_selection_set(existing, combined)
            elif isinstance(selection, InlineFragmentNode):
                condition = selection.type_condition.name.value if selection.type_condition else None
                if selection.selection_set and applies_to(condition, concrete, parent):
                    self._collect_into(fields, selection.selection_set, concrete, parent)
