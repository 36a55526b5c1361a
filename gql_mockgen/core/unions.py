"""Union variant expansion.

A union selection produces one named mock per inline fragment that targets a
member of the union, named ``<name hint>As<Member>``.
"""

import logging
from typing import TYPE_CHECKING

from graphql import GraphQLSchema, GraphQLUnionType, InlineFragmentNode, SelectionSetNode

from .errors import WiringError
from .fragments import SelectionSetResolver
from .ir import FragmentRegistry, NamedMock

if TYPE_CHECKING:
    from .mock_builder import MockObjectBuilder

logger = logging.getLogger(__name__)


def variant_name(name_hint: str, type_name: str) -> str:
    return f"{name_hint}As{type_name}"


class UnionVariantExpander:
    """Builds one mock per union variant by delegating to the object builder.

    The builder and the expander call into each other, so the builder is
    attached after construction with ``set_builder``.
    """

    def __init__(self, schema: GraphQLSchema, resolver: SelectionSetResolver):
        self.schema = schema
        self.resolver = resolver
        self._builder: "MockObjectBuilder | None" = None

    def set_builder(self, builder: "MockObjectBuilder") -> None:
        self._builder = builder

    def process_union_type(
        self,
        union_type: GraphQLUnionType,
        selection_set: SelectionSetNode | None,
        operation_name: str,
        fragment_registry: FragmentRegistry,
    ) -> list[NamedMock]:
        """Build the variant mocks for a union selection.

        Only inline fragments directly inside the selection count; fields
        selected on the union itself are ignored. Fragments without a type
        condition, or naming a type that is unknown or not a member, are
        skipped.

        Raises:
            WiringError: If no MockObjectBuilder has been attached
        """
        if self._builder is None:
            raise WiringError("MockObjectBuilder not set on UnionVariantExpander")

        resolved = self.resolver.resolve(selection_set, fragment_registry)
        if resolved is None:
            return []

        members = {member.name for member in union_type.types}
        mocks: list[NamedMock] = []
        for selection in resolved.selections:
            if not isinstance(selection, InlineFragmentNode):
                continue
            if selection.type_condition is None:
                logger.debug("Skipping inline fragment without type condition on %s", union_type.name)
                continue

            type_name = selection.type_condition.name.value
            target = self.schema.get_type(type_name)
            if target is None or type_name not in members:
                logger.debug("Skipping %s: not a member of union %s", type_name, union_type.name)
                continue

            mocks.extend(
                self._builder.build_for_type(
                    target,
                    selection.selection_set,
                    variant_name(operation_name, type_name),
                    fragment_registry,
                )
            )
        return mocks
