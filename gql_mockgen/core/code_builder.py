"""TypeScript emitter for named mocks.

Renders Jinja2 templates to produce a type declaration and a builder per
named mock:

    type GetTodosQuery = { ... };

    export const aGetTodosQuery = createBuilder<GetTodosQuery>({ ... });

Nested shapes picked by the NestedTypeCollector are emitted first under
``a<Operation><Type>`` and referenced from later types and values.

Supports custom templates via the template_dir parameter. Templates in
template_dir take precedence over the built-in templates:
    - boilerplate.ts.j2: shared ``createBuilder`` helper
    - mock.ts.j2: one type declaration plus builder
"""

import json
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from .ir import GeneratedCodeArtifact, NamedMock, NestedTypeInfo, SchemaContext, SemanticTypeInfo
from .naming import builder_name, type_name_for_mock
from .nested_types import NestedTypeCollector
from .type_inference import TypeInferenceService
from .typescript import INDENT, render_struct, string_literal, ts_comment


def structural_key(value: Any) -> Optional[str]:
    """Key of a mock object: its ``__typename`` plus its other keys, sorted."""
    if not isinstance(value, dict) or "__typename" not in value:
        return None
    fields = sorted(key for key in value if key != "__typename")
    return f"{value['__typename']}:{','.join(fields)}"


def semantic_key(info: SemanticTypeInfo) -> Optional[str]:
    """Same key as ``structural_key`` for an object SemanticTypeInfo."""
    if info.typename is None:
        return None
    fields = sorted(key for key in info.object_fields if key != "__typename")
    return f"{info.typename}:{','.join(fields)}"


class _NestedReferences:
    """Lookup of declared nested builders by structural key."""

    def __init__(self, declared: list[NestedTypeInfo]):
        self._by_key = {info.structural_key: info for info in declared}

    def for_value(self, value: Any) -> Optional[NestedTypeInfo]:
        key = structural_key(value)
        return self._by_key.get(key) if key else None

    def type_name(self, info: SemanticTypeInfo) -> Optional[str]:
        key = semantic_key(info)
        nested = self._by_key.get(key) if key else None
        return nested.builder_name[1:] if nested else None


class TypeScriptCodeBuilder:
    """Turns named mocks into TypeScript declarations and builders.

    Example:
        builder = TypeScriptCodeBuilder(type_inference, collector)
        artifact = builder.build_code_artifact("GetTodos", "query", mocks, context)
        print(builder.boilerplate() + "\\n\\n" + artifact.generated_code)
    """

    def __init__(
        self,
        type_inference: Optional[TypeInferenceService] = None,
        collector: Optional[NestedTypeCollector] = None,
        template_dir: Optional[str] = None,
        add_operation_suffix: bool = True,
    ):
        """Initialize the code builder.

        Args:
            type_inference: Used for schema-derived type declarations
            collector: Used to find nested shapes worth their own builder
            template_dir: Optional directory with custom Jinja2 templates
            add_operation_suffix: Append Query/Mutation/Subscription to names
        """
        self.type_inference = type_inference
        self.collector = collector
        self.add_operation_suffix = add_operation_suffix

        loaders = []
        if template_dir:
            template_path = Path(template_dir)
            if template_path.is_dir():
                loaders.append(FileSystemLoader(str(template_path)))
        loaders.append(PackageLoader("gql_mockgen", "templates"))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(),
        )
        self.env.filters["builder_name"] = builder_name
        self.env.filters["ts_comment"] = ts_comment

    def boilerplate(self) -> str:
        """The shared ``createBuilder`` helper, emitted once per output."""
        return self.env.get_template("boilerplate.ts.j2").render().rstrip("\n")

    def build_code_artifact(
        self,
        operation_name: str,
        operation_type: str,
        named_mocks: list[NamedMock],
        schema_context: Optional[SchemaContext] = None,
    ) -> GeneratedCodeArtifact:
        """Emit declarations and builders for one operation or fragment.

        Args:
            operation_name: Name of the operation or fragment
            operation_type: 'query', 'mutation', 'subscription' or 'fragment'
            named_mocks: Mocks produced for the definition
            schema_context: When given, types are derived from the schema
                and nested builders are extracted; otherwise types are
                inferred from the literal values

        Returns:
            The artifact; its code is empty when there are no mocks
        """
        blocks: list[str] = []
        used_names: set[str] = set()

        declared: list[NestedTypeInfo] = []
        if schema_context is not None and named_mocks:
            for info, value in self._nested_types(operation_name, named_mocks, schema_context):
                references = _NestedReferences(declared)
                type_body = self._declared_type(
                    self.type_inference.analyze(info.graphql_type, info.selection_set, schema_context.fragment_registry),
                    value,
                    references,
                )
                type_name = info.builder_name[1:]
                used_names.add(type_name)
                blocks.append(
                    self._render_mock(
                        type_name,
                        type_body,
                        self._literal(value, references, 0),
                        comment=f"{info.type_name} selection shared by {operation_name}",
                    )
                )
                declared.append(info)

        references = _NestedReferences(declared)
        root_info = None
        if schema_context is not None and self.type_inference is not None:
            root_info = self.type_inference.analyze(
                schema_context.parent_type,
                schema_context.selection_set,
                schema_context.fragment_registry,
            )

        for mock in named_mocks:
            type_name = self._unique_name(
                type_name_for_mock(mock.name, operation_name, operation_type, self.add_operation_suffix),
                used_names,
            )
            if root_info is not None:
                type_body = self._declared_type(root_info, mock.mock_value, references)
            else:
                type_body = self._literal_type(mock.mock_value, 0)
            blocks.append(self._render_mock(type_name, type_body, self._literal(mock.mock_value, references, 0)))

        return GeneratedCodeArtifact(
            operation_name=operation_name,
            operation_type=operation_type,
            generated_code="\n\n".join(blocks),
        )

    def _render_mock(self, type_name: str, type_body: str, literal: str, comment: str = "") -> str:
        template = self.env.get_template("mock.ts.j2")
        return template.render(type_name=type_name, type_body=type_body, literal=literal, comment=comment)

    @staticmethod
    def _unique_name(name: str, used: set[str]) -> str:
        """Suffix repeated names with Variant2, Variant3, ..."""
        candidate = name
        index = 2
        while candidate in used:
            candidate = f"{name}Variant{index}"
            index += 1
        used.add(candidate)
        return candidate

    # -- nested builders ---------------------------------------------------

    def _nested_types(
        self,
        operation_name: str,
        named_mocks: list[NamedMock],
        schema_context: SchemaContext,
    ) -> list[tuple[NestedTypeInfo, Any]]:
        """Builder-worthy nested shapes with a sample value, dependencies first."""
        if self.collector is None or self.type_inference is None:
            return []
        collected = self.collector.collect(
            schema_context.parent_type,
            schema_context.selection_set,
            operation_name,
            schema_context.fragment_registry,
        )

        values: dict[str, Any] = {}
        for info in collected:
            value = self._find_value(info.structural_key, [mock.mock_value for mock in named_mocks])
            if value is not None:
                values[info.structural_key] = value
        found = [info for info in collected if info.structural_key in values]
        by_key = {info.structural_key: info for info in found}

        ordered: list[NestedTypeInfo] = []
        placed: set[str] = set()

        def place(info: NestedTypeInfo, path: frozenset[str]) -> None:
            key = info.structural_key
            if key in placed or key in path:
                return
            dependencies = {
                structural_key(child) for child in self._child_objects(values[key])
            } & by_key.keys()
            for dependency in sorted(dependencies - {key}):
                place(by_key[dependency], path | {key})
            placed.add(key)
            ordered.append(info)

        for info in found:
            place(info, frozenset())
        return [(info, values[info.structural_key]) for info in ordered]

    def _find_value(self, key: str, values: list[Any]) -> Any:
        """First object (depth first) whose structural key is ``key``."""
        for value in values:
            if structural_key(value) == key:
                return value
            children = value.values() if isinstance(value, dict) else value if isinstance(value, list) else []
            found = self._find_value(key, list(children))
            if found is not None:
                return found
        return None

    def _child_objects(self, value: Any) -> list[dict]:
        """Every object nested anywhere below ``value`` (not ``value`` itself)."""
        children = value.values() if isinstance(value, dict) else value if isinstance(value, list) else []
        objects: list[dict] = []
        for child in children:
            if isinstance(child, dict):
                objects.append(child)
            objects.extend(self._child_objects(child))
        return objects

    # -- types ---------------------------------------------------------------

    def _declared_type(self, info: SemanticTypeInfo, value: Any, references: _NestedReferences) -> str:
        narrowed = self._narrow(info, value)
        return self.type_inference.generate_type_string(narrowed, references.type_name)

    def _narrow(self, info: SemanticTypeInfo, value: Any) -> SemanticTypeInfo:
        """Fit ``info`` to a concrete value.

        Union types collapse to the variant named by the value's
        ``__typename``, and fields the value does not carry are dropped.
        """
        if info.is_array:
            element = value[0] if isinstance(value, list) and value else None
            return replace(self._narrow(replace(info, is_array=False), element), is_array=True)

        if info.union_variants is not None and isinstance(value, dict):
            variant = info.union_variants.get(value.get("__typename"))
            if variant is None:
                return info
            info = SemanticTypeInfo("object", is_nullable=info.is_nullable, object_fields=variant)

        if info.object_fields is not None and isinstance(value, dict):
            fields = {
                key: self._narrow(field, value[key])
                for key, field in info.object_fields.items()
                if key == "__typename" or key in value
            }
            return replace(info, object_fields=fields, union_variants=None)
        return info

    def _literal_type(self, value: Any, depth: int) -> str:
        """Best-effort type read straight off a mock value."""
        if isinstance(value, dict):
            entries = {key: self._literal_type(item, depth + 1) for key, item in value.items()}
            return render_struct(entries, depth)
        if isinstance(value, list):
            if not value:
                return "unknown[]"
            return f"Array<{self._literal_type(value[0], depth)}>"
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "boolean"
        if isinstance(value, (int, float)):
            return "number"
        if isinstance(value, str):
            return string_literal(value)
        return "unknown"

    # -- values --------------------------------------------------------------

    def _literal(self, value: Any, references: _NestedReferences, depth: int) -> str:
        if isinstance(value, dict):
            nested = references.for_value(value)
            if nested is not None:
                return f"{nested.builder_name}()"
            entries = {key: self._literal(item, references, depth + 1) for key, item in value.items()}
            return render_struct(entries, depth)
        if isinstance(value, list):
            items = [self._literal(item, references, depth + 1) for item in value]
            if not any("\n" in item for item in items):
                return f"[{', '.join(items)}]"
            inner = INDENT * (depth + 1)
            return "[\n" + ",\n".join(inner + item for item in items) + "\n" + INDENT * depth + "]"
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return json.dumps(value)
        return string_literal(str(value))
