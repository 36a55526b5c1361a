"""Tests for the TypeScript emitter."""

import pytest
from graphql import build_schema, parse

from gql_mockgen.core.code_builder import TypeScriptCodeBuilder, semantic_key, structural_key
from gql_mockgen.core.fragments import SelectionSetResolver
from gql_mockgen.core.ir import NamedMock, SchemaContext, SemanticTypeInfo
from gql_mockgen.core.nested_types import NestedTypeCollector
from gql_mockgen.core.type_inference import TypeInferenceService

CHAIN_SDL = """
type Zed {
  id: ID!
  x: String
  y: String
}

type Alpha {
  id: ID!
  a: String
  b: String
  zed: Zed
}

type Query {
  alpha: Alpha
}
"""


@pytest.fixture
def code_builder(schema, resolver, type_inference) -> TypeScriptCodeBuilder:
    return TypeScriptCodeBuilder(type_inference, NestedTypeCollector(schema, resolver))


def build_operation(schema, builder, code_builder, source: str, name_hint: str):
    operation = parse(source).definitions[0]
    root = schema.mutation_type if operation.operation.value == "mutation" else schema.query_type
    mocks = builder.build_for_type(root, operation.selection_set, name_hint, {})
    context = SchemaContext(root, operation.selection_set, {})
    return code_builder.build_code_artifact(operation.name.value, operation.operation.value, mocks, context)


class TestKeys:
    """Tests for structural and semantic keys."""

    def test_structural_key(self):
        assert structural_key({"__typename": "Todo", "title": "x", "id": "1"}) == "Todo:id,title"

    def test_structural_key_requires_typename(self):
        assert structural_key({"id": "1"}) is None
        assert structural_key("Todo") is None

    def test_semantic_key_matches_structural_key(self):
        info = SemanticTypeInfo(
            "object",
            object_fields={
                "__typename": SemanticTypeInfo('"Todo"'),
                "title": SemanticTypeInfo("string"),
                "id": SemanticTypeInfo("string"),
            },
        )
        assert semantic_key(info) == "Todo:id,title"


class TestBoilerplate:
    """Tests for the shared builder helper."""

    def test_contents(self):
        boilerplate = TypeScriptCodeBuilder().boilerplate()
        assert boilerplate.startswith('import { mergeWith } from "lodash";')
        assert "type DeepPartial<T>" in boilerplate
        assert "function createBuilder<T extends object>(baseObject: T)" in boilerplate
        assert "return srcValue;" in boilerplate
        assert not boilerplate.endswith("\n")


class TestLiteralTypes:
    """Tests for emitting without schema context."""

    def test_types_are_read_from_values(self):
        mock = NamedMock(
            "GetUserQuery",
            "Query",
            {
                "__typename": "Query",
                "user": {"__typename": "User", "id": "1", "age": 3, "active": True, "tags": [], "nick": None},
            },
        )
        artifact = TypeScriptCodeBuilder().build_code_artifact("GetUser", "query", [mock])

        assert artifact.operation_name == "GetUser"
        assert artifact.operation_type == "query"
        assert artifact.generated_code == (
            "type GetUserQuery = {\n"
            '  "__typename": "Query",\n'
            "  user: {\n"
            '    "__typename": "User",\n'
            '    id: "1",\n'
            "    age: number,\n"
            "    active: boolean,\n"
            "    tags: unknown[],\n"
            "    nick: null\n"
            "  }\n"
            "};\n"
            "\n"
            "export const aGetUserQuery = createBuilder<GetUserQuery>({\n"
            '  "__typename": "Query",\n'
            "  user: {\n"
            '    "__typename": "User",\n'
            '    id: "1",\n'
            "    age: 3,\n"
            "    active: true,\n"
            "    tags: [],\n"
            "    nick: null\n"
            "  }\n"
            "});"
        )

    def test_array_uses_first_element(self):
        mock = NamedMock("ListQuery", "Query", {"__typename": "Query", "scores": [1.5, 2]})
        code = TypeScriptCodeBuilder().build_code_artifact("List", "query", [mock]).generated_code
        assert "scores: Array<number>" in code
        assert "scores: [1.5, 2]" in code

    def test_no_mocks(self):
        artifact = TypeScriptCodeBuilder().build_code_artifact("Empty", "query", [])
        assert artifact.generated_code == ""


class TestLiterals:
    """Tests for value literals."""

    def test_strings_are_escaped(self):
        mock = NamedMock("QQuery", "Query", {"__typename": "Query", "text": 'say "hi"\nback\\slash'})
        code = TypeScriptCodeBuilder().build_code_artifact("Q", "query", [mock]).generated_code
        assert 'text: "say \\"hi\\"\\nback\\\\slash"' in code

    def test_non_identifier_keys_are_quoted(self):
        mock = NamedMock("QQuery", "Query", {"__typename": "Query", "my-key": 1, "plain": 2})
        code = TypeScriptCodeBuilder().build_code_artifact("Q", "query", [mock]).generated_code
        assert '"my-key": 1' in code
        assert "  plain: 2" in code

    def test_lists_of_objects_span_lines(self):
        mock = NamedMock("QQuery", "Query", {"__typename": "Q", "items": [{"__typename": "T", "id": "1"}]})
        code = TypeScriptCodeBuilder().build_code_artifact("Q", "query", [mock]).generated_code
        assert code.endswith(
            "createBuilder<QQuery>({\n"
            '  "__typename": "Q",\n'
            "  items: [\n"
            "    {\n"
            '      "__typename": "T",\n'
            '      id: "1"\n'
            "    }\n"
            "  ]\n"
            "});"
        )


class TestNaming:
    """Tests for emitted names."""

    def test_duplicate_names_get_variant_suffix(self):
        first = NamedMock("GetTodosQuery", "Query", {"__typename": "Query", "a": 1})
        second = NamedMock("GetTodosQuery", "Query", {"__typename": "Query", "b": 2})
        code = TypeScriptCodeBuilder().build_code_artifact("GetTodos", "query", [first, second]).generated_code

        assert "type GetTodosQuery = " in code
        assert "type GetTodosQueryVariant2 = " in code
        assert "export const aGetTodosQueryVariant2 = createBuilder<GetTodosQueryVariant2>(" in code

    def test_suffix_can_be_disabled(self):
        mock = NamedMock("GetTodos", "Query", {"__typename": "Query"})
        code = TypeScriptCodeBuilder(add_operation_suffix=False).build_code_artifact(
            "GetTodos", "query", [mock]
        ).generated_code
        assert code.startswith("type GetTodos = ")
        assert "export const aGetTodos = createBuilder<GetTodos>(" in code


class TestSchemaTypes:
    """Tests for schema-derived declarations."""

    def test_nested_builder_is_declared_first(self, schema, builder, code_builder):
        artifact = build_operation(
            schema, builder, code_builder, "query GetTodos { todos { id title completed } }", "GetTodosQuery"
        )
        code = artifact.generated_code

        assert code.startswith("// Todo selection shared by GetTodos\ntype GetTodosTodo = {\n")
        assert "export const aGetTodosTodo = createBuilder<GetTodosTodo>({" in code
        assert code.index("aGetTodosTodo = ") < code.index("type GetTodosQuery = ")
        assert (
            "type GetTodosQuery = {\n"
            '  "__typename": "Query",\n'
            "  todos: Array<GetTodosTodo>\n"
            "};"
        ) in code
        assert code.endswith(
            "export const aGetTodosQuery = createBuilder<GetTodosQuery>({\n"
            '  "__typename": "Query",\n'
            "  todos: [aGetTodosTodo()]\n"
            "});"
        )

    def test_nested_type_fields(self, schema, builder, code_builder):
        code = build_operation(
            schema, builder, code_builder, "query GetTodos { todos { id title completed } }", "GetTodosQuery"
        ).generated_code
        assert (
            "type GetTodosTodo = {\n"
            '  "__typename": "Todo",\n'
            "  id: string,\n"
            "  title: string,\n"
            "  completed: boolean\n"
            "};"
        ) in code

    def test_small_shapes_are_inlined(self, schema, builder, code_builder):
        code = build_operation(
            schema, builder, code_builder, "query GetTodos { todos { id title } }", "GetTodosQuery"
        ).generated_code

        assert "//" not in code
        assert "todos: Array<{\n" in code
        assert "aGetTodosTodo" not in code

    def test_dependencies_are_declared_before_dependents(self):
        chain = build_schema(CHAIN_SDL)
        resolver = SelectionSetResolver(chain)
        code_builder = TypeScriptCodeBuilder(TypeInferenceService(chain, resolver), NestedTypeCollector(chain, resolver))
        operation = parse("query Q { alpha { id a b zed { id x y } } }").definitions[0]
        mocks = [
            NamedMock(
                "QQuery",
                "Query",
                {
                    "__typename": "Query",
                    "alpha": {
                        "__typename": "Alpha",
                        "id": "a1",
                        "a": "a",
                        "b": "b",
                        "zed": {"__typename": "Zed", "id": "z1", "x": "x", "y": "y"},
                    },
                },
            )
        ]
        code = code_builder.build_code_artifact(
            "Q", "query", mocks, SchemaContext(chain.query_type, operation.selection_set, {})
        ).generated_code

        assert code.index("type QZed = ") < code.index("type QAlpha = ") < code.index("type QQuery = ")
        assert "  zed: QZed\n" in code
        assert "  zed: aQZed()\n" in code
        assert "  alpha: aQAlpha()\n" in code

    def test_union_variants_are_narrowed(self, schema, builder, code_builder):
        code = build_operation(
            schema,
            builder,
            code_builder,
            'query GetTodo { todo(id: "1") { ... on Todo { id } ... on Error { message } } }',
            "GetTodoQuery",
        ).generated_code

        assert (
            "type GetTodoQueryAsTodo = {\n"
            '  "__typename": "Query",\n'
            "  todo: {\n"
            '    "__typename": "Todo",\n'
            "    id: string\n"
            "  }\n"
            "};"
        ) in code
        assert (
            "type GetTodoQueryAsError = {\n"
            '  "__typename": "Query",\n'
            "  todo: {\n"
            '    "__typename": "Error",\n'
            "    message: string\n"
            "  }\n"
            "};"
        ) in code
        assert "export const aGetTodoQueryAsTodo = " in code
        assert "export const aGetTodoQueryAsError = " in code

    def test_fields_missing_from_value_are_dropped(self, schema, builder, code_builder):
        code = build_operation(
            schema,
            builder,
            code_builder,
            'query Q { me { id } todo(id: "1") { ... on Error { code } } }',
            "QQuery",
        ).generated_code

        base_type = code.split("type QQuery = ")[1].split("};")[0]
        assert "me:" in base_type
        assert "todo:" not in base_type
        assert "code: number" in code.split("type QQueryAsError = ")[1]

    def test_mutation(self, schema, builder, code_builder):
        code = build_operation(
            schema, builder, code_builder, 'mutation AddTodo { addTodo(title: "x") { id } }', "AddTodoMutation"
        ).generated_code
        assert "type AddTodoMutation = {\n" in code
        assert "export const aAddTodoMutation = createBuilder<AddTodoMutation>(" in code


class TestTemplates:
    """Tests for template overrides."""

    def test_template_dir_takes_precedence(self, tmp_path):
        (tmp_path / "mock.ts.j2").write_text("// {{ type_name }} -> {{ type_name | builder_name }}")
        code_builder = TypeScriptCodeBuilder(template_dir=str(tmp_path))
        mock = NamedMock("QQuery", "Query", {"__typename": "Query"})

        assert code_builder.build_code_artifact("Q", "query", [mock]).generated_code == "// QQuery -> aQQuery"
        assert "createBuilder" in code_builder.boilerplate()

    def test_missing_template_dir_uses_builtin(self, tmp_path):
        code_builder = TypeScriptCodeBuilder(template_dir=str(tmp_path / "missing"))
        mock = NamedMock("QQuery", "Query", {"__typename": "Query"})
        assert code_builder.build_code_artifact("Q", "query", [mock]).generated_code.startswith("type QQuery = ")
