"""Tests for the schema helpers."""

from graphql import parse

from gql_mockgen.core.schema_utils import concrete_type_for, custom_scalar_names, inline_fragment_conditions


def node_selection(source: str):
    return parse(source).definitions[0].selection_set.selections[0].selection_set


class TestConcreteTypeFor:
    """Tests for concrete_type_for."""

    def test_object_type_is_its_own_concrete_type(self, schema):
        todo = schema.get_type("Todo")
        assert concrete_type_for(schema, todo) is todo

    def test_interface_defaults_to_first_implementation(self, schema):
        node = schema.get_type("Node")
        assert concrete_type_for(schema, node) is schema.get_possible_types(node)[0]

    def test_interface_prefers_inline_fragment_condition(self, schema):
        selection = node_selection('query Q { node(id: "1") { id ... on Todo { title } } }')
        assert concrete_type_for(schema, schema.get_type("Node"), selection).name == "Todo"

    def test_first_named_implementation_wins(self, schema):
        selection = node_selection('query Q { node(id: "1") { ... on Todo { title } ... on Author { name } } }')
        assert concrete_type_for(schema, schema.get_type("Node"), selection).name == "Todo"

    def test_unrelated_condition_is_ignored(self, schema):
        node = schema.get_type("Node")
        selection = node_selection('query Q { node(id: "1") { id ... on Error { code } } }')
        assert concrete_type_for(schema, node, selection) is schema.get_possible_types(node)[0]


class TestInlineFragmentConditions:
    """Tests for inline_fragment_conditions."""

    def test_nested_inline_fragments(self):
        selection = node_selection('query Q { node(id: "1") { ... { ... on Todo { id } } ... on Author { id } } }')
        assert list(inline_fragment_conditions(selection)) == ["Todo", "Author"]

    def test_none(self):
        assert list(inline_fragment_conditions(None)) == []


class TestCustomScalarNames:
    """Tests for custom_scalar_names."""

    def test_lists_declared_scalars(self, schema):
        assert custom_scalar_names(schema) == ["Date"]
