"""Shared test fixtures for gql-mockgen tests."""

import pytest
from faker import Faker
from graphql import GraphQLSchema, build_schema

from gql_mockgen.core.config import MockGenConfig
from gql_mockgen.core.fragments import SelectionSetResolver
from gql_mockgen.core.mock_builder import MockObjectBuilder
from gql_mockgen.core.scalars import ScalarMockGenerator
from gql_mockgen.core.type_inference import TypeInferenceService
from gql_mockgen.core.unions import UnionVariantExpander

TODO_SDL = """
scalar Date

enum Priority {
  HIGH
  LOW
}

interface Node {
  id: ID!
}

type Author implements Node {
  id: ID!
  avatarUrl: String
  name: String!
  email: String!
}

type Todo implements Node {
  id: ID!
  title: String!
  completed: Boolean!
  dueDate: Date
  priority: Priority!
  tags: [String!]!
  author: Author
  owner: Author
}

type Error {
  message: String!
  code: Int!
}

union TodoResult = Todo | Error

union SearchResult = Todo | Author

type User {
  id: ID!
  name: String!
  friends: [User!]!
}

type Query {
  todos: [Todo!]!
  todo(id: ID!): TodoResult
  node(id: ID!): Node
  search(term: String!): [SearchResult!]!
  me: User
}

type Mutation {
  addTodo(title: String!): Todo!
}
"""


@pytest.fixture
def schema() -> GraphQLSchema:
    return build_schema(TODO_SDL)


@pytest.fixture
def config() -> MockGenConfig:
    return MockGenConfig(scalars={"Date": {"generator": "date", "arguments": "YYYY-MM-DD"}})


@pytest.fixture
def faker() -> Faker:
    fake = Faker()
    fake.seed_instance(1234)
    return fake


@pytest.fixture
def resolver(schema) -> SelectionSetResolver:
    return SelectionSetResolver(schema)


@pytest.fixture
def scalars(config, faker) -> ScalarMockGenerator:
    return ScalarMockGenerator(config, faker)


@pytest.fixture
def unions(schema, resolver) -> UnionVariantExpander:
    return UnionVariantExpander(schema, resolver)


@pytest.fixture
def builder(schema, scalars, resolver, unions) -> MockObjectBuilder:
    return MockObjectBuilder(schema, scalars, resolver, unions)


@pytest.fixture
def type_inference(schema, resolver) -> TypeInferenceService:
    return TypeInferenceService(schema, resolver)
