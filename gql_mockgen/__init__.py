"""gql-mockgen: typed mock-data builders from GraphQL operations."""

__version__ = "0.1.0"
