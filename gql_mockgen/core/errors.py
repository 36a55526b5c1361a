"""Exceptions raised by the mock generation pipeline."""


class MockGenError(Exception):
    """Base class for all gql-mockgen errors."""


class ConfigurationError(MockGenError):
    """The run configuration is unusable; generation must not proceed."""


class ScalarConfigError(ConfigurationError):
    """A per-scalar generator entry is malformed or does not resolve."""

    def __init__(self, message: str, scalar_name: str, generator_name: str | None = None):
        self.scalar_name = scalar_name
        self.generator_name = generator_name
        super().__init__(message)


class MissingScalarsError(ConfigurationError):
    """One or more custom scalars have no configured generator."""

    def __init__(self, scalar_names: list[str]):
        self.scalar_names = scalar_names
        super().__init__(
            f"Missing scalar mock definitions for: {', '.join(scalar_names)}.\n"
            "Please add them to your config under 'scalars'."
        )


class WiringError(MockGenError):
    """A pipeline component was used before its collaborator was attached."""


class UnresolvedFragmentError(MockGenError):
    """A fragment spread could not be resolved while strict_fragments is on."""

    def __init__(self, fragment_name: str):
        self.fragment_name = fragment_name
        super().__init__(f'Unknown fragment "{fragment_name}"')


class SchemaLoadError(MockGenError):
    """A schema or document source could not be loaded."""

    def __init__(self, message: str, errors: list[dict] | None = None):
        self.message = message
        self.errors = errors or []
        super().__init__(message)
