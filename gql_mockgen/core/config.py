"""Run configuration and the pre-flight validator.

The configuration mirrors the codegen plugin config, so both camelCase and
snake_case keys are accepted:

    {
        "scalars": {
            "Date": {"generator": "date", "arguments": "YYYY-MM-DD"},
            "Email": "email"
        },
        "naming": {"addOperationSuffix": true},
        "strictFragments": false
    }
"""

from collections.abc import Mapping
from typing import Any, Union

from graphql import GraphQLSchema
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr, ValidationError

from .errors import MissingScalarsError, ScalarConfigError
from .schema_utils import custom_scalar_names

ScalarArgument = Union[StrictStr, StrictInt, StrictFloat, StrictBool]


class ScalarGeneratorSpec(BaseModel):
    """Object form of a scalar entry: a generator name plus optional arguments."""

    generator: StrictStr
    arguments: ScalarArgument | list[ScalarArgument] | None = None


class NamingOptions(BaseModel):
    """Controls the type names derived from operation names."""

    model_config = ConfigDict(populate_by_name=True)

    add_operation_suffix: bool = Field(default=True, alias="addOperationSuffix")


class MockGenConfig(BaseModel):
    """Configuration for one generation run."""

    model_config = ConfigDict(populate_by_name=True)

    # Raw entries; shapes are checked by validate_config/parse_scalar_entry
    scalars: dict[str, Any] = Field(default_factory=dict)
    naming: NamingOptions = Field(default_factory=NamingOptions)
    strict_fragments: bool = Field(default=False, alias="strictFragments")
    seed: int | None = None
    locale: str | None = None
    template_dir: str | None = Field(default=None, alias="templateDir")

    @classmethod
    def coerce(cls, config: "MockGenConfig | Mapping[str, Any] | None") -> "MockGenConfig":
        """Accept a model, a plain mapping or None."""
        if config is None:
            return cls()
        if isinstance(config, cls):
            return config
        return cls.model_validate(dict(config))


def parse_scalar_entry(scalar_name: str, entry: Any) -> ScalarGeneratorSpec:
    """Normalize a raw scalar entry into a ScalarGeneratorSpec.

    Raises:
        ScalarConfigError: If the entry has an unsupported shape
    """
    if isinstance(entry, str):
        return ScalarGeneratorSpec(generator=entry)
    if isinstance(entry, ScalarGeneratorSpec):
        return entry
    if not isinstance(entry, Mapping):
        raise ScalarConfigError(
            f'Invalid configuration for scalar "{scalar_name}". '
            "Expected string or object with generator property.",
            scalar_name,
        )
    try:
        return ScalarGeneratorSpec.model_validate(dict(entry))
    except ValidationError as exc:
        failed = {error["loc"][0] for error in exc.errors() if error["loc"]}
        if "generator" in failed:
            raise ScalarConfigError(
                f'Scalar "{scalar_name}" must have a "generator" property with a string value',
                scalar_name,
            ) from exc
        raise ScalarConfigError(
            f'Arguments for scalar "{scalar_name}" must be a string, number, or array',
            scalar_name,
            entry.get("generator"),
        ) from exc


def validate_config(schema: GraphQLSchema, config: MockGenConfig | Mapping[str, Any] | None) -> None:
    """Pre-flight check run by the host before generation.

    Args:
        schema: The schema the documents are generated against
        config: Run configuration

    Raises:
        MissingScalarsError: If custom scalars lack a generator (all are listed)
        ScalarConfigError: For the first malformed or unresolvable scalar entry
    """
    # Local import: scalars imports this module for parse_scalar_entry
    from .scalars import ScalarMockGenerator

    config = MockGenConfig.coerce(config)

    missing = [name for name in custom_scalar_names(schema) if name not in config.scalars]
    if missing:
        raise MissingScalarsError(missing)

    generator = ScalarMockGenerator(config)
    for scalar_name, entry in config.scalars.items():
        spec = parse_scalar_entry(scalar_name, entry)
        if generator.resolve_generator(spec.generator) is None:
            raise ScalarConfigError(
                f'Invalid generator "{spec.generator}" for scalar "{scalar_name}"',
                scalar_name,
                spec.generator,
            )
