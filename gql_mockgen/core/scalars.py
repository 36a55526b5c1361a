"""Scalar mock values backed by Faker.

Built-in scalars map to canned generators. Custom scalars are configured by
naming a generator, optionally with arguments:

    config = MockGenConfig(scalars={
        "Date": {"generator": "date", "arguments": "YYYY-MM-DD"},
        "Email": "email",
        "Count": {"generator": "integer", "arguments": [1, 10]},
    })
    scalars = ScalarMockGenerator(config)
    scalars.generate("Date")   # e.g. "2019-04-12"

Generator names are Faker provider methods (``email``, ``company``, ``iso8601``
...), plus a few aliases for the names common in JS mocking configs
(``uuid``, ``integer``, ``double``, ``boolean``, ...).
"""

import re
from collections.abc import Callable
from typing import Any

from faker import Faker
from pydantic_core import PydanticSerializationError, to_jsonable_python

from .config import MockGenConfig, parse_scalar_entry
from .errors import ScalarConfigError
from .schema_utils import PRIMITIVE_SCALARS

GENERATOR_ALIASES = {
    "uuid": "uuid4",
    "integer": "random_int",
    "double": "pyfloat",
    "boolean": "pybool",
    "string": "pystr",
    "full_name": "name",
    "phone": "phone_number",
    "zip": "postcode",
    "timestamp": "unix_time",
    "array_of_words": "words",
}

# Faker proxy attributes that are not value generators
_RESERVED_ATTRIBUTES = frozenset({
    "add_provider", "del_arguments", "factories", "format", "get_arguments",
    "get_formatter", "get_providers", "items", "locales", "optional", "parse",
    "provider", "random", "seed", "seed_instance", "seed_locale",
    "set_arguments", "set_formatter", "unique", "weights",
})

_MOMENT_TOKENS = {
    "YYYY": "%Y",
    "YY": "%y",
    "MM": "%m",
    "DD": "%d",
    "HH": "%H",
    "mm": "%M",
    "ss": "%S",
}
_MOMENT_PATTERN = re.compile("|".join(_MOMENT_TOKENS))
_DATE_GENERATORS = ("date", "time")


def moment_to_strftime(pattern: str) -> str:
    """Translate a moment-style format (``YYYY-MM-DD``) to strftime."""
    if "%" in pattern:
        return pattern
    return _MOMENT_PATTERN.sub(lambda match: _MOMENT_TOKENS[match.group(0)], pattern)


class ScalarMockGenerator:
    """Produces JSON-compatible mock values for GraphQL scalars."""

    def __init__(self, config: MockGenConfig | None = None, faker: Faker | None = None):
        self.config = config or MockGenConfig()
        self.faker = faker or Faker(self.config.locale)
        if faker is None and self.config.seed is not None:
            self.faker.seed_instance(self.config.seed)
        self._primitives: dict[str, Callable[[], Any]] = {
            "ID": self.faker.uuid4,
            "String": self.faker.sentence,
            "Int": lambda: self.faker.random_int(-1000, 1000),
            "Float": lambda: self.faker.pyfloat(min_value=-1000, max_value=1000),
            "Boolean": self.faker.pybool,
        }

    def is_primitive(self, scalar_name: str) -> bool:
        return scalar_name in PRIMITIVE_SCALARS

    def resolve_generator(self, name: str) -> Callable[..., Any] | None:
        """Look up a named generator, or None if the name does not resolve."""
        attribute = GENERATOR_ALIASES.get(name, name)
        if attribute.startswith("_") or attribute in _RESERVED_ATTRIBUTES:
            return None
        generator = getattr(self.faker, attribute, None)
        return generator if callable(generator) else None

    def generate(self, scalar_name: str) -> Any:
        """Generate a value for the named scalar.

        Raises:
            ScalarConfigError: If the configured generator is malformed,
                unknown, or rejects its arguments
        """
        if self.is_primitive(scalar_name):
            return self._primitives[scalar_name]()

        entry = self.config.scalars.get(scalar_name)
        if entry is None:
            return f"{scalar_name.lower()}-mock"

        spec = parse_scalar_entry(scalar_name, entry)
        generator = self.resolve_generator(spec.generator)
        if generator is None:
            raise ScalarConfigError(
                f'Invalid generator "{spec.generator}" for scalar "{scalar_name}"',
                scalar_name,
                spec.generator,
            )

        arguments = spec.arguments
        if spec.generator in _DATE_GENERATORS and isinstance(arguments, str):
            arguments = moment_to_strftime(arguments)

        try:
            if arguments is None:
                value = generator()
            elif isinstance(arguments, list):
                value = generator(*arguments)
            else:
                value = generator(arguments)
        except (TypeError, ValueError) as exc:
            raise ScalarConfigError(
                f'Generator "{spec.generator}" for scalar "{scalar_name}" rejected its arguments: {exc}',
                scalar_name,
                spec.generator,
            ) from exc

        try:
            return to_jsonable_python(value)
        except (PydanticSerializationError, ValueError) as exc:
            raise ScalarConfigError(
                f'Generator "{spec.generator}" for scalar "{scalar_name}" produced a non-JSON value: {exc}',
                scalar_name,
                spec.generator,
            ) from exc
