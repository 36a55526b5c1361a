"""Command-line interface for gql-mockgen."""

import logging
from pathlib import Path

import click
from pydantic import ValidationError

from .core.config import MockGenConfig, validate_config
from .core.errors import MockGenError
from .core.hooks import AddHeaderHook, HookRunner
from .core.loader import load_documents, load_schema
from .core.orchestrator import MockGenerator


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def parse_http_headers(values: tuple[str, ...]) -> dict[str, str]:
    """Turn ``("Authorization: Bearer x",)`` into a header dict."""
    headers = {}
    for value in values:
        name, separator, content = value.partition(":")
        if not separator or not name.strip():
            raise click.BadParameter(f"Expected 'Name: value', got {value!r}", param_hint="--http-header")
        headers[name.strip()] = content.strip()
    return headers


def load_config(config_path: str | None, **overrides) -> MockGenConfig:
    """Read a JSON config file (if any) and apply command-line overrides."""
    config = MockGenConfig()
    if config_path:
        config = MockGenConfig.model_validate_json(Path(config_path).read_text())
    updates = {key: value for key, value in overrides.items() if value is not None}
    return config.model_copy(update=updates) if updates else config


@click.group()
@click.version_option(package_name="gql-mockgen")
def main():
    """Typed mock-data builders from GraphQL operations.

    Generate TypeScript mock builders for the queries, mutations and
    fragments in your GraphQL documents.
    """
    pass


@main.command()
@click.option(
    "--schema",
    "-s",
    required=True,
    help="Schema source: SDL file or directory, introspection .json file, or endpoint URL.",
)
@click.option(
    "--documents",
    "-d",
    required=True,
    multiple=True,
    help="Document file, directory or glob. Repeatable; prefix with '!' to exclude.",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON configuration file (scalars, naming, strictFragments, ...).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Output file for all mocks. Defaults to stdout.",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    help="Write one <document>.mock.ts per document into this directory.",
)
@click.option("--seed", type=int, help="Seed scalar generators for reproducible values.")
@click.option(
    "--strict-fragments",
    is_flag=True,
    default=None,
    help="Fail on fragment spreads that cannot be resolved instead of guessing.",
)
@click.option("--header", help="Comment header prepended to every generated file.")
@click.option(
    "--http-header",
    multiple=True,
    help="Header for schema introspection requests, as 'Name: value'. Repeatable.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def generate(
    schema: str,
    documents: tuple[str, ...],
    config: str | None,
    output: str | None,
    output_dir: str | None,
    seed: int | None,
    strict_fragments: bool | None,
    header: str | None,
    http_header: tuple[str, ...],
    verbose: bool,
):
    """Generate mock builders from GraphQL documents.

    Examples:

        gql-mockgen generate -s ./schema.graphql -d 'src/**/*.graphql' -o src/mocks.ts

        gql-mockgen generate -s http://localhost:4000/graphql -d src -c codegen.json

        gql-mockgen generate -s ./schema -d src --output-dir src/mocks
    """
    configure_logging(verbose)
    if output and output_dir:
        raise click.UsageError("Use either --output or --output-dir, not both.")

    try:
        run_config = load_config(config, seed=seed, strict_fragments=strict_fragments)

        click.echo("Loading schema...", err=True)
        graphql_schema = load_schema(schema, headers=parse_http_headers(http_header))

        click.echo("Loading documents...", err=True)
        document_files = load_documents(documents)
        if verbose:
            click.echo(f"  Documents: {len(document_files)}", err=True)
            for document_file in document_files:
                click.echo(f"    {document_file.location}", err=True)

        validate_config(graphql_schema, run_config)

        hooks = HookRunner()
        if header:
            hooks.add_post_hook(AddHeaderHook(header))

        click.echo("Generating mocks...", err=True)
        generator = MockGenerator(graphql_schema, run_config)

        if output_dir:
            outputs = generator.generate_per_document(document_files)
            output_path = Path(output_dir).resolve()
            output_path.mkdir(parents=True, exist_ok=True)
            for location, code in outputs.items():
                target = output_path / f"{Path(location).stem}.mock.ts"
                target.write_text(hooks.run_post_hooks(str(target), code))
                if verbose:
                    click.echo(f"  Wrote {target}", err=True)
            click.echo(f"Done! Generated {len(outputs)} file(s) in {output_path}", err=True)
            return

        code = generator.generate(document_files)
        if not code:
            click.echo("No operations or fragments found; nothing to generate.", err=True)
            return

        if output:
            output_path = Path(output).resolve()
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(hooks.run_post_hooks(str(output_path), code))
            click.echo(f"Done! Generated mocks in {output_path}", err=True)
        else:
            click.echo(hooks.run_post_hooks("-", code), nl=False)
    except (MockGenError, ValidationError) as exc:
        raise click.ClickException(str(exc)) from exc


@main.command()
@click.option(
    "--schema",
    "-s",
    required=True,
    help="Schema source: SDL file or directory, introspection .json file, or endpoint URL.",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON configuration file.",
)
@click.option(
    "--http-header",
    multiple=True,
    help="Header for schema introspection requests, as 'Name: value'. Repeatable.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def validate(schema: str, config: str | None, http_header: tuple[str, ...], verbose: bool):
    """Check that every custom scalar has a valid generator configured.

    Examples:

        gql-mockgen validate -s ./schema.graphql -c codegen.json
    """
    configure_logging(verbose)
    try:
        run_config = load_config(config)
        graphql_schema = load_schema(schema, headers=parse_http_headers(http_header))
        validate_config(graphql_schema, run_config)
    except (MockGenError, ValidationError) as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo("Configuration is valid.")


if __name__ == "__main__":
    main()
