"""Loading schemas and documents for the command line host.

Schemas come from SDL files or directories, introspection JSON files, or a
live endpoint queried over HTTP with introspection. Documents come from
files, directories and glob patterns.
"""

import asyncio
import fnmatch
import glob
import json
import logging
import os
from collections.abc import Iterable
from typing import Any

import httpx
from graphql import (
    GraphQLError,
    GraphQLSchema,
    Source,
    build_client_schema,
    build_schema,
    get_introspection_query,
    parse,
)

from .errors import SchemaLoadError
from .ir import DocumentFile

logger = logging.getLogger(__name__)

SCHEMA_EXTENSIONS = (".graphql", ".graphqls", ".gql")
DOCUMENT_EXTENSIONS = (".graphql", ".gql")


class IntrospectionClient:
    """Fetches a schema from a GraphQL endpoint via introspection.

    Example:
        async with IntrospectionClient(url, headers={"Authorization": "Bearer t"}) as client:
            schema = await client.fetch_schema()
    """

    def __init__(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            url: GraphQL endpoint URL
            headers: Extra request headers (auth tokens and the like)
            timeout: Request timeout in seconds
            transport: Optional httpx transport, mainly for tests
        """
        self.url = url
        self.headers = headers or {}
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            headers.update(self.headers)
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "IntrospectionClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def fetch(self) -> dict[str, Any]:
        """Run the introspection query and return its ``data`` portion.

        Raises:
            SchemaLoadError: On HTTP failures or a response carrying errors
        """
        client = await self._get_client()
        payload = {"query": get_introspection_query(descriptions=True)}
        try:
            response = await client.post(self.url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise SchemaLoadError(f"Introspection request to {self.url} failed: {exc}") from exc

        result = response.json()
        if "errors" in result:
            error_messages = "; ".join(e.get("message", str(e)) for e in result["errors"])
            raise SchemaLoadError(f"Introspection returned errors: {error_messages}", result["errors"])
        return result.get("data") or {}

    async def fetch_schema(self) -> GraphQLSchema:
        return schema_from_introspection(await self.fetch())


def schema_from_introspection(introspection: dict[str, Any]) -> GraphQLSchema:
    """Build a schema from ``{"__schema": ...}`` or ``{"data": {"__schema": ...}}``."""
    data = introspection
    if "__schema" not in introspection and "__schema" in (introspection.get("data") or {}):
        data = introspection["data"]
    try:
        return build_client_schema(data)
    except (TypeError, GraphQLError) as exc:
        raise SchemaLoadError(f"Invalid introspection result: {exc}") from exc


def collect_schema_files(schema_path: str) -> list[str]:
    """Collect all SDL files from a file or directory path, sorted."""
    files = []
    if os.path.isfile(schema_path):
        if schema_path.endswith(SCHEMA_EXTENSIONS):
            files.append(schema_path)
    else:
        for root, _, filenames in os.walk(schema_path):
            for filename in filenames:
                if filename.endswith(SCHEMA_EXTENSIONS):
                    files.append(os.path.join(root, filename))
    return sorted(files)


def load_schema(
    source: str,
    headers: dict[str, str] | None = None,
    timeout: float = 30.0,
) -> GraphQLSchema:
    """Load a schema from a URL, an introspection JSON file, or SDL files.

    Raises:
        SchemaLoadError: If the source is missing, unreadable or invalid
    """
    if source.startswith(("http://", "https://")):
        logger.debug("Introspecting schema from %s", source)

        async def fetch() -> GraphQLSchema:
            async with IntrospectionClient(source, headers, timeout=timeout) as client:
                return await client.fetch_schema()

        return asyncio.run(fetch())

    if source.endswith(".json") and os.path.isfile(source):
        with open(source) as f:
            try:
                return schema_from_introspection(json.load(f))
            except json.JSONDecodeError as exc:
                raise SchemaLoadError(f"Invalid JSON in {source}: {exc}") from exc

    schema_files = collect_schema_files(source)
    if not schema_files:
        raise SchemaLoadError(f"No schema files found at {source}")

    sdl_parts = []
    for file_path in schema_files:
        logger.debug("Reading schema file %s", file_path)
        with open(file_path) as f:
            sdl_parts.append(f.read())
    try:
        return build_schema("\n".join(sdl_parts))
    except (GraphQLError, TypeError) as exc:
        raise SchemaLoadError(f"Invalid schema at {source}: {exc}") from exc


def _expand_pattern(pattern: str) -> list[str]:
    if os.path.isdir(pattern):
        found = []
        for root, _, filenames in os.walk(pattern):
            found.extend(
                os.path.join(root, filename)
                for filename in filenames
                if filename.endswith(DOCUMENT_EXTENSIONS)
            )
        return found
    if os.path.isfile(pattern):
        return [pattern]
    return [path for path in glob.glob(pattern, recursive=True) if os.path.isfile(path)]


def load_documents(patterns: Iterable[str]) -> list[DocumentFile]:
    """Parse every document matched by ``patterns``.

    Patterns may be files, directories or globs; a leading ``!`` excludes
    matches. Results are sorted by path and deduplicated.

    Raises:
        SchemaLoadError: If a document does not parse
    """
    includes: set[str] = set()
    excludes: list[str] = []
    for pattern in patterns:
        if pattern.startswith("!"):
            excludes.append(pattern[1:])
        else:
            includes.update(os.path.normpath(path) for path in _expand_pattern(pattern))

    documents = []
    for path in sorted(includes):
        if any(fnmatch.fnmatch(path, os.path.normpath(exclude)) for exclude in excludes):
            continue
        with open(path) as f:
            content = f.read()
        try:
            document = parse(Source(content, path))
        except GraphQLError as exc:
            raise SchemaLoadError(f"Error parsing {path}: {exc}") from exc
        documents.append(DocumentFile(location=path, document=document))
    logger.debug("Loaded %d document(s)", len(documents))
    return documents
