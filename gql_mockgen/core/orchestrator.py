"""Document-level orchestration of the mock pipeline.

Builds the fragment registry across every document first, then produces one
artifact per operation and fragment, and joins them behind a single copy of
the builder boilerplate.

Example:
    schema = build_schema(sdl)
    documents = [parse(query_source), parse(fragment_source)]
    code = plugin(schema, documents, {"scalars": {"Date": "date"}})
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Union

from faker import Faker
from graphql import (
    DocumentNode,
    FragmentDefinitionNode,
    GraphQLSchema,
    OperationDefinitionNode,
    is_union_type,
)

from .code_builder import TypeScriptCodeBuilder
from .config import MockGenConfig, validate_config
from .fragments import SelectionSetResolver, build_fragment_registry
from .ir import DocumentFile, FragmentRegistry, GeneratedCodeArtifact, SchemaContext
from .mock_builder import MockObjectBuilder
from .naming import capitalize, qualified_operation_name
from .nested_types import NestedTypeCollector
from .scalars import ScalarMockGenerator
from .schema_utils import has_fields, root_type_for
from .type_inference import TypeInferenceService
from .unions import UnionVariantExpander

logger = logging.getLogger(__name__)

DocumentInput = Union[DocumentNode, DocumentFile, None]
ConfigInput = Union[MockGenConfig, Mapping[str, Any], None]


def as_document_files(documents: Iterable[DocumentInput]) -> list[DocumentFile]:
    """Normalize the accepted document forms to DocumentFile records."""
    files = []
    for index, document in enumerate(documents):
        if isinstance(document, DocumentFile):
            files.append(document)
        else:
            files.append(DocumentFile(location=f"<document {index}>", document=document))
    return files


class MockGenerator:
    """Wires the pipeline together for one schema and configuration.

    Every call to ``generate`` builds its fragment registry and nested-type
    state from scratch; nothing carries over between runs.
    """

    def __init__(self, schema: GraphQLSchema, config: ConfigInput = None, faker: Faker | None = None):
        """Initialize the generator.

        Args:
            schema: Schema the documents are written against
            config: Run configuration (model, mapping or None)
            faker: Optional Faker instance, mainly for tests
        """
        self.schema = schema
        self.config = MockGenConfig.coerce(config)

        self.resolver = SelectionSetResolver(schema, strict=self.config.strict_fragments)
        self.scalars = ScalarMockGenerator(self.config, faker)
        self.unions = UnionVariantExpander(schema, self.resolver)
        self.builder = MockObjectBuilder(schema, self.scalars, self.resolver, self.unions)
        self.type_inference = TypeInferenceService(schema, self.resolver)
        self.collector = NestedTypeCollector(schema, self.resolver)
        self.code_builder = TypeScriptCodeBuilder(
            self.type_inference,
            self.collector,
            template_dir=self.config.template_dir,
            add_operation_suffix=self.config.naming.add_operation_suffix,
        )

    def generate(self, documents: Iterable[DocumentInput]) -> str:
        """Generate the combined output for all documents.

        Returns:
            Boilerplate followed by every artifact, or "" if nothing was built
        """
        files = as_document_files(documents)
        registry = build_fragment_registry(file.document for file in files)
        artifacts = [
            artifact
            for file in files
            for artifact in self.build_artifacts(file.document, registry)
        ]
        return self.combine(artifacts)

    def generate_per_document(self, documents: Iterable[DocumentInput]) -> dict[str, str]:
        """Generate one output per document (near-operation-file layout).

        Fragments are still resolved across all documents. Documents that
        produce nothing are left out.
        """
        files = as_document_files(documents)
        registry = build_fragment_registry(file.document for file in files)
        outputs: dict[str, str] = {}
        for file in files:
            code = self.combine(self.build_artifacts(file.document, registry))
            if code:
                outputs[file.location] = code
        return outputs

    def build_artifacts(
        self,
        document: DocumentNode | None,
        registry: FragmentRegistry,
    ) -> list[GeneratedCodeArtifact]:
        """Artifacts for each operation and fragment of one document, in order."""
        if document is None:
            return []
        artifacts = []
        for definition in document.definitions:
            if isinstance(definition, OperationDefinitionNode):
                artifact = self._process_operation(definition, registry)
            elif isinstance(definition, FragmentDefinitionNode):
                artifact = self._process_fragment(definition, registry)
            else:
                continue
            if artifact is not None and artifact.generated_code:
                artifacts.append(artifact)
        return artifacts

    def combine(self, artifacts: list[GeneratedCodeArtifact]) -> str:
        codes = [artifact.generated_code for artifact in artifacts if artifact.generated_code]
        if not codes:
            return ""
        return "\n\n".join([self.code_builder.boilerplate(), *codes]) + "\n"

    def _process_operation(
        self,
        operation: OperationDefinitionNode,
        registry: FragmentRegistry,
    ) -> GeneratedCodeArtifact | None:
        if operation.name is None:
            logger.debug("Skipping anonymous %s operation", operation.operation.value)
            return None

        operation_type = operation.operation.value
        root_type = root_type_for(self.schema, operation_type)
        if root_type is None:
            logger.debug("Schema has no %s root type; skipping %s", operation_type, operation.name.value)
            return None

        name = operation.name.value
        name_hint = qualified_operation_name(
            capitalize(name), operation_type, self.config.naming.add_operation_suffix
        )
        mocks = self.builder.build_for_type(root_type, operation.selection_set, name_hint, registry)
        logger.debug("Built %d mock(s) for %s %s", len(mocks), operation_type, name)
        return self.code_builder.build_code_artifact(
            name,
            operation_type,
            mocks,
            SchemaContext(root_type, operation.selection_set, registry),
        )

    def _process_fragment(
        self,
        fragment: FragmentDefinitionNode,
        registry: FragmentRegistry,
    ) -> GeneratedCodeArtifact | None:
        name = fragment.name.value
        fragment_type = self.schema.get_type(fragment.type_condition.name.value)
        if fragment_type is None or not (has_fields(fragment_type) or is_union_type(fragment_type)):
            logger.debug("Skipping fragment %s: unknown or non-composite type", name)
            return None

        mocks = self.builder.build_for_type(fragment_type, fragment.selection_set, capitalize(name), registry)
        logger.debug("Built %d mock(s) for fragment %s", len(mocks), name)
        return self.code_builder.build_code_artifact(
            name,
            "fragment",
            mocks,
            SchemaContext(fragment_type, fragment.selection_set, registry),
        )


def plugin(schema: GraphQLSchema, documents: Iterable[DocumentInput], config: ConfigInput = None) -> str:
    """Codegen plugin entry point: all documents in, one string out."""
    return MockGenerator(schema, config).generate(documents)


def validate(schema: GraphQLSchema, documents: Iterable[DocumentInput], config: ConfigInput = None) -> None:
    """Codegen validate hook; documents are accepted for signature parity.

    Raises:
        ConfigurationError: If the scalar configuration is incomplete or invalid
    """
    validate_config(schema, config)
