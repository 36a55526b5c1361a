"""Core modules for GraphQL mock generation."""

from .code_builder import TypeScriptCodeBuilder
from .config import MockGenConfig, NamingOptions, ScalarGeneratorSpec, validate_config
from .errors import (
    ConfigurationError,
    MissingScalarsError,
    MockGenError,
    ScalarConfigError,
    SchemaLoadError,
    UnresolvedFragmentError,
    WiringError,
)
from .fragments import SelectionSetResolver, build_fragment_registry, type_name_from_fragment_name
from .hooks import AddHeaderHook, HookRunner, PostGenerateHook
from .ir import (
    DocumentFile,
    GeneratedCodeArtifact,
    NamedMock,
    NestedTypeInfo,
    NestedTypeUsage,
    SchemaContext,
    SemanticTypeInfo,
)
from .loader import IntrospectionClient, load_documents, load_schema
from .mock_builder import MockObjectBuilder
from .nested_types import NestedTypeCollector
from .orchestrator import MockGenerator, plugin, validate
from .scalars import ScalarMockGenerator
from .type_inference import TypeInferenceService
from .unions import UnionVariantExpander

__all__ = [
    # Config
    "MockGenConfig",
    "NamingOptions",
    "ScalarGeneratorSpec",
    "validate_config",
    # Errors
    "MockGenError",
    "ConfigurationError",
    "ScalarConfigError",
    "MissingScalarsError",
    "WiringError",
    "UnresolvedFragmentError",
    "SchemaLoadError",
    # IR types
    "DocumentFile",
    "GeneratedCodeArtifact",
    "NamedMock",
    "NestedTypeInfo",
    "NestedTypeUsage",
    "SchemaContext",
    "SemanticTypeInfo",
    # Pipeline
    "ScalarMockGenerator",
    "SelectionSetResolver",
    "build_fragment_registry",
    "type_name_from_fragment_name",
    "TypeInferenceService",
    "UnionVariantExpander",
    "NestedTypeCollector",
    "MockObjectBuilder",
    "TypeScriptCodeBuilder",
    # Orchestration
    "MockGenerator",
    "plugin",
    "validate",
    # Loading
    "IntrospectionClient",
    "load_documents",
    "load_schema",
    # Hooks
    "PostGenerateHook",
    "AddHeaderHook",
    "HookRunner",
]
