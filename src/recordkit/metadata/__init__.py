"""Declarative model definitions loaded from YAML."""

from recordkit.metadata.loader import (
    AttributeConfig,
    CallbackConfig,
    MetadataLoader,
    ModelDefinition,
    ValidationConfig,
    load_definition,
    load_schema,
)
from recordkit.metadata.validator import (
    DefinitionIssue,
    validate_definition_file,
    validate_definitions_dir,
)

__all__ = [
    "AttributeConfig",
    "CallbackConfig",
    "DefinitionIssue",
    "MetadataLoader",
    "ModelDefinition",
    "ValidationConfig",
    "load_definition",
    "load_schema",
    "validate_definition_file",
    "validate_definitions_dir",
]
