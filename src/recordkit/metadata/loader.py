"""Load model definitions from YAML files.

Example definition (models/person.yaml):

    model: Person
    primaryKey: id
    attributes:
      - id
      - name: name
        label: Full name
      - name: age
        default: 0
    aliases:
      full_name: name
    validations:
      - type: presence
        attributes: [name]
      - type: numericality
        attributes: age
        greaterThanOrEqualTo: 0
        on: create
    callbacks:
      - kind: before
        action: create
        hook: rejectBannedNames
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from recordkit.callbacks import CallbackKind, HookRegistry
from recordkit.exceptions import ModelDefinitionError, RecordKitError
from recordkit.metadata.validator import preprocess_on_key, validate_definition
from recordkit.naming import underscore
from recordkit.schema import DEFAULT_CALLBACK_ACTIONS, ModelSchema
from recordkit.validation import ValidatorRegistry, register_builtin_validators

logger = logging.getLogger(__name__)

# YAML keys that are Python keywords map to the validators' trailing-underscore params.
_PARAM_ALIASES = {"in": "in_", "with": "with_", "is": "is_"}

# Keys of a validation entry that are not validator parameters.
_VALIDATION_KEYS = {"type", "attributes", "if", "unless", "on"}


@dataclass
class AttributeConfig:
    """Attribute definition from YAML metadata."""

    name: str
    default: Any = None
    label: str | None = None


@dataclass
class ValidationConfig:
    """Validation definition from YAML metadata."""

    type: str
    attributes: list[str] = field(default_factory=list)
    params: dict[str, Any] = field(default_factory=dict)
    if_: list[str] = field(default_factory=list)
    unless: list[str] = field(default_factory=list)
    on: list[str] = field(default_factory=list)


@dataclass
class CallbackConfig:
    """Callback definition from YAML metadata."""

    kind: str
    action: str
    hook: str
    if_: list[str] = field(default_factory=list)
    unless: list[str] = field(default_factory=list)


@dataclass
class ModelDefinition:
    name: str
    attributes: list[AttributeConfig]
    primary_key: str = "id"
    aliases: dict[str, str] = field(default_factory=dict)
    callback_actions: list[str] = field(default_factory=lambda: list(DEFAULT_CALLBACK_ACTIONS))
    validations: list[ValidationConfig] = field(default_factory=list)
    callbacks: list[CallbackConfig] = field(default_factory=list)
    source: Path | None = None

    def build_schema(self) -> ModelSchema:
        """Resolve validators and hooks and build the ModelSchema.

        Raises:
            ModelDefinitionError: If a validator or hook is unknown or misconfigured
        """
        labels = {a.name: a.label for a in self.attributes if a.label}
        schema = ModelSchema(
            self.name,
            primary_key=self.primary_key,
            labels=labels,
            callback_actions=self.callback_actions,
        )
        try:
            for attr in self.attributes:
                schema.attribute(attr.name, attr.default)
            for new_name, old_name in self.aliases.items():
                schema.alias_attribute(new_name, old_name)
            for validation in self.validations:
                self._add_validation(schema, validation)
            for callback in self.callbacks:
                self._add_callback(schema, callback)
        except (RecordKitError, ValueError) as e:
            raise ModelDefinitionError(f"{self._where()}: {e}") from e
        return schema

    def _add_validation(self, schema: ModelSchema, config: ValidationConfig) -> None:
        params = dict(config.params)
        if config.attributes:
            params["attributes"] = config.attributes
        validator = ValidatorRegistry.create(config.type, **params)
        schema.add_validator(
            validator,
            if_=config.if_ or None,
            unless=config.unless or None,
            on=config.on or None,
        )

    def _add_callback(self, schema: ModelSchema, config: CallbackConfig) -> None:
        handler = HookRegistry.get(config.hook)
        schema.callbacks.add(
            CallbackKind(config.kind),
            config.action,
            handler,
            if_=config.if_ or None,
            unless=config.unless or None,
        )

    def _where(self) -> str:
        return str(self.source) if self.source else f"model '{self.name}'"


class MetadataLoader:
    """Loads model definitions from a directory of YAML files."""

    def __init__(self, metadata_path: Path):
        self.metadata_path = metadata_path
        self.definitions: dict[str, ModelDefinition] = {}
        self.schemas: dict[str, ModelSchema] = {}

    def load_all(self) -> dict[str, ModelSchema]:
        """Load, validate and build every definition in the directory."""
        register_builtin_validators()
        paths = sorted(
            [*self.metadata_path.glob("*.yaml"), *self.metadata_path.glob("*.yml")]
        )
        for yaml_file in paths:
            definition = load_definition(yaml_file)
            if definition.name in self.definitions:
                raise ModelDefinitionError(
                    f"Duplicate model '{definition.name}' in {yaml_file} and "
                    f"{self.definitions[definition.name].source}"
                )
            self.definitions[definition.name] = definition

        for name, definition in self.definitions.items():
            self.schemas[name] = definition.build_schema()
        logger.debug("Loaded %d model definition(s) from %s", len(self.schemas), self.metadata_path)
        return dict(self.schemas)


def load_definition(path: Path) -> ModelDefinition:
    """Parse and validate one definition file.

    Raises:
        ModelDefinitionError: If the file is not valid YAML or violates the
            definition schema
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ModelDefinitionError(f"{path}: YAML parse error: {e}") from e

    if not isinstance(data, dict):
        raise ModelDefinitionError(f"{path}: expected a mapping with a 'model' key")

    data = preprocess_on_key(data)
    issues = validate_definition(data, path)
    if issues:
        raise ModelDefinitionError("; ".join(str(issue) for issue in issues))

    return _resolve_definition(data, path)


def load_schema(path: Path) -> ModelSchema:
    """Load one definition file and build its ModelSchema."""
    register_builtin_validators()
    return load_definition(path).build_schema()


def _resolve_definition(data: dict[str, Any], source: Path) -> ModelDefinition:
    attributes = [_resolve_attribute(a) for a in data.get("attributes", [])]

    definition = ModelDefinition(
        name=data["model"],
        attributes=attributes,
        primary_key=data.get("primaryKey", "id"),
        aliases=dict(data.get("aliases", {})),
        validations=[_resolve_validation(v) for v in data.get("validations", [])],
        callbacks=[_resolve_callback(c) for c in data.get("callbacks", [])],
        source=source,
    )
    if "callbackActions" in data:
        definition.callback_actions = list(data["callbackActions"])
    return definition


def _resolve_attribute(data: str | dict[str, Any]) -> AttributeConfig:
    if isinstance(data, str):
        return AttributeConfig(name=data)
    return AttributeConfig(
        name=data["name"],
        default=data.get("default"),
        label=data.get("label"),
    )


def _resolve_validation(data: dict[str, Any]) -> ValidationConfig:
    params = {
        _param_name(key): value
        for key, value in data.items()
        if key not in _VALIDATION_KEYS
    }
    return ValidationConfig(
        type=data["type"],
        attributes=_as_list(data.get("attributes")),
        params=params,
        if_=_as_list(data.get("if")),
        unless=_as_list(data.get("unless")),
        on=_as_list(data.get("on")),
    )


def _resolve_callback(data: dict[str, Any]) -> CallbackConfig:
    return CallbackConfig(
        kind=data["kind"],
        action=data["action"],
        hook=data["hook"],
        if_=_as_list(data.get("if")),
        unless=_as_list(data.get("unless")),
    )


def _param_name(key: str) -> str:
    """camelCase YAML keys -> snake_case keyword arguments."""
    if key in _PARAM_ALIASES:
        return _PARAM_ALIASES[key]
    return underscore(key)


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]
