"""
Tests for recordkit.metadata

Covers:
  - preprocess_on_key()           — PyYAML boolean True → "on" rename
  - validate_definition_file()    — single-file validation (valid + invalid)
  - validate_definitions_dir()    — directory walk
  - load_schema()                 — YAML definition → working ModelSchema
  - MetadataLoader.load_all()     — directory of definitions
"""
from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from recordkit import HALT, HookRegistry, ModelDefinitionError, ValidatorRegistry, hook
from recordkit.config import reset_settings
from recordkit.metadata import (
    MetadataLoader,
    load_definition,
    load_schema,
    validate_definition_file,
    validate_definitions_dir,
)
from recordkit.metadata.validator import preprocess_on_key
from recordkit.validation import PresenceValidator


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _write_yaml(path: Path, data: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(data))
    return path


def _write_raw(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


PERSON_YAML = """\
model: Person
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
  - type: format
    attributes: name
    with: "^[A-Za-z ]*$"
    allowBlank: true
callbacks:
  - kind: before
    action: create
    hook: rejectBanned
"""


@pytest.fixture(autouse=True)
def clean_registries(monkeypatch):
    monkeypatch.delenv("RECORDKIT_FULL_MESSAGE_FORMAT", raising=False)
    monkeypatch.delenv("RECORDKIT_MESSAGES_PATH", raising=False)
    reset_settings()
    HookRegistry.clear()
    ValidatorRegistry.clear()

    @hook("rejectBanned")
    def reject_banned(record):
        if record.name == "mallory":
            return HALT

    yield
    HookRegistry.clear()
    ValidatorRegistry.clear()
    reset_settings()


@pytest.fixture
def person_file(tmp_path):
    return _write_raw(tmp_path / "person.yaml", PERSON_YAML)


# ---------------------------------------------------------------------------
# preprocess_on_key
# ---------------------------------------------------------------------------


class TestPreprocessOnKey:
    def test_renames_bool_true_to_on(self):
        assert preprocess_on_key({True: ["create"]}) == {"on": ["create"]}

    def test_nested_lists_and_dicts(self):
        raw = {"validations": [{"type": "presence", True: "update"}]}
        assert preprocess_on_key(raw) == {
            "validations": [{"type": "presence", "on": "update"}]
        }

    def test_no_bool_key_unchanged(self):
        raw = {"a": 1, "b": [1, 2, {"c": 3}]}
        assert preprocess_on_key(raw) == raw


# ---------------------------------------------------------------------------
# validate_definition_file / validate_definitions_dir
# ---------------------------------------------------------------------------


class TestValidateDefinitionFile:
    def test_valid_file(self, person_file):
        assert validate_definition_file(person_file) == []

    def test_missing_attributes(self, tmp_path):
        path = _write_yaml(tmp_path / "bad.yaml", {"model": "Person"})

        issues = validate_definition_file(path)

        assert len(issues) == 1
        assert "attributes" in issues[0].message
        assert issues[0].file == path

    def test_bad_callback_kind(self, tmp_path):
        path = _write_yaml(
            tmp_path / "bad.yaml",
            {
                "model": "Person",
                "attributes": ["name"],
                "callbacks": [{"kind": "during", "action": "create", "hook": "x"}],
            },
        )

        issues = validate_definition_file(path)

        assert [i.path for i in issues] == ["callbacks[0]/kind"]

    def test_invalid_attribute_name(self, tmp_path):
        path = _write_yaml(
            tmp_path / "bad.yaml", {"model": "Person", "attributes": ["first name"]}
        )
        assert validate_definition_file(path)

    def test_empty_file(self, tmp_path):
        path = _write_raw(tmp_path / "empty.yaml", "")
        issues = validate_definition_file(path)
        assert "empty" in issues[0].message

    def test_yaml_parse_error(self, tmp_path):
        path = _write_raw(tmp_path / "broken.yaml", "model: [unclosed\n")
        issues = validate_definition_file(path)
        assert "YAML parse error" in issues[0].message

    def test_issue_str(self, tmp_path):
        path = _write_yaml(tmp_path / "bad.yaml", {"model": "Person"})
        assert str(validate_definition_file(path)[0]).startswith("[ERROR] ")

    def test_directory(self, tmp_path, person_file):
        _write_yaml(tmp_path / "bad.yml", {"model": "Broken"})
        issues = validate_definitions_dir(tmp_path)
        assert [i.file.name for i in issues] == ["bad.yml"]


# ---------------------------------------------------------------------------
# load_definition / load_schema
# ---------------------------------------------------------------------------


class TestLoadSchema:
    def test_definition(self, person_file):
        definition = load_definition(person_file)

        assert definition.name == "Person"
        assert [a.name for a in definition.attributes] == ["id", "name", "age"]
        assert definition.validations[1].params == {"greater_than_or_equal_to": 0}
        assert definition.validations[1].on == ["create"]
        assert definition.validations[2].params == {"with_": "^[A-Za-z ]*$", "allow_blank": True}
        assert definition.callbacks[0].hook == "rejectBanned"
        assert definition.source == person_file

    def test_schema_attributes(self, person_file):
        schema = load_schema(person_file)

        assert schema.name == "Person"
        assert schema.attribute_names() == ("id", "name", "age")
        assert schema.registry.aliases() == {"full_name": "name"}
        assert schema.new().age == 0

    def test_labels_and_presence(self, person_file):
        record = load_schema(person_file).new()

        assert not record.valid()
        assert record.errors.full_messages() == ["Full name can't be blank"]

    def test_validation_context(self, person_file):
        record = load_schema(person_file).new(name="bob", age=-1)

        assert not record.valid("create")
        assert record.errors.full_messages() == ["Age must be greater than or equal to 0"]
        assert record.valid("update")

    def test_format_param_alias(self, person_file):
        record = load_schema(person_file).new(name="b0b")
        assert not record.valid()
        assert record.errors.added("name", code="invalid")

    def test_hook_resolved(self, person_file):
        schema = load_schema(person_file)

        assert load_schema(person_file) is not schema
        assert schema.new(name="mallory").create().halted
        assert schema.new(name="bob").create()

    def test_unknown_hook(self, tmp_path):
        path = _write_raw(tmp_path / "person.yaml", PERSON_YAML.replace("rejectBanned", "nope"))
        with pytest.raises(ModelDefinitionError, match="Hook 'nope' is not registered"):
            load_schema(path)

    def test_unknown_validator_type(self, tmp_path):
        path = _write_yaml(
            tmp_path / "person.yaml",
            {
                "model": "Person",
                "attributes": ["name"],
                "validations": [{"type": "uniqueness", "attributes": ["name"]}],
            },
        )
        with pytest.raises(ModelDefinitionError, match="uniqueness"):
            load_schema(path)

    def test_custom_validator_type(self, tmp_path):
        class NameValidator(PresenceValidator):
            pass

        ValidatorRegistry.register("myapp.Name", NameValidator)
        path = _write_yaml(
            tmp_path / "person.yaml",
            {
                "model": "Person",
                "attributes": ["name"],
                "validations": [{"type": "myapp.Name", "attributes": "name"}],
            },
        )

        schema = load_schema(path)

        assert isinstance(schema.validators()[0].validator, NameValidator)

    def test_error_names_the_file(self, tmp_path):
        path = _write_yaml(
            tmp_path / "person.yaml",
            {
                "model": "Person",
                "attributes": ["name"],
                "validations": [{"type": "presence", "attributes": ["email"]}],
            },
        )
        with pytest.raises(ModelDefinitionError, match="person.yaml"):
            load_schema(path)

    def test_schema_violation(self, tmp_path):
        path = _write_yaml(tmp_path / "person.yaml", {"model": "Person"})
        with pytest.raises(ModelDefinitionError, match="attributes"):
            load_definition(path)

    def test_not_a_mapping(self, tmp_path):
        path = _write_raw(tmp_path / "list.yaml", "- a\n- b\n")
        with pytest.raises(ModelDefinitionError, match="mapping"):
            load_definition(path)

    def test_custom_callback_actions(self, tmp_path):
        path = _write_yaml(
            tmp_path / "doc.yaml",
            {
                "model": "Doc",
                "attributes": ["title"],
                "callbackActions": ["publish"],
                "callbacks": [{"kind": "before", "action": "publish", "hook": "rejectBanned"}],
            },
        )

        schema = load_schema(path)

        assert schema.callbacks.actions() == ["publish"]


# ---------------------------------------------------------------------------
# MetadataLoader
# ---------------------------------------------------------------------------


class TestMetadataLoader:
    def test_load_all(self, tmp_path, person_file):
        _write_yaml(tmp_path / "tag.yml", {"model": "Tag", "attributes": ["label"]})

        schemas = MetadataLoader(tmp_path).load_all()

        assert sorted(schemas) == ["Person", "Tag"]
        assert schemas["Tag"].attribute_names() == ("label",)

    def test_duplicate_model(self, tmp_path, person_file):
        _write_raw(tmp_path / "person_copy.yaml", PERSON_YAML)
        with pytest.raises(ModelDefinitionError, match="Duplicate model 'Person'"):
            MetadataLoader(tmp_path).load_all()

    def test_empty_directory(self, tmp_path):
        assert MetadataLoader(tmp_path).load_all() == {}
