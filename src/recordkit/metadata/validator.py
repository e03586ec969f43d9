"""
metadata/validator.py: JSON Schema validation for recordkit model definition files.

Usage:
    from recordkit.metadata.validator import validate_definitions_dir

    issues = validate_definitions_dir(Path("models"))
    for issue in issues:
        print(issue)

PyYAML quirk: the bare key ``on:`` is parsed as boolean ``True``, not the string
``"on"``.  We preprocess loaded dicts to rename that key before schema validation.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

logger = logging.getLogger(__name__)

_SCHEMA_PATH = Path(__file__).parent / "schemas" / "model.schema.json"


@dataclass
class DefinitionIssue:
    """A single validation finding for a model definition file."""

    file: Path
    message: str
    path: str = ""          # location within the document, e.g. "validations[0]/type"
    severity: str = "error"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[{self.severity.upper()}] {self.file}{loc}: {self.message}"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def _validator() -> Draft202012Validator:
    with _SCHEMA_PATH.open() as fh:
        schema = json.load(fh)
    return Draft202012Validator(schema)


def preprocess_on_key(obj: Any) -> Any:
    """
    Recursively rename the boolean key ``True`` → ``"on"`` in a parsed YAML dict.

    PyYAML parses the bare key ``on:`` as boolean ``True`` (YAML 1.1 spec).
    """
    if isinstance(obj, dict):
        result: dict[Any, Any] = {}
        for k, v in obj.items():
            new_key = "on" if k is True else k
            result[new_key] = preprocess_on_key(v)
        return result
    if isinstance(obj, list):
        return [preprocess_on_key(item) for item in obj]
    return obj


def _json_path(error: ValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_definition(doc: Any, source: Path) -> list[DefinitionIssue]:
    """Validate an already-parsed definition document."""
    return [
        DefinitionIssue(file=source, message=error.message, path=_json_path(error))
        for error in sorted(_validator().iter_errors(doc), key=_json_path)
    ]


def validate_definition_file(yaml_path: Path) -> list[DefinitionIssue]:
    """
    Validate a single model definition YAML file.

    Returns:
        A list of :class:`DefinitionIssue` objects (empty on success).
    """
    try:
        with yaml_path.open() as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        return [DefinitionIssue(file=yaml_path, message=f"YAML parse error: {exc}")]

    if raw is None:
        return [
            DefinitionIssue(file=yaml_path, message="File is empty or contains only whitespace")
        ]

    return validate_definition(preprocess_on_key(raw), yaml_path)


def validate_definitions_dir(definitions_dir: Path) -> list[DefinitionIssue]:
    """Validate every ``*.yaml`` / ``*.yml`` file in *definitions_dir*."""
    issues: list[DefinitionIssue] = []
    for yaml_path in sorted([*definitions_dir.glob("*.yaml"), *definitions_dir.glob("*.yml")]):
        file_issues = validate_definition_file(yaml_path)
        if file_issues:
            logger.debug("%d issue(s) in %s", len(file_issues), yaml_path)
        issues.extend(file_issues)
    return issues
