"""Runtime settings for recordkit."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

DEFAULT_FULL_MESSAGE_FORMAT = "{attribute} {message}"

# Message templates keyed by error code. Placeholders use str.format syntax.
DEFAULT_MESSAGES: dict[str, str] = {
    "invalid": "is invalid",
    "blank": "can't be blank",
    "present": "must be blank",
    "accepted": "must be accepted",
    "inclusion": "is not included in the list",
    "exclusion": "is reserved",
    "too_short": "is too short (minimum is {count} characters)",
    "too_long": "is too long (maximum is {count} characters)",
    "wrong_length": "is the wrong length (should be {count} characters)",
    "not_a_number": "is not a number",
    "not_an_integer": "must be an integer",
    "greater_than": "must be greater than {count}",
    "greater_than_or_equal_to": "must be greater than or equal to {count}",
    "less_than": "must be less than {count}",
    "less_than_or_equal_to": "must be less than or equal to {count}",
    "equal_to": "must be equal to {count}",
    "other_than": "must be other than {count}",
    "odd": "must be odd",
    "even": "must be even",
}


@dataclass
class Settings:
    """Formatting configuration shared by every record type.

    Attributes:
        full_message_format: Template joining a humanized attribute and a message
        messages: Error message templates keyed by error code
    """

    full_message_format: str = DEFAULT_FULL_MESSAGE_FORMAT
    messages: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_MESSAGES))

    @classmethod
    def from_env(cls) -> Settings:
        """Create settings from environment variables.

        RECORDKIT_FULL_MESSAGE_FORMAT overrides the full message template.
        RECORDKIT_MESSAGES_PATH points at a YAML mapping of code -> template
        merged over the defaults.
        """
        settings = cls()

        fmt = os.environ.get("RECORDKIT_FULL_MESSAGE_FORMAT")
        if fmt:
            settings.full_message_format = fmt

        messages_path = os.environ.get("RECORDKIT_MESSAGES_PATH")
        if messages_path:
            settings.messages.update(load_messages(Path(messages_path)))

        return settings

    def message_for(self, code: str, **options: Any) -> str:
        """Render the template for an error code."""
        template = self.messages.get(code, self.messages["invalid"])
        try:
            return template.format(**options)
        except (KeyError, IndexError):
            return template


def load_messages(path: Path) -> dict[str, str]:
    """Load message template overrides from a YAML file."""
    with path.open() as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Message file {path} must contain a mapping")
    return {str(k): str(v) for k, v in data.items()}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def reset_settings() -> None:
    """Drop cached settings. Primarily for testing."""
    get_settings.cache_clear()
