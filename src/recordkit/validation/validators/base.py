"""Base classes for recordkit validators."""

from collections.abc import Iterable
from typing import Any


def is_blank(value: Any) -> bool:
    """Check if a value is considered empty."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    if isinstance(value, (list, tuple, set, frozenset, dict)) and len(value) == 0:
        return True
    return False


def read_value(record: Any, attribute: str) -> Any:
    """Read an attribute through read_attribute when the record has one."""
    reader = getattr(record, "read_attribute", None)
    if reader is not None:
        return reader(attribute)
    return getattr(record, attribute)


class BaseValidator:
    """Base class for validators with common functionality.

    Subclasses should override the `validate` method.
    """

    def validate(self, record: Any) -> None:
        """Validate the record. Override in subclasses."""
        raise NotImplementedError("Subclasses must implement validate()")


class EachValidator(BaseValidator):
    """A validator that checks each of a set of attributes independently.

    Subclasses implement validate_each(record, attribute, value).

    Args:
        attributes: Attribute names to check
        allow_none: Skip attributes whose value is None
        allow_blank: Skip attributes whose value is blank
        message: Message overriding the default for every error this adds
    """

    def __init__(
        self,
        attributes: Iterable[str],
        *,
        allow_none: bool = False,
        allow_blank: bool = False,
        message: str | None = None,
    ):
        if isinstance(attributes, str):
            attributes = [attributes]
        self.attributes = tuple(attributes)
        if not self.attributes:
            raise ValueError(f"{type(self).__name__} needs at least one attribute")
        self.allow_none = allow_none
        self.allow_blank = allow_blank
        self.message = message

    def validate(self, record: Any) -> None:
        for attribute in self.attributes:
            value = read_value(record, attribute)
            if value is None and self.allow_none:
                continue
            if self.allow_blank and is_blank(value):
                continue
            self.validate_each(record, attribute, value)

    def validate_each(self, record: Any, attribute: str, value: Any) -> None:
        raise NotImplementedError("Subclasses must implement validate_each()")

    def add_error(self, record: Any, attribute: str, code: str, **options: Any) -> None:
        """Add an error, using the configured message when one was given."""
        message = None
        if self.message is not None:
            try:
                message = self.message.format(**options)
            except (KeyError, IndexError):
                message = self.message
        record.errors.add(attribute, message, code=code, **options)
