"""Error collection for recordkit validation.

An ErrorCollection is an ordered multi-map from attribute name to error
details. Whole-record errors are stored under the reserved BASE key.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from recordkit.config import get_settings

# Reserved key for errors that are not scoped to an attribute. Attribute
# names are always identifiers, so the empty string never collides.
BASE = ""


@dataclass(frozen=True)
class ErrorDetail:
    """A single validation error.

    Attributes:
        attribute: Attribute name, or BASE for whole-record errors
        message: Rendered message (e.g. "can't be blank")
        code: Machine-readable code (e.g. "blank"), None for free-text messages
        options: Interpolation values used to render the message
    """

    attribute: str
    message: str
    code: str | None = None
    options: dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "attribute": self.attribute or None,
            "message": self.message,
            "code": self.code,
        }


class ErrorCollection:
    """Validation errors for one record.

    Args:
        humanize: Attribute -> display label; raw keys are used when absent
        full_message_format: Overrides the configured "{attribute} {message}"
        messages: Overrides the configured code -> template catalog
    """

    def __init__(
        self,
        humanize: Callable[[str], str] | None = None,
        full_message_format: str | None = None,
        messages: dict[str, str] | None = None,
    ):
        self._humanize = humanize
        self._full_message_format = full_message_format
        self._messages = messages
        self._errors: dict[str, list[ErrorDetail]] = {}

    # =========================================================================
    # Adding and removing
    # =========================================================================

    def add(
        self,
        attribute: str,
        message: str | None = None,
        *,
        code: str | None = None,
        **options: Any,
    ) -> ErrorDetail:
        """Append an error for attribute.

        When message is omitted it is rendered from the template for code
        (default "invalid"), interpolating options.

        Args:
            attribute: Attribute name, or BASE
            message: Literal message text
            code: Error code; also selects the default template
            **options: Interpolation values (e.g. count=3)

        Returns:
            The stored ErrorDetail
        """
        if message is None:
            code = code or "invalid"
            message = self._render(code, options)
        detail = ErrorDetail(
            attribute=attribute, message=message, code=code, options=dict(options)
        )
        self._errors.setdefault(attribute, []).append(detail)
        return detail

    def delete(self, attribute: str) -> list[str]:
        """Remove and return the messages for attribute."""
        return [d.message for d in self._errors.pop(attribute, [])]

    def clear(self) -> None:
        self._errors.clear()

    def merge(self, other: "ErrorCollection") -> None:
        """Append every error from other."""
        for detail in other:
            self._errors.setdefault(detail.attribute, []).append(detail)

    # =========================================================================
    # Queries
    # =========================================================================

    def messages(self, attribute: str) -> list[str]:
        return [d.message for d in self._errors.get(attribute, [])]

    def details(self, attribute: str) -> list[ErrorDetail]:
        return list(self._errors.get(attribute, []))

    def added(
        self,
        attribute: str,
        message: str | None = None,
        *,
        code: str | None = None,
    ) -> bool:
        """True if an error with the given message and/or code exists."""
        for detail in self._errors.get(attribute, []):
            if message is not None and detail.message != message:
                continue
            if code is not None and detail.code != code:
                continue
            return True
        return False

    def attribute_names(self) -> list[str]:
        return [attr for attr, details in self._errors.items() if details]

    def is_empty(self) -> bool:
        return self.count() == 0

    def count(self) -> int:
        return sum(len(details) for details in self._errors.values())

    def __getitem__(self, attribute: str) -> list[str]:
        return self.messages(attribute)

    def __contains__(self, attribute: object) -> bool:
        return bool(self._errors.get(attribute))  # type: ignore[arg-type]

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> Iterator[ErrorDetail]:
        for details in self._errors.values():
            yield from details

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ErrorCollection):
            return NotImplemented
        return list(self) == list(other)

    def __repr__(self) -> str:
        return f"ErrorCollection({self.to_dict()!r})"

    # =========================================================================
    # Presentation
    # =========================================================================

    def full_message(self, attribute: str, message: str) -> str:
        """Join a humanized attribute name with a message.

        Whole-record messages are returned unchanged.
        """
        if attribute == BASE:
            return message
        fmt = self._full_message_format or get_settings().full_message_format
        return fmt.format(attribute=self._human_name(attribute), message=message)

    def full_messages(self) -> list[str]:
        """All messages, whole-record errors first, then insertion order."""
        result = [self.full_message(BASE, m) for m in self.messages(BASE)]
        for attribute, details in self._errors.items():
            if attribute == BASE:
                continue
            result.extend(self.full_message(attribute, d.message) for d in details)
        return result

    def full_messages_for(self, attribute: str) -> list[str]:
        return [self.full_message(attribute, m) for m in self.messages(attribute)]

    def to_dict(self, full_messages: bool = False) -> dict[str, list[str]]:
        """attribute -> messages, omitting attributes without errors."""
        if full_messages:
            return {
                attr: self.full_messages_for(attr) for attr in self.attribute_names()
            }
        return {attr: self.messages(attr) for attr in self.attribute_names()}

    def _human_name(self, attribute: str) -> str:
        if self._humanize is None:
            return attribute
        return self._humanize(attribute)

    def _render(self, code: str, options: dict[str, Any]) -> str:
        if self._messages is not None and code in self._messages:
            try:
                return self._messages[code].format(**options)
            except (KeyError, IndexError):
                return self._messages[code]
        return get_settings().message_for(code, **options)
