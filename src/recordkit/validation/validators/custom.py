"""Validators wrapping application code.

- BlockValidator: per-attribute function (validates_each)
- MethodValidator: whole-record function or record method (validate)
- build_validator: instantiate a custom validator class (validates_with)
"""

from collections.abc import Callable, Iterable
from typing import Any

from recordkit.validation.types import Validator
from recordkit.validation.validators.base import BaseValidator, EachValidator


class BlockValidator(EachValidator):
    """Calls block(record, attribute, value) for each attribute.

    The block reports problems through record.errors.add().
    """

    def __init__(
        self,
        attributes: Iterable[str],
        block: Callable[[Any, str, Any], Any],
        **options: Any,
    ):
        super().__init__(attributes, **options)
        if not callable(block):
            raise ValueError("BlockValidator block must be callable")
        self.block = block

    def validate_each(self, record: Any, attribute: str, value: Any) -> None:
        self.block(record, attribute, value)


class MethodValidator(BaseValidator):
    """Calls a function with the record, or a named method of the record."""

    def __init__(self, method: str | Callable[[Any], Any]):
        self.method = method

    def validate(self, record: Any) -> None:
        if isinstance(self.method, str):
            getattr(record, self.method)()
        else:
            self.method(record)

    def __repr__(self) -> str:
        name = self.method if isinstance(self.method, str) else getattr(
            self.method, "__name__", repr(self.method)
        )
        return f"MethodValidator({name})"


def build_validator(validator: Any, **options: Any) -> Validator:
    """Return a validator instance for validates_with.

    Classes are instantiated with options; instances are returned as-is
    (options must then be empty).

    Raises:
        ValueError: If the object does not implement validate()
    """
    if isinstance(validator, type):
        instance = validator(**options)
    else:
        if options:
            raise ValueError(
                "Options can only be passed with a validator class, not an instance"
            )
        instance = validator

    if not callable(getattr(instance, "validate", None)):
        raise ValueError(
            f"{type(instance).__name__} does not implement validate(record)"
        )
    return instance
