"""Core types for the recordkit validation system."""

from dataclasses import dataclass
from typing import Any, Protocol

from recordkit.conditions import Guard


class Validator(Protocol):
    """Protocol that all validators must implement.

    A validator inspects the record and writes any problems into
    record.errors. It returns nothing and never raises for invalid data.
    """

    def validate(self, record: Any) -> None:
        ...


@dataclass(frozen=True)
class ValidatorSpec:
    """A validator registered on a record type.

    Attributes:
        validator: The validator instance
        attributes: Attributes the validator inspects (empty for whole-record)
        if_: Guards that must all hold for the validator to run
        unless: Guards that must all fail for the validator to run
        on: Validation contexts this validator runs in (empty means all)
    """

    validator: Validator
    attributes: tuple[str, ...] = ()
    if_: tuple[Guard, ...] = ()
    unless: tuple[Guard, ...] = ()
    on: tuple[str, ...] = ()

    def applies_to(self, context: str | None) -> bool:
        if not self.on:
            return True
        return context in self.on
