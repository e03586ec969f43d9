"""Validator registry for recordkit.

Maps validator type names used in declarative model definitions
("presence", "length", "myapp.AgeValidator") to validator classes.
"""

from typing import Any

from recordkit.validation.types import Validator


class ValidatorRegistry:
    """Registry for validator types.

    Validators must be explicitly registered before a definition can refer
    to them. Built-ins are registered by register_builtin_validators();
    applications register their own at startup.

    Example:
        ValidatorRegistry.register("myapp.AgeValidator", AgeValidator)
        validator = ValidatorRegistry.create("myapp.AgeValidator", attributes=["age"])
    """

    _validators: dict[str, type] = {}

    @classmethod
    def register(cls, name: str, validator_class: type) -> None:
        """Register a validator class by name.

        Idempotent - re-registering the same name is a no-op.
        """
        if name in cls._validators:
            return
        cls._validators[name] = validator_class

    @classmethod
    def get(cls, name: str) -> type:
        """Get a registered validator class by name.

        Raises:
            ValueError: If validator is not registered
        """
        if name not in cls._validators:
            raise ValueError(
                f"Validator '{name}' is not registered. "
                "Custom validators must be explicitly registered at application startup."
            )
        return cls._validators[name]

    @classmethod
    def create(cls, name: str, **params: Any) -> Validator:
        """Instantiate the validator registered under name with params."""
        validator_class = cls.get(name)
        try:
            return validator_class(**params)
        except TypeError as e:
            raise ValueError(f"Invalid parameters for validator '{name}': {e}") from e

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._validators

    @classmethod
    def list_registered(cls) -> list[str]:
        return sorted(cls._validators.keys())

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._validators.clear()
