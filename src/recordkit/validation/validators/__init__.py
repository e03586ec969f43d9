"""Built-in validators for recordkit."""

from recordkit.validation.registry import ValidatorRegistry
from recordkit.validation.validators.base import (
    BaseValidator,
    EachValidator,
    is_blank,
    read_value,
)
from recordkit.validation.validators.constraints import (
    AbsenceValidator,
    AcceptanceValidator,
    ExclusionValidator,
    FormatValidator,
    InclusionValidator,
    LengthValidator,
    NumericalityValidator,
    PresenceValidator,
)
from recordkit.validation.validators.custom import (
    BlockValidator,
    MethodValidator,
    build_validator,
)

BUILTIN_VALIDATORS: dict[str, type] = {
    "presence": PresenceValidator,
    "absence": AbsenceValidator,
    "length": LengthValidator,
    "format": FormatValidator,
    "inclusion": InclusionValidator,
    "exclusion": ExclusionValidator,
    "numericality": NumericalityValidator,
    "acceptance": AcceptanceValidator,
}


def register_builtin_validators() -> None:
    """Register the built-in validators under their short names."""
    for name, validator_class in BUILTIN_VALIDATORS.items():
        ValidatorRegistry.register(name, validator_class)


__all__ = [
    "AbsenceValidator",
    "AcceptanceValidator",
    "BUILTIN_VALIDATORS",
    "BaseValidator",
    "BlockValidator",
    "EachValidator",
    "ExclusionValidator",
    "FormatValidator",
    "InclusionValidator",
    "LengthValidator",
    "MethodValidator",
    "NumericalityValidator",
    "PresenceValidator",
    "build_validator",
    "is_blank",
    "read_value",
    "register_builtin_validators",
]
