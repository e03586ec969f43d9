"""recordkit validation system.

Validators inspect a record and write into its ErrorCollection; the
ValidationRunner clears the collection, runs every applicable validator in
declaration order and reports whether the collection stayed empty.

Usage:
    from recordkit.validation import (
        ErrorCollection,
        PresenceValidator,
        ValidationRunner,
        ValidatorSpec,
    )

    specs = [ValidatorSpec(PresenceValidator(["name"]), attributes=("name",))]
    ValidationRunner().run(record, specs)
"""

from recordkit.validation.errors import BASE, ErrorCollection, ErrorDetail
from recordkit.validation.registry import ValidatorRegistry
from recordkit.validation.runner import ValidationRunner
from recordkit.validation.types import Validator, ValidatorSpec
from recordkit.validation.validators import (
    AbsenceValidator,
    AcceptanceValidator,
    BaseValidator,
    BlockValidator,
    EachValidator,
    ExclusionValidator,
    FormatValidator,
    InclusionValidator,
    LengthValidator,
    MethodValidator,
    NumericalityValidator,
    PresenceValidator,
    build_validator,
    is_blank,
    register_builtin_validators,
)

__all__ = [
    # Errors
    "BASE",
    "ErrorCollection",
    "ErrorDetail",
    # Types
    "Validator",
    "ValidatorSpec",
    # Runner and registry
    "ValidationRunner",
    "ValidatorRegistry",
    # Validators
    "AbsenceValidator",
    "AcceptanceValidator",
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
    "register_builtin_validators",
]
