"""recordkit: composable model behavior for plain data records.

Attribute declaration and attribute methods, lifecycle callbacks, change
tracking and validation, composed on a Record facade instead of inherited
from a framework base class.

Usage:
    from recordkit import HALT, ModelSchema

    person = ModelSchema("Person", ["name", "age"])
    person.validates_presence_of("name")
    person.before("create", lambda rec: HALT if (rec.age or 0) < 0 else None)

    bob = person.new(name="bob", age=3)
    bob.create()
    bob.previous_changes()  # {"name": (None, "bob"), "age": (None, 3)}
"""

from recordkit.attributes import AttributeRegistry
from recordkit.callbacks import (
    HALT,
    CallbackChain,
    CallbackEntry,
    CallbackKind,
    CallbackSet,
    ChainResult,
    ChainState,
    HookRegistry,
    hook,
)
from recordkit.config import Settings, get_settings, reset_settings
from recordkit.dirty import ChangeTracker
from recordkit.exceptions import (
    CallbackError,
    ModelDefinitionError,
    OverlappingAttributeMethodPatternError,
    RecordKitError,
    UnknownAttributeError,
)
from recordkit.naming import DefaultNaming, ModelName, Naming
from recordkit.record import Record
from recordkit.schema import ModelSchema
from recordkit.validation import (
    BASE,
    ErrorCollection,
    ErrorDetail,
    ValidationRunner,
    Validator,
    ValidatorRegistry,
    ValidatorSpec,
    register_builtin_validators,
)

__version__ = "0.1.0"

__all__ = [
    # Composition
    "ModelSchema",
    "Record",
    # Components
    "AttributeRegistry",
    "CallbackChain",
    "CallbackSet",
    "ChangeTracker",
    "ErrorCollection",
    "ValidationRunner",
    # Callback types
    "HALT",
    "CallbackEntry",
    "CallbackKind",
    "ChainResult",
    "ChainState",
    "HookRegistry",
    "hook",
    # Validation types
    "BASE",
    "ErrorDetail",
    "Validator",
    "ValidatorRegistry",
    "ValidatorSpec",
    "register_builtin_validators",
    # Naming
    "DefaultNaming",
    "ModelName",
    "Naming",
    # Configuration
    "Settings",
    "get_settings",
    "reset_settings",
    # Errors
    "CallbackError",
    "ModelDefinitionError",
    "OverlappingAttributeMethodPatternError",
    "RecordKitError",
    "UnknownAttributeError",
]
