"""Per-type model metadata for recordkit.

A ModelSchema bundles everything shared by all records of one type: the
attribute registry, the callback chains and the ordered validator list. It
is built at definition time and frozen when the first record is created.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any

from recordkit.attributes import AttributeRegistry
from recordkit.callbacks import CallbackKind, CallbackSet
from recordkit.conditions import Guard, normalize_guards
from recordkit.exceptions import ModelDefinitionError
from recordkit.naming import DefaultNaming, ModelName, Naming
from recordkit.validation.types import Validator, ValidatorSpec
from recordkit.validation.validators import (
    BUILTIN_VALIDATORS,
    BlockValidator,
    MethodValidator,
    PresenceValidator,
    build_validator,
)

logger = logging.getLogger(__name__)

DEFAULT_CALLBACK_ACTIONS = ("create", "save", "update")

# Options every EachValidator accepts; validates() passes them to each kind.
_EACH_OPTIONS = ("allow_none", "allow_blank", "message")


def _dirty_methods() -> list[tuple[str, str, Callable[..., Any]]]:
    """(prefix, suffix, handler) for the change-tracking attribute methods."""
    return [
        ("", "_changed", lambda rec, attr: rec.attribute_changed(attr)),
        ("", "_was", lambda rec, attr: rec.attribute_was(attr)),
        ("", "_change", lambda rec, attr: rec.attribute_change(attr)),
        ("", "_will_change", lambda rec, attr: rec.attribute_will_change(attr)),
        ("", "_previously_changed", lambda rec, attr: rec.attribute_previously_changed(attr)),
        ("", "_previous_change", lambda rec, attr: rec.attribute_previous_change(attr)),
        ("", "_previously_was", lambda rec, attr: rec.attribute_previously_was(attr)),
        ("restore_", "", lambda rec, attr: rec.restore_attributes([attr])),
        ("clear_", "_change", lambda rec, attr: rec.clear_attribute_change(attr)),
    ]


class ModelSchema:
    """Definition of one record type.

    Example:
        person = ModelSchema("Person", ["name", "age"])
        person.validates_presence_of("name")

        @person.before("create")
        def reject_negative_age(record):
            if record.age is not None and record.age < 0:
                return HALT

        bob = person.new(name="bob", age=3)

    Args:
        name: Type name (e.g. "Person")
        attributes: Attribute names to declare up front
        primary_key: Attribute used as the record's identifying key
        labels: Attribute -> display label, used by the default naming
        naming: Naming collaborator; DefaultNaming(name, labels) if omitted
        equals: Equality used by change tracking (default ==)
        callback_actions: Lifecycle actions with callback chains
    """

    def __init__(
        self,
        name: str,
        attributes: Iterable[str] = (),
        *,
        primary_key: str = "id",
        labels: dict[str, str] | None = None,
        naming: Naming | None = None,
        equals: Callable[[Any, Any], bool] | None = None,
        callback_actions: Iterable[str] = DEFAULT_CALLBACK_ACTIONS,
    ):
        if not name:
            raise ModelDefinitionError("Model schema needs a name")
        self.name = name
        self.primary_key = primary_key
        self.naming = naming if naming is not None else DefaultNaming(name, labels)
        self.equals = equals
        self.registry = AttributeRegistry()
        self.callbacks = CallbackSet(callback_actions)
        self._validators: list[ValidatorSpec] = []
        self._frozen = False
        self._warned_naming = False

        for prefix, suffix, handler in _dirty_methods():
            self.registry.define_affix_method(prefix, suffix, handler)

        self.attributes(*attributes)

    def __repr__(self) -> str:
        return f"ModelSchema({self.name!r}, {list(self.attribute_names())!r})"

    # =========================================================================
    # Attributes
    # =========================================================================

    def attribute(self, name: str, default: Any = None) -> "ModelSchema":
        self.registry.declare_attribute(name, default)
        return self

    def attributes(self, *names: str) -> "ModelSchema":
        self.registry.declare_attributes(names)
        return self

    def alias_attribute(self, new_name: str, old_name: str) -> "ModelSchema":
        self.registry.alias_attribute(new_name, old_name)
        return self

    def attribute_names(self) -> tuple[str, ...]:
        return self.registry.attribute_names()

    def define_prefix_method(self, prefix: str, handler: Callable[..., Any]) -> "ModelSchema":
        self.registry.define_prefix_method(prefix, handler)
        return self

    def define_suffix_method(self, suffix: str, handler: Callable[..., Any]) -> "ModelSchema":
        self.registry.define_suffix_method(suffix, handler)
        return self

    def define_affix_method(
        self, prefix: str, suffix: str, handler: Callable[..., Any]
    ) -> "ModelSchema":
        self.registry.define_affix_method(prefix, suffix, handler)
        return self

    # =========================================================================
    # Callbacks
    # =========================================================================

    def define_model_callbacks(self, *actions: str) -> "ModelSchema":
        self.callbacks.define_model_callbacks(*actions)
        return self

    def before(self, action: str, handler: Callable[..., Any] | None = None, **options: Any):
        """Register a before-hook; usable as a decorator when handler is omitted."""
        return self._register_callback(CallbackKind.BEFORE, action, handler, options)

    def around(self, action: str, handler: Callable[..., Any] | None = None, **options: Any):
        """Register an around-hook taking (record, proceed)."""
        return self._register_callback(CallbackKind.AROUND, action, handler, options)

    def after(self, action: str, handler: Callable[..., Any] | None = None, **options: Any):
        """Register an after-hook."""
        return self._register_callback(CallbackKind.AFTER, action, handler, options)

    def _register_callback(
        self,
        kind: CallbackKind,
        action: str,
        handler: Callable[..., Any] | None,
        options: dict[str, Any],
    ):
        if handler is None:

            def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
                self.callbacks.add(kind, action, fn, **options)
                return fn

            return decorator

        self.callbacks.add(kind, action, handler, **options)
        return handler

    # =========================================================================
    # Validations
    # =========================================================================

    def validators(self) -> tuple[ValidatorSpec, ...]:
        return tuple(self._validators)

    def add_validator(
        self,
        validator: Validator,
        *,
        if_: Guard | list[Guard] | None = None,
        unless: Guard | list[Guard] | None = None,
        on: str | Iterable[str] | None = None,
    ) -> ValidatorSpec:
        """Append a validator instance with its guards and contexts."""
        if self._frozen:
            raise ModelDefinitionError(
                f"Model schema '{self.name}' is frozen; add validators before building records"
            )
        attributes = tuple(getattr(validator, "attributes", ()))
        for attr in attributes:
            if not self.registry.has_attribute(attr):
                raise ModelDefinitionError(
                    f"Validator {type(validator).__name__} references undeclared "
                    f"attribute '{attr}' on {self.name}"
                )
        if isinstance(on, str):
            on = (on,)
        spec = ValidatorSpec(
            validator=validator,
            attributes=attributes,
            if_=normalize_guards(if_),
            unless=normalize_guards(unless),
            on=tuple(on or ()),
        )
        self._validators.append(spec)
        return spec

    def validates_with(
        self,
        validator: Any,
        *,
        if_: Guard | list[Guard] | None = None,
        unless: Guard | list[Guard] | None = None,
        on: str | Iterable[str] | None = None,
        **options: Any,
    ) -> ValidatorSpec:
        """Register a custom validator class (instantiated with options) or instance."""
        return self.add_validator(
            build_validator(validator, **options), if_=if_, unless=unless, on=on
        )

    def validates_presence_of(self, *attributes: str, **options: Any) -> ValidatorSpec:
        spec_options, each_options = self._split_options(options)
        return self.add_validator(
            PresenceValidator(attributes, **each_options), **spec_options
        )

    def validates_each(
        self,
        *attributes: str,
        block: Callable[[Any, str, Any], Any] | None = None,
        **options: Any,
    ):
        """Register block(record, attribute, value) for each attribute.

        Usable as a decorator when block is omitted.
        """
        spec_options, each_options = self._split_options(options)

        def register(fn: Callable[[Any, str, Any], Any]) -> Callable[[Any, str, Any], Any]:
            self.add_validator(
                BlockValidator(attributes, fn, **each_options), **spec_options
            )
            return fn

        if block is None:
            return register
        return register(block)

    def validate(self, method: str | Callable[[Any], Any] | None = None, **options: Any):
        """Register a whole-record validation function or record method name.

        Usable as a decorator when method is omitted.
        """
        spec_options, extra = self._split_options(options)
        if extra:
            raise ModelDefinitionError(f"Unknown validate() options: {sorted(extra)}")

        def register(fn):
            self.add_validator(MethodValidator(fn), **spec_options)
            return fn

        if method is None:
            return register
        return register(method)

    def validates(self, *attributes: str, **options: Any) -> list[ValidatorSpec]:
        """Register built-in validators by keyword.

        Example:
            schema.validates("name", presence=True, length={"maximum": 20})
            schema.validates("role", inclusion=["admin", "user"], allow_none=True)
            schema.validates("code", format=r"^[A-Z]{3}$")
        """
        spec_options, rest = self._split_options(options)
        shared = {key: rest.pop(key) for key in _EACH_OPTIONS if key in rest}

        if not rest:
            raise ModelDefinitionError("validates() needs at least one validator keyword")

        specs = []
        for kind, params in rest.items():
            if kind not in BUILTIN_VALIDATORS:
                raise ModelDefinitionError(f"Unknown validator '{kind}' in validates()")
            if params is False or params is None:
                continue
            params = self._validator_params(kind, params)
            validator = BUILTIN_VALIDATORS[kind](attributes, **{**shared, **params})
            specs.append(self.add_validator(validator, **spec_options))
        return specs

    @staticmethod
    def _split_options(options: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
        spec_options = {k: options.pop(k) for k in ("if_", "unless", "on") if k in options}
        return spec_options, options

    @staticmethod
    def _validator_params(kind: str, params: Any) -> dict[str, Any]:
        if params is True:
            return {}
        if isinstance(params, dict):
            return dict(params)
        if kind in ("inclusion", "exclusion"):
            return {"in_": params}
        if kind == "format":
            return {"with_": params}
        if kind == "length" and isinstance(params, range):
            return {"in_": params}
        raise ModelDefinitionError(f"Invalid options for '{kind}' validator: {params!r}")

    # =========================================================================
    # Naming
    # =========================================================================

    def human_attribute_name(self, attribute: str, **options: Any) -> str:
        """Display label for attribute; the raw name if naming can't help."""
        humanize = getattr(self.naming, "human_attribute_name", None)
        if humanize is None:
            if not self._warned_naming:
                logger.warning(
                    "Naming for %s has no human_attribute_name; using raw attribute names",
                    self.name,
                )
                self._warned_naming = True
            return attribute
        return humanize(attribute, **options)

    def model_name(self) -> ModelName:
        lookup = getattr(self.naming, "model_name", None)
        if lookup is None:
            return ModelName.from_name(self.name)
        return lookup()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def freeze(self) -> None:
        """Make the schema read-only. Called when the first record is built."""
        if self._frozen:
            return
        self.registry.freeze()
        self.callbacks.freeze()
        self._frozen = True
        logger.debug("Model schema '%s' frozen", self.name)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def new(self, **values: Any):
        """Build a record of this type."""
        from recordkit.record import Record

        return Record(self, **values)
