"""The record facade for recordkit.

A Record composes the per-type ModelSchema with per-instance state: one
ChangeTracker and one ErrorCollection. It answers attribute reads and writes,
dispatches attribute methods, runs validation and wraps lifecycle actions in
the schema's callback chains.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from recordkit.callbacks import ChainResult
from recordkit.dirty import Change, ChangeTracker
from recordkit.exceptions import ModelDefinitionError, UnknownAttributeError
from recordkit.validation import ErrorCollection, ValidationRunner

if TYPE_CHECKING:
    from recordkit.schema import ModelSchema

logger = logging.getLogger(__name__)

PersistFn = Callable[["Record"], Any]

_runner = ValidationRunner()


class Record:
    """A single record of a ModelSchema type.

    Records can be built from a schema directly, or through a subclass that
    sets the `schema` class attribute:

        person = ModelSchema("Person", ["name", "age"])
        bob = Record(person, name="bob")

        class Person(Record):
            schema = person

        bob = Person(name="bob")

    Initial values are tracked as changes from the declared defaults.
    """

    schema: ModelSchema | None = None

    def __init__(self, schema: ModelSchema | None = None, /, **values: Any):
        schema = schema or type(self).schema
        if schema is None:
            raise ModelDefinitionError(
                f"{type(self).__name__} needs a schema (argument or class attribute)"
            )
        self._check_reserved_names(schema)
        schema.freeze()

        self._schema = schema
        self._persisted = False
        self._tracker = ChangeTracker(
            schema.attribute_names(),
            initial=copy.deepcopy(schema.registry.defaults()),
            equals=schema.equals,
            record_type=schema.name,
        )
        self._errors = ErrorCollection(humanize=schema.human_attribute_name)
        self.assign_attributes(values)

    # =========================================================================
    # Attribute access
    # =========================================================================

    def __getattr__(self, name: str) -> Any:
        # Only called when normal lookup fails.
        if name.startswith("_"):
            raise AttributeError(name)
        schema = self.__dict__.get("_schema")
        if schema is None:
            raise AttributeError(name)
        registry = schema.registry
        if registry.has_attribute(name):
            return self.read_attribute(name)
        if registry.match(name) is not None:
            return registry.bind(self, name)
        raise UnknownAttributeError(schema.name, name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        if self._schema.registry.has_attribute(name):
            self.write_attribute(name, value)
            return
        if hasattr(type(self), name):
            object.__setattr__(self, name, value)
            return
        raise UnknownAttributeError(self._schema.name, name)

    def __getitem__(self, name: str) -> Any:
        return self.read_attribute(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.write_attribute(name, value)

    def __dir__(self) -> list[str]:
        registry = self._schema.registry
        return sorted(
            {
                *super().__dir__(),
                *registry.attribute_names(),
                *registry.aliases(),
                *registry.attribute_method_names(),
            }
        )

    def __repr__(self) -> str:
        values = " ".join(f"{k}={v!r}" for k, v in self._tracker.values().items())
        return f"<{self._schema.name} {values}>" if values else f"<{self._schema.name}>"

    def read_attribute(self, name: str) -> Any:
        return self._tracker.read(self._canonical(name))

    def write_attribute(self, name: str, value: Any) -> None:
        self._tracker.write(self._canonical(name), value)

    def assign_attributes(self, values: Mapping[str, Any]) -> None:
        """Write several attributes; any unknown name raises before writing."""
        for name in values:
            if not self._schema.registry.has_attribute(name):
                raise UnknownAttributeError(self._schema.name, name)
        for name, value in values.items():
            self.write_attribute(name, value)

    def attributes(self) -> dict[str, Any]:
        """Current values of all declared attributes."""
        return self._tracker.values()

    @property
    def model_schema(self) -> ModelSchema:
        return self._schema

    # =========================================================================
    # Validation
    # =========================================================================

    @property
    def errors(self) -> ErrorCollection:
        return self._errors

    def valid(self, context: str | None = None) -> bool:
        """Run validations without callbacks.

        The context defaults to "create" for new records and "update" for
        persisted ones.
        """
        if context is None:
            context = "create" if self.new_record() else "update"
        return _runner.run(self, self._schema.validators(), context)

    def invalid(self, context: str | None = None) -> bool:
        return not self.valid(context)

    # =========================================================================
    # Lifecycle actions
    # =========================================================================

    def run_callbacks(self, action: str, core: Callable[[], Any]) -> ChainResult:
        """Run core wrapped in the callbacks registered for action."""
        return self._schema.callbacks.run(action, self, core)

    def create(self, persist: PersistFn | None = None) -> ChainResult:
        """Validate and, if valid, persist inside the "create" callbacks.

        Args:
            persist: Called with the record once it is valid; returning
                False marks the action as failed

        Returns:
            ChainResult; truthy when the record was validated and persisted
        """
        result = self.run_callbacks("create", lambda: self._persist("create", persist))
        logger.debug(
            "%s create: executed=%s halted=%s", self._schema.name, result.executed, result.halted
        )
        return result

    def save(self, persist: PersistFn | None = None) -> ChainResult:
        """Run "save" callbacks around the "create" or "update" action."""
        action = "create" if self.new_record() else "update"

        def core() -> bool:
            inner = self.run_callbacks(action, lambda: self._persist(action, persist))
            return bool(inner)

        return self.run_callbacks("save", core)

    def update(self, persist: PersistFn | None = None, **values: Any) -> ChainResult:
        """Assign values, then save."""
        self.assign_attributes(values)
        return self.save(persist)

    def _persist(self, context: str, persist: PersistFn | None) -> bool:
        if not self.valid(context):
            return False
        if persist is not None and persist(self) is False:
            return False
        self._persisted = True
        self._tracker.commit()
        return True

    # =========================================================================
    # Change tracking
    # =========================================================================

    def is_changed(self) -> bool:
        return bool(self._tracker.changed())

    def changed(self) -> list[str]:
        return self._tracker.changed()

    def changed_attributes(self) -> set[str]:
        return self._tracker.changed_attributes()

    def changes(self) -> dict[str, Change]:
        return self._tracker.changes()

    def previous_changes(self) -> dict[str, Change]:
        return self._tracker.previous_changes()

    def commit(self) -> dict[str, Change]:
        """Move pending changes into previous_changes()."""
        return self._tracker.commit()

    changes_applied = commit

    def rollback(self) -> list[str]:
        """Restore every changed attribute to its original value."""
        return self._tracker.rollback()

    def restore_attributes(self, attributes: Iterable[str] | None = None) -> list[str]:
        if attributes is not None:
            attributes = [self._canonical(a) for a in attributes]
        return self._tracker.rollback(attributes)

    def clear_changes_information(self) -> None:
        self._tracker.clear_changes()

    def attribute_changed(self, name: str) -> bool:
        return self._tracker.is_changed(self._canonical(name))

    def attribute_was(self, name: str) -> Any:
        return self._tracker.attribute_was(self._canonical(name))

    def attribute_change(self, name: str) -> Change | None:
        return self._tracker.attribute_change(self._canonical(name))

    def attribute_will_change(self, name: str) -> None:
        self._tracker.will_change(self._canonical(name))

    def attribute_previously_changed(self, name: str) -> bool:
        return self._tracker.previously_changed(self._canonical(name))

    def attribute_previous_change(self, name: str) -> Change | None:
        return self._tracker.previous_change(self._canonical(name))

    def attribute_previously_was(self, name: str) -> Any:
        return self._tracker.previously_was(self._canonical(name))

    def clear_attribute_change(self, name: str) -> None:
        self._tracker.clear_attribute_change(self._canonical(name))

    # =========================================================================
    # Conversion
    # =========================================================================

    def persisted(self) -> bool:
        return self._persisted

    def new_record(self) -> bool:
        return not self._persisted

    def to_model(self) -> Record:
        return self

    def to_key(self) -> list[Any] | None:
        """[primary key value], or None when the key is unset or undeclared."""
        pk = self._schema.primary_key
        if not self._schema.registry.has_attribute(pk):
            return None
        key = self.read_attribute(pk)
        return [key] if key is not None else None

    def to_param(self) -> str | None:
        """URL-safe key for persisted records."""
        key = self.to_key()
        if not self._persisted or key is None:
            return None
        return "-".join(str(part) for part in key)

    # =========================================================================
    # Serialization
    # =========================================================================

    def serializable_attributes(self) -> dict[str, Any]:
        return self._tracker.values()

    def serializable_hash(
        self,
        only: Iterable[str] | None = None,
        exclude: Iterable[str] | None = None,
        methods: Iterable[str] | None = None,
    ) -> dict[str, Any]:
        """Attribute values filtered by only/exclude, plus method results.

        Args:
            only: Keep just these attributes
            exclude: Drop these attributes (ignored when only is given)
            methods: Record methods or properties whose values are added
        """
        values = self._tracker.values()
        if only is not None:
            keep = [self._canonical(n) for n in only]
            values = {k: v for k, v in values.items() if k in keep}
        elif exclude is not None:
            drop = {self._canonical(n) for n in exclude}
            values = {k: v for k, v in values.items() if k not in drop}

        for name in methods or ():
            value = getattr(self, name)
            values[name] = value() if callable(value) else value
        return values

    # =========================================================================
    # Internals
    # =========================================================================

    def _canonical(self, name: str) -> str:
        return self._schema.registry.resolve_alias(name)

    @classmethod
    def _check_reserved_names(cls, schema: ModelSchema) -> None:
        registry = schema.registry
        for name in (*registry.attribute_names(), *registry.aliases()):
            if hasattr(cls, name):
                raise ModelDefinitionError(
                    f"Attribute '{name}' of {schema.name} conflicts with "
                    f"{cls.__name__}.{name}"
                )
        for name in registry.attribute_method_names():
            if hasattr(cls, name):
                match = registry.match(name)
                raise ModelDefinitionError(
                    f"Attribute method '{name}' (for '{match.attribute}') of "
                    f"{schema.name} conflicts with {cls.__name__}.{name}"
                )
