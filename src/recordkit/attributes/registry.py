"""Attribute registry for recordkit.

Holds the declared attribute names of one record type and the dynamic
attribute method patterns (prefix, suffix or both) registered against them.
Pattern methods are never synthesized on a class; every generated method name
is precomputed into a lookup table that a single dispatch function consults.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import partial
from typing import Any

from recordkit.exceptions import (
    ModelDefinitionError,
    OverlappingAttributeMethodPatternError,
)

logger = logging.getLogger(__name__)

# Handler signature: (target, attribute_name, *args, **kwargs) -> Any
AttributeMethodHandler = Callable[..., Any]


@dataclass(frozen=True)
class AttributeMethodPattern:
    """A prefix and/or suffix wrapped around an attribute name.

    Attributes:
        prefix: Text before the attribute name (e.g. "clear_")
        suffix: Text after the attribute name (e.g. "_changed")
        handler: Called as handler(target, attribute_name, *args, **kwargs)
    """

    prefix: str
    suffix: str
    handler: AttributeMethodHandler

    def method_name(self, attribute: str) -> str:
        return f"{self.prefix}{attribute}{self.suffix}"

    @property
    def affix_length(self) -> int:
        return len(self.prefix) + len(self.suffix)

    def describe(self) -> str:
        if self.prefix and self.suffix:
            return f"affix '{self.prefix}...{self.suffix}'"
        if self.prefix:
            return f"prefix '{self.prefix}'"
        return f"suffix '{self.suffix}'"


@dataclass(frozen=True)
class AttributeMethodMatch:
    """Result of resolving a generated method name.

    Attributes:
        method_name: The name that was looked up
        attribute: Canonical attribute name (aliases already resolved)
        pattern: The pattern that generated the name
    """

    method_name: str
    attribute: str
    pattern: AttributeMethodPattern


class AttributeRegistry:
    """Declared attributes and attribute method patterns of one record type.

    Registries are built at type-definition time and then frozen; after
    freeze() every mutating call raises ModelDefinitionError.

    Example:
        registry = AttributeRegistry()
        registry.declare_attributes(["name", "age"])
        registry.define_prefix_method("clear_", lambda rec, attr: rec.write_attribute(attr, None))

        registry.dispatch(record, "clear_name")  # handler(record, "name")
    """

    def __init__(self) -> None:
        self._attributes: dict[str, Any] = {}  # name -> default
        self._aliases: dict[str, str] = {}
        self._patterns: list[AttributeMethodPattern] = []
        self._table: dict[str, AttributeMethodMatch] = {}
        self._frozen = False

    # =========================================================================
    # Declaration
    # =========================================================================

    def declare_attribute(self, name: str, default: Any = None) -> None:
        """Declare one attribute. Redeclaring an existing name is a no-op."""
        self.declare_attributes([name], defaults={name: default})

    def declare_attributes(
        self,
        names: Iterable[str],
        defaults: dict[str, Any] | None = None,
    ) -> None:
        """Declare attribute names for this record type.

        Args:
            names: Attribute names, in declaration order
            defaults: Optional initial values keyed by attribute name

        Raises:
            ModelDefinitionError: If a name is not a valid identifier or the
                registry is frozen
            OverlappingAttributeMethodPatternError: If a new name makes two
                patterns generate the same method with equal affix length
        """
        self._check_not_frozen()
        defaults = defaults or {}

        attributes = dict(self._attributes)
        for name in names:
            self._check_name(name)
            if name in self._aliases:
                raise ModelDefinitionError(
                    f"Attribute '{name}' is already declared as an alias"
                )
            if name not in attributes:
                attributes[name] = defaults.get(name)

        table = self._build_table(attributes, self._aliases, self._patterns)
        self._attributes = attributes
        self._table = table

    def alias_attribute(self, new_name: str, old_name: str) -> None:
        """Make new_name an alias for the declared attribute old_name."""
        self._check_not_frozen()
        self._check_name(new_name)
        if old_name not in self._attributes:
            raise ModelDefinitionError(
                f"Cannot alias '{new_name}' to undeclared attribute '{old_name}'"
            )
        if new_name in self._attributes:
            raise ModelDefinitionError(
                f"Alias '{new_name}' collides with a declared attribute"
            )

        aliases = {**self._aliases, new_name: old_name}
        self._table = self._build_table(self._attributes, aliases, self._patterns)
        self._aliases = aliases

    # =========================================================================
    # Attribute method patterns
    # =========================================================================

    def define_prefix_method(self, prefix: str, handler: AttributeMethodHandler) -> None:
        """Register prefix + attribute as a dispatchable method name."""
        self.define_affix_method(prefix, "", handler)

    def define_suffix_method(self, suffix: str, handler: AttributeMethodHandler) -> None:
        """Register attribute + suffix as a dispatchable method name."""
        self.define_affix_method("", suffix, handler)

    def define_affix_method(
        self,
        prefix: str,
        suffix: str,
        handler: AttributeMethodHandler,
    ) -> None:
        """Register prefix + attribute + suffix as a dispatchable method name.

        Raises:
            ModelDefinitionError: If both affixes are empty, the handler is not
                callable, or the registry is frozen
            OverlappingAttributeMethodPatternError: If the pattern ties with an
                existing one for some declared attribute
        """
        self._check_not_frozen()
        if not prefix and not suffix:
            raise ModelDefinitionError("Attribute method pattern needs a prefix or suffix")
        if not callable(handler):
            raise ModelDefinitionError(
                f"Handler for attribute method pattern '{prefix}*{suffix}' is not callable"
            )

        patterns = [*self._patterns, AttributeMethodPattern(prefix, suffix, handler)]
        self._table = self._build_table(self._attributes, self._aliases, patterns)
        self._patterns = patterns

    # =========================================================================
    # Lookup and dispatch
    # =========================================================================

    def attribute_names(self) -> tuple[str, ...]:
        """Declared attribute names, in declaration order."""
        return tuple(self._attributes)

    def defaults(self) -> dict[str, Any]:
        return dict(self._attributes)

    def has_attribute(self, name: str) -> bool:
        """True for declared attributes and their aliases."""
        return name in self._attributes or name in self._aliases

    def resolve_alias(self, name: str) -> str:
        """Map an alias to its attribute; other names pass through."""
        return self._aliases.get(name, name)

    def aliases(self) -> dict[str, str]:
        return dict(self._aliases)

    def attribute_method_names(self) -> list[str]:
        """Every generated method name, sorted."""
        return sorted(self._table)

    def match(self, method_name: str) -> AttributeMethodMatch | None:
        """Resolve a method name to its (pattern, attribute), or None."""
        return self._table.get(method_name)

    def dispatch(self, target: Any, method_name: str, *args: Any, **kwargs: Any) -> Any:
        """Invoke the handler registered for method_name on target.

        Raises:
            AttributeError: If no pattern generates method_name
        """
        return self.bind(target, method_name)(*args, **kwargs)

    def bind(self, target: Any, method_name: str) -> Callable[..., Any]:
        """Return the handler for method_name bound to target and attribute."""
        found = self.match(method_name)
        if found is None:
            raise AttributeError(f"no attribute method '{method_name}'")
        return partial(found.pattern.handler, target, found.attribute)

    # =========================================================================
    # Freezing
    # =========================================================================

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # =========================================================================
    # Internals
    # =========================================================================

    def _check_not_frozen(self) -> None:
        if self._frozen:
            raise ModelDefinitionError(
                "Attribute registry is frozen; declare attributes and patterns "
                "before building records"
            )

    @staticmethod
    def _check_name(name: str) -> None:
        if not isinstance(name, str) or not name.isidentifier():
            raise ModelDefinitionError(f"Invalid attribute name: {name!r}")

    @staticmethod
    def _build_table(
        attributes: dict[str, Any],
        aliases: dict[str, str],
        patterns: list[AttributeMethodPattern],
    ) -> dict[str, AttributeMethodMatch]:
        """Precompute generated method name -> match.

        When several (pattern, name) pairs generate the same method, the pair
        with the longest affix wins; a tie on that length is an error.
        """
        candidates: dict[str, list[AttributeMethodMatch]] = {}
        names = [*attributes, *aliases]
        for pattern in patterns:
            for name in names:
                method_name = pattern.method_name(name)
                candidates.setdefault(method_name, []).append(
                    AttributeMethodMatch(
                        method_name=method_name,
                        attribute=aliases.get(name, name),
                        pattern=pattern,
                    )
                )

        table: dict[str, AttributeMethodMatch] = {}
        for method_name, matches in candidates.items():
            longest = max(m.pattern.affix_length for m in matches)
            best = [m for m in matches if m.pattern.affix_length == longest]
            if len(best) > 1:
                raise OverlappingAttributeMethodPatternError(
                    method_name,
                    best[0].pattern.describe(),
                    best[1].pattern.describe(),
                )
            if len(matches) > 1:
                logger.debug(
                    "Attribute method '%s' resolved to %s (longest affix)",
                    method_name,
                    best[0].pattern.describe(),
                )
            table[method_name] = best[0]
        return table
