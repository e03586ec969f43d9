"""Per-type callback chains keyed by lifecycle action."""

from collections.abc import Callable, Iterable
from typing import Any

from recordkit.callbacks.chain import CallbackChain
from recordkit.callbacks.types import CallbackEntry, CallbackKind, ChainResult
from recordkit.exceptions import ModelDefinitionError


class CallbackSet:
    """The callback chains of one record type.

    Actions must be defined with define_model_callbacks() before hooks can
    be registered against them.
    """

    def __init__(self, actions: Iterable[str] = ()):
        self._chains: dict[str, CallbackChain] = {}
        self._frozen = False
        self.define_model_callbacks(*actions)

    def define_model_callbacks(self, *actions: str) -> None:
        """Define lifecycle actions. Redefining an action is a no-op."""
        if self._frozen:
            raise ModelDefinitionError("Callback set is frozen")
        for action in actions:
            if not action or not isinstance(action, str):
                raise ModelDefinitionError(f"Invalid callback action: {action!r}")
            self._chains.setdefault(action, CallbackChain(action))

    def actions(self) -> list[str]:
        return list(self._chains)

    def chain(self, action: str) -> CallbackChain:
        if action not in self._chains:
            raise ModelDefinitionError(
                f"No callbacks defined for action '{action}'. "
                f"Defined actions: {', '.join(self._chains) or '(none)'}"
            )
        return self._chains[action]

    def add(
        self,
        kind: CallbackKind,
        action: str,
        handler: Callable[..., Any],
        **options: Any,
    ) -> CallbackEntry:
        return self.chain(action).add(kind, handler, **options)

    def run(self, action: str, record: Any, core: Callable[[], Any]) -> ChainResult:
        return self.chain(action).run(record, core)

    def freeze(self) -> None:
        self._frozen = True
        for chain in self._chains.values():
            chain.freeze()
