"""Callback chain execution for recordkit.

A chain runs, for one action:
1. before-hooks in registration order (HALT stops everything)
2. around-hooks as nested wrappers, each receiving a proceed() continuation
3. the core body, innermost
4. after-hooks in registration order, only if the core body ran

An around-hook that never calls proceed() skips every inner hook and the
core body; outer around-hooks still finish, after-hooks do not run.
Exceptions raised by any hook or the core propagate unchanged.
"""

import logging
from collections.abc import Callable
from typing import Any

from recordkit.callbacks.types import (
    HALT,
    CallbackEntry,
    CallbackKind,
    ChainResult,
    ChainState,
)
from recordkit.conditions import Guard, guards_pass, normalize_guards
from recordkit.exceptions import CallbackError, ModelDefinitionError

logger = logging.getLogger(__name__)


class CallbackChain:
    """Ordered before/around/after hooks for one lifecycle action.

    Example:
        chain = CallbackChain("create")
        chain.before(lambda rec: HALT if rec.age < 0 else None)
        chain.around(lambda rec, proceed: proceed())
        result = chain.run(record, core=lambda: True)
    """

    def __init__(self, action: str):
        self.action = action
        self._entries: dict[CallbackKind, list[CallbackEntry]] = {
            kind: [] for kind in CallbackKind
        }
        self._frozen = False

    # =========================================================================
    # Registration
    # =========================================================================

    def append(self, entry: CallbackEntry, prepend: bool = False) -> CallbackEntry:
        if self._frozen:
            raise ModelDefinitionError(
                f"Callback chain '{self.action}' is frozen; register hooks "
                "before building records"
            )
        if entry.action != self.action:
            raise ModelDefinitionError(
                f"Callback for '{entry.action}' added to chain '{self.action}'"
            )
        if not callable(entry.handler):
            raise ModelDefinitionError(
                f"{entry.kind.value} callback for '{self.action}' is not callable"
            )
        entries = self._entries[entry.kind]
        if prepend:
            entries.insert(0, entry)
        else:
            entries.append(entry)
        return entry

    def add(
        self,
        kind: CallbackKind,
        handler: Callable[..., Any],
        *,
        if_: Guard | list[Guard] | None = None,
        unless: Guard | list[Guard] | None = None,
        prepend: bool = False,
    ) -> CallbackEntry:
        entry = CallbackEntry(
            kind=kind,
            action=self.action,
            handler=handler,
            if_=normalize_guards(if_),
            unless=normalize_guards(unless),
        )
        return self.append(entry, prepend=prepend)

    def before(self, handler: Callable[..., Any], **options: Any) -> CallbackEntry:
        return self.add(CallbackKind.BEFORE, handler, **options)

    def around(self, handler: Callable[..., Any], **options: Any) -> CallbackEntry:
        return self.add(CallbackKind.AROUND, handler, **options)

    def after(self, handler: Callable[..., Any], **options: Any) -> CallbackEntry:
        return self.add(CallbackKind.AFTER, handler, **options)

    def entries(self, kind: CallbackKind) -> list[CallbackEntry]:
        return list(self._entries[kind])

    def freeze(self) -> None:
        self._frozen = True

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())

    # =========================================================================
    # Execution
    # =========================================================================

    def run(self, record: Any, core: Callable[[], Any]) -> ChainResult:
        """Run the chain around core for record.

        Args:
            record: Passed to every hook and guard
            core: The action body; its return value becomes result.value

        Returns:
            ChainResult describing whether the core ran and what it returned
        """
        return _ChainRun(self, record, core).execute()


class _ChainRun:
    """State of a single chain invocation."""

    def __init__(self, chain: CallbackChain, record: Any, core: Callable[[], Any]):
        self.chain = chain
        self.record = record
        self.core = core
        self.result = ChainResult(action=chain.action, state=ChainState.NOT_STARTED)
        self.result.trace.append((ChainState.NOT_STARTED, None))

    def execute(self) -> ChainResult:
        self._transition(ChainState.RUNNING_BEFORE)
        for entry in self.chain._entries[CallbackKind.BEFORE]:
            if not self._applies(entry):
                continue
            if entry.handler(self.record) is HALT:
                self._mark_halt(entry, ChainState.RUNNING_BEFORE)
                return self._finish(ChainState.HALTED)

        around = self.chain._entries[CallbackKind.AROUND]
        self._enter(around, 0)

        if not self.result.executed:
            return self._finish(ChainState.HALTED)

        self._transition(ChainState.RUNNING_AFTER)
        for entry in self.chain._entries[CallbackKind.AFTER]:
            if self._applies(entry):
                entry.handler(self.record)

        return self._finish(ChainState.COMPLETED)

    def _enter(self, around: list[CallbackEntry], index: int) -> Any:
        """Run around-hook index and everything inside it.

        Returns the core's value, or HALT if the core was skipped.
        """
        if index == len(around):
            self._transition(ChainState.RUNNING_CORE)
            self.result.value = self.core()
            self.result.executed = True
            return self.result.value

        entry = around[index]
        if not self._applies(entry):
            return self._enter(around, index + 1)

        self._transition(ChainState.RUNNING_AROUND_ENTER, index)
        proceeded = False
        inner: Any = HALT

        def proceed() -> Any:
            nonlocal proceeded, inner
            if proceeded:
                raise CallbackError(
                    f"around callback '{entry.name}' for '{self.chain.action}' "
                    "called proceed() more than once"
                )
            proceeded = True
            inner = self._enter(around, index + 1)
            self._transition(ChainState.RUNNING_AROUND_EXIT, index)
            return inner

        entry.handler(self.record, proceed)

        if not proceeded:
            self._mark_halt(entry, ChainState.RUNNING_AROUND_ENTER)
        return inner

    def _applies(self, entry: CallbackEntry) -> bool:
        return guards_pass(self.record, entry.if_, entry.unless)

    def _mark_halt(self, entry: CallbackEntry, where: ChainState) -> None:
        self.result.halted_by = entry
        self.result.halted_in = where
        logger.debug(
            "Callback chain '%s' halted by %s callback '%s'",
            self.chain.action,
            entry.kind.value,
            entry.name,
        )

    def _transition(self, state: ChainState, index: int | None = None) -> None:
        self.result.state = state
        self.result.trace.append((state, index))

    def _finish(self, state: ChainState) -> ChainResult:
        self._transition(state)
        return self.result
