"""Callback system types for recordkit.

Defines the data structures of the lifecycle callback chain:
- CallbackKind: before, around or after
- CallbackEntry: a registered hook bound to an action
- ChainState: the states one chain invocation moves through
- ChainResult: what a chain invocation reports back
- HALT: the value a before-hook returns to stop the chain
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from recordkit.conditions import Guard


class _Halt:
    """Sentinel type for HALT."""

    _instance: "_Halt | None" = None

    def __new__(cls) -> "_Halt":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "HALT"

    def __bool__(self) -> bool:
        return False


# Returned by a before-hook to halt the chain. Also what proceed() returns to
# an around-hook when everything inside it was skipped.
HALT = _Halt()


class CallbackKind(Enum):
    BEFORE = "before"
    AROUND = "around"
    AFTER = "after"


class ChainState(Enum):
    NOT_STARTED = "not_started"
    RUNNING_BEFORE = "running_before"
    RUNNING_AROUND_ENTER = "running_around_enter"
    RUNNING_CORE = "running_core"
    RUNNING_AROUND_EXIT = "running_around_exit"
    RUNNING_AFTER = "running_after"
    COMPLETED = "completed"
    HALTED = "halted"


@dataclass(frozen=True)
class CallbackEntry:
    """A hook registered against a lifecycle action.

    Attributes:
        kind: BEFORE, AROUND or AFTER
        action: Lifecycle action name (e.g. "create")
        handler: before/after: handler(record); around: handler(record, proceed)
        if_: Guards that must all hold for the hook to run
        unless: Guards that must all fail for the hook to run
    """

    kind: CallbackKind
    action: str
    handler: Callable[..., Any]
    if_: tuple[Guard, ...] = ()
    unless: tuple[Guard, ...] = ()

    @property
    def name(self) -> str:
        return getattr(self.handler, "__name__", repr(self.handler))


@dataclass
class ChainResult:
    """Outcome of running a callback chain.

    Attributes:
        action: The action that ran
        state: COMPLETED or HALTED
        executed: True if the core body ran
        value: What the core body returned (None if it didn't run)
        halted_by: The hook that halted the chain, if any
        halted_in: RUNNING_BEFORE or RUNNING_AROUND_ENTER when halted
        trace: (state, around index) pairs in the order they were entered
    """

    action: str
    state: ChainState
    executed: bool = False
    value: Any = None
    halted_by: CallbackEntry | None = None
    halted_in: ChainState | None = None
    trace: list[tuple[ChainState, int | None]] = field(default_factory=list)

    @property
    def halted(self) -> bool:
        return self.state is ChainState.HALTED

    def __bool__(self) -> bool:
        return self.executed and bool(self.value)
