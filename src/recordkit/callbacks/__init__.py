"""recordkit lifecycle callback system.

Provides ordered before/around/after hooks wrapped around a lifecycle
action such as create or save:
- before: handler(record); return HALT to stop the action
- around: handler(record, proceed); call proceed() to run the inner part
- after: handler(record); runs only if the action body ran

Usage:
    from recordkit.callbacks import CallbackChain, HALT

    chain = CallbackChain("create")
    chain.before(lambda rec: HALT if rec.age < 0 else None)
    result = chain.run(record, core=lambda: record.valid())
"""

from recordkit.callbacks.callback_set import CallbackSet
from recordkit.callbacks.chain import CallbackChain
from recordkit.callbacks.registry import HookFn, HookRegistry, hook
from recordkit.callbacks.types import (
    HALT,
    CallbackEntry,
    CallbackKind,
    ChainResult,
    ChainState,
)

__all__ = [
    "HALT",
    "CallbackChain",
    "CallbackEntry",
    "CallbackKind",
    "CallbackSet",
    "ChainResult",
    "ChainState",
    "HookFn",
    "HookRegistry",
    "hook",
]
