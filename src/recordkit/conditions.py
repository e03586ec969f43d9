"""Conditional guards shared by callbacks and validators.

A guard is either a callable taking the record, or the name of a record
attribute or method whose (called) value is tested for truthiness.
"""

from collections.abc import Callable, Iterable
from typing import Any, Union

Guard = Union[str, Callable[[Any], Any]]


def normalize_guards(guards: Guard | Iterable[Guard] | None) -> tuple[Guard, ...]:
    """Accept a single guard, an iterable of guards, or None."""
    if guards is None:
        return ()
    if isinstance(guards, str) or callable(guards):
        return (guards,)
    return tuple(guards)


def evaluate_guard(record: Any, guard: Guard) -> bool:
    if isinstance(guard, str):
        value = getattr(record, guard)
        if callable(value):
            value = value()
        return bool(value)
    return bool(guard(record))


def guards_pass(
    record: Any,
    if_: tuple[Guard, ...] = (),
    unless: tuple[Guard, ...] = (),
) -> bool:
    """True when every if_ guard holds and no unless guard does."""
    if not all(evaluate_guard(record, g) for g in if_):
        return False
    return not any(evaluate_guard(record, g) for g in unless)
