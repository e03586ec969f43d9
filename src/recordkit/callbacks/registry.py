"""Named callback registry for recordkit.

Declarative model definitions refer to callbacks by name; the functions
themselves are registered here, usually with the @hook decorator at import
time.
"""

from collections.abc import Callable
from typing import Any

HookFn = Callable[..., Any]


class HookRegistry:
    """Registry of named callback functions.

    Hooks must be registered before a definition that references them is
    loaded.

    Example:
        @hook("rejectNegativeAge")
        def reject_negative_age(record):
            if record.age is not None and record.age < 0:
                return HALT
    """

    _hooks: dict[str, HookFn] = {}

    @classmethod
    def register(cls, name: str, hook_fn: HookFn) -> None:
        """Register a hook function by name.

        Idempotent: re-registering the same name is a no-op.
        """
        if name in cls._hooks:
            return
        cls._hooks[name] = hook_fn

    @classmethod
    def get(cls, name: str) -> HookFn:
        """Get a registered hook function by name.

        Raises:
            ValueError: If hook is not registered
        """
        if name not in cls._hooks:
            raise ValueError(
                f"Hook '{name}' is not registered. "
                "Hooks must be registered before definitions that use them are loaded."
            )
        return cls._hooks[name]

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._hooks

    @classmethod
    def list_registered(cls) -> list[str]:
        return sorted(cls._hooks.keys())

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._hooks.clear()


def hook(name: str) -> Callable[[HookFn], HookFn]:
    """Decorator to register a hook function.

    Usage:
        @hook("stampCreatedAt")
        def stamp_created_at(record):
            record.created_at = now()
    """

    def decorator(fn: HookFn) -> HookFn:
        HookRegistry.register(name, fn)
        return fn

    return decorator
