"""Change tracking for recordkit records.

A ChangeTracker keeps the current value of every declared attribute plus,
for attributes written since the last commit, the value they had before the
first write. An attribute is changed iff its current value differs from that
original under the tracker's equality function.
"""

import copy
import operator
from collections.abc import Callable, Iterable
from typing import Any

from recordkit.exceptions import UnknownAttributeError

Change = tuple[Any, Any]

_MISSING = object()


class ChangeTracker:
    """Original vs. current values for one record instance.

    Attributes:
        record_type: Name used in UnknownAttributeError messages
    """

    def __init__(
        self,
        attribute_names: Iterable[str],
        initial: dict[str, Any] | None = None,
        equals: Callable[[Any, Any], bool] | None = None,
        record_type: str = "record",
    ):
        self.record_type = record_type
        self._equals = equals or operator.eq
        initial = initial or {}
        self._values: dict[str, Any] = {
            name: initial.get(name) for name in attribute_names
        }
        # attribute -> value before the first write since the last commit
        self._originals: dict[str, Any] = {}
        self._previous: dict[str, Change] = {}

    # =========================================================================
    # Reads and writes
    # =========================================================================

    def read(self, attr: str) -> Any:
        self._check(attr)
        return self._values[attr]

    def write(self, attr: str, value: Any) -> None:
        """Set the current value, recording the original on first write."""
        self._check(attr)
        if attr not in self._originals:
            self._originals[attr] = self._values[attr]
        self._values[attr] = value

    def will_change(self, attr: str) -> None:
        """Snapshot attr before an in-place mutation of its value."""
        self._check(attr)
        if attr not in self._originals:
            self._originals[attr] = copy.deepcopy(self._values[attr])

    def values(self) -> dict[str, Any]:
        """Current values in declaration order."""
        return dict(self._values)

    # =========================================================================
    # Current changes
    # =========================================================================

    def is_changed(self, attr: str) -> bool:
        self._check(attr)
        original = self._originals.get(attr, _MISSING)
        if original is _MISSING:
            return False
        return not self._equals(original, self._values[attr])

    def changed(self) -> list[str]:
        """Changed attribute names, in first-write order."""
        return [attr for attr in self._originals if self.is_changed(attr)]

    def changed_attributes(self) -> set[str]:
        return set(self.changed())

    def changes(self) -> dict[str, Change]:
        """attribute -> (original, current) for changed attributes only."""
        return {
            attr: (self._originals[attr], self._values[attr]) for attr in self.changed()
        }

    def attribute_was(self, attr: str) -> Any:
        """Value before the pending change, or the current value if unchanged."""
        if self.is_changed(attr):
            return self._originals[attr]
        return self._values[attr]

    def attribute_change(self, attr: str) -> Change | None:
        if self.is_changed(attr):
            return (self._originals[attr], self._values[attr])
        return None

    # =========================================================================
    # Commit and rollback
    # =========================================================================

    def commit(self) -> dict[str, Change]:
        """Move current changes into previous changes and reset originals.

        Previous changes are fully replaced, even when nothing changed.
        """
        self._previous = self.changes()
        self._originals = {}
        return dict(self._previous)

    def rollback(self, attributes: Iterable[str] | None = None) -> list[str]:
        """Restore changed attributes to their original values.

        Args:
            attributes: Limit the rollback to these names (default: all)

        Returns:
            The attribute names that were restored
        """
        if attributes is None:
            targets = list(self._originals)
        else:
            targets = list(attributes)
            for attr in targets:
                self._check(attr)

        restored = []
        for attr in targets:
            if attr not in self._originals:
                continue
            if self.is_changed(attr):
                restored.append(attr)
            self._values[attr] = self._originals.pop(attr)
        return restored

    def clear_changes(self) -> None:
        """Forget current and previous change information."""
        self._originals = {}
        self._previous = {}

    def clear_attribute_change(self, attr: str) -> None:
        """Accept the current value of attr as its original."""
        self._check(attr)
        self._originals.pop(attr, None)

    # =========================================================================
    # Previous changes
    # =========================================================================

    def previous_changes(self) -> dict[str, Change]:
        return dict(self._previous)

    def previously_changed(self, attr: str) -> bool:
        self._check(attr)
        return attr in self._previous

    def previous_change(self, attr: str) -> Change | None:
        self._check(attr)
        return self._previous.get(attr)

    def previously_was(self, attr: str) -> Any:
        """Value before the last commit (current value if it didn't change)."""
        change = self.previous_change(attr)
        if change is None:
            return self._values[attr]
        return change[0]

    def _check(self, attr: str) -> None:
        if attr not in self._values:
            raise UnknownAttributeError(self.record_type, attr)
