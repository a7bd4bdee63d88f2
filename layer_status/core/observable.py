from __future__ import annotations

"""Observable values with explicit watch/unwatch handles.

Watchers run synchronously on the caller's thread, in registration order, each
to completion before the next one starts. ``immediate=True`` runs a watcher once
while it is being registered so that derived state exists before anything
reads it.
"""

import logging
from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)

__all__ = ["Observable", "Unsubscribe"]

Unsubscribe = Callable[[], None]
Watcher = Callable[[T, Optional[T]], None]


class Observable(Generic[T]):
    """A value holder that notifies watchers when it changes.

    Watchers receive ``(new_value, old_value)``. Setting a value identical or
    equal to the current one does not notify.
    """

    def __init__(self, value: T, name: str = "") -> None:
        self._value = value
        self._name = name
        self._watchers: List[Watcher] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T, force: bool = False) -> None:
        old = self._value
        if not force and (value is old or value == old):
            return
        self._value = value
        # Copy so watchers may unwatch themselves while being notified
        for watcher in list(self._watchers):
            if watcher in self._watchers:
                watcher(value, old)

    def watch(self, callback: Watcher, immediate: bool = False) -> Unsubscribe:
        """Register *callback* and return a handle that removes it again."""
        if callback not in self._watchers:
            self._watchers.append(callback)
        logger.debug("Watcher registered on '%s' (immediate=%s)", self._name, immediate)
        if immediate:
            callback(self._value, None)

        def unsubscribe() -> None:
            self.unwatch(callback)

        return unsubscribe

    def unwatch(self, callback: Watcher) -> None:
        """Remove *callback*; unknown callbacks are ignored."""
        if callback in self._watchers:
            self._watchers.remove(callback)
            logger.debug("Watcher removed from '%s'", self._name)

    @property
    def watcher_count(self) -> int:
        return len(self._watchers)
