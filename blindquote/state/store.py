"""
QuoteStore: single owner of the quote state tree.

Every commit replaces the whole tree by reference and bumps a version number.
Readers take the latest snapshot with get_state() and never keep it across a
commit. Subscribers are called after each change with the new snapshot.

Commits are serialized with a lock: the HTTP layer runs sync endpoints in a
thread pool.
"""

import logging
import threading
from typing import Callable, List

from .actions import Action

logger = logging.getLogger(__name__)


class QuoteStore:

    def __init__(self, initial_state: dict, reducer: Callable[[dict, Action], dict]):
        self._state = initial_state
        self._reducer = reducer
        self._version = 0
        self._subscribers: List[Callable[[dict], None]] = []
        self._lock = threading.RLock()

    @property
    def version(self) -> int:
        return self._version

    def get_state(self) -> dict:
        return self._state

    def commit(self, new_state: dict) -> bool:
        """Adopt a precomputed state tree. Returns False when it is the current one."""
        with self._lock:
            if new_state is self._state:
                return False
            self._state = new_state
            self._version += 1
            logger.debug("Committed state version %d", self._version)
            snapshot = self._state
        self._notify(snapshot)
        return True

    def dispatch(self, action: Action) -> bool:
        """Run the reducer against the current state. Returns True if the state changed."""
        with self._lock:
            new_state = self._reducer(self._state, action)
            if new_state is self._state:
                return False
            self._state = new_state
            self._version += 1
            logger.debug("%s -> state version %d", action.TYPE, self._version)
            snapshot = self._state
        self._notify(snapshot)
        return True

    def subscribe(self, callback: Callable[[dict], None]) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, snapshot: dict) -> None:
        for callback in list(self._subscribers):
            callback(snapshot)
