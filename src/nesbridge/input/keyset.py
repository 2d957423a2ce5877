"""Shared record of which keys are held down."""
import threading
from typing import FrozenSet, Set


class ActiveKeySet:
    """Key codes currently considered held, shared by every input source.

    ``try_press`` and ``try_release`` are the only way in; each returns
    whether the transition is new and should be forwarded.
    """

    def __init__(self):
        self._keys: Set[int] = set()
        self._lock = threading.Lock()

    def try_press(self, key_code: int) -> bool:
        with self._lock:
            if key_code in self._keys:
                return False
            self._keys.add(key_code)
            return True

    def try_release(self, key_code: int) -> bool:
        with self._lock:
            if key_code not in self._keys:
                return False
            self._keys.discard(key_code)
            return True

    def clear(self) -> None:
        with self._lock:
            self._keys.clear()

    def snapshot(self) -> FrozenSet[int]:
        with self._lock:
            return frozenset(self._keys)

    def __contains__(self, key_code: int) -> bool:
        with self._lock:
            return key_code in self._keys

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)
