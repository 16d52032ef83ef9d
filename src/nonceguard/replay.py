from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Optional

from .config import NONCE_CACHE_SIZE


class NonceCache:
    """Insertion-ordered set of the most recently issued nonces for one session.

    Holds at most ``capacity`` entries; adding past that evicts the oldest.
    Re-adding a known nonce moves it to the newest position. Validated nonces
    are not consumed, so any of the last ``capacity`` nonces stays valid
    (bounded replay window), which lets several tabs share one session.
    """

    def __init__(self, capacity: int = NONCE_CACHE_SIZE) -> None:
        if capacity < 1:
            raise ValueError("Nonce cache capacity must be at least 1")
        self._capacity = capacity
        self._entries: OrderedDict[str, None] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def add(self, nonce: str) -> None:
        with self._lock:
            if nonce in self._entries:
                self._entries.move_to_end(nonce)
            else:
                self._entries[nonce] = None
            while len(self._entries) > self._capacity:
                self._entries.popitem(last=False)

    def contains(self, nonce: Optional[str]) -> bool:
        if not nonce:
            return False
        with self._lock:
            return nonce in self._entries

    def snapshot(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def __contains__(self, nonce: object) -> bool:
        return isinstance(nonce, str) and self.contains(nonce)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
