from __future__ import annotations

import logging
from typing import Optional

from .config import NONCE_CACHE_SIZE, NONCE_SESSION_ATTR
from .replay import NonceCache
from .sessions import Session

logger = logging.getLogger(__name__)


class SessionNonceStore:
    def __init__(self, capacity: int = NONCE_CACHE_SIZE, attribute: str = NONCE_SESSION_ATTR) -> None:
        if capacity < 1:
            raise ValueError("Nonce cache capacity must be at least 1")
        self.capacity = capacity
        self.attribute = attribute

    def get(self, session: Optional[Session]) -> Optional[NonceCache]:
        if session is None:
            return None
        return session.get_attribute(self.attribute)

    def get_or_create(self, session: Session) -> NonceCache:
        cache = session.get_attribute(self.attribute)
        if cache is not None:
            return cache
        # Creation runs under the session's own lock, so at most once per session.
        return session.setdefault_attribute(self.attribute, self._new_cache)

    def _new_cache(self) -> NonceCache:
        logger.debug("created nonce cache for session capacity=%d", self.capacity)
        return NonceCache(self.capacity)
