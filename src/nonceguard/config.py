from __future__ import annotations

import os
from datetime import timedelta
from typing import Iterable

LOG_LEVEL = os.getenv("NONCEGUARD_LOG_LEVEL", "INFO")

SECRET_KEY = os.getenv("NONCEGUARD_SECRET_KEY", "dev-change-me")

NONCE_CACHE_SIZE = int(os.getenv("NONCEGUARD_NONCE_CACHE_SIZE", "5"))
NONCE_BYTES = int(os.getenv("NONCEGUARD_NONCE_BYTES", "16"))
NONCE_REQUEST_PARAM = os.getenv("NONCEGUARD_NONCE_PARAM", "CSRF_NONCE")
NONCE_SESSION_ATTR = os.getenv("NONCEGUARD_SESSION_ATTR", "nonceguard.CSRF_NONCE")

# Comma separated, e.g. "/,/health,/login"
ENTRY_POINTS = os.getenv("NONCEGUARD_ENTRY_POINTS", "")

DENY_STATUS = int(os.getenv("NONCEGUARD_DENY_STATUS", "403"))

SESSION_IDLE_TTL = timedelta(minutes=int(os.getenv("NONCEGUARD_SESSION_IDLE_MINUTES", "30")))


def parse_entry_points(value: str | Iterable[str] | None) -> frozenset[str]:
    if not value:
        return frozenset()
    if isinstance(value, str):
        value = value.split(",")
    paths = set()
    for entry in value:
        entry = entry.strip()
        if entry:
            paths.add(entry)
    return frozenset(paths)
