from __future__ import annotations

import secrets
from typing import Callable

from .config import NONCE_BYTES
from .errors import NonceSourceError


class NonceGenerator:
    def __init__(
        self,
        num_bytes: int = NONCE_BYTES,
        random_source: Callable[[int], bytes] = secrets.token_bytes,
    ) -> None:
        if num_bytes < 1:
            raise ValueError("Nonce length must be at least one byte")
        self.num_bytes = num_bytes
        self._random_source = random_source

    @property
    def length(self) -> int:
        return self.num_bytes * 2

    def generate(self) -> str:
        raw = self._random_source(self.num_bytes)
        if len(raw) != self.num_bytes:
            raise NonceSourceError(
                f"Random source returned {len(raw)} bytes, expected {self.num_bytes}"
            )
        return raw.hex().upper()


_default_generator = NonceGenerator()


def generate_nonce() -> str:
    return _default_generator.generate()
