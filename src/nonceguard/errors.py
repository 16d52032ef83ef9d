from __future__ import annotations


class NonceGuardError(Exception):
    pass


class NonceRejected(NonceGuardError):
    def __init__(self, path: str, status: int = 403) -> None:
        super().__init__(f"CSRF nonce rejected for {path}")
        self.path = path
        self.status = status


class NonceSourceError(NonceGuardError):
    pass
