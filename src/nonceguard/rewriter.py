from __future__ import annotations

from typing import Any, Optional

from .config import NONCE_REQUEST_PARAM


def add_nonce(url: Optional[str], nonce: Optional[str], param: str = NONCE_REQUEST_PARAM) -> Optional[str]:
    if not url or not nonce:
        return url

    # Anchor is only searched for ahead of the first "?" and stays before the query.
    path = url
    query = ""
    question = url.find("?")
    if question >= 0:
        path, query = url[:question], url[question:]

    anchor = ""
    pound = path.find("#")
    if pound >= 0:
        path, anchor = path[:pound], path[pound:]

    if query:
        return f"{path}{anchor}{query}&{param}={nonce}"
    return f"{path}{anchor}?{param}={nonce}"


class ResponseEncoder:
    def encode_url(self, url: str) -> str:
        return url

    def encode_redirect_url(self, url: str) -> str:
        return url


class NonceResponse(ResponseEncoder):
    def __init__(self, response: Any, nonce: str, param: str = NONCE_REQUEST_PARAM) -> None:
        self.response = response
        self.nonce = nonce
        self.param = param

    def encode_url(self, url: str) -> str:
        return add_nonce(self.response.encode_url(url), self.nonce, self.param)

    def encode_redirect_url(self, url: str) -> str:
        return add_nonce(self.response.encode_redirect_url(url), self.nonce, self.param)

    def __getattr__(self, name: str) -> Any:
        # Only called for attributes not defined above.
        if name == "response":
            raise AttributeError(name)
        return getattr(self.response, name)
