from __future__ import annotations

from typing import Iterable, Optional

from flask import Flask, Response, abort, current_app, g, redirect, request, session, url_for

from .config import (
    DENY_STATUS,
    ENTRY_POINTS,
    NONCE_CACHE_SIZE,
    NONCE_REQUEST_PARAM,
    NONCE_SESSION_ATTR,
    parse_entry_points,
)
from .errors import NonceRejected
from .nonce import NonceGenerator
from .rewriter import ResponseEncoder
from .sessions import MemorySessionStore, Session
from .store import SessionNonceStore
from .validator import FilterRequest, RequestValidator

SESSION_ID_KEY = "_nonceguard_sid"
EXTENSION_KEY = "nonceguard"


class CsrfPreventionFilter:
    # URLs sent to the client must go through encode_url, nonce_url_for or
    # nonce_redirect, otherwise the next request from that page is rejected.

    def __init__(
        self,
        app: Flask | None = None,
        *,
        entry_points: str | Iterable[str] | None = None,
        cache_size: int | None = None,
        nonce_param: str | None = None,
        session_attribute: str | None = None,
        deny_status: int | None = None,
        sessions: MemorySessionStore | None = None,
        generator: NonceGenerator | None = None,
    ) -> None:
        self._entry_points = entry_points
        self._cache_size = cache_size
        self._nonce_param = nonce_param
        self._session_attribute = session_attribute
        self._deny_status = deny_status
        self._generator = generator
        self.sessions = sessions or MemorySessionStore()
        self.validator: RequestValidator | None = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        config = app.config
        entry_points = self._entry_points
        if entry_points is None:
            entry_points = config.get("CSRF_ENTRY_POINTS", ENTRY_POINTS)
        store = SessionNonceStore(
            capacity=int(self._cache_size or config.get("CSRF_NONCE_CACHE_SIZE", NONCE_CACHE_SIZE)),
            attribute=self._session_attribute or config.get("CSRF_NONCE_SESSION_ATTR", NONCE_SESSION_ATTR),
        )
        self.validator = RequestValidator(
            store=store,
            entry_points=parse_entry_points(entry_points),
            generator=self._generator,
            nonce_param=self._nonce_param or config.get("CSRF_NONCE_PARAM", NONCE_REQUEST_PARAM),
            deny_status=int(self._deny_status or config.get("CSRF_DENY_STATUS", DENY_STATUS)),
        )
        app.before_request(self._protect)
        app.context_processor(self._inject_helpers)
        app.extensions[EXTENSION_KEY] = self

    @property
    def nonce_param(self) -> str:
        return self.validator.nonce_param

    def current_session(self, create: bool = True) -> Optional[Session]:
        found = self.sessions.get(session.get(SESSION_ID_KEY))
        if found is None and create:
            found = self.sessions.create()
            session[SESSION_ID_KEY] = found.session_id
        return found

    def _protect(self) -> None:
        filter_request = FilterRequest(
            method=request.method,
            servlet_path=request.path,
            nonce=request.values.get(self.nonce_param),
        )
        try:
            result = self.validator.process(filter_request, self.current_session, ResponseEncoder())
        except NonceRejected as exc:
            abort(exc.status)
        g.csrf_response = result.response
        g.csrf_nonce = result.nonce

    def _inject_helpers(self) -> dict:
        return {
            "encode_url": encode_url,
            "nonce_url_for": nonce_url_for,
            "csrf_nonce": current_nonce(),
        }


def current_nonce() -> Optional[str]:
    return g.get("csrf_nonce")


def _current_response():
    response = g.get("csrf_response")
    if response is None:
        # Request did not pass through the filter (e.g. app without init_app).
        return ResponseEncoder()
    return response


def encode_url(url: str) -> str:
    return _current_response().encode_url(url)


def encode_redirect_url(url: str) -> str:
    return _current_response().encode_redirect_url(url)


def nonce_url_for(endpoint: str, **values) -> str:
    return encode_url(url_for(endpoint, **values))


def nonce_redirect(location: str, code: int = 302) -> Response:
    return redirect(encode_redirect_url(location), code=code)


def get_filter() -> CsrfPreventionFilter:
    return current_app.extensions[EXTENSION_KEY]
