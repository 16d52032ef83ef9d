from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from .config import DENY_STATUS, NONCE_REQUEST_PARAM
from .errors import NonceRejected
from .nonce import NonceGenerator
from .rewriter import NonceResponse
from .sessions import Session
from .store import SessionNonceStore

logger = logging.getLogger(__name__)

SessionGetter = Callable[[bool], Optional[Session]]


class RequestState(str, Enum):
    ENTRY_POINT_BYPASS = "entry_point_bypass"
    VALIDATE = "validate"
    REJECTED = "rejected"
    ACCEPTED = "accepted"


@dataclass(frozen=True)
class FilterRequest:
    method: str
    servlet_path: str
    path_info: Optional[str] = None
    nonce: Optional[str] = None

    @property
    def path(self) -> str:
        if self.path_info is not None:
            return self.servlet_path + self.path_info
        return self.servlet_path


@dataclass
class FilterResult:
    state: RequestState
    nonce: str
    response: NonceResponse


class RequestValidator:
    def __init__(
        self,
        store: SessionNonceStore | None = None,
        entry_points: Iterable[str] = (),
        generator: NonceGenerator | None = None,
        nonce_param: str = NONCE_REQUEST_PARAM,
        deny_status: int = DENY_STATUS,
    ) -> None:
        self.store = store or SessionNonceStore()
        self.entry_points = frozenset(entry_points)
        self.generator = generator or NonceGenerator()
        self.nonce_param = nonce_param
        self.deny_status = deny_status

    def is_entry_point(self, request: FilterRequest) -> bool:
        return request.method == "GET" and request.path in self.entry_points

    def check(self, request: FilterRequest, session: Optional[Session]) -> RequestState:
        if self.is_entry_point(request):
            return RequestState.ENTRY_POINT_BYPASS
        cache = self.store.get(session)
        if cache is not None and not cache.contains(request.nonce):
            return RequestState.REJECTED
        return RequestState.ACCEPTED

    def process(self, request: FilterRequest, get_session: SessionGetter, response: Any) -> FilterResult:
        session = get_session(True)
        state = self.check(request, session)
        if state is RequestState.REJECTED:
            logger.warning("csrf nonce rejected method=%s path=%s", request.method, request.path)
            raise NonceRejected(request.path, self.deny_status)

        cache = self.store.get_or_create(session)
        new_nonce = self.generator.generate()
        cache.add(new_nonce)
        logger.debug("issued nonce state=%s path=%s", state.value, request.path)
        return FilterResult(
            state=state,
            nonce=new_nonce,
            response=NonceResponse(response, new_nonce, self.nonce_param),
        )
