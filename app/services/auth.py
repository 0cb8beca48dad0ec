"""
Authentication seam for the API.

Session storage lives outside this service; routes only depend on a
``SessionProvider`` that resolves the caller of a request.
"""
import hmac
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol

from fastapi import Depends, Request

from app.utils.exceptions import AuthenticationError
from app.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SessionUser:
    user_id: str
    role: Optional[str] = None


class SessionProvider(Protocol):
    def get_user(self, request: Request) -> Optional[SessionUser]:
        ...


class BearerTokenSessionProvider:
    """Accepts ``Authorization: Bearer <token>`` for any configured token"""

    def __init__(self, tokens: Iterable[str]):
        self._tokens = [t for t in tokens if t]

    def get_user(self, request: Request) -> Optional[SessionUser]:
        header = request.headers.get("authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        token = token.strip()
        for index, known in enumerate(self._tokens):
            if hmac.compare_digest(token.encode(), known.encode()):
                return SessionUser(user_id=f"token-{index}")
        return None


def get_session_provider(request: Request) -> SessionProvider:
    return request.app.state.session_provider


def require_user(request: Request, provider: SessionProvider = Depends(get_session_provider)) -> SessionUser:
    """FastAPI dependency: the authenticated caller, or 401"""
    user = provider.get_user(request)
    if user is None:
        logger.info("Rejected unauthenticated request", extra={"path": request.url.path})
        raise AuthenticationError()
    return user
