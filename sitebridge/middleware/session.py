"""
Session Middleware for sitebridge

Starts the session of each request. A session id arriving as an encrypted
query parameter (the receiving end of the cross-domain bridge) takes
precedence over the session cookie.
"""
import logging
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.types import ASGIApp

from sitebridge.exceptions import CryptoError
from sitebridge.routes.resources import RESOURCE_TAG
from sitebridge.services.encrypter import Encrypter
from sitebridge.utils.session_manager import Session, SessionManager

logger = logging.getLogger(__name__)

PREFETCH_HEADERS = ("purpose", "sec-purpose", "x-moz")


class StartSessionMiddleware(BaseHTTPMiddleware):
    """Middleware that loads, stores and saves the request session."""

    def __init__(
        self,
        app: ASGIApp,
        sessions: SessionManager,
        encrypter: Encrypter,
        cookie_name: str = "sitebridge_session",
        query_param: str = "s_code",
        secure_cookie: bool = False,
    ):
        super().__init__(app)
        self.sessions = sessions
        self.encrypter = encrypter
        self.cookie_name = cookie_name
        self.query_param = query_param
        self.secure_cookie = secure_cookie

    async def dispatch(self, request: Request, call_next):
        session = self.get_session(request)
        request.state.session = session

        response = await call_next(request)

        self.store_current_url(request, session)
        self.sessions.save_session(session)

        response.set_cookie(
            key=self.cookie_name,
            value=session.session_id,
            httponly=True,
            samesite="lax",
            secure=self.secure_cookie,
        )
        return response

    def session_id_from(self, request: Request) -> Optional[str]:
        """Session id from the bridge token, falling back to the cookie."""
        token = request.query_params.get(self.query_param)
        if token:
            try:
                return self.encrypter.decrypt(token)
            except CryptoError:
                logger.warning("Discarding invalid %s token from %s", self.query_param, request.url.hostname)

        return request.cookies.get(self.cookie_name)

    def get_session(self, request: Request) -> Session:
        return self.sessions.get_or_create_session(self.session_id_from(request))

    def store_current_url(self, request: Request, session: Session):
        """Remember top-level page views for redirect-back."""
        route = request.scope.get("route")
        if route is None:
            return

        if RESOURCE_TAG in (getattr(route, "tags", None) or []):
            return

        if (
            request.method == "GET"
            and not is_ajax(request)
            and not is_prefetch(request)
        ):
            session.set_previous_url(str(request.url.replace(query="")))


def is_ajax(request: Request) -> bool:
    return request.headers.get("x-requested-with", "").lower() == "xmlhttprequest"


def is_prefetch(request: Request) -> bool:
    return any(
        request.headers.get(header, "").lower() == "prefetch"
        for header in PREFETCH_HEADERS
    )
