"""
Site Routing Middleware for sitebridge

Resolves the site of each request from the Host header and injects the
cross-domain session beacons into outgoing HTML.
"""
import logging
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from sitebridge.services.bridge import SessionBridge, is_html
from sitebridge.services.events import EventDispatcher
from sitebridge.services.site_loader import SiteContext, SiteRegistry, get_site_registry

logger = logging.getLogger(__name__)


class SiteMiddleware(BaseHTTPMiddleware):
    """Middleware that binds the active site to each request."""

    def __init__(
        self,
        app: ASGIApp,
        bridge: SessionBridge,
        main_domain: str,
        registry: Optional[SiteRegistry] = None,
        events: Optional[EventDispatcher] = None,
    ):
        super().__init__(app)
        self.registry = registry or get_site_registry()
        self.bridge = bridge
        self.main_domain = main_domain
        self.events = events

    async def dispatch(self, request: Request, call_next):
        context = await self.registry.handle_request(request, self.events)
        try:
            response = await call_next(request)

            if is_html(response.headers.get("content-type")):
                response = await self.handle_response(request, response, context)

            return response
        finally:
            self.registry.unbind(context)

    async def handle_response(self, request: Request, response: Response, context: SiteContext) -> Response:
        """Rewrite an HTML response with beacons for every sibling site."""
        session = getattr(request.state, "session", None)
        if session is None:
            logger.debug("No session on request, skipping session beacons")
            return response

        siblings = self.registry.sibling_sites(self.main_domain, context.site)

        # The body must be complete before it can be rewritten
        body = b"".join([chunk async for chunk in response.body_iterator])
        html = body.decode("utf-8", errors="surrogateescape")
        content = self.bridge.inject(html, siblings, session.session_id, context.urls, context.view_context)
        content_bytes = content.encode("utf-8", errors="surrogateescape")

        rewritten = Response(
            content=content_bytes,
            status_code=response.status_code,
            background=response.background,
        )
        rewritten.raw_headers = [
            (key, value) for key, value in response.raw_headers
            if key.lower() != b"content-length"
        ]
        rewritten.raw_headers.append((b"content-length", str(len(content_bytes)).encode("latin-1")))
        return rewritten
