"""
sitebridge - Main Application

Multi-site routing layer: resolves the site of every request from its host and
carries the session between sibling domains.
"""
from typing import List, Optional

from fastapi import FastAPI

from sitebridge.config import Settings, get_settings
from sitebridge.middleware.session import StartSessionMiddleware
from sitebridge.middleware.sites import SiteMiddleware
from sitebridge.routes.composition import register_routes
from sitebridge.services.bridge import SessionBridge
from sitebridge.services.encrypter import Encrypter
from sitebridge.services.events import EventDispatcher
from sitebridge.services.site_loader import SiteRegistry
from sitebridge.services.views import ViewRenderer
from sitebridge.utils.logging import setup_logging
from sitebridge.utils.session_manager import SessionManager


def create_app(
    settings: Optional[Settings] = None,
    registry: Optional[SiteRegistry] = None,
    sessions: Optional[SessionManager] = None,
    events: Optional[EventDispatcher] = None,
) -> FastAPI:
    """Build the application; a registry that fails to load stops startup."""
    settings = settings or get_settings()
    registry = registry or SiteRegistry.from_settings(settings)
    sessions = sessions or SessionManager(ttl_seconds=settings.session_ttl_seconds)
    events = events or EventDispatcher()
    encrypter = Encrypter.from_secret(settings.secret_key)

    app = FastAPI(
        title=settings.app_name,
        description="Multi-site routing with cross-domain sessions",
        version="0.1.0",
        debug=settings.debug
    )
    app.state.settings = settings
    app.state.registry = registry
    app.state.sessions = sessions
    app.state.events = events
    app.state.encrypter = encrypter

    # Middleware stack (order matters - last added runs first)
    app.add_middleware(
        SiteMiddleware,
        registry=registry,
        events=events,
        main_domain=settings.main_domain,
        bridge=SessionBridge(
            encrypter=encrypter,
            renderer=ViewRenderer(),
            beacon_path=settings.beacon_path,
            query_param=settings.sso_query_param,
        ),
    )
    app.add_middleware(
        StartSessionMiddleware,
        sessions=sessions,
        encrypter=encrypter,
        cookie_name=settings.session_cookie,
        query_param=settings.sso_query_param,
        secure_cookie=not settings.debug,
    )

    register_routes(app, registry, settings)

    return app


def startup_banner(settings: Settings, registry: SiteRegistry) -> List[str]:
    """Lines printed when the server starts, listing the loaded sites."""
    sites = registry.all()
    lines = [
        "=" * 50,
        settings.app_name,
        "=" * 50,
        f"Server starting at http://{settings.host}:{settings.port}",
        f"Main domain: {settings.main_domain}",
        f"Sites configured: {len(sites)}",
    ]
    for site in sites:
        domains = list(site.domains)
        lines.append(f"   • {site.name} ({', '.join(domains[:2])}{'...' if len(domains) > 2 else ''})")
    lines.append("=" * 50)
    return lines


def build_app() -> FastAPI:
    """Entry point for uvicorn's factory mode."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_json)
    return create_app(settings)


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "sitebridge.main:build_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
