"""
Route composition for sitebridge

Every domain gets one router combining, in order: the main routes (main
domain only), the shared resource routes and the owning site's routes (site
domains only) and the global routes. Global routes also answer unknown hosts.
"""
from __future__ import annotations
import importlib
import importlib.util
import logging
from typing import TYPE_CHECKING, Dict, List, Optional

from fastapi import APIRouter, FastAPI
from starlette.routing import Host

from sitebridge.exceptions import ConfigurationError
from sitebridge.routes.resources import build_resource_router

if TYPE_CHECKING:
    from sitebridge.config import Settings
    from sitebridge.services.site_loader import SiteRegistry

logger = logging.getLogger(__name__)

MAIN_ROUTE_NAME = "main"


def load_route_module(package: Optional[str], name: str) -> Optional[APIRouter]:
    """Import ``package.name`` and return its ``router``; None if the module does not exist."""
    if not package:
        return None

    module_name = f"{package}.{name}"
    try:
        module_spec = importlib.util.find_spec(module_name)
    except ModuleNotFoundError as exc:
        raise ConfigurationError(f"Routes package {package} not found", details={"package": package}) from exc

    if module_spec is None:
        return None

    router = getattr(importlib.import_module(module_name), "router", None)
    if not isinstance(router, APIRouter):
        raise ConfigurationError(f"{module_name} does not define an APIRouter named router")
    return router


def build_site_routers(registry: SiteRegistry) -> Dict[str, APIRouter]:
    """Collect the routes of every site from its registrars."""
    routers = {}
    for site in registry.all():
        router = APIRouter()
        site.register_routes(router)
        routers[site.name] = router
    return routers


def register_routes(
    app: FastAPI,
    registry: SiteRegistry,
    settings: Settings,
    main_router: Optional[APIRouter] = None,
    global_router: Optional[APIRouter] = None,
):
    """Mount the main, resource, site and global route groups on ``app``."""
    if main_router is None:
        main_router = load_route_module(settings.routes_package, "main")
    if global_router is None:
        global_router = load_route_module(settings.routes_package, "global")

    resources = build_resource_router(settings.assets_path, settings.beacon_path)
    site_routers = build_site_routers(registry)

    hosts: Dict[str, List[APIRouter]] = {}
    if main_router is not None:
        hosts[settings.main_domain] = [main_router]

    for site in registry.all():
        for domain in site.domains:
            hosts.setdefault(domain, []).extend([resources, site_routers[site.name]])

    for domain, routers in hosts.items():
        host_router = APIRouter()
        for router in routers:
            host_router.include_router(router)
        if global_router is not None:
            host_router.include_router(global_router)

        app.router.routes.append(Host(domain, app=host_router, name=_host_name(registry, settings, domain)))
        logger.debug("Registered %d routes for %s", len(host_router.routes), domain)

    if global_router is not None:
        app.include_router(global_router)


def _host_name(registry: SiteRegistry, settings: Settings, domain: str) -> Optional[str]:
    """Canonical domains are named after their site so url_for('site:route') works."""
    site = registry.by_domain(domain)
    if site is not None and site.canonical_domain == domain:
        return site.name
    if domain == settings.main_domain:
        return MAIN_ROUTE_NAME
    return None
