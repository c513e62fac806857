"""
Site Registry for sitebridge

Loads sites once from configuration and the site repository, resolves hosts
to sites and keeps the request-scoped "current site" binding.
"""
from __future__ import annotations
import logging
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union
import yaml

from sitebridge.exceptions import ConfigurationError, MissingParameterError, StateError
from sitebridge.models.config import SiteOptions, SitesConfig
from sitebridge.models.contracts import RouteGroup, SiteRecord, SiteRepository
from sitebridge.models.site import Site
from sitebridge.services.events import SITE_FOUND, EventDispatcher
from sitebridge.services.urls import UrlGenerator
from sitebridge.services.views import SITE_VIEW_KEY
from sitebridge.utils.imports import import_string

if TYPE_CHECKING:
    from starlette.requests import Request

    from sitebridge.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class SiteContext:
    """Everything bound to one request by the registry."""
    request: Request
    urls: UrlGenerator
    storage_namespace: str
    site: Optional[Site] = None
    view_context: Dict[str, Any] = field(default_factory=dict)
    token: Optional[Token] = field(default=None, repr=False)


# Request-scoped binding; never shared between concurrent requests
_site_context: ContextVar[Optional[SiteContext]] = ContextVar("sitebridge_site_context", default=None)


def current_site_name() -> Optional[str]:
    """Slug of the site bound to the running request, if any."""
    context = _site_context.get()
    if context is None or context.site is None:
        return None
    return context.site.name


def normalize_host(host: str) -> str:
    return host.lower().split(":")[0]


def read_sites_config(path: Optional[Path] = None) -> SitesConfig:
    """Load the sites YAML file; a missing file means no sites."""
    if path is None:
        from sitebridge.config import get_settings
        path = get_settings().sites_config

    if not path.exists():
        logger.warning("Sites config %s not found, no sites loaded", path)
        return SitesConfig()

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return SitesConfig.model_validate(data)


def resolve_repository(identifier: str, settings: Optional[Settings] = None) -> SiteRepository:
    """Import and instantiate the configured repository class."""
    repository_class = import_string(identifier)
    if not isinstance(repository_class, type) or not issubclass(repository_class, SiteRepository):
        raise ConfigurationError(
            "Configured repository does not implement SiteRepository",
            details={"repository": identifier},
        )
    if settings is not None:
        return repository_class.from_settings(settings)
    return repository_class()


def _make_route_group(identifier: str) -> RouteGroup:
    target = import_string(identifier)
    group = target() if isinstance(target, type) else target
    if not isinstance(group, RouteGroup):
        raise ConfigurationError(
            f"{identifier} does not implement RouteGroup",
            details={"route_group": identifier},
        )
    return group


class SiteRegistry:
    """Holds every configured site in configuration order."""

    def __init__(self, default_storage: str = "local", url_default_prefix: str = "__site_"):
        self.default_storage = default_storage
        self.url_default_prefix = url_default_prefix
        self._sites: List[Site] = []

    @classmethod
    def from_settings(cls, settings: Settings) -> "SiteRegistry":
        """Build and load a registry from application settings."""
        registry = cls(
            default_storage=settings.default_storage,
            url_default_prefix=settings.url_default_prefix,
        )
        registry.load(
            read_sites_config(settings.sites_config),
            resolve_repository(settings.model_repository, settings),
        )
        return registry

    # -- Loading --------------------------------------------------------------

    def load(
        self,
        config: Union[SitesConfig, Mapping[str, SiteOptions]],
        repository: SiteRepository,
    ):
        """Build a Site for every configured slug from its backing records."""
        if not isinstance(repository, SiteRepository):
            raise ConfigurationError("Configured repository does not implement SiteRepository")

        sites_options = config.sites if isinstance(config, SitesConfig) else config
        claimed: Dict[str, str] = {
            domain: site.name for site in self._sites for domain in site.domains
        }

        for slug, options in sites_options.items():
            if isinstance(options, Mapping):
                options = SiteOptions.model_validate(options)

            domains: List[str] = []
            params: Dict[str, Dict[str, Any]] = {}
            provided = set()

            for record in repository.get_by_slug(slug) or []:
                if not isinstance(record, SiteRecord):
                    raise ConfigurationError(
                        f"Repository returned an invalid record for site {slug}",
                        details={"site": slug, "record": repr(record)},
                    )

                domain = record.get_domain()
                # Several records may share a domain; the site serves it once
                if record.is_enabled() and domain not in domains:
                    domains.append(domain)

                for param in options.extra_params:
                    value = record.get_extra_data(param)
                    if value is not None:
                        params.setdefault(domain, {})[param] = value
                        provided.add(param)

            for param, param_options in options.extra_params.items():
                if param_options.required and param not in provided:
                    raise MissingParameterError(site=slug, parameter=param)

            for domain in domains:
                if domain in claimed:
                    raise ConfigurationError(
                        f"Domain {domain} is claimed by both {claimed[domain]} and {slug}",
                        details={"domain": domain, "sites": [claimed[domain], slug]},
                    )
                claimed[domain] = slug

            site = Site(
                name=slug,
                title=options.title or slug.replace("_", " ").title(),
                domains=tuple(domains),
                domain_params=params,
                route_registrars=tuple(_make_route_group(identifier) for identifier in options.routes),
            )
            self._sites.append(site)
            logger.debug("Loaded site %s with domains %s", site.name, list(site.domains))

        logger.info(
            "Site registry loaded %d sites (%d enabled)",
            len(self._sites), len(self.enabled_sites())
        )

    # -- Lookups --------------------------------------------------------------

    def all(self) -> List[Site]:
        return list(self._sites)

    def enabled_sites(self) -> List[Site]:
        return [site for site in self._sites if site.enabled]

    def by_domain(self, domain: str) -> Optional[Site]:
        """First site, in registry order, serving ``domain``."""
        return next((site for site in self._sites if site.has_domain(domain)), None)

    def by_slug(self, slug: str) -> Optional[Site]:
        return next((site for site in self._sites if site.slug == slug), None)

    def by_id(self, index: int) -> Optional[Site]:
        if 0 <= index < len(self._sites):
            return self._sites[index]
        return None

    def resolve(self, host: str) -> Optional[Site]:
        """Find the site for a raw Host header value."""
        return self.by_domain(normalize_host(host))

    def sibling_sites(self, main_domain: str, current: Optional[Site]) -> List[Site]:
        """Enabled sites other than the current one and the main domain's site."""
        excluded = [site for site in (self.by_domain(main_domain), current) if site is not None]
        return [
            site for site in self.enabled_sites()
            if not any(site is other for other in excluded)
        ]

    # -- Request binding ------------------------------------------------------

    def bind(self, request: Request) -> SiteContext:
        """Bind ``request`` to the registry, reusing an existing binding."""
        context = getattr(request.state, "site_context", None)
        if context is None:
            context = SiteContext(
                request=request,
                urls=UrlGenerator(scheme=request.url.scheme, prefix=self.url_default_prefix),
                storage_namespace=self.default_storage,
            )
            request.state.site_context = context
        if context.token is None:
            context.token = _site_context.set(context)
        return context

    def unbind(self, context: SiteContext):
        if context.token is not None:
            _site_context.reset(context.token)
            context.token = None

    def context(self) -> SiteContext:
        context = _site_context.get()
        if context is None:
            raise StateError()
        return context

    def current(self) -> Optional[Site]:
        """The site of the bound request; None when its host matched no site."""
        return self.context().site

    async def handle_request(self, request: Request, events: Optional[EventDispatcher] = None) -> SiteContext:
        """Bind the request, resolve its site and set URL defaults."""
        context = self.bind(request)

        if context.site is None:
            site = self.resolve(request.headers.get("host", ""))
            if site:
                if events is not None:
                    await events.dispatch(SITE_FOUND, site)
                self.register_current_site(context, site)

        for site in self.enabled_sites():
            context.urls.defaults({self.url_default_prefix + site.name: site.domains[0]})

        return context

    def register_current_site(self, context: SiteContext, site: Site):
        """Make ``site`` the active site of the request."""
        context.site = site
        context.view_context[SITE_VIEW_KEY] = site
        context.storage_namespace = site.slug
        logger.debug("Resolved site %s for %s", site.name, context.request.url.hostname)


# Global instance
_site_registry: Optional[SiteRegistry] = None


def get_site_registry() -> SiteRegistry:
    """Get the global site registry, loading it on first use."""
    global _site_registry
    if _site_registry is None:
        from sitebridge.config import get_settings
        _site_registry = SiteRegistry.from_settings(get_settings())
    return _site_registry
