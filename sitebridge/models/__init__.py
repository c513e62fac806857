"""sitebridge models."""
from sitebridge.models.config import DomainRecordConfig, ParamOptions, SiteOptions, SitesConfig
from sitebridge.models.contracts import RouteGroup, SiteRecord, SiteRepository
from sitebridge.models.site import Site

__all__ = [
    "DomainRecordConfig",
    "ParamOptions",
    "RouteGroup",
    "Site",
    "SiteOptions",
    "SiteRecord",
    "SiteRepository",
    "SitesConfig",
]
