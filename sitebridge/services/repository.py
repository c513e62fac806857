"""
Default site repository for sitebridge

Reads backing records from the `domains` list of each site in the sites
YAML file.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sitebridge.models.config import SitesConfig
from sitebridge.models.contracts import SiteRepository

if TYPE_CHECKING:
    from sitebridge.config import Settings


@dataclass
class DomainRecord:
    """A backing record held in memory."""
    domain: str
    enabled: bool = True
    extra: Dict[str, Any] = field(default_factory=dict)

    def is_enabled(self) -> bool:
        return self.enabled

    def get_domain(self) -> str:
        return self.domain

    def get_extra_data(self, key: str) -> Optional[Any]:
        return self.extra.get(key)


class ConfigSiteRepository(SiteRepository):
    """Repository backed by the sites configuration file."""

    def __init__(self, config: Optional[SitesConfig] = None):
        if config is None:
            from sitebridge.services.site_loader import read_sites_config
            config = read_sites_config()
        self._records: Dict[str, List[DomainRecord]] = {
            slug: [
                DomainRecord(domain=item.domain, enabled=item.enabled, extra=dict(item.extra))
                for item in options.domains
            ]
            for slug, options in config.sites.items()
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConfigSiteRepository":
        from sitebridge.services.site_loader import read_sites_config
        return cls(read_sites_config(settings.sites_config))

    def get_by_slug(self, slug: str) -> List[DomainRecord]:
        return list(self._records.get(slug, []))
