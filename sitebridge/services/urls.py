"""
URL generation defaults for sitebridge

Every enabled site registers `<prefix><site name> -> canonical domain` so links
to any site can be built whichever site is active.
"""
from __future__ import annotations
from typing import Dict, Mapping
from urllib.parse import urlencode

from sitebridge.exceptions import SiteNotFoundError


class UrlGenerator:
    """Request-scoped URL builder."""

    def __init__(self, scheme: str = "http", prefix: str = "__site_"):
        self.scheme = scheme
        self.prefix = prefix
        self._defaults: Dict[str, str] = {}

    def defaults(self, values: Mapping[str, str]):
        """Merge default parameters."""
        self._defaults.update(values)

    def get_defaults(self) -> Dict[str, str]:
        return dict(self._defaults)

    def domain_for(self, site_name: str) -> str:
        try:
            return self._defaults[self.prefix + site_name]
        except KeyError:
            raise SiteNotFoundError(site_name) from None

    def site_url(self, site_name: str, path: str = "/", **query: str) -> str:
        """Build an absolute URL on a site's canonical domain."""
        url = f"{self.scheme}://{self.domain_for(site_name)}/{path.lstrip('/')}"
        if query:
            url += "?" + urlencode(query)
        return url
