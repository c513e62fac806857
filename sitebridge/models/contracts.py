"""
Collaborator contracts for sitebridge

Repositories supply backing records for a site slug; route groups add
site-specific routes to a router. Both are checked when the registry loads.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from fastapi import APIRouter

    from sitebridge.config import Settings
    from sitebridge.models.site import Site


@runtime_checkable
class SiteRecord(Protocol):
    """One backing record (domain) of a site."""

    def is_enabled(self) -> bool: ...

    def get_domain(self) -> str: ...

    def get_extra_data(self, key: str) -> Optional[Any]: ...


class SiteRepository(ABC):
    """Supplies raw site records."""

    @classmethod
    def from_settings(cls, settings: Settings) -> "SiteRepository":
        """Build the repository configured in ``settings``."""
        return cls()

    @abstractmethod
    def get_by_slug(self, slug: str) -> Sequence[SiteRecord]:
        """Return the records of a site in their stored order."""


class RouteGroup(ABC):
    """Registers routes shared by every domain of a site."""

    @abstractmethod
    def register(self, router: APIRouter, site: Site) -> None:
        """Add routes to ``router`` on behalf of ``site``."""
