"""
Site entity for sitebridge
"""
from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Optional, Tuple

if TYPE_CHECKING:
    from fastapi import APIRouter

    from sitebridge.models.contracts import RouteGroup


@dataclass(frozen=True, eq=False)
class Site:
    """
    One tenant served under one or more domains.

    Only domains of enabled backing records are listed; the first one is
    canonical. Sites compare by identity.
    """
    name: str
    title: str
    domains: Tuple[str, ...] = ()
    domain_params: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    route_registrars: Tuple[RouteGroup, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "domains", tuple(self.domains))
        object.__setattr__(self, "route_registrars", tuple(self.route_registrars))
        object.__setattr__(self, "domain_params", MappingProxyType({
            domain: MappingProxyType(dict(params))
            for domain, params in self.domain_params.items()
        }))

    @property
    def slug(self) -> str:
        return self.name

    @property
    def enabled(self) -> bool:
        """A site without any enabled domain is disabled."""
        return bool(self.domains)

    @property
    def canonical_domain(self) -> Optional[str]:
        return self.domains[0] if self.domains else None

    def has_domain(self, domain: str) -> bool:
        return domain in self.domains

    def params_for(self, domain: str) -> Mapping[str, Any]:
        """Get the extra parameters stored for one domain."""
        return self.domain_params.get(domain, MappingProxyType({}))

    def register_routes(self, router: APIRouter) -> None:
        """Let every registrar of this site add its routes."""
        for registrar in self.route_registrars:
            registrar.register(router, self)

    def __repr__(self) -> str:
        return f"Site(name={self.name!r}, domains={list(self.domains)!r})"
