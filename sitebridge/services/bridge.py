"""
Cross-domain session bridge for sitebridge

Outgoing HTML pages carry one invisible image per sibling site. Each image
requests the sibling's beacon endpoint with the encrypted session id, so the
sibling domain adopts the same session.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

from sitebridge.models.site import Site
from sitebridge.services.encrypter import Encrypter
from sitebridge.services.urls import UrlGenerator
from sitebridge.services.views import ViewRenderer

logger = logging.getLogger(__name__)

CLOSING_BODY = "</body>"


@dataclass
class Beacon:
    """One image request towards a sibling site."""
    site: Site
    url: str


def is_html(content_type: Optional[str]) -> bool:
    return bool(content_type) and content_type.lower().startswith("text/html")


def inject_before_body_end(html: str, markup: str) -> str:
    """
    Insert ``markup`` before the first ``</body>``.

    Only the first occurrence is used; a page without ``</body>`` is returned
    unchanged.
    """
    index = html.find(CLOSING_BODY)
    if index == -1:
        return html
    return html[:index] + markup + "\n" + html[index:]


class SessionBridge:
    """Builds and injects sibling-domain beacons."""

    def __init__(
        self,
        encrypter: Encrypter,
        renderer: ViewRenderer,
        beacon_path: str = "/_sitebridge/beacon.gif",
        query_param: str = "s_code",
    ):
        self.encrypter = encrypter
        self.renderer = renderer
        self.beacon_path = beacon_path
        self.query_param = query_param

    def beacons(self, siblings: Iterable[Site], session_id: str, urls: UrlGenerator) -> List[Beacon]:
        """Build a beacon per sibling, each with its own encryption of the id."""
        return [
            Beacon(
                site=site,
                url=urls.site_url(
                    site.name,
                    self.beacon_path,
                    **{self.query_param: self.encrypter.encrypt(session_id)}
                ),
            )
            for site in siblings
        ]

    def render(self, beacons: List[Beacon], view_context: Optional[Mapping[str, Any]] = None) -> str:
        """Render the beacon markup with the request's view context."""
        return self.renderer.render("beacons.html", view_context or {}, beacons=beacons).strip()

    def inject(
        self,
        html: str,
        siblings: Iterable[Site],
        session_id: str,
        urls: UrlGenerator,
        view_context: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Add the beacons for ``siblings`` to an HTML document."""
        beacons = self.beacons(siblings, session_id, urls)
        if not beacons:
            return html
        logger.debug("Injecting %d session beacons", len(beacons))
        return inject_before_body_end(html, self.render(beacons, view_context))
