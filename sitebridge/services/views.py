"""
View rendering for sitebridge

Templates receive an explicit context; the active site travels in the
request's view context under SITE_VIEW_KEY instead of a shared global.
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

SITE_VIEW_KEY = "__site"


class ViewRenderer:
    """Renders templates from the sitebridge package and optional extra folders."""

    def __init__(self, search_paths: Optional[Iterable[Path]] = None):
        loaders = [FileSystemLoader([str(p) for p in search_paths])] if search_paths else []
        loaders.append(PackageLoader("sitebridge", "templates"))
        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def render(self, template: str, context: Mapping[str, Any], **values: Any) -> str:
        """Render ``template`` with the view context and extra values."""
        data = dict(context)
        data.update(values)
        return self.env.get_template(template).render(**data)

