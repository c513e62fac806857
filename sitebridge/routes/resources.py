"""
Resource Routes for sitebridge

Served on every site domain without a per-site path prefix: each site reads
`/css/app.css` from its own storage namespace. Also hosts the receiving end of
the cross-domain session bridge.
"""
from fastapi import APIRouter, Request, HTTPException
from fastapi.responses import FileResponse, Response
from pathlib import Path
import base64
import mimetypes

RESOURCE_TAG = "site-resources"

# Asset folders served per site
RESOURCE_KINDS = ("css", "js", "images", "fonts")

# 1x1 transparent GIF
TRANSPARENT_GIF = base64.b64decode("R0lGODlhAQABAIAAAAAAAP///yH5BAEAAAAALAAAAAABAAEAAAIBRAA7")


def get_site_or_404(request: Request):
    """Get the active site from the request context or raise 404."""
    context = getattr(request.state, "site_context", None)
    if context is None or context.site is None:
        raise HTTPException(status_code=404, detail="Site not found for this domain")
    return context.site


def resolve_asset(root: Path, kind: str, path: str) -> Path:
    """Find an asset file below ``root/kind`` or raise 404."""
    base = (root / kind).resolve()
    candidate = (base / path).resolve()

    if not candidate.is_relative_to(base) or not candidate.is_file():
        raise HTTPException(status_code=404, detail=f"Resource not found: {kind}/{path}")
    return candidate


def build_resource_router(assets_path: Path, beacon_path: str) -> APIRouter:
    """Create the resource route group shared by every site."""
    router = APIRouter(tags=[RESOURCE_TAG])

    @router.get(beacon_path, name="beacon")
    async def session_beacon(request: Request):
        """Receiving end of the session bridge; the session middleware adopts the id."""
        get_site_or_404(request)
        return Response(
            content=TRANSPARENT_GIF,
            media_type="image/gif",
            headers={"Cache-Control": "no-store, no-cache, must-revalidate"}
        )

    for kind in RESOURCE_KINDS:
        router.add_api_route(
            f"/{kind}/{{path:path}}",
            _resource_endpoint(assets_path, kind),
            methods=["GET"],
            name=f"resource.{kind}",
        )

    return router


def _resource_endpoint(assets_path: Path, kind: str):
    async def serve_resource(request: Request, path: str):
        """Serve a static asset from the active site's storage namespace."""
        get_site_or_404(request)
        storage = request.state.site_context.storage_namespace
        asset = resolve_asset(assets_path / storage, kind, path)
        media_type, _ = mimetypes.guess_type(str(asset))
        return FileResponse(
            path=asset,
            media_type=media_type or "application/octet-stream"
        )

    return serve_resource
