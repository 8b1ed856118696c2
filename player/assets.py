"""Built widget assets and the snippets that load them into host pages.

Every ``.js`` file in the dist directory is served under ``/js/`` and every
``.css`` file under ``/css/``; anything else is ignored.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse, StreamingResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
templates = Jinja2Templates(directory=str(_TEMPLATES_DIR))

_ROUTE_PREFIXES = {
    ".js": ("js", "application/javascript"),
    ".css": ("css", "text/css"),
}
_CHUNK_SIZE = 64 * 1024


class AssetRoute(BaseModel):
    path: str  # e.g. "js/music-player.iife.js"
    file: Path
    media_type: str


def discover_assets(dist_dir: Path) -> list[AssetRoute]:
    """Map each servable file in *dist_dir* to its route (empty if missing)."""
    if not dist_dir.is_dir():
        return []
    routes: list[AssetRoute] = []
    for file in sorted(dist_dir.iterdir()):
        if not file.is_file() or file.suffix not in _ROUTE_PREFIXES:
            continue
        prefix, media_type = _ROUTE_PREFIXES[file.suffix]
        routes.append(AssetRoute(path=f"{prefix}/{file.name}", file=file, media_type=media_type))
    return routes


def iter_file(path: Path) -> Iterator[bytes]:
    with path.open("rb") as fh:
        while chunk := fh.read(_CHUNK_SIZE):
            yield chunk


def build_asset_router(dist_dir: Path) -> APIRouter:
    """Router serving the assets found in *dist_dir* at startup."""
    router = APIRouter(tags=["assets"])
    table = {route.path: route for route in discover_assets(dist_dir)}

    @router.get("/js/{name}")
    @router.get("/css/{name}")
    async def asset(request: Request, name: str):
        prefix = request.url.path.strip("/").split("/", 1)[0]
        route = table.get(f"{prefix}/{name}")
        if route is None:
            raise HTTPException(status_code=404, detail="Asset not found")
        return StreamingResponse(iter_file(route.file), media_type=route.media_type)

    return router


# ---------------------------------------------------------------------------
# Injection snippets
# ---------------------------------------------------------------------------

router = APIRouter(prefix="/embed", tags=["embed"])


@router.get("/head", response_class=HTMLResponse)
async def head_snippet(request: Request):
    """Stylesheet link for the host page's ``<head>``."""
    return templates.TemplateResponse(
        request,
        "head_end.html",
        {"enabled": request.app.state.settings.enable},
    )


@router.get("/body", response_class=HTMLResponse)
async def body_snippet(request: Request):
    """Config + loader script for the end of the host page's ``<body>``."""
    settings = request.app.state.settings
    return templates.TemplateResponse(
        request,
        "body_end.html",
        {
            "enabled": settings.enable,
            "config": settings.music_config().model_dump(by_alias=True),
        },
    )
