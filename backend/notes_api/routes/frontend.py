"""
Notes API — Frontend & Unknown Endpoint Routes
===============================================

What:  Serves the separate frontend's production build and answers every
       request no other route matched.
How:   `GET /` (and HEAD) returns build/index.html (or a placeholder page). The
       catch-all route serves files from the build directory for GET/HEAD
       and otherwise returns 404 {"error": "unknown endpoint"}.

This router MUST be included after every other router: its catch-all path
matches anything, including known paths called with an unsupported method.
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse, Response

from notes_api.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Frontend"])

PLACEHOLDER_PAGE = "<h1>Hello World!</h1>"

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def resolve_static_file(relative_path: str) -> Optional[Path]:
    """
    Map a request path onto a file inside the static root.

    Returns None when the file does not exist or the path would leave the
    static root (e.g. ../../etc/passwd).
    """
    root = Path(settings.static_root).resolve()
    candidate = (root / relative_path.lstrip("/")).resolve()
    if candidate != root and root not in candidate.parents:
        return None
    if not candidate.is_file():
        return None
    return candidate


@router.api_route(
    "/",
    methods=["GET", "HEAD"],
    response_class=HTMLResponse,
    summary="Frontend entry page",
)
async def index() -> Response:
    page = resolve_static_file("index.html")
    if page is not None:
        return FileResponse(path=str(page), media_type="text/html")
    return HTMLResponse(PLACEHOLDER_PAGE)


@router.api_route(
    "/{full_path:path}",
    methods=ALL_METHODS,
    include_in_schema=False,
)
async def unknown_endpoint(full_path: str, request: Request) -> Response:
    if request.method in ("GET", "HEAD"):
        static_file = resolve_static_file(full_path)
        if static_file is not None:
            return FileResponse(path=str(static_file))

    logger.debug("Unknown endpoint: %s %s", request.method, request.url.path)
    return JSONResponse(status_code=404, content={"error": "unknown endpoint"})
