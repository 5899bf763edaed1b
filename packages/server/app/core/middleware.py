"""
Cross-origin support.

Regular responses get their CORS headers from FastAPI's CORSMiddleware.
PreflightMiddleware answers OPTIONS on any path before routing and
authentication run.
"""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]
CORS_ALLOW_METHODS = ["GET", "POST", "OPTIONS"]


def cors_headers(allow_origin: str = "*") -> dict[str, str]:
    """Headers for responses built outside CORSMiddleware (preflight, 500s)."""
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
        "Access-Control-Allow-Methods": ", ".join(CORS_ALLOW_METHODS),
    }


class PreflightMiddleware(BaseHTTPMiddleware):
    """Short-circuit every OPTIONS request with an empty 200."""

    def __init__(self, app, allow_origins: list[str] | None = None):
        super().__init__(app)
        self.allow_origins = allow_origins or ["*"]

    def _allow_origin(self, request: Request) -> str:
        if "*" in self.allow_origins:
            return "*"
        origin = request.headers.get("origin")
        if origin in self.allow_origins:
            return origin
        return self.allow_origins[0]

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=cors_headers(self._allow_origin(request)))
        return await call_next(request)
