"""
PromptMesh MCP Server

Entry point for the FastAPI application.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.mcp import router as mcp_router
from app.core.auth import AuthenticationError
from app.core.config import get_settings
from app.core.database import engine, init_db
from app.core.logging import configure_logging
from app.core.middleware import (
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    PreflightMiddleware,
    cors_headers,
)
from promptmesh_shared.schemas.jsonrpc import INTERNAL_ERROR, JsonRpcResponse

settings = get_settings()
log = structlog.get_logger()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="PromptMesh MCP Server",
        description="Organization-scoped prompt access for MCP clients.",
        version=settings.server_version,
        docs_url="/docs",
        redoc_url=None,
        openapi_url="/openapi.json",
    )

    # Middleware (last added is outermost)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
    )
    app.add_middleware(PreflightMiddleware, allow_origins=settings.cors_origins)

    app.include_router(mcp_router, prefix="/mcp", tags=["MCP"])

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(request: Request, exc: AuthenticationError):
        return JSONResponse(status_code=401, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return PlainTextResponse("Not Found", status_code=404)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        log.exception("server.unhandled_error", path=request.url.path)
        return JSONResponse(
            status_code=500,
            content=JsonRpcResponse.failure(INTERNAL_ERROR, "Internal error").to_wire(),
            headers=cors_headers(),
        )

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint for liveness probes."""
        return {"status": "ok"}

    @app.on_event("startup")
    async def on_startup():
        configure_logging(settings.log_level, settings.log_format)
        log.info("PromptMesh MCP server starting", version=settings.server_version)
        if settings.create_tables_on_startup:
            await init_db()

    @app.on_event("shutdown")
    async def on_shutdown():
        log.info("PromptMesh MCP server shutting down")
        await engine.dispose()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
