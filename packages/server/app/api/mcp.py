"""
MCP transport endpoints.

POST /mcp         — JSON-RPC call endpoint (one request per body)
GET  /mcp/stream  — SSE stream (connection handshake, then held open)

Both require ``Authorization: Bearer <api key>``; the key's organization is
the scope of every read.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from sse_starlette.sse import EventSourceResponse

from app.core.auth import Principal, require_principal
from app.core.config import get_settings
from app.core.database import get_session
from app.core.events import connection_events
from app.core.rpc import DispatchContext
from app.services.mcp import registry
from promptmesh_shared.schemas.jsonrpc import (
    DOMAIN_ERROR,
    INTERNAL_ERROR,
    JsonRpcRequest,
    JsonRpcResponse,
)

log = structlog.get_logger()
router = APIRouter()


def _request_id(body):
    if isinstance(body, dict):
        request_id = body.get("id")
        if isinstance(request_id, (int, str)) and not isinstance(request_id, bool):
            return request_id
    return None


@router.post("")
async def call(
    request: Request,
    principal: Principal = Depends(require_principal),
    session: AsyncSession = Depends(get_session),
):
    """Dispatch one JSON-RPC request and return its envelope."""
    try:
        body = await request.json()
    except ValueError:
        log.warning("mcp.unparseable_body", org_id=str(principal.organization_id))
        return JSONResponse(
            status_code=500,
            content=JsonRpcResponse.failure(INTERNAL_ERROR, "Internal error").to_wire(),
        )

    try:
        rpc_request = JsonRpcRequest.model_validate(body)
    except ValidationError:
        return JSONResponse(
            content=JsonRpcResponse.failure(
                DOMAIN_ERROR, "Invalid request", _request_id(body)
            ).to_wire(),
        )

    ctx = DispatchContext(principal=principal, session=session)
    response = await registry.dispatch(rpc_request, ctx)
    return JSONResponse(content=response.to_wire())


@router.get("/stream")
async def stream(
    principal: Principal = Depends(require_principal),
):
    """Open the SSE channel for the caller's organization."""
    settings = get_settings()
    return EventSourceResponse(
        connection_events(principal.organization_id),
        ping=settings.sse_ping_seconds,
        sep="\n",
        headers={"Cache-Control": "no-cache"},
    )
