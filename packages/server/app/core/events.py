"""
SSE event stream for MCP clients.

The stream currently carries a single handshake frame; later frames (e.g.
prompts/tools list-changed notifications) plug in here. sse-starlette sends
keep-alive comments on its own ping interval and cancels the generator when
the client disconnects.
"""

from __future__ import annotations

import asyncio
import json
from typing import AsyncGenerator
from uuid import UUID

import structlog

log = structlog.get_logger()

CONNECTED_EVENT = {"type": "connection", "status": "connected"}


async def connection_events(org_id: UUID) -> AsyncGenerator[dict, None]:
    """Emit the connected handshake, then hold the stream until cancelled."""
    log.info("sse.connected", org_id=str(org_id))
    try:
        yield {"data": json.dumps(CONNECTED_EVENT, separators=(",", ":"))}
        await asyncio.Event().wait()
    except asyncio.CancelledError:
        log.info("sse.cancelled", org_id=str(org_id))
        raise
    finally:
        log.info("sse.closed", org_id=str(org_id))
