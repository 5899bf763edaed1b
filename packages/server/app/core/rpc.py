"""
JSON-RPC method registry and dispatcher.

Handlers are registered against a method name together with the pydantic
model their ``params`` must satisfy:

    registry = MethodRegistry()

    @registry.method("prompts/get", params=GetPromptParams)
    async def get_prompt(params: GetPromptParams, ctx: DispatchContext) -> GetPromptResult:
        ...

``dispatch`` never raises: domain errors become -32000 envelopes and any
other exception becomes a -32603 "Internal error" envelope.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

import structlog
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import Principal
from promptmesh_shared.schemas.jsonrpc import (
    DOMAIN_ERROR,
    INTERNAL_ERROR,
    JsonRpcRequest,
    JsonRpcResponse,
)

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class RpcError(Exception):
    """Domain failure reported to the caller inside the envelope."""

    code = DOMAIN_ERROR

    def __init__(self, message: str, *, data: Any = None):
        super().__init__(message)
        self.message = message
        self.data = data


class BadRequest(RpcError):
    """A required parameter is missing or malformed."""


class NotFound(RpcError):
    """Nothing in the caller's scope matches."""


class UnknownMethod(RpcError):
    def __init__(self, method: Optional[str]):
        super().__init__(f"Unknown method: {method}")


class UnknownTool(RpcError):
    def __init__(self, tool: Optional[str]):
        super().__init__(f"Unknown tool: {tool}")


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class EmptyParams(BaseModel):
    """Parameter model for methods that take none."""


@dataclass
class DispatchContext:
    """Per-call state handed to every handler."""

    principal: Principal
    session: AsyncSession


Handler = Callable[[Any, DispatchContext], Awaitable[Any]]


@dataclass
class MethodSpec:
    name: str
    handler: Handler
    params_model: type[BaseModel]


class MethodRegistry:
    """Maps protocol method names to typed handlers."""

    def __init__(self) -> None:
        self._methods: dict[str, MethodSpec] = {}

    def method(
        self, name: str, *, params: type[BaseModel] = EmptyParams
    ) -> Callable[[Handler], Handler]:
        def decorator(fn: Handler) -> Handler:
            if name in self._methods:
                raise ValueError(f"Method already registered: {name}")
            self._methods[name] = MethodSpec(name=name, handler=fn, params_model=params)
            return fn

        return decorator

    @property
    def methods(self) -> list[str]:
        return sorted(self._methods)

    def __contains__(self, name: str) -> bool:
        return name in self._methods

    async def call(self, method: str, params: Optional[dict], ctx: DispatchContext) -> Any:
        """Validate params and run the handler. Raises RpcError subclasses."""
        spec = self._methods.get(method)
        if spec is None:
            raise UnknownMethod(method)

        try:
            parsed = spec.params_model.model_validate(params or {})
        except ValidationError as exc:
            raise BadRequest(
                "Invalid params",
                data=exc.errors(include_url=False, include_context=False),
            ) from exc

        result = await spec.handler(parsed, ctx)
        if isinstance(result, BaseModel):
            return result.model_dump(mode="json", by_alias=True)
        return result

    async def dispatch(self, request: JsonRpcRequest, ctx: DispatchContext) -> JsonRpcResponse:
        """Run one call and wrap its outcome in an envelope."""
        try:
            result = await self.call(request.method, request.params, ctx)
        except RpcError as exc:
            log.info(
                "mcp.dispatch_error",
                method=request.method,
                error=exc.message,
                org_id=str(ctx.principal.organization_id),
            )
            return JsonRpcResponse.failure(exc.code, exc.message, request.id, exc.data)
        except Exception:
            log.exception(
                "mcp.internal_error",
                method=request.method,
                org_id=str(ctx.principal.organization_id),
            )
            try:
                await ctx.session.rollback()
            except Exception:
                log.exception("mcp.rollback_failed", method=request.method)
            return JsonRpcResponse.failure(INTERNAL_ERROR, "Internal error", request.id)

        log.info(
            "mcp.dispatch",
            method=request.method,
            org_id=str(ctx.principal.organization_id),
        )
        return JsonRpcResponse.success(result, request.id)
