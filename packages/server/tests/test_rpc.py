"""
Tests for the JSON-RPC method registry and envelope shaping.

Uses a private registry with throwaway handlers so dispatcher behaviour is
tested independently of the MCP methods.
"""

from __future__ import annotations

import uuid
from typing import Optional
from unittest.mock import AsyncMock

import pytest
from pydantic import BaseModel

from app.core.auth import Principal
from app.core.rpc import (
    BadRequest,
    DispatchContext,
    MethodRegistry,
    NotFound,
    UnknownMethod,
)
from promptmesh_shared.schemas.jsonrpc import (
    DOMAIN_ERROR,
    INTERNAL_ERROR,
    JsonRpcRequest,
    JsonRpcResponse,
)


class EchoParams(BaseModel):
    text: Optional[str] = None
    times: int = 1


class EchoResult(BaseModel):
    echoed: str


@pytest.fixture
def registry() -> MethodRegistry:
    reg = MethodRegistry()

    @reg.method("echo", params=EchoParams)
    async def echo(params: EchoParams, ctx: DispatchContext) -> EchoResult:
        if not params.text:
            raise BadRequest("text is required")
        return EchoResult(echoed=params.text * params.times)

    @reg.method("whoami")
    async def whoami(params, ctx: DispatchContext) -> dict:
        return {"org": str(ctx.principal.organization_id)}

    @reg.method("missing")
    async def missing(params, ctx: DispatchContext):
        raise NotFound("Nothing here")

    @reg.method("explode")
    async def explode(params, ctx: DispatchContext):
        raise RuntimeError("database connection reset")

    return reg


@pytest.fixture
def ctx() -> DispatchContext:
    principal = Principal(
        user_id=uuid.uuid4(), organization_id=uuid.uuid4(), api_key_id=uuid.uuid4()
    )
    return DispatchContext(principal=principal, session=AsyncMock())


def _request(method: str, params=None, request_id=1) -> JsonRpcRequest:
    return JsonRpcRequest(method=method, params=params, id=request_id)


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

class TestRegistration:
    def test_methods_listed(self, registry):
        assert registry.methods == ["echo", "explode", "missing", "whoami"]
        assert "echo" in registry
        assert "nope" not in registry

    def test_duplicate_registration_rejected(self, registry):
        with pytest.raises(ValueError, match="already registered"):

            @registry.method("echo")
            async def again(params, ctx):
                return None


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

class TestDispatch:
    async def test_success_envelope(self, registry, ctx):
        response = await registry.dispatch(_request("echo", {"text": "ab", "times": 2}), ctx)
        assert response.to_wire() == {"jsonrpc": "2.0", "result": {"echoed": "abab"}, "id": 1}

    async def test_handler_sees_principal(self, registry, ctx):
        response = await registry.dispatch(_request("whoami"), ctx)
        assert response.result == {"org": str(ctx.principal.organization_id)}

    async def test_unknown_method(self, registry, ctx):
        response = await registry.dispatch(_request("nonexistent/method", {}), ctx)
        assert response.to_wire() == {
            "jsonrpc": "2.0",
            "error": {"code": DOMAIN_ERROR, "message": "Unknown method: nonexistent/method"},
            "id": 1,
        }

    async def test_handler_domain_error(self, registry, ctx):
        response = await registry.dispatch(_request("echo", {}), ctx)
        assert response.error.code == DOMAIN_ERROR
        assert response.error.message == "text is required"

    async def test_not_found_shares_domain_code(self, registry, ctx):
        response = await registry.dispatch(_request("missing"), ctx)
        assert response.error.code == DOMAIN_ERROR
        assert response.error.message == "Nothing here"

    async def test_params_shape_violation(self, registry, ctx):
        response = await registry.dispatch(_request("echo", {"text": "a", "times": "many"}), ctx)
        assert response.error.code == DOMAIN_ERROR
        assert response.error.message == "Invalid params"
        assert response.error.data[0]["loc"] == ("times",)

    async def test_unexpected_failure_is_internal_error(self, registry, ctx):
        response = await registry.dispatch(_request("explode", request_id="abc"), ctx)
        assert response.to_wire() == {
            "jsonrpc": "2.0",
            "error": {"code": INTERNAL_ERROR, "message": "Internal error"},
            "id": "abc",
        }
        ctx.session.rollback.assert_awaited_once()

    async def test_failed_rollback_still_returns_envelope(self, registry, ctx):
        ctx.session.rollback.side_effect = RuntimeError("connection lost during rollback")
        response = await registry.dispatch(_request("explode", request_id=7), ctx)
        assert response.to_wire() == {
            "jsonrpc": "2.0",
            "error": {"code": INTERNAL_ERROR, "message": "Internal error"},
            "id": 7,
        }

    async def test_call_raises_for_unknown_method(self, registry, ctx):
        with pytest.raises(UnknownMethod):
            await registry.call("nope", None, ctx)


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------

class TestEnvelope:
    def test_id_omitted_when_absent(self):
        wire = JsonRpcResponse.success({"ok": True}, None).to_wire()
        assert wire == {"jsonrpc": "2.0", "result": {"ok": True}}

    def test_error_data_included_when_present(self):
        wire = JsonRpcResponse.failure(DOMAIN_ERROR, "bad", 7, data={"field": "name"}).to_wire()
        assert wire["error"] == {"code": DOMAIN_ERROR, "message": "bad", "data": {"field": "name"}}
        assert "result" not in wire

    def test_none_members_inside_result_are_kept(self):
        wire = JsonRpcResponse.success({"description": None}, 1).to_wire()
        assert wire["result"] == {"description": None}
