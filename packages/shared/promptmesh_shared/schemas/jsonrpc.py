"""
JSON-RPC 2.0 envelope schemas shared by the server and its clients.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel

JSONRPC_VERSION = "2.0"

# Error codes
DOMAIN_ERROR = -32000
INTERNAL_ERROR = -32603

RequestId = Union[int, str]


class JsonRpcRequest(BaseModel):
    jsonrpc: str = JSONRPC_VERSION
    method: str
    params: Optional[dict[str, Any]] = None
    id: Optional[RequestId] = None


class JsonRpcError(BaseModel):
    code: int
    message: str
    data: Optional[Any] = None


class JsonRpcResponse(BaseModel):
    jsonrpc: str = JSONRPC_VERSION
    result: Optional[Any] = None
    error: Optional[JsonRpcError] = None
    id: Optional[RequestId] = None

    @classmethod
    def success(cls, result: Any, request_id: Optional[RequestId]) -> "JsonRpcResponse":
        return cls(result=result, id=request_id)

    @classmethod
    def failure(
        cls,
        code: int,
        message: str,
        request_id: Optional[RequestId] = None,
        data: Any = None,
    ) -> "JsonRpcResponse":
        return cls(error=JsonRpcError(code=code, message=message, data=data), id=request_id)

    def to_wire(self) -> dict[str, Any]:
        """Serialize with exactly one of result/error, and id only when present."""
        body: dict[str, Any] = {"jsonrpc": self.jsonrpc}
        if self.error is not None:
            body["error"] = self.error.model_dump(exclude_none=True)
        else:
            body["result"] = self.result
        if self.id is not None:
            body["id"] = self.id
        return body
