"""
MCP prompt and tool schemas: method parameters and result payloads.

Result models are dumped with ``by_alias=True`` so CamelModel fields go out
camelCase (``protocolVersion``, ``inputSchema``, ...).
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from .common import CamelModel


# ---------------------------------------------------------------------------
# initialize
# ---------------------------------------------------------------------------

class Capability(CamelModel):
    list_changed: bool = True


class ServerCapabilities(CamelModel):
    prompts: Capability = Field(default_factory=Capability)
    tools: Capability = Field(default_factory=Capability)


class ServerInfo(BaseModel):
    name: str
    version: str


class InitializeResult(CamelModel):
    protocol_version: str
    capabilities: ServerCapabilities = Field(default_factory=ServerCapabilities)
    server_info: ServerInfo


# ---------------------------------------------------------------------------
# prompts/*
# ---------------------------------------------------------------------------

class PromptArgumentInfo(BaseModel):
    name: str
    description: Optional[str] = None
    required: bool = False


class PromptListItem(BaseModel):
    name: str
    description: Optional[str] = None
    # Left empty on the list form; prompts/get returns the full list.
    arguments: list[PromptArgumentInfo] = Field(default_factory=list)


class PromptListResult(BaseModel):
    prompts: list[PromptListItem]


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class PromptMessage(BaseModel):
    role: Literal["user", "assistant"] = "user"
    content: TextContent


class GetPromptParams(BaseModel):
    name: Optional[str] = None


class GetPromptResult(BaseModel):
    description: Optional[str] = None
    arguments: list[PromptArgumentInfo]
    prompt: PromptMessage


# ---------------------------------------------------------------------------
# tools/*
# ---------------------------------------------------------------------------

class ToolDescriptor(CamelModel):
    name: str
    description: str
    input_schema: dict[str, Any]


class ToolListResult(BaseModel):
    tools: list[ToolDescriptor]


class ToolCallParams(BaseModel):
    name: Optional[str] = None
    arguments: Optional[dict[str, Any]] = None


class SearchPromptsArguments(BaseModel):
    query: Optional[str] = None


class ToolCallResult(BaseModel):
    content: list[TextContent]
