"""
MCP protocol methods served over the JSON-RPC call endpoint.

- initialize   — static capability descriptor
- prompts/list — org prompts with a default variant
- prompts/get  — one prompt's arguments and default content
- tools/list   — static tool descriptors
- tools/call   — run a tool (search_prompts)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable

from pydantic import BaseModel, ValidationError

from app.core.config import get_settings
from app.core.rpc import (
    BadRequest,
    DispatchContext,
    MethodRegistry,
    NotFound,
    UnknownTool,
)
from app.models.prompt import Prompt
from app.services import prompts as prompt_service
from promptmesh_shared.schemas.prompts import (
    GetPromptParams,
    GetPromptResult,
    InitializeResult,
    PromptArgumentInfo,
    PromptListItem,
    PromptListResult,
    PromptMessage,
    SearchPromptsArguments,
    ServerInfo,
    TextContent,
    ToolCallParams,
    ToolCallResult,
    ToolDescriptor,
    ToolListResult,
)

registry = MethodRegistry()


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------

ToolHandler = Callable[[BaseModel, DispatchContext], Awaitable[ToolCallResult]]


@dataclass
class Tool:
    descriptor: ToolDescriptor
    arguments_model: type[BaseModel]
    handler: ToolHandler


def format_search_results(query: str, matches: list[Prompt]) -> str:
    header = f'Found {len(matches)} prompts matching "{query}":\n\n'
    entries = [f"**{p.name}**\n{p.description or ''}\n" for p in matches]
    return header + "\n".join(entries)


async def _search_prompts(args: SearchPromptsArguments, ctx: DispatchContext) -> ToolCallResult:
    if not args.query:
        raise BadRequest("Search query is required")

    matches = await prompt_service.search_prompts(
        ctx.principal.organization_id, args.query, ctx.session
    )
    return ToolCallResult(content=[TextContent(text=format_search_results(args.query, matches))])


TOOLS: dict[str, Tool] = {
    "search_prompts": Tool(
        descriptor=ToolDescriptor(
            name="search_prompts",
            description="Search for prompts in the organization",
            input_schema={
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": "Search query to find prompts",
                    },
                },
                "required": ["query"],
            },
        ),
        arguments_model=SearchPromptsArguments,
        handler=_search_prompts,
    ),
}


# ---------------------------------------------------------------------------
# Methods
# ---------------------------------------------------------------------------

@registry.method("initialize")
async def initialize(params, ctx: DispatchContext) -> InitializeResult:
    settings = get_settings()
    return InitializeResult(
        protocol_version=settings.protocol_version,
        server_info=ServerInfo(name=settings.server_name, version=settings.server_version),
    )


@registry.method("prompts/list")
async def list_prompts(params, ctx: DispatchContext) -> PromptListResult:
    prompts = await prompt_service.list_prompts(ctx.principal.organization_id, ctx.session)
    return PromptListResult(
        prompts=[PromptListItem(name=p.name, description=p.description) for p in prompts]
    )


@registry.method("prompts/get", params=GetPromptParams)
async def get_prompt(params: GetPromptParams, ctx: DispatchContext) -> GetPromptResult:
    if not params.name:
        raise BadRequest("Prompt name is required")

    resolved = await prompt_service.get_prompt(
        ctx.principal.organization_id, params.name, ctx.session
    )
    if resolved is None:
        raise NotFound("Prompt not found")

    return GetPromptResult(
        description=resolved.prompt.description,
        arguments=[
            PromptArgumentInfo(name=a.name, description=a.description, required=a.required)
            for a in resolved.arguments
        ],
        prompt=PromptMessage(role="user", content=TextContent(text=resolved.variant.content)),
    )


@registry.method("tools/list")
async def list_tools(params, ctx: DispatchContext) -> ToolListResult:
    return ToolListResult(tools=[tool.descriptor for tool in TOOLS.values()])


@registry.method("tools/call", params=ToolCallParams)
async def call_tool(params: ToolCallParams, ctx: DispatchContext) -> ToolCallResult:
    tool = TOOLS.get(params.name) if params.name else None
    if tool is None:
        raise UnknownTool(params.name)

    try:
        args = tool.arguments_model.model_validate(params.arguments or {})
    except ValidationError as exc:
        raise BadRequest(
            "Invalid tool arguments",
            data=exc.errors(include_url=False, include_context=False),
        ) from exc

    return await tool.handler(args, ctx)
