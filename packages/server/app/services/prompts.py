"""
Prompt resolver: organization-scoped reads of prompts, their default
variant and their arguments.

Every query takes the organization id; nothing here reads across orgs.
A prompt without a default variant is invisible to all of these queries.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy import and_, exists, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.prompt import Prompt
from app.models.prompt_argument import PromptArgument
from app.models.prompt_variant import PromptVariant


@dataclass
class ResolvedPrompt:
    """A prompt together with the content it serves."""

    prompt: Prompt
    variant: PromptVariant
    arguments: list[PromptArgument] = field(default_factory=list)


def _has_default_variant():
    return exists().where(
        and_(
            PromptVariant.prompt_id == Prompt.id,
            PromptVariant.is_default.is_(True),
        )
    )


async def list_prompts(org_id: uuid.UUID, session: AsyncSession) -> list[Prompt]:
    """All prompts in the org that have a default variant."""
    result = await session.execute(
        select(Prompt).where(
            Prompt.organization_id == org_id,
            _has_default_variant(),
        )
    )
    return list(result.scalars().all())


async def list_arguments(prompt_id: uuid.UUID, session: AsyncSession) -> list[PromptArgument]:
    """Arguments of a prompt, name-ascending."""
    result = await session.execute(
        select(PromptArgument)
        .where(PromptArgument.prompt_id == prompt_id)
        .order_by(PromptArgument.name)
    )
    return list(result.scalars().all())


async def get_prompt(
    org_id: uuid.UUID, name: str, session: AsyncSession
) -> Optional[ResolvedPrompt]:
    """Resolve one prompt by exact name together with its default variant.

    Returns None when no row matches, and also when more than one does
    (duplicate names, or a prompt carrying several defaults).
    """
    result = await session.execute(
        select(Prompt, PromptVariant)
        .join(
            PromptVariant,
            and_(
                PromptVariant.prompt_id == Prompt.id,
                PromptVariant.is_default.is_(True),
            ),
        )
        .where(
            Prompt.organization_id == org_id,
            Prompt.name == name,
        )
    )
    rows = result.all()
    if len(rows) != 1:
        return None

    prompt, variant = rows[0]
    arguments = await list_arguments(prompt.id, session)
    return ResolvedPrompt(prompt=prompt, variant=variant, arguments=arguments)


async def search_prompts(
    org_id: uuid.UUID, query: str, session: AsyncSession
) -> list[Prompt]:
    """Default-variant prompts whose name or description contains ``query``.

    Matching is case-insensitive; ``%`` and ``_`` in the query match literally.
    """
    result = await session.execute(
        select(Prompt).where(
            Prompt.organization_id == org_id,
            _has_default_variant(),
            or_(
                Prompt.name.icontains(query, autoescape=True),
                Prompt.description.icontains(query, autoescape=True),
            ),
        )
    )
    return list(result.scalars().all())
