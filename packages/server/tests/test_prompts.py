"""
Tests for the prompt resolver: organization scoping, default-variant
filtering, argument ordering and substring search.
"""

from __future__ import annotations

import uuid
from typing import Optional

import pytest

from app.models.prompt import Prompt
from app.models.prompt_argument import PromptArgument
from app.models.prompt_variant import PromptVariant
from app.scripts.seed_dev_data import ACME_ORG_ID, ALICE_USER_ID, GLOBEX_ORG_ID
from app.services import prompts as prompt_service


async def add_prompt(
    session,
    name: str,
    *,
    org_id: uuid.UUID = ACME_ORG_ID,
    description: Optional[str] = None,
    variants: tuple[tuple[str, bool], ...] = (("content", True),),
) -> Prompt:
    prompt = Prompt(
        organization_id=org_id, name=name, description=description, creator_id=ALICE_USER_ID
    )
    session.add(prompt)
    await session.flush()
    for content, is_default in variants:
        session.add(
            PromptVariant(
                prompt_id=prompt.id,
                content=content,
                is_default=is_default,
                created_by=ALICE_USER_ID,
            )
        )
    await session.commit()
    return prompt


# ---------------------------------------------------------------------------
# list_prompts
# ---------------------------------------------------------------------------

class TestListPrompts:
    async def test_scoped_to_org(self, session, api_keys):
        acme = {p.name for p in await prompt_service.list_prompts(ACME_ORG_ID, session)}
        globex = {p.name for p in await prompt_service.list_prompts(GLOBEX_ORG_ID, session)}
        assert acme == {"Greeting", "Code Review", "Release Notes"}
        assert globex == {"Greeting"}

    async def test_excludes_prompts_without_default(self, session, api_keys):
        await add_prompt(session, "Draft", variants=(("wip", False),))
        await add_prompt(session, "Empty", variants=())

        names = {p.name for p in await prompt_service.list_prompts(ACME_ORG_ID, session)}
        assert "Draft" not in names
        assert "Empty" not in names

    async def test_prompt_listed_once_despite_several_variants(self, session, api_keys):
        await add_prompt(session, "Versioned", variants=(("v1", False), ("v2", True), ("v3", False)))
        names = [p.name for p in await prompt_service.list_prompts(ACME_ORG_ID, session)]
        assert names.count("Versioned") == 1

    async def test_unknown_org_is_empty(self, session, api_keys):
        assert await prompt_service.list_prompts(uuid.uuid4(), session) == []


# ---------------------------------------------------------------------------
# get_prompt
# ---------------------------------------------------------------------------

class TestGetPrompt:
    async def test_resolves_default_content_and_arguments(self, session, api_keys):
        resolved = await prompt_service.get_prompt(ACME_ORG_ID, "Greeting", session)
        assert resolved is not None
        assert resolved.variant.content == "Hello, {name}!"
        assert [(a.name, a.required) for a in resolved.arguments] == [("name", True)]

    async def test_serves_the_default_variant(self, session, api_keys):
        await add_prompt(session, "Versioned", variants=(("old", False), ("current", True)))
        resolved = await prompt_service.get_prompt(ACME_ORG_ID, "Versioned", session)
        assert resolved.variant.content == "current"

    async def test_same_name_other_org(self, session, api_keys):
        resolved = await prompt_service.get_prompt(GLOBEX_ORG_ID, "Greeting", session)
        assert resolved.variant.content == "Good day, {name}. Welcome to Globex."
        assert resolved.prompt.organization_id == GLOBEX_ORG_ID

    async def test_exact_name_only(self, session, api_keys):
        assert await prompt_service.get_prompt(ACME_ORG_ID, "greeting", session) is None
        assert await prompt_service.get_prompt(ACME_ORG_ID, "Greet", session) is None

    async def test_no_default_variant(self, session, api_keys):
        await add_prompt(session, "Draft", variants=(("wip", False),))
        assert await prompt_service.get_prompt(ACME_ORG_ID, "Draft", session) is None

    async def test_ambiguous_defaults_not_resolved(self, session, api_keys):
        await add_prompt(session, "Broken", variants=(("a", True), ("b", True)))
        assert await prompt_service.get_prompt(ACME_ORG_ID, "Broken", session) is None


class TestListArguments:
    async def test_ordered_by_name(self, session, api_keys):
        prompt = await add_prompt(session, "Many Args")
        for name in ("zeta", "alpha", "mu"):
            session.add(PromptArgument(prompt_id=prompt.id, name=name, required=False))
        await session.commit()

        arguments = await prompt_service.list_arguments(prompt.id, session)
        assert [a.name for a in arguments] == ["alpha", "mu", "zeta"]


# ---------------------------------------------------------------------------
# search_prompts
# ---------------------------------------------------------------------------

class TestSearchPrompts:
    async def _names(self, session, query, org_id=ACME_ORG_ID):
        return {p.name for p in await prompt_service.search_prompts(org_id, query, session)}

    async def test_matches_name_case_insensitively(self, session, api_keys):
        assert await self._names(session, "GREET") == {"Greeting"}

    async def test_matches_description(self, session, api_keys):
        assert await self._names(session, "diff") == {"Code Review"}

    async def test_scoped_to_org(self, session, api_keys):
        assert await self._names(session, "globex") == set()
        assert await self._names(session, "globex", GLOBEX_ORG_ID) == {"Greeting"}

    async def test_excludes_prompts_without_default(self, session, api_keys):
        await add_prompt(session, "Greeting Draft", variants=(("wip", False),))
        assert await self._names(session, "greeting") == {"Greeting"}

    async def test_no_matches(self, session, api_keys):
        assert await self._names(session, "zzz-nothing") == set()

    async def test_null_description(self, session, api_keys):
        await add_prompt(session, "Bare", description=None)
        assert await self._names(session, "bare") == {"Bare"}

    @pytest.mark.parametrize("query", ["%", "_"])
    async def test_wildcards_match_literally(self, session, api_keys, query):
        await add_prompt(session, "Discount", description="Take 10% off_peak")
        assert await self._names(session, query) == {"Discount"}
