"""Seed a development database with two organizations, their prompts and an API key.

Usage:
    python -m app.scripts.seed_dev_data

Requires PM_DATABASE_URL (or defaults to localhost). Tables are created if missing.
"""

import asyncio
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session_context, init_db
from app.models.member import Member
from app.models.organization import Organization
from app.models.prompt import Prompt
from app.models.prompt_argument import PromptArgument
from app.models.prompt_variant import PromptVariant
from app.services.api_keys import issue_api_key
from promptmesh_shared.schemas.common import Role

# Deterministic UUIDs for reproducibility
ACME_ORG_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
GLOBEX_ORG_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")
ALICE_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000010")
BOB_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000011")

# (name, description, default content, [(arg name, arg description, required)])
ACME_PROMPTS = [
    (
        "Greeting",
        "Friendly greeting for a named person",
        "Hello, {name}!",
        [("name", "Who to greet", True)],
    ),
    (
        "Code Review",
        "Review a diff for bugs and style issues",
        "Review the following {language} change:\n\n{diff}",
        [("diff", "Unified diff to review", True), ("language", "Source language", False)],
    ),
    (
        "Release Notes",
        "Summarize merged changes for a release",
        "Write release notes for version {version} from these changes:\n{changes}",
        [("changes", "Merged change list", True), ("version", "Release version", True)],
    ),
]

GLOBEX_PROMPTS = [
    (
        "Greeting",
        "Globex formal greeting",
        "Good day, {name}. Welcome to Globex.",
        [("name", "Who to greet", True)],
    ),
]


async def _add_prompts(
    session: AsyncSession,
    org_id: uuid.UUID,
    creator_id: uuid.UUID,
    prompts: list,
) -> None:
    for name, description, content, arguments in prompts:
        prompt = Prompt(
            organization_id=org_id,
            name=name,
            description=description,
            creator_id=creator_id,
        )
        session.add(prompt)
        await session.flush()

        session.add(
            PromptVariant(
                prompt_id=prompt.id,
                content=content,
                is_default=True,
                created_by=creator_id,
            )
        )
        for arg_name, arg_description, required in arguments:
            session.add(
                PromptArgument(
                    prompt_id=prompt.id,
                    name=arg_name,
                    description=arg_description,
                    required=required,
                )
            )


async def seed_data(session: AsyncSession) -> dict[str, str]:
    """Insert the fixture organizations and prompts. Returns plaintext keys by org name."""
    session.add(Organization(id=ACME_ORG_ID, name="Acme"))
    session.add(Organization(id=GLOBEX_ORG_ID, name="Globex"))
    session.add(Member(organization_id=ACME_ORG_ID, user_id=ALICE_USER_ID, role=Role.OWNER.value))
    session.add(Member(organization_id=GLOBEX_ORG_ID, user_id=BOB_USER_ID, role=Role.OWNER.value))
    await session.flush()

    await _add_prompts(session, ACME_ORG_ID, ALICE_USER_ID, ACME_PROMPTS)
    await _add_prompts(session, GLOBEX_ORG_ID, BOB_USER_ID, GLOBEX_PROMPTS)
    await session.flush()

    _, acme_key = await issue_api_key(ALICE_USER_ID, ACME_ORG_ID, "dev seed", session)
    _, globex_key = await issue_api_key(BOB_USER_ID, GLOBEX_ORG_ID, "dev seed", session)
    return {"Acme": acme_key, "Globex": globex_key}


async def seed():
    await init_db()
    async with get_session_context() as session:
        keys = await seed_data(session)

    print("Seed data inserted successfully.")
    for org_name, key in keys.items():
        print(f"  {org_name} API KEY: {key}")


if __name__ == "__main__":
    asyncio.run(seed())
