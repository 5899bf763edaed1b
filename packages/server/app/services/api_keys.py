"""
API key service: issuance, listing and revocation.

The plaintext key is returned by ``issue_api_key`` exactly once; only its
SHA-256 hash and an 8-character display prefix are stored.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.auth import generate_api_key, hash_api_key, key_display_prefix
from app.models.api_key import ApiKey
from app.models.member import Member

log = structlog.get_logger()


class ApiKeyError(Exception):
    """Base class for API key lifecycle failures."""


class ApiKeyNotFound(ApiKeyError):
    pass


class ApiKeyRevoked(ApiKeyError):
    pass


class NotAMember(ApiKeyError):
    pass


async def issue_api_key(
    user_id: uuid.UUID,
    organization_id: uuid.UUID,
    name: str,
    session: AsyncSession,
) -> tuple[ApiKey, str]:
    """Issue a key scoped to one of the user's organizations.

    Returns (stored_record, plaintext_key). The plaintext is not recoverable later.
    """
    result = await session.execute(
        select(Member).where(
            Member.organization_id == organization_id,
            Member.user_id == user_id,
        )
    )
    if result.scalar_one_or_none() is None:
        raise NotAMember(f"User {user_id} is not a member of organization {organization_id}")

    plaintext_key = generate_api_key()
    api_key = ApiKey(
        user_id=user_id,
        organization_id=organization_id,
        name=name,
        key_hash=hash_api_key(plaintext_key),
        key_prefix=key_display_prefix(plaintext_key),
    )
    session.add(api_key)
    await session.flush()

    log.info(
        "api_key.issued",
        api_key_id=str(api_key.id),
        user_id=str(user_id),
        org_id=str(organization_id),
        key_prefix=api_key.key_prefix,
    )
    return api_key, plaintext_key


async def list_api_keys(user_id: uuid.UUID, session: AsyncSession) -> list[ApiKey]:
    """The user's usable keys, newest first."""
    result = await session.execute(
        select(ApiKey)
        .where(ApiKey.user_id == user_id, ApiKey.revoked_at.is_(None))
        .order_by(ApiKey.created_at.desc())
    )
    return list(result.scalars().all())


async def revoke_api_key(key_id: uuid.UUID, session: AsyncSession) -> ApiKey:
    """Revoke a key. Revocation is terminal; revoking twice is an error."""
    result = await session.execute(select(ApiKey).where(ApiKey.id == key_id))
    api_key = result.scalar_one_or_none()
    if api_key is None:
        raise ApiKeyNotFound(f"API key {key_id} not found")
    if not api_key.is_active:
        raise ApiKeyRevoked(f"API key {key_id} is already revoked")

    api_key.revoked_at = datetime.now(timezone.utc)
    session.add(api_key)
    await session.flush()

    log.info(
        "api_key.revoked",
        api_key_id=str(api_key.id),
        user_id=str(api_key.user_id),
        org_id=str(api_key.organization_id),
    )
    return api_key
