"""
Authentication for the PromptMesh MCP server.

Supports:
- API key generation & SHA-256 hashing (deterministic, so the hash is the lookup key)
- Bearer token verification against non-revoked stored key hashes
- Best-effort last_used_at bookkeeping, decoupled from the auth result
- FastAPI dependency resolving the request Principal (user + organization scope)
"""

from __future__ import annotations

import hashlib
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.database import get_session
from app.models.api_key import ApiKey

log = structlog.get_logger()

api_key_header = APIKeyHeader(name="Authorization", auto_error=False)

API_KEY_PREFIX = "pm_"
KEY_PREFIX_LENGTH = 8
BEARER_SCHEME = "Bearer "


class AuthenticationError(Exception):
    """Raised when a request carries no usable credential.

    Rendered by the transport as a plain 401. The message never says whether
    the key was unknown or revoked.
    """

    def __init__(self, message: str = "Invalid or missing API key"):
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class Principal:
    """Authenticated identity: a user acting within one organization."""

    user_id: uuid.UUID
    organization_id: uuid.UUID
    api_key_id: uuid.UUID


# ---------------------------------------------------------------------------
# API Key generation & hashing
# ---------------------------------------------------------------------------

def generate_api_key() -> str:
    """Generate a new plaintext API key: ``pm_`` followed by 48 hex chars."""
    return f"{API_KEY_PREFIX}{secrets.token_hex(24)}"


def hash_api_key(key: str) -> str:
    """Hash an API key with SHA-256 (lowercase hex)."""
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def key_display_prefix(key: str) -> str:
    """Short unobfuscated prefix of a key, safe to show and log."""
    return key[:KEY_PREFIX_LENGTH]


def parse_bearer(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` value.

    Returns None for a missing header, another scheme or an empty token.
    """
    if not authorization or not authorization.startswith(BEARER_SCHEME):
        return None
    token = authorization[len(BEARER_SCHEME):]
    return token or None


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------

async def touch_api_key(api_key: ApiKey, session: AsyncSession) -> None:
    """Record a successful use of the key. Failures are logged, never raised.

    The lookup transaction is committed first so the write reuses the
    request's connection instead of checking out a second one.
    """
    try:
        await session.commit()
        async with session.begin():
            await session.execute(
                update(ApiKey)
                .where(ApiKey.id == api_key.id)
                .values(last_used_at=datetime.now(timezone.utc))
            )
    except Exception:
        log.exception("auth.last_used_update_failed", key_prefix=api_key.key_prefix)


async def authenticate(
    authorization: Optional[str], session: AsyncSession
) -> Optional[Principal]:
    """Resolve a Principal from an Authorization header value.

    Returns None for a malformed header, an unknown hash, a revoked key, or
    a store failure during lookup.
    """
    token = parse_bearer(authorization)
    if token is None:
        return None

    key_hash = hash_api_key(token)
    try:
        result = await session.execute(
            select(ApiKey).where(
                ApiKey.key_hash == key_hash,
                ApiKey.revoked_at.is_(None),
            )
        )
        api_key = result.scalar_one_or_none()
    except (SQLAlchemyError, OSError) as exc:
        log.error("auth.api_key_lookup_failed", error=str(exc))
        return None

    if api_key is None:
        log.info("auth.api_key_rejected", key_prefix=key_display_prefix(token))
        return None

    await touch_api_key(api_key, session)

    return Principal(
        user_id=api_key.user_id,
        organization_id=api_key.organization_id,
        api_key_id=api_key.id,
    )


# ---------------------------------------------------------------------------
# Authentication dependency
# ---------------------------------------------------------------------------

async def require_principal(
    authorization: Optional[str] = Depends(api_key_header),
    session: AsyncSession = Depends(get_session),
) -> Principal:
    """Main authentication dependency. Bearer API key is the only accepted credential."""
    principal = await authenticate(authorization, session)
    if principal is None:
        raise AuthenticationError()
    return principal
