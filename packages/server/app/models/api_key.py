"""API key model. Only the SHA-256 hash of the token is stored."""

from datetime import datetime
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, UUIDMixin


class ApiKey(UUIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "api_keys"

    user_id: uuid.UUID = Field(nullable=False, index=True)
    organization_id: uuid.UUID = Field(
        foreign_key="organizations.id", nullable=False, index=True
    )
    name: str = Field(nullable=False)
    key_hash: str = Field(nullable=False, unique=True, index=True)
    key_prefix: str = Field(nullable=False)  # first 8 chars, display only
    revoked_at: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))
    last_used_at: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))

    @property
    def is_active(self) -> bool:
        return self.revoked_at is None
