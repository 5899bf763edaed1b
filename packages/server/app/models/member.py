"""Organization membership (one role per user per organization)."""

import uuid

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, UUIDMixin


class Member(UUIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "organization_members"
    __table_args__ = (
        UniqueConstraint("organization_id", "user_id", name="uq_member_org_user"),
    )

    organization_id: uuid.UUID = Field(
        foreign_key="organizations.id", nullable=False, index=True
    )
    user_id: uuid.UUID = Field(nullable=False, index=True)
    role: str = Field(nullable=False, default="viewer")  # owner | admin | viewer
