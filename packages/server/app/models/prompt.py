"""Prompt model."""

from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Prompt(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "prompts"

    organization_id: uuid.UUID = Field(
        foreign_key="organizations.id", nullable=False, index=True
    )
    name: str = Field(nullable=False, index=True)
    description: Optional[str] = None
    creator_id: uuid.UUID = Field(nullable=False)
