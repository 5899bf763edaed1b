"""Prompt variant model. At most one variant per prompt is the default."""

from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class PromptVariant(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "prompt_variants"

    prompt_id: uuid.UUID = Field(foreign_key="prompts.id", nullable=False, index=True)
    content: str = Field(nullable=False)
    notes: Optional[str] = None
    is_default: bool = Field(default=False, nullable=False)
    created_by: uuid.UUID = Field(nullable=False)
