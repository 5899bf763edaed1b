"""Prompt argument model."""

from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, UUIDMixin


class PromptArgument(UUIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "prompt_arguments"

    prompt_id: uuid.UUID = Field(foreign_key="prompts.id", nullable=False, index=True)
    name: str = Field(nullable=False)
    description: Optional[str] = None
    required: bool = Field(default=False, nullable=False)
