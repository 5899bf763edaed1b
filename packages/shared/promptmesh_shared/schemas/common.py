from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    VIEWER = "viewer"


class CamelModel(BaseModel):
    """Base for wire models whose keys are camelCase on the protocol."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
