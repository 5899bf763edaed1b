# SQLModel definitions, imported here so metadata is populated for create_all.
from .base import CreatedAtMixin, TimestampMixin, UUIDMixin  # noqa: F401
from .organization import Organization  # noqa: F401
from .member import Member  # noqa: F401
from .api_key import ApiKey  # noqa: F401
from .prompt import Prompt  # noqa: F401
from .prompt_variant import PromptVariant  # noqa: F401
from .prompt_argument import PromptArgument  # noqa: F401
