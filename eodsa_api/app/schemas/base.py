"""
Shared base model for API schemas.

Fields are declared in snake_case and exposed in camelCase.  Requests
may use either spelling (``populate_by_name``); responses are always
serialised by alias because FastAPI's ``response_model`` does so by
default.
"""

import re

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# One address, no whitespace or header-breaking characters.
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalise_email(value: str) -> str:
    """Lower-case and strip ``value``; raise ``ValueError`` unless it looks like one address."""
    value = value.strip().lower()
    if not _EMAIL_RE.match(value):
        raise ValueError("must be a valid email address")
    return value


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Message(ApiModel):
    """Plain acknowledgement returned by actions without a richer payload."""

    success: bool = True
    message: str
