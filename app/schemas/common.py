"""Shared Pydantic base for API bodies: snake_case in Python, camelCase on the wire."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Base for request/response schemas exchanged with the admin panel."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
