"""Shared pydantic base model for camelCase JSON payloads."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model serialised with camelCase keys but constructible with snake_case names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
