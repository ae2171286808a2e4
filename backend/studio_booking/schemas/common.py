"""
Shared schema base: snake_case attributes, camelCase on the wire and in
stored documents.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(CamelModel):
    success: bool = True
    message: str
