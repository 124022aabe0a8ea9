"""Shared schema base.

The dashboard speaks camelCase JSON (``parentId``, ``originalName``) while
the Python side stays snake_case. Responses are serialized by alias.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
