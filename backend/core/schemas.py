# backend/core/schemas.py

"""
Shared schema base.

The public JSON contract is camelCase (``qrData``, ``stampsRequired``),
while Python code stays snake_case. Models accept either spelling on input
and emit camelCase on output.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Base schema for request and response bodies"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(APIModel):
    success: bool = True
    message: str
