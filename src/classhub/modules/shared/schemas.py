"""Common response schemas."""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Plain acknowledgement returned by action endpoints."""

    message: str
