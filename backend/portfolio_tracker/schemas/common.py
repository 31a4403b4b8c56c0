"""Common response schemas used across the API."""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Simple message response for operations that return only a message.

    Attributes:
        message: The response message
    """

    message: str
