from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response: ``{"error": "<message>"}``."""

    error: str

    @classmethod
    def create(cls, message: str):
        return cls(error=message)


class MessageResponse(BaseModel):
    message: str
