"""
Error response models for the dispatcher.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Standard error response model.

    This model represents the structure of error responses returned when a
    dispatch fails. It includes an error message, the kind of failure and a
    request identifier for correlating logs.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": 'The controller for "widgets" does not exist',
                "code": "ControllerNotFoundError",
                "request_id": "0b6f2c1e-6f53-4f43-9d8c-5a8e1f0f2a17"
            }
        }
    )

    error: str = Field(
        ...,
        description="Human-readable error message describing what went wrong"
    )

    code: Optional[str] = Field(
        None,
        description="Name of the error kind, e.g. MethodNotAllowedError"
    )

    request_id: Optional[str] = Field(
        None,
        description="Unique identifier for this specific request"
    )

    def model_dump_json(self, **kwargs):
        """Serialize to JSON, leaving out unset optional fields by default."""
        kwargs.setdefault('exclude_none', True)
        return super().model_dump_json(**kwargs)

    @classmethod
    def from_exception(cls, error: Exception, request_id: Optional[str] = None) -> "ErrorResponse":
        """Create an ErrorResponse from a dispatch failure."""
        return cls(error=str(error) or type(error).__name__, code=type(error).__name__, request_id=request_id)
