from typing import Any

from pydantic import BaseModel


class ValidationFailedResponse(BaseModel):
    message: str = "Validation failed"
    errors: list[dict[str, Any]]


class HealthResponse(BaseModel):
    status: str
    database: str
