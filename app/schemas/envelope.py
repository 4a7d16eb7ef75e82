from pydantic import BaseModel
from typing import Generic, Optional, TypeVar

DataT = TypeVar("DataT")


class Envelope(BaseModel, Generic[DataT]):
    """Uniform success wrapper. `code` mirrors the HTTP status."""
    code: int
    message: str = "success"
    data: Optional[DataT] = None


class ErrorEnvelope(BaseModel):
    """Uniform error wrapper."""
    code: int
    message: str


class HealthStatus(BaseModel):
    status: str


class ReadinessStatus(BaseModel):
    status: str
    checks: dict[str, bool]
