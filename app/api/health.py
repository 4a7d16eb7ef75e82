from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from app.schemas.envelope import Envelope, HealthStatus, ReadinessStatus

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "",
    response_model=Envelope[HealthStatus],
    summary="Health check",
    description="Basic liveness check."
)
def health_check():
    """Simple health check."""
    return Envelope(code=status.HTTP_200_OK, data=HealthStatus(status="ok"))


@router.get(
    "/ready",
    response_model=Envelope[ReadinessStatus],
    summary="Readiness check",
    description="Check that the datastore answers queries.",
    responses={503: {"model": Envelope[ReadinessStatus]}}
)
def readiness_check(request: Request):
    """
    Readiness check for all dependencies.

    Returns status of:
    - Database connection
    """
    checks = {"database": request.app.state.database.ping()}
    ready = all(checks.values())

    code = status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE
    body = Envelope(
        code=code,
        message="success" if ready else "not ready",
        data=ReadinessStatus(status="ready" if ready else "not_ready", checks=checks)
    )
    if not ready:
        return JSONResponse(status_code=code, content=body.model_dump())
    return body
