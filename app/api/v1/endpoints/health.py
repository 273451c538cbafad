"""Health check endpoints."""

from fastapi import APIRouter, status
from pydantic import BaseModel

from app.config import settings
from app.core.firebase import get_firestore_client
from app.core.upstream import call_upstream
from app.models.users import USERS

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    environment: str


class DetailedHealthResponse(HealthResponse):
    """Detailed health check response model."""

    firestore: str
    token_secret: str


async def check_firestore_connection() -> bool:
    """Check that Firestore answers a one-document read."""
    try:
        db = get_firestore_client()
        await call_upstream("users.limit", db.collection(USERS).limit(1).get())
        return True
    except Exception:
        return False


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Basic health check",
)
async def health_check() -> HealthResponse:
    """Basic health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        environment=settings.environment,
    )


@router.get(
    "/health/detailed",
    response_model=DetailedHealthResponse,
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Detailed health check",
)
async def detailed_health_check() -> DetailedHealthResponse:
    """
    Detailed health check with Firestore reachability and token secret status.

    Returns:
        Detailed health status including dependencies
    """
    firestore_healthy = await check_firestore_connection()
    secret_ok = settings.has_secret_key

    return DetailedHealthResponse(
        status="healthy" if firestore_healthy and secret_ok else "degraded",
        version=settings.app_version,
        environment=settings.environment,
        firestore="healthy" if firestore_healthy else "unhealthy",
        token_secret="configured" if secret_ok else "missing",
    )
