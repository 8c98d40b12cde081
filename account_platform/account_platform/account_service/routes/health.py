"""
Health check endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status

from ..dependencies import get_store
from ..schemas import ErrorResponse, MessageResponse, ReadinessResponse
from ..store import CredentialStore

router = APIRouter(tags=["health"])


@router.get("/health", response_model=MessageResponse)
def health_check():
    """Liveness probe; does not touch the database."""
    return MessageResponse(message="Backend working")


@router.get("/ready", response_model=ReadinessResponse, responses={503: {"model": ErrorResponse}})
def readiness_check(store: CredentialStore = Depends(get_store)):
    """
    Readiness check endpoint with database status.

    Raises:
        HTTPException: 503 if the database cannot be reached
    """
    if not store.check_connection():
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database unavailable")
    return ReadinessResponse(database="connected")
