import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError

from ..dependencies import get_current_user_id, get_store
from ..schemas import ErrorResponse, ProfileOut, ProfileResponse
from ..store import CredentialStore
from ..utils.event_logger import log_auth_event

router = APIRouter(tags=["profile"])
logger = logging.getLogger(__name__)


@router.get(
    "/profile",
    response_model=ProfileResponse,
    responses={code: {"model": ErrorResponse} for code in (401, 403, 404, 500)},
)
def get_profile(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    store: CredentialStore = Depends(get_store),
):
    try:
        profile = store.find_profile_by_user_id(user_id)
    except SQLAlchemyError as e:
        logger.exception("Profile lookup failed for user_id=%s", user_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="DB error") from e

    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")

    log_auth_event("profile_access", request, user_id=user_id)
    return ProfileResponse(profile=ProfileOut.model_validate(profile))
