"""
Demo data endpoint for local development.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError

from ..auth import PasswordHasher, generate_id
from ..dependencies import get_password_hasher, get_store
from ..schemas import ErrorResponse, MessageResponse
from ..store import ConstraintViolation, CredentialStore
from ..utils.event_logger import log_auth_event

router = APIRouter(tags=["seed"])
logger = logging.getLogger(__name__)

SEED_EMAIL = "jay@test.com"
SEED_PASSWORD = "password123"
SEED_NAME = "阿傑"


@router.get("/seed", response_model=MessageResponse, responses={500: {"model": ErrorResponse}})
def seed(
    request: Request,
    store: CredentialStore = Depends(get_store),
    passwords: PasswordHasher = Depends(get_password_hasher),
):
    """
    Insert the demo user and its profile.

    Idempotent: when the demo email is already registered nothing is written.
    """
    user_id = generate_id()
    try:
        with store.unit_of_work() as uow:
            created = uow.insert_user(user_id, SEED_EMAIL, passwords.hash(SEED_PASSWORD), ignore_existing=True)
            if created:
                uow.insert_profile(generate_id(), user_id, SEED_NAME)
    except (ConstraintViolation, SQLAlchemyError) as e:
        logger.exception("Seed failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Seed failed") from e

    if created:
        log_auth_event("seed", request, user_id=user_id, email=SEED_EMAIL)
    else:
        logger.info("Seed skipped, %s already present", SEED_EMAIL)
    return MessageResponse(message="Seed done!")
