"""
Signup and login endpoints.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError

from ..auth import PasswordHasher, TokenService, generate_id
from ..dependencies import get_password_hasher, get_store, get_token_service
from ..models import User
from ..schemas import ErrorResponse, LoginRequest, SignupRequest, TokenResponse
from ..store import ConstraintViolation, CredentialStore
from ..utils.event_logger import log_auth_event

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post(
    "/signup",
    response_model=TokenResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def signup(
    payload: SignupRequest,
    request: Request,
    store: CredentialStore = Depends(get_store),
    tokens: TokenService = Depends(get_token_service),
    passwords: PasswordHasher = Depends(get_password_hasher),
):
    """
    Create a user and its profile, then return a token for the new user.

    Both rows are written in one unit of work: if the profile cannot be
    stored the user row is rolled back too.
    """
    user_id = generate_id()
    password_hash = passwords.hash(payload.password)

    try:
        with store.unit_of_work() as uow:
            uow.insert_user(user_id, payload.email, password_hash)
            uow.insert_profile(generate_id(), user_id, payload.name)
    except ConstraintViolation as e:
        if e.table == User.__tablename__ and e.column == "email":
            logger.info("Signup rejected, email already registered: %s", payload.email)
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already exists") from e
        logger.exception("Signup error for %s", payload.email)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="DB error") from e
    except SQLAlchemyError as e:
        logger.exception("Signup error for %s", payload.email)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="DB error") from e

    log_auth_event("signup", request, user_id=user_id, email=payload.email)
    return TokenResponse(token=tokens.issue_token(user_id))


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def login(
    credentials: LoginRequest,
    request: Request,
    store: CredentialStore = Depends(get_store),
    tokens: TokenService = Depends(get_token_service),
    passwords: PasswordHasher = Depends(get_password_hasher),
):
    try:
        user = store.find_user_by_email(credentials.email)
    except SQLAlchemyError as e:
        logger.exception("Login error for %s", credentials.email)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="DB error") from e

    if not user or not passwords.verify(credentials.password, user.password_hash):
        log_auth_event("login_failure", request, user_id=user.id if user else None, email=credentials.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    log_auth_event("login_success", request, user_id=user.id, email=user.email)
    return TokenResponse(token=tokens.issue_token(user.id))
