"""
Request dependencies: the injected store, token service and current user.
"""
from typing import Optional
import logging

from fastapi import Depends, Header, HTTPException, Request, status

from .auth import InvalidToken, PasswordHasher, TokenService
from .store import CredentialStore

logger = logging.getLogger(__name__)


def get_store(request: Request) -> CredentialStore:
    return request.app.state.store


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.passwords


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an 'Authorization: Bearer <token>' value, if any."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def get_current_user_id(
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
    tokens: TokenService = Depends(get_token_service),
) -> str:
    token = bearer_token(authorization)
    if token is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No token")
    try:
        return tokens.verify_token(token)
    except InvalidToken as exc:
        logger.info("Rejected token: %s", exc)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token") from exc
