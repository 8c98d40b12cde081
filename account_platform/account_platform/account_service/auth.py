from passlib.context import CryptContext
from datetime import datetime, timezone
import secrets
import string
import time
import jwt

from .config import Settings

DEFAULT_HASH_ROUNDS = 29000

_ID_ALPHABET = string.digits + string.ascii_lowercase


class InvalidToken(Exception):
    """Raised when a token cannot be verified."""


class PasswordHasher:
    """Salted password hashing with a per-instance work factor."""

    def __init__(self, rounds: int = DEFAULT_HASH_ROUNDS):
        self.rounds = rounds
        # Use pbkdf2_sha256 to avoid external bcrypt backend issues in some environments
        self.context = CryptContext(
            schemes=["pbkdf2_sha256"],
            deprecated="auto",
            pbkdf2_sha256__default_rounds=rounds,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "PasswordHasher":
        return cls(settings.PASSWORD_HASH_ROUNDS)

    def hash(self, password: str) -> str:
        return self.context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        if not hashed_password:
            return False
        try:
            return self.context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            # Unrecognized or corrupt hash
            return False


def _base36(value: int) -> str:
    digits = []
    while True:
        value, remainder = divmod(value, 36)
        digits.append(_ID_ALPHABET[remainder])
        if value == 0:
            break
    return "".join(reversed(digits))


def generate_id(random_length: int = 11) -> str:
    """
    Build an identifier from the current time and random characters.

    The base-36 millisecond timestamp prefix keeps ids roughly time-ordered;
    the random suffix makes collisions unlikely but not impossible.
    """
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(random_length))
    return _base36(int(time.time() * 1000)) + suffix


class TokenService:
    """Issues and verifies signed user tokens.

    Tokens carry the user id and an issued-at time. They have no expiry.
    """

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(settings.JWT_SECRET, settings.JWT_ALGORITHM)

    def issue_token(self, user_id: str) -> str:
        payload = {"userId": user_id, "iat": datetime.now(timezone.utc)}
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify_token(self, token: str) -> str:
        """
        Validate a token and return the user id it was issued for.

        Raises:
            InvalidToken: If the token is malformed, its signature does not
                match, or it carries no user id
        """
        if not token:
            raise InvalidToken("Token is empty")
        try:
            data = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.InvalidTokenError as exc:
            raise InvalidToken(str(exc)) from exc

        user_id = data.get("userId")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidToken("Token carries no user id")
        return user_id
