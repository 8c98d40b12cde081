"""
Credential store: persistence of users and their profiles.

The store is constructed explicitly and handed to the application, so each
app instance (and each test) owns its own engine and database file.
"""
from contextlib import contextmanager
from typing import Iterator, Optional
import logging

from sqlalchemy import text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .db import init_db, make_engine
from .models import Profile, User

logger = logging.getLogger(__name__)

# Dialects that support INSERT ... ON CONFLICT DO NOTHING
_CONFLICT_AWARE_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class ConstraintViolation(Exception):
    """Raised when a write would break a uniqueness constraint."""

    def __init__(self, table: str, column: Optional[str], detail: str = ""):
        self.table = table
        self.column = column
        self.detail = detail
        super().__init__(f"Constraint violated on {table}.{column or 'unknown'}: {detail}")


def _violated_column(table, message: str) -> Optional[str]:
    message = message.lower()
    for column in table.columns:
        if column.name != "id" and column.name in message:
            return column.name
    if "id" in message or "primary" in message or "pkey" in message:
        return "id"
    return None


class UnitOfWork:
    """Store operations bound to one session and one transaction."""

    def __init__(self, session: Session):
        self.session = session

    def insert_user(self, id: str, email: str, password_hash: str, ignore_existing: bool = False) -> bool:
        """
        Insert a user row.

        Args:
            id: Identifier for the new user
            email: Email address, unique across users
            password_hash: Salted hash of the user's password
            ignore_existing: When True an email clash is a silent no-op

        Returns:
            True if a row was written, False if it was ignored

        Raises:
            ConstraintViolation: If the row clashes with an existing user
                and ignore_existing is False
        """
        values = {"id": id, "email": email, "password_hash": password_hash}
        if ignore_existing:
            return self._insert_user_ignoring_conflicts(values)

        self.session.add(User(**values))
        try:
            self.session.flush()
        except IntegrityError as exc:
            raise ConstraintViolation(
                User.__tablename__, _violated_column(User.__table__, str(exc.orig)), str(exc.orig)
            ) from exc
        return True

    def _insert_user_ignoring_conflicts(self, values: dict) -> bool:
        insert = _CONFLICT_AWARE_INSERTS.get(self.session.get_bind().dialect.name)
        if insert is None:
            if self.find_user_by_email(values["email"]) is not None:
                return False
            self.session.add(User(**values))
            self.session.flush()
            return True

        # Only an email clash counts as "already present"; an id clash still fails
        statement = insert(User).values(**values).on_conflict_do_nothing(index_elements=[User.email])
        try:
            result = self.session.execute(statement)
        except IntegrityError as exc:
            raise ConstraintViolation(
                User.__tablename__, _violated_column(User.__table__, str(exc.orig)), str(exc.orig)
            ) from exc
        return result.rowcount > 0

    def find_user_by_email(self, email: str) -> Optional[User]:
        return self.session.query(User).filter(User.email == email).first()

    def insert_profile(self, id: str, user_id: str, name: str) -> Profile:
        profile = Profile(id=id, user_id=user_id, name=name)
        self.session.add(profile)
        try:
            self.session.flush()
        except IntegrityError as exc:
            raise ConstraintViolation(
                Profile.__tablename__, _violated_column(Profile.__table__, str(exc.orig)), str(exc.orig)
            ) from exc
        return profile

    def find_profile_by_user_id(self, user_id: str) -> Optional[Profile]:
        return self.session.query(Profile).filter(Profile.user_id == user_id).first()


class CredentialStore:
    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = sessionmaker(
            bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "CredentialStore":
        return cls(make_engine(database_url, echo=echo))

    def init_schema(self) -> None:
        """Create the users and user_profiles tables if they are absent."""
        try:
            init_db(self.engine)
            logger.info("Database initialized successfully: %s", self.engine.url.render_as_string(hide_password=True))
        except SQLAlchemyError as e:
            logger.error("Failed to initialize database: %s", e)
            raise

    @contextmanager
    def unit_of_work(self) -> Iterator[UnitOfWork]:
        """
        Group store operations into one transaction.

        Commits when the block exits cleanly and rolls back on any exception,
        which is re-raised to the caller.
        """
        session = self._session_factory()
        try:
            yield UnitOfWork(session)
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def insert_user(self, id: str, email: str, password_hash: str, ignore_existing: bool = False) -> bool:
        with self.unit_of_work() as uow:
            return uow.insert_user(id, email, password_hash, ignore_existing=ignore_existing)

    def find_user_by_email(self, email: str) -> Optional[User]:
        with self.unit_of_work() as uow:
            return uow.find_user_by_email(email)

    def insert_profile(self, id: str, user_id: str, name: str) -> Profile:
        with self.unit_of_work() as uow:
            return uow.insert_profile(id, user_id, name)

    def find_profile_by_user_id(self, user_id: str) -> Optional[Profile]:
        with self.unit_of_work() as uow:
            return uow.find_profile_by_user_id(user_id)

    def check_connection(self) -> bool:
        """
        Check if the database connection is working.

        Returns:
            bool: True if connection is successful, False otherwise
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error("Database connection check failed: %s", e)
            return False

    def dispose(self) -> None:
        self.engine.dispose()
