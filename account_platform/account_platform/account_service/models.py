from sqlalchemy import Column, String
from .db import Base


class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True)
    email = Column(String, unique=True, index=True)
    password_hash = Column(String)


class Profile(Base):
    __tablename__ = "user_profiles"
    id = Column(String, primary_key=True)
    # Refers to users.id by convention only; there is no foreign key.
    user_id = Column(String, index=True)
    name = Column(String)

    def to_dict(self) -> dict:
        """
        Serialize Profile for API responses.

        Returns:
            Dictionary with the profile id, owning user id and display name
        """
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
        }
