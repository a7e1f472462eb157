"""SQLAlchemy database models for karen."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime

from karen.database.database import Base


class UserDB(Base):
    """Database model for User."""

    __tablename__ = "users"
    # AUTOINCREMENT keeps SQLite from handing out the id of a deleted row again.
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)

    # User profile
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    avatar_url = Column(String(2048), nullable=False, default="")

    # Credential (salted PBKDF2 hash, never the raw password)
    password_hash = Column(String(255), nullable=False)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from karen.models.user import User
        return User(
            id=self.id,
            name=self.name,
            email=self.email,
            avatar_url=self.avatar_url or "",
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
