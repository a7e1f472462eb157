"""Repository for User database operations."""

import logging
from typing import Any, Dict, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from karen.auth.passwords import hash_password, verify_password
from karen.database.models import UserDB
from karen.errors import AuthenticationError, ConflictError, NotFoundError
from karen.models.user import User

logger = logging.getLogger(__name__)

# Columns a PATCH may touch. `password` is hashed into `password_hash`.
UPDATABLE_FIELDS = ("name", "email", "password", "avatar_url")


class UserRepository:
    """Repository for User database operations.

    Email uniqueness is enforced by the UNIQUE constraint on `users.email`; the
    lookup before each write only turns the common case into a clean ConflictError.
    """

    def __init__(self, db: Session):
        self.db = db

    def _get_db(self, user_id: int) -> Optional[UserDB]:
        return self.db.query(UserDB).filter(UserDB.id == user_id).first()

    def _email_taken(self, email: str, exclude_user_id: Optional[int] = None) -> bool:
        query = self.db.query(UserDB.id).filter(UserDB.email == email)
        if exclude_user_id is not None:
            query = query.filter(UserDB.id != exclude_user_id)
        return query.first() is not None

    def get(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        user_db = self._get_db(user_id)
        return user_db.to_pydantic() if user_db else None

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email (exact match)."""
        user_db = self.db.query(UserDB).filter(UserDB.email == email).first()
        return user_db.to_pydantic() if user_db else None

    def create(self, name: str, email: str, password: str, avatar_url: str = "") -> User:
        """Create a new user.

        Raises:
            ConflictError: If the email already belongs to another user
        """
        if self._email_taken(email):
            raise ConflictError(f"User already exists with email {email}")

        user_db = UserDB(
            name=name,
            email=email,
            avatar_url=avatar_url or "",
            password_hash=hash_password(password),
        )
        try:
            self.db.add(user_db)
            self.db.commit()
        except IntegrityError as e:
            # Lost a race against a concurrent create with the same email.
            self.db.rollback()
            logger.info(f"Rejected duplicate email on create: {email}")
            raise ConflictError(f"User already exists with email {email}") from e
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create user {email}: {type(e).__name__}: {str(e)}")
            raise
        self.db.refresh(user_db)
        logger.debug(f"Created user {user_db.id}: {user_db.email}")
        return user_db.to_pydantic()

    def update(self, user_id: int, changes: Dict[str, Any]) -> Optional[User]:
        """Apply a partial update in a single transaction.

        Args:
            user_id: User to update
            changes: Subset of UPDATABLE_FIELDS mapped to new values

        Returns:
            Updated User, or None if the user does not exist

        Raises:
            ConflictError: If `email` belongs to a different user (nothing is written)
        """
        user_db = self._get_db(user_id)
        if not user_db:
            return None

        if "email" in changes and self._email_taken(changes["email"], exclude_user_id=user_id):
            raise ConflictError(f"User already exists with email {changes['email']}")

        for field, value in changes.items():
            if field not in UPDATABLE_FIELDS:
                continue
            if field == "password":
                user_db.password_hash = hash_password(value)
            else:
                setattr(user_db, field, value)

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info(f"Rejected duplicate email on update of user {user_id}")
            raise ConflictError(f"User already exists with email {changes.get('email')}") from e
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update user {user_id}: {type(e).__name__}: {str(e)}")
            raise
        self.db.refresh(user_db)
        logger.debug(f"Updated user {user_id}: {sorted(k for k in changes if k != 'password')}")
        return user_db.to_pydantic()

    def delete(self, user_id: int) -> bool:
        """Delete a user. Returns False if there was nothing to delete."""
        try:
            deleted = self.db.query(UserDB).filter(UserDB.id == user_id).delete()
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete user {user_id}: {type(e).__name__}: {str(e)}")
            raise
        if deleted:
            logger.debug(f"Deleted user {user_id}")
        return bool(deleted)

    def authenticate(self, email: str, password: str) -> User:
        """Verify credentials.

        Raises:
            NotFoundError: If no user has that email
            AuthenticationError: If the password does not match
        """
        user_db = self.db.query(UserDB).filter(UserDB.email == email).first()
        if not user_db:
            raise NotFoundError(f"User with email {email} was not found")
        if not verify_password(password, user_db.password_hash):
            raise AuthenticationError("password incorrect")
        return user_db.to_pydantic()
