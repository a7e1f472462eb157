"""FastAPI dependencies for session resolution.

A request acts on behalf of an account by sending that account's id in the
`User-ID` header. There is no token: an absent, malformed, or unknown id is
reported as not found rather than unauthenticated.
"""

import logging
import re
from typing import Optional
from fastapi import Depends, Header
from sqlalchemy.orm import Session

from karen.database.database import get_db
from karen.database.user_repository import UserRepository
from karen.errors import NotFoundError

logger = logging.getLogger(__name__)

SESSION_HEADER = "User-ID"

# Largest id a 64-bit INTEGER column can hold.
MAX_USER_ID = 2**63 - 1

_USER_ID_RE = re.compile(r"[0-9]+")


def parse_user_id(raw: Optional[str]) -> Optional[int]:
    """Parse a user id from a header or path segment; None if it is not a positive integer."""
    if raw is None:
        return None
    raw = raw.strip()
    if not _USER_ID_RE.fullmatch(raw):
        return None
    user_id = int(raw)
    if user_id <= 0 or user_id > MAX_USER_ID:
        return None
    return user_id


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get a UserRepository bound to the request's database session."""
    return UserRepository(db)


def get_session_user_id(
    user_id_header: Optional[str] = Header(default=None, alias=SESSION_HEADER),
    repo: UserRepository = Depends(get_user_repository),
) -> int:
    """Resolve the `self` alias to a concrete user id.

    Raises:
        NotFoundError: If the header is absent, malformed, or names no user
    """
    user_id = parse_user_id(user_id_header)
    if user_id is None:
        logger.info(f"Invalid session header: {user_id_header!r}")
        raise NotFoundError("User not found")
    if repo.get(user_id) is None:
        logger.info(f"Session user {user_id} not found")
        raise NotFoundError("User not found")
    return user_id
