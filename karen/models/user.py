"""User data model for karen."""

from datetime import datetime
from typing import Any, Dict, Iterable, Optional
from pydantic import BaseModel, Field


# Attributes that may ever leave the service. The password hash is not one of them.
PUBLIC_FIELDS = ("id", "name", "email", "avatar_url")

# Default shape of a session-scoped read; the session already identifies the user.
SELF_FIELDS = ("name", "email", "avatar_url")

# Shape of the authentication response.
AUTH_FIELDS = ("id", "name", "email")


class User(BaseModel):
    """User model for karen."""

    id: int = Field(..., description="Server-assigned user identifier (never reused)")
    name: str = Field(..., description="User display name")
    email: str = Field(..., description="User email address (unique, exact match)")
    avatar_url: str = Field("", description="Avatar URL, empty when unset")
    created_at: Optional[datetime] = Field(None, description="User creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="User last update timestamp")

    def public_view(self, fields: Iterable[str] = PUBLIC_FIELDS) -> Dict[str, Any]:
        """Project the user onto a subset of the public field set.

        Raises:
            ValueError: If a requested field is not public
        """
        view: Dict[str, Any] = {}
        for field in fields:
            if field not in PUBLIC_FIELDS:
                raise ValueError(f"Field '{field}' is not a public user field")
            view[field] = getattr(self, field)
        return view
