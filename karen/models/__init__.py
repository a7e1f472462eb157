"""Data models for karen."""

from karen.models.user import User, PUBLIC_FIELDS, SELF_FIELDS, AUTH_FIELDS

__all__ = [
    "User",
    "PUBLIC_FIELDS",
    "SELF_FIELDS",
    "AUTH_FIELDS",
]
