"""Password hashing for stored user credentials.

Raw passwords are never stored or logged. The stored value has the form
``pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>`` so the iteration count can be
raised later without invalidating existing hashes.
"""

import hashlib
import hmac
import os
import secrets
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

ALGORITHM = "pbkdf2_sha256"
SALT_BYTES = 32
PASSWORD_HASH_ITERATIONS = int(os.getenv("PASSWORD_HASH_ITERATIONS", "260000"))


def _derive(password: str, salt: bytes, iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)


def hash_password(password: str, iterations: Optional[int] = None) -> str:
    """Hash a password with a fresh random salt.

    Args:
        password: Raw password
        iterations: PBKDF2 iteration count (defaults to PASSWORD_HASH_ITERATIONS)

    Returns:
        Encoded hash string suitable for storage
    """
    if iterations is None:
        iterations = PASSWORD_HASH_ITERATIONS
    salt = secrets.token_bytes(SALT_BYTES)
    digest = _derive(password, salt, iterations)
    return f"{ALGORITHM}${iterations}${salt.hex()}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    """Check a raw password against a stored hash (constant-time compare)."""
    try:
        algorithm, iterations, salt_hex, digest_hex = encoded.split("$")
        if algorithm != ALGORITHM:
            return False
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(digest_hex)
        rounds = int(iterations)
    except (AttributeError, ValueError):
        return False
    return hmac.compare_digest(_derive(password, salt, rounds), expected)
