"""
Password hashing and opaque token generation.
"""

import secrets

import bcrypt

# Random bytes per token; hex encoding doubles the length
TOKEN_BYTES = 256


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt

    Raises:
        ValueError: If password exceeds bcrypt's 72 byte limit
    """
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > 72:
        raise ValueError(
            f"Password is {len(password_bytes)} bytes, exceeds bcrypt's 72 byte limit"
        )

    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash. Malformed hashes never match."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError:
        return False


def generate_token() -> str:
    return secrets.token_bytes(TOKEN_BYTES).hex()
