"""Credential utilities for tenant users.

Provides password hashing and personal access token issuance. Tokens are
opaque capabilities: only a bcrypt hash and a short lookup prefix are
stored in the tenant database, the plaintext is shown to the caller once.
"""

import secrets

import bcrypt

API_TOKEN_PREFIX = "sdk_"
TOKEN_LOOKUP_PREFIX_LENGTH = 12

# bcrypt ignores input beyond 72 bytes; newer releases reject it.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a user password with bcrypt and a fresh salt."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash.

    Returns False for malformed hashes instead of raising.
    """
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        return False


def generate_api_token() -> str:
    """Generate a URL-safe API token with the sdk_ prefix.

    Returns:
        A token such as ``sdk_Xy3...`` (32 random bytes, base64url encoded)
    """
    # replace - with _ so the whole token selects as one word
    random_part = secrets.token_urlsafe(32).replace("-", "_")
    return f"{API_TOKEN_PREFIX}{random_part}"


def extract_prefix(token: str) -> str:
    """Return the lookup prefix stored alongside the token hash."""
    return token[:TOKEN_LOOKUP_PREFIX_LENGTH]


def hash_token(token: str) -> str:
    return bcrypt.hashpw(token.encode(), bcrypt.gensalt()).decode()


def verify_token(token: str, token_hash: str) -> bool:
    """Constant-time check of a presented token against a stored hash."""
    try:
        return bcrypt.checkpw(token.encode(), token_hash.encode())
    except ValueError:
        return False
