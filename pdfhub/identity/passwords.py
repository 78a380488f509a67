import hashlib
import secrets
from functools import lru_cache

from werkzeug.security import check_password_hash, generate_password_hash

MIN_PASSWORD_LENGTH = 8


def hash_password(password: str) -> str:
    """Salted one-way hash of a password."""
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    """Constant-time comparison of a password against its stored hash."""
    return check_password_hash(password_hash, password)


def verify_password_for_unknown_account(password: str) -> bool:
    """Spend the same hashing work as a real check, always failing."""
    check_password_hash(_dummy_hash(), password)
    return False


def unusable_password() -> str:
    """Random placeholder for accounts that only sign in through a provider."""
    return secrets.token_hex(32)


def generate_reset_token() -> tuple[str, str]:
    """Return (raw token, SHA-256 hex digest of it)."""
    raw = secrets.token_hex(32)
    return raw, hash_reset_token(raw)


def hash_reset_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return generate_password_hash(secrets.token_hex(16))
