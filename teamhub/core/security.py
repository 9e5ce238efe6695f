"""Security helpers (hashing and verification)."""

from __future__ import annotations

import hashlib
import secrets

HASH_DELIMITER = "."
_SALT_BYTES = 16
_KEY_LEN = 64


def _scrypt(password: str, salt: str) -> str:
    return hashlib.scrypt(
        password.encode(),
        salt=salt.encode(),
        n=2**14,
        r=8,
        p=1,
        dklen=_KEY_LEN,
    ).hex()


def hash_password(password: str) -> str:
    """Return ``"<digest>.<salt>"`` where both parts are hex strings."""
    salt = secrets.token_hex(_SALT_BYTES)
    return f"{_scrypt(password, salt)}{HASH_DELIMITER}{salt}"


def looks_hashed(value: str | None) -> bool:
    """A stored password is considered hashed once it carries the delimiter."""
    return HASH_DELIMITER in (value or "")


def verify_password(password: str, stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if not looks_hashed(stored):
        return False
    digest, _, salt = stored.partition(HASH_DELIMITER)
    if not digest or not salt:
        return False
    return secrets.compare_digest(_scrypt(password or "", salt), digest)
