from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from teamhub.core.security import hash_password, looks_hashed, verify_password  # noqa: E402
from teamhub.core.utils import generate_unique_join_code  # noqa: E402


def test_hash_has_two_hex_parts_and_random_salt():
    first = hash_password("secret123")
    second = hash_password("secret123")
    digest, salt = first.split(".")
    assert len(digest) == 128 and len(salt) == 32
    assert first != second


def test_verify_password_roundtrip():
    stored = hash_password("secret123")
    assert verify_password("secret123", stored) is True
    assert verify_password("secret124", stored) is False
    assert verify_password("secret123", None) is False
    assert verify_password("secret123", "secret123") is False


def test_looks_hashed_uses_delimiter():
    assert looks_hashed("abc.def")
    assert not looks_hashed("secret123")
    assert not looks_hashed(None)


def test_unique_join_code_avoids_existing():
    existing = {"ABC123"}
    code = generate_unique_join_code(existing, 6)
    assert code not in existing
    assert len(code) == 6 and code.isalnum() and code.upper() == code
