"""Salted one-way password hashing."""

from __future__ import annotations

import base64
import os
import re
from typing import Optional

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

_SCHEME = "scrypt"
_SALT_BYTES = 16
_KEY_LENGTH = 32
_N, _R, _P = 2**14, 8, 1

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _kdf(salt: bytes) -> Scrypt:
    return Scrypt(salt=salt, length=_KEY_LENGTH, n=_N, r=_R, p=_P)


def hash_password(password: str) -> str:
    """Return ``scrypt$<salt>$<digest>`` for ``password`` with a fresh salt."""
    salt = os.urandom(_SALT_BYTES)
    digest = _kdf(salt).derive(password.encode("utf-8"))
    return "$".join(
        [
            _SCHEME,
            base64.b64encode(salt).decode("ascii"),
            base64.b64encode(digest).decode("ascii"),
        ]
    )


def verify_password(password: str, encoded: str) -> bool:
    try:
        scheme, salt_b64, digest_b64 = encoded.split("$")
    except ValueError:
        return False
    if scheme != _SCHEME:
        return False
    salt = base64.b64decode(salt_b64)
    digest = base64.b64decode(digest_b64)
    try:
        _kdf(salt).verify(password.encode("utf-8"), digest)
    except InvalidKey:
        return False
    return True


def password_policy_error(password: str) -> Optional[str]:
    """Return why ``password`` is unacceptable, or ``None``."""
    if len(password) < 8:
        return "Password must be at least 8 characters long"
    if not (
        re.search(r"[a-z]", password)
        and re.search(r"[A-Z]", password)
        and re.search(r"\d", password)
    ):
        return (
            "Password must contain at least one uppercase letter, "
            "one lowercase letter, and one number"
        )
    return None
