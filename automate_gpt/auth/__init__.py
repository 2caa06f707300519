"""Local account management."""

from .accounts import AccountStore
from .passwords import hash_password, password_policy_error, verify_password

__all__ = ["AccountStore", "hash_password", "verify_password", "password_policy_error"]
