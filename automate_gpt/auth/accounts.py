"""Local account records and the current-session pointer."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError

from ..constants import SESSION_KEY, USERS_KEY
from ..contracts import UserAccount
from ..errors import (
    AccountNotFound,
    AccountValidationError,
    DuplicateAccount,
    WrongPassword,
)
from ..persistence.store import KeyValueStore
from .passwords import EMAIL_PATTERN, hash_password, password_policy_error, verify_password

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _validate_email(email: str) -> str:
    normalized = _normalize_email(email)
    if not normalized or not EMAIL_PATTERN.match(normalized):
        raise AccountValidationError("Please enter a valid email address")
    return normalized


def _validate_password(password: str) -> None:
    problem = password_policy_error(password)
    if problem:
        raise AccountValidationError(problem)


class AccountStore:
    """Create, authenticate and reset local accounts.

    Accounts live in one list under ``USERS_KEY``; the signed-in user is a
    pointer under ``SESSION_KEY``.
    """

    def __init__(self, kv: KeyValueStore) -> None:
        self.kv = kv
        self._lock = asyncio.Lock()

    async def _load_accounts(self) -> List[UserAccount]:
        raw = await self.kv.get(USERS_KEY)
        if not isinstance(raw, list):
            return []
        try:
            return [UserAccount.model_validate(item) for item in raw]
        except ValidationError as exc:
            logger.warning(f"Ignoring unreadable account records: {exc}")
            return []

    async def _save_accounts(self, accounts: List[UserAccount]) -> None:
        await self.kv.set(USERS_KEY, [a.model_dump(mode="json") for a in accounts])

    async def _start_session(self, account: UserAccount) -> None:
        await self.kv.set(SESSION_KEY, {"user_id": account.id})

    async def sign_up(self, name: str, email: str, password: str) -> UserAccount:
        """Create an account and sign it in.

        Raises:
            AccountValidationError: Blank name, malformed email or weak password.
            DuplicateAccount: The email is already registered.
        """
        if not name.strip() or not email.strip() or not password.strip():
            raise AccountValidationError("All fields are required")
        normalized = _validate_email(email)
        _validate_password(password)

        async with self._lock:
            accounts = await self._load_accounts()
            if any(a.email == normalized for a in accounts):
                raise DuplicateAccount(normalized)
            account = UserAccount(
                name=name.strip(),
                email=normalized,
                password_hash=hash_password(password),
                last_signed_in_at=datetime.now(timezone.utc),
            )
            accounts.append(account)
            await self._save_accounts(accounts)
            await self._start_session(account)

        logger.info(f"Created account {account.id}")
        return account

    async def sign_in(self, email: str, password: str) -> UserAccount:
        """Authenticate and make the account current.

        Raises:
            AccountValidationError: Malformed email or blank password.
            AccountNotFound: No account for ``email``.
            WrongPassword: The password does not match.
        """
        normalized = _validate_email(email)
        if not password:
            raise AccountValidationError("Password is required")

        async with self._lock:
            accounts = await self._load_accounts()
            for index, account in enumerate(accounts):
                if account.email == normalized:
                    break
            else:
                raise AccountNotFound(normalized)

            if not verify_password(password, account.password_hash):
                raise WrongPassword()

            account = account.model_copy(
                update={"last_signed_in_at": datetime.now(timezone.utc)}
            )
            accounts[index] = account
            await self._save_accounts(accounts)
            await self._start_session(account)
        return account

    async def sign_out(self) -> None:
        await self.kv.remove(SESSION_KEY)

    async def current_user(self) -> Optional[UserAccount]:
        """Return the signed-in account, if any."""
        pointer = await self.kv.get(SESSION_KEY)
        if not isinstance(pointer, dict) or not pointer.get("user_id"):
            return None
        for account in await self._load_accounts():
            if account.id == pointer["user_id"]:
                return account
        return None

    async def reset_password(self, email: str, new_password: str) -> UserAccount:
        """Replace the password of the account registered under ``email``."""
        normalized = _validate_email(email)
        _validate_password(new_password)

        async with self._lock:
            accounts = await self._load_accounts()
            for index, account in enumerate(accounts):
                if account.email == normalized:
                    break
            else:
                raise AccountNotFound(normalized)

            account = account.model_copy(
                update={"password_hash": hash_password(new_password)}
            )
            accounts[index] = account
            await self._save_accounts(accounts)

        logger.info(f"Password reset for account {account.id}")
        return account
