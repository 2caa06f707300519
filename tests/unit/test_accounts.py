"""Tests for local account management."""

import pytest

from automate_gpt.auth import AccountStore, hash_password, password_policy_error, verify_password
from automate_gpt.constants import USERS_KEY
from automate_gpt.errors import (
    AccountNotFound,
    AccountValidationError,
    DuplicateAccount,
    WrongPassword,
)
from automate_gpt.persistence import InMemoryKeyValueStore


def test_password_hash_is_salted_and_verifiable():
    first = hash_password("Secret123")
    second = hash_password("Secret123")
    assert first != second
    assert "Secret123" not in first
    assert verify_password("Secret123", first)
    assert not verify_password("secret123", first)
    assert not verify_password("Secret123", "not-a-hash")


@pytest.mark.parametrize(
    "password, ok",
    [("Secret123", True), ("Sh0rt", False), ("alllower123", False), ("NoDigitsHere", False)],
)
def test_password_policy(password, ok):
    assert (password_policy_error(password) is None) is ok


@pytest.mark.asyncio
async def test_sign_up_then_sign_in():
    kv = InMemoryKeyValueStore()
    accounts = AccountStore(kv)

    user = await accounts.sign_up("Ada", "Ada@Example.com", "Secret123")
    assert user.email == "ada@example.com"
    assert (await accounts.current_user()).id == user.id

    stored = await kv.get(USERS_KEY)
    assert "Secret123" not in str(stored)

    await accounts.sign_out()
    assert await accounts.current_user() is None

    signed_in = await accounts.sign_in("ada@example.com", "Secret123")
    assert signed_in.id == user.id
    assert signed_in.last_signed_in_at is not None
    assert (await accounts.current_user()).id == user.id


@pytest.mark.asyncio
async def test_duplicate_email_is_case_insensitive():
    accounts = AccountStore(InMemoryKeyValueStore())
    await accounts.sign_up("Ada", "ada@example.com", "Secret123")
    with pytest.raises(DuplicateAccount):
        await accounts.sign_up("Ada Two", "ADA@example.com", "Secret456")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "name, email, password",
    [
        ("", "ada@example.com", "Secret123"),
        ("Ada", "not-an-email", "Secret123"),
        ("Ada", "ada@example.com", "weak"),
    ],
)
async def test_sign_up_validation(name, email, password):
    accounts = AccountStore(InMemoryKeyValueStore())
    with pytest.raises(AccountValidationError):
        await accounts.sign_up(name, email, password)


@pytest.mark.asyncio
async def test_sign_in_errors():
    accounts = AccountStore(InMemoryKeyValueStore())
    await accounts.sign_up("Ada", "ada@example.com", "Secret123")

    with pytest.raises(AccountNotFound):
        await accounts.sign_in("bob@example.com", "Secret123")
    with pytest.raises(WrongPassword):
        await accounts.sign_in("ada@example.com", "Wrong1234")
    with pytest.raises(AccountValidationError):
        await accounts.sign_in("ada@example.com", "")


@pytest.mark.asyncio
async def test_reset_password():
    accounts = AccountStore(InMemoryKeyValueStore())
    await accounts.sign_up("Ada", "ada@example.com", "Secret123")

    await accounts.reset_password("ada@example.com", "Fresh4567")
    with pytest.raises(WrongPassword):
        await accounts.sign_in("ada@example.com", "Secret123")
    assert (await accounts.sign_in("ada@example.com", "Fresh4567")).email == "ada@example.com"

    with pytest.raises(AccountNotFound):
        await accounts.reset_password("bob@example.com", "Fresh4567")
    with pytest.raises(AccountValidationError):
        await accounts.reset_password("ada@example.com", "weak")
