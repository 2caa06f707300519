"""Exception hierarchy surfaced to callers of the workflow pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, Sequence

if TYPE_CHECKING:
    from .contracts import GenerationFailure


class AutomateGPTError(Exception):
    """Base class for all automate-gpt errors."""


class InvalidInput(AutomateGPTError):
    """Raised when the workflow input is empty or whitespace only."""

    def __init__(self, message: str = "Please enter some text to process.") -> None:
        super().__init__(message)


class TemplateNotFound(AutomateGPTError, LookupError):
    """Raised when a workflow id is not present in the registry."""

    def __init__(self, workflow_id: str) -> None:
        self.workflow_id = workflow_id
        super().__init__(f"Unknown workflow: {workflow_id}")


class AllProvidersUnavailable(AutomateGPTError):
    """Raised after every provider in the chain failed.

    ``cause`` is ``"configuration"`` when no failure is worth retrying
    (bad credentials, exhausted quota, rejected request) and ``"transient"``
    otherwise.
    """

    def __init__(
        self,
        message: str,
        failures: Sequence["GenerationFailure"],
        cause: Literal["configuration", "transient"],
    ) -> None:
        self.failures = list(failures)
        self.cause = cause
        super().__init__(message)


class AccountError(AutomateGPTError):
    """Base class for account store errors."""


class AccountValidationError(AccountError):
    """Malformed name, email or password."""


class DuplicateAccount(AccountError):
    """An account with the same email already exists."""

    def __init__(self, email: str) -> None:
        super().__init__(f"An account with email {email} already exists.")


class AccountNotFound(AccountError):
    """No account matches the given email."""

    def __init__(self, email: str) -> None:
        super().__init__(f"No account found for {email}.")


class WrongPassword(AccountError):
    def __init__(self) -> None:
        super().__init__("Incorrect password.")


class StorageError(AutomateGPTError):
    """Failure reported by a key-value storage backend."""


class StorageQuotaExceeded(StorageError):
    """The backend refused a write because it is out of space."""


class FileValidationError(AutomateGPTError):
    """An uploaded file was rejected or could not be read."""
