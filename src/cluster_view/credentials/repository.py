"""Account credentials repository and resolution errors.

The repository maps account names to credentials. The provider never
reaches for a global repository; one is injected at construction.
Built-in backend: StaticCredentialsRepository, loaded from an accounts
YAML file or built directly from credential models.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import yaml
from pydantic import TypeAdapter, ValidationError

from cluster_view.models import AccountCredentials, EcsCredentials


class ConfigurationError(Exception):
    """Raised when an account cannot be used for the requested call."""


class CredentialsNotFoundError(ConfigurationError):
    """Raised when no credentials are registered for an account."""


class InvalidCredentialsError(ConfigurationError):
    """Raised when an account's credentials are not ECS-capable."""


class AccountsError(Exception):
    """Raised when the accounts file is invalid or cannot be loaded."""


@runtime_checkable
class CredentialsRepository(Protocol):
    """Protocol for credential lookup backends."""

    def get_one(self, account: str) -> AccountCredentials:
        """Return credentials for *account*.

        Raises:
            CredentialsNotFoundError: If the account is unknown.
        """
        ...


class StaticCredentialsRepository:
    """In-memory repository keyed by account name."""

    def __init__(self, accounts: list[AccountCredentials]) -> None:
        self._accounts: dict[str, AccountCredentials] = {}
        for creds in accounts:
            if creds.name in self._accounts:
                raise AccountsError(f"Duplicate account name: {creds.name}")
            self._accounts[creds.name] = creds

    def __len__(self) -> int:
        return len(self._accounts)

    @property
    def accounts(self) -> list[AccountCredentials]:
        return list(self._accounts.values())

    def get_one(self, account: str) -> AccountCredentials:
        creds = self._accounts.get(account)
        if creds is None:
            raise CredentialsNotFoundError(f"Unknown account: {account}")
        return creds


def resolve_ecs_credentials(
    repository: CredentialsRepository,
    account: str,
    region: str,
) -> EcsCredentials:
    """Look up *account* and require the ECS credential variant."""
    creds = repository.get_one(account)
    if creds.type != "ecs":
        raise InvalidCredentialsError(f"Invalid credentials:{account}:{region}")
    return creds


_ACCOUNT_ADAPTER: TypeAdapter[Any] = TypeAdapter(AccountCredentials)


def load_accounts(path: str | Path) -> StaticCredentialsRepository:
    """Load account credentials from a YAML file.

    The YAML file must have a top-level 'accounts' key containing a list
    of account entries. Entries without a ``type`` default to ``ecs``.

    Raises:
        AccountsError: If the file cannot be read, parsed, or validated.
    """
    path = Path(path)
    if not path.exists():
        raise AccountsError(f"Accounts file not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise AccountsError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(raw, dict) or "accounts" not in raw:
        raise AccountsError(f"Accounts file must have a top-level 'accounts' key: {path}")

    raw_accounts: Any = raw["accounts"]
    if not isinstance(raw_accounts, list):
        raise AccountsError(f"'accounts' must be a list: {path}")

    accounts: list[AccountCredentials] = []
    for i, entry in enumerate(raw_accounts):
        if not isinstance(entry, dict):
            raise AccountsError(f"Invalid account at index {i} in {path}: expected a mapping")
        try:
            accounts.append(_ACCOUNT_ADAPTER.validate_python({"type": "ecs", **entry}))
        except ValidationError as e:
            raise AccountsError(f"Invalid account at index {i} in {path}: {e}") from e

    return StaticCredentialsRepository(accounts)
