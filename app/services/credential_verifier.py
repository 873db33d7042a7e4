"""Username/password verification against the account store."""

import logging
from functools import lru_cache
from typing import Protocol

from app.core.exceptions import InvalidCredentialsError
from app.models import Account

logger = logging.getLogger(__name__)


class PasswordHasher(Protocol):
    def hash(self, plain_password: str) -> str: ...

    def verify(self, plain_password: str, hashed: str) -> bool: ...


class AccountLookup(Protocol):
    def find_by_username(self, username: str) -> Account | None: ...


@lru_cache(maxsize=8)
def _dummy_hash(hasher: PasswordHasher) -> str:
    return hasher.hash("not-a-real-password")


class CredentialVerifier:
    """
    Authenticate a username/password pair and return the stored account.

    Unknown usernames and wrong passwords raise the same InvalidCredentialsError
    so callers cannot tell which factor failed. The cause is only logged.
    """

    def __init__(self, accounts: AccountLookup, hasher: PasswordHasher) -> None:
        self.accounts = accounts
        self.hasher = hasher

    def authenticate(self, username: str, password: str) -> Account:
        account = self.accounts.find_by_username(username)
        if account is None:
            # Burn a comparable amount of time so response latency does not reveal the miss.
            self.hasher.verify(password, _dummy_hash(self.hasher))
            logger.warning("Login failed - unknown username: %s", username)
            raise InvalidCredentialsError()
        if not self.hasher.verify(password, account.password_hash):
            logger.warning("Login failed - bad password for username: %s", username)
            raise InvalidCredentialsError()
        return account
