"""Account store: lookups, existence checks and save with uniqueness enforced by the database."""

import logging

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    AuthError,
    DuplicateEmailError,
    DuplicateUsernameError,
    StoreUnavailableError,
)
from app.models import Account

logger = logging.getLogger(__name__)

# Fragments of the constraint violation text that identify the offending column.
_USERNAME_MARKERS = ("accounts.username", "ix_accounts_username", "(username)")
_EMAIL_MARKERS = ("accounts.email", "ix_accounts_email", "(email)")


def _duplicate_error_from_integrity(exc: IntegrityError) -> AuthError | None:
    """
    Map a unique-constraint violation to the matching duplicate error.

    Both SQLite ("UNIQUE constraint failed: accounts.username") and PostgreSQL
    ('... unique constraint "ix_accounts_username"') name the column or index.
    Username is checked first so a row violating both reports the username.
    """
    detail = str(exc.orig).lower()
    if any(marker in detail for marker in _USERNAME_MARKERS):
        return DuplicateUsernameError()
    if any(marker in detail for marker in _EMAIL_MARKERS):
        return DuplicateEmailError()
    return None


class AccountStore:
    """Credential store backed by the accounts table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_username(self, username: str) -> Account | None:
        try:
            return self.session.scalars(
                select(Account).where(Account.username == username)
            ).first()
        except SQLAlchemyError as e:
            raise StoreUnavailableError("Account store is unavailable.") from e

    def exists_by_username(self, username: str) -> bool:
        try:
            return bool(
                self.session.scalar(select(exists().where(Account.username == username)))
            )
        except SQLAlchemyError as e:
            raise StoreUnavailableError("Account store is unavailable.") from e

    def exists_by_email(self, email: str) -> bool:
        try:
            return bool(self.session.scalar(select(exists().where(Account.email == email))))
        except SQLAlchemyError as e:
            raise StoreUnavailableError("Account store is unavailable.") from e

    def save(self, account: Account) -> Account:
        """
        Add the account to the session and flush so the database checks uniqueness now.

        Does not commit; the caller owns the transaction. On a unique violation
        the session is rolled back and DuplicateUsernameError/DuplicateEmailError
        is raised.
        """
        try:
            self.session.add(account)
            self.session.flush()
        except IntegrityError as e:
            self.session.rollback()
            duplicate = _duplicate_error_from_integrity(e)
            if duplicate is None:
                raise StoreUnavailableError("Account could not be saved.") from e
            logger.info(
                "Uniqueness violation detected at save time: %s",
                type(duplicate).__name__,
            )
            raise duplicate from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreUnavailableError("Account store is unavailable.") from e
        return account
