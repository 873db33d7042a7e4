"""Account registration: uniqueness checks, default role assignment, single-transaction save."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    AuthError,
    DuplicateEmailError,
    DuplicateUsernameError,
    StoreUnavailableError,
)
from app.models import Account, AccountStatus
from app.repositories import AccountStore, RoleStore
from app.schemas.auth import RegistrationRequest
from app.services.credential_verifier import PasswordHasher

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DefaultRole:
    """Role attached to every new account; created on first use."""

    name: str
    description: str

    @classmethod
    def from_settings(cls, settings: "Settings") -> "DefaultRole":
        return cls(name=settings.DEFAULT_ROLE_NAME, description=settings.DEFAULT_ROLE_DESCRIPTION)


class Registrar:
    """
    Register new accounts.

    One register() call is one transaction on the shared session: the account
    and any role created for it are committed together or not at all.
    """

    def __init__(
        self,
        session: Session,
        accounts: AccountStore,
        roles: RoleStore,
        hasher: PasswordHasher,
        default_role: DefaultRole,
    ) -> None:
        self.session = session
        self.accounts = accounts
        self.roles = roles
        self.hasher = hasher
        self.default_role = default_role

    def register(self, request: RegistrationRequest) -> Account:
        """
        Create an ACTIVE account with the default role and return the persisted snapshot.

        Raises DuplicateUsernameError (checked first), DuplicateEmailError or
        StoreUnavailableError. Nothing is persisted on failure.
        """
        try:
            if self.accounts.exists_by_username(request.username):
                raise DuplicateUsernameError()
            if self.accounts.exists_by_email(request.email):
                raise DuplicateEmailError()

            account = Account(
                username=request.username,
                email=request.email,
                password_hash=self.hasher.hash(request.password),
                first_name=request.first_name,
                last_name=request.last_name,
                phone=request.phone,
                status=AccountStatus.ACTIVE,
            )
            role = self.roles.get_or_create(self.default_role.name, self.default_role.description)
            account.roles = {role}
            self.accounts.save(account)
            self.session.commit()
        except AuthError:
            self.session.rollback()
            raise
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreUnavailableError("Account could not be registered.") from e

        try:
            self.session.refresh(account)
        except SQLAlchemyError as e:
            raise StoreUnavailableError("Account store is unavailable.") from e
        logger.info(
            "Registered account %s with role %s",
            account.username,
            self.default_role.name,
        )
        return account
