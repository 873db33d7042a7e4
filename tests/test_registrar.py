"""Tests for app.services.registrar: ordering of uniqueness checks, default role and transaction handling."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.core.exceptions import (
    DuplicateEmailError,
    DuplicateUsernameError,
    StoreUnavailableError,
)
from app.models import Account, AccountStatus, Role
from app.repositories import AccountStore, RoleStore
from app.schemas.auth import RegistrationRequest
from app.services.registrar import DefaultRole, Registrar
from tests.helpers import FakeHasher, make_session_factory

DEFAULT_ROLE = DefaultRole(name="CUSTOMER", description="Customer")


def _request(
    username: str = "alice",
    email: str = "alice@x.com",
    password: str = "password-1",
    **kwargs: object,
) -> RegistrationRequest:
    return RegistrationRequest(username=username, email=email, password=password, **kwargs)


def _mock_registrar(
    username_taken: bool = False,
    email_taken: bool = False,
) -> tuple[Registrar, MagicMock, MagicMock, MagicMock]:
    session = MagicMock()
    accounts = MagicMock()
    accounts.exists_by_username.return_value = username_taken
    accounts.exists_by_email.return_value = email_taken
    accounts.save.side_effect = lambda account: account
    roles = MagicMock()
    roles.get_or_create.return_value = Role(name="CUSTOMER", description="Customer")
    registrar = Registrar(session, accounts, roles, FakeHasher(), DEFAULT_ROLE)
    return registrar, session, accounts, roles


class TestUniquenessOrdering(unittest.TestCase):
    """Username is checked before email and the first violation short-circuits."""

    def test_duplicate_username(self) -> None:
        registrar, session, accounts, roles = _mock_registrar(username_taken=True)
        with self.assertRaises(DuplicateUsernameError):
            registrar.register(_request())
        accounts.exists_by_email.assert_not_called()
        roles.get_or_create.assert_not_called()
        accounts.save.assert_not_called()
        session.rollback.assert_called_once()
        session.commit.assert_not_called()

    def test_duplicate_email(self) -> None:
        registrar, session, accounts, _ = _mock_registrar(email_taken=True)
        with self.assertRaises(DuplicateEmailError):
            registrar.register(_request())
        accounts.save.assert_not_called()
        session.commit.assert_not_called()

    def test_both_duplicate_reports_username(self) -> None:
        registrar, _, _, _ = _mock_registrar(username_taken=True, email_taken=True)
        with self.assertRaises(DuplicateUsernameError):
            registrar.register(_request())


class TestNewAccount(unittest.TestCase):
    """A new account is ACTIVE, has a hashed password and exactly the default role."""

    def test_builds_active_account_with_default_role(self) -> None:
        registrar, session, accounts, roles = _mock_registrar()
        account = registrar.register(_request(first_name="Alice", phone="555-0100"))
        roles.get_or_create.assert_called_once_with("CUSTOMER", "Customer")
        accounts.save.assert_called_once_with(account)
        session.commit.assert_called_once()
        session.refresh.assert_called_once_with(account)
        self.assertEqual(account.status, AccountStatus.ACTIVE)
        self.assertEqual(account.role_names, {"CUSTOMER"})
        self.assertEqual(account.password_hash, "hashed::password-1")
        self.assertEqual(account.first_name, "Alice")
        self.assertEqual(account.phone, "555-0100")

    def test_late_uniqueness_violation_keeps_its_kind(self) -> None:
        registrar, session, accounts, _ = _mock_registrar()
        accounts.save.side_effect = DuplicateEmailError()
        with self.assertRaises(DuplicateEmailError):
            registrar.register(_request())
        session.commit.assert_not_called()
        session.rollback.assert_called()

    def test_commit_failure_is_store_unavailable(self) -> None:
        registrar, session, _, _ = _mock_registrar()
        session.commit.side_effect = OperationalError("COMMIT", {}, Exception("gone"))
        with self.assertRaises(StoreUnavailableError):
            registrar.register(_request())
        session.rollback.assert_called_once()


class TestRegistrarAgainstDatabase(unittest.TestCase):
    """Registration against an in-memory SQLite schema."""

    def setUp(self) -> None:
        self.session_factory = make_session_factory()
        self.session = self.session_factory()

    def tearDown(self) -> None:
        self.session.close()

    def _registrar(self, default_role: DefaultRole = DEFAULT_ROLE) -> Registrar:
        return Registrar(
            self.session,
            AccountStore(self.session),
            RoleStore(self.session),
            FakeHasher(),
            default_role,
        )

    def _count(self, model: type) -> int:
        return self.session.scalar(select(func.count()).select_from(model))

    def test_alice_registers_once(self) -> None:
        registrar = self._registrar()
        first = registrar.register(_request(username="alice", email="alice@x.com", password="p1"))
        self.assertEqual(first.status, AccountStatus.ACTIVE)
        self.assertEqual(first.role_names, {"CUSTOMER"})
        self.assertIsNotNone(first.id)
        self.assertIsNotNone(first.created_at)

        with self.assertRaises(DuplicateUsernameError):
            registrar.register(_request(username="alice", email="other@x.com", password="p2"))
        self.assertEqual(self._count(Account), 1)

    def test_email_is_stored_exactly_as_given(self) -> None:
        registrar = self._registrar()
        mixed = registrar.register(_request(username="bob", email="Bob@X.COM"))
        lower = registrar.register(_request(username="bobby", email="bob@x.com"))
        self.assertEqual(mixed.email, "Bob@X.COM")
        self.assertEqual(lower.email, "bob@x.com")
        self.assertTrue(registrar.accounts.exists_by_email("Bob@X.COM"))
        self.assertEqual(self._count(Account), 2)

    def test_duplicate_email_with_new_username(self) -> None:
        registrar = self._registrar()
        registrar.register(_request(username="alice", email="alice@x.com"))
        with self.assertRaises(DuplicateEmailError):
            registrar.register(_request(username="alicia", email="alice@x.com"))

    def test_default_role_created_once_and_reused(self) -> None:
        registrar = self._registrar()
        self.assertEqual(self._count(Role), 0)
        first = registrar.register(_request(username="alice", email="alice@x.com"))
        second = registrar.register(_request(username="bob", email="bob@x.com"))
        self.assertEqual(self._count(Role), 1)
        (first_role,) = first.roles
        (second_role,) = second.roles
        self.assertEqual(first_role.id, second_role.id)

    def test_failed_save_persists_nothing(self) -> None:
        registrar = self._registrar()
        registrar.register(_request(username="alice", email="alice@x.com"))

        # Simulate a concurrent registration that slipped past the pre-checks.
        racing = self._registrar(DefaultRole(name="MODERATOR", description="Moderator"))
        racing.accounts.exists_by_username = MagicMock(return_value=False)
        with self.assertRaises(DuplicateUsernameError):
            racing.register(_request(username="alice", email="new@x.com"))

        self.assertEqual(self._count(Account), 1)
        names = set(self.session.scalars(select(Role.name)))
        self.assertEqual(names, {"CUSTOMER"})


if __name__ == "__main__":
    unittest.main()
