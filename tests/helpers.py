"""Shared builders for tests: in-memory database and plain account snapshots."""

import uuid
from types import SimpleNamespace

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import AccountStatus, Base

TEST_SECRET = "test-secret-that-is-at-least-32-bytes-long"


def make_session_factory() -> sessionmaker[Session]:
    """Fresh in-memory SQLite schema shared by every session from the factory."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


def account_snapshot(
    username: str = "alice",
    email: str = "alice@x.com",
    role_names: tuple[str, ...] = ("CUSTOMER",),
    **kwargs: object,
) -> SimpleNamespace:
    """Build an object shaped like an Account for token tests."""
    defaults = {
        "id": uuid.uuid4(),
        "first_name": "Alice",
        "last_name": "Liddell",
        "status": AccountStatus.ACTIVE,
        "password_hash": "unused",
    }
    defaults.update(kwargs)
    return SimpleNamespace(
        username=username,
        email=email,
        roles=[SimpleNamespace(name=name) for name in role_names],
        **defaults,
    )


class FakeHasher:
    """Reversible stand-in for bcrypt so tests stay fast."""

    def hash(self, plain_password: str) -> str:
        return f"hashed::{plain_password}"

    def verify(self, plain_password: str, hashed: str) -> bool:
        return hashed == f"hashed::{plain_password}"
