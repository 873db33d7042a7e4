"""Role store with an atomic get-or-create (insert-or-ignore, then fetch)."""

import logging

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import StoreUnavailableError
from app.models import Role

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class RoleStore:
    """Role store backed by the roles table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_name(self, name: str) -> Role | None:
        try:
            return self.session.scalars(select(Role).where(Role.name == name)).first()
        except SQLAlchemyError as e:
            raise StoreUnavailableError("Role store is unavailable.") from e

    def save(self, role: Role) -> Role:
        """Add and flush a role. Does not commit."""
        try:
            self.session.add(role)
            self.session.flush()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreUnavailableError("Role could not be saved.") from e
        return role

    def get_or_create(self, name: str, description: str | None = None) -> Role:
        """
        Return the role named `name`, inserting it first if absent.

        The insert uses ON CONFLICT DO NOTHING against the unique name index, so
        concurrent callers never create duplicates and never fail on the race;
        whoever loses simply fetches the winner's row. Does not commit.
        """
        dialect = self.session.get_bind().dialect.name
        insert = _INSERT_BY_DIALECT.get(dialect)
        if insert is None:
            raise StoreUnavailableError(f"Unsupported database dialect for roles: {dialect}")

        stmt = (
            insert(Role.__table__)
            .values(name=name, description=description)
            .on_conflict_do_nothing(index_elements=["name"])
        )
        try:
            result = self.session.execute(stmt)
            if result.rowcount:
                logger.info("Created role %s", name)
            role = self.session.scalars(select(Role).where(Role.name == name)).one()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreUnavailableError("Role store is unavailable.") from e
        return role
