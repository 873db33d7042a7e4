"""ORM model for user accounts and their role assignments."""

import enum

from sqlalchemy import Column, Enum, ForeignKey, String, Table
from sqlalchemy.orm import relationship

from app.models.base import AuditMixin, Base


class AccountStatus(str, enum.Enum):
    """Lifecycle status. Only ACTIVE is set by the core; the rest are administrative."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    LOCKED = "LOCKED"
    DELETED = "DELETED"


account_roles = Table(
    "account_roles",
    Base.metadata,
    Column("account_id", ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Account(AuditMixin, Base):
    """
    Account for JWT authentication and role-based access control.

    username and email are each unique across all accounts. Accounts are never
    hard-deleted; DELETED is a status value.
    """

    __tablename__ = "accounts"

    username = Column(String(100), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    status = Column(
        Enum(AccountStatus, native_enum=False, length=20),
        nullable=False,
        default=AccountStatus.ACTIVE,
    )
    roles = relationship(
        "Role",
        secondary=account_roles,
        collection_class=set,
        lazy="selectin",
    )

    @property
    def role_names(self) -> set[str]:
        return {role.name for role in self.roles}
