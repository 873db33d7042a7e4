"""ORM model for roles (authorities) attached to accounts."""

import enum

from sqlalchemy import Column, String

from app.models.base import AuditMixin, Base


class RoleName(str, enum.Enum):
    """Known authorities and their human descriptions."""

    ADMIN = "ADMIN"
    CUSTOMER = "CUSTOMER"
    MODERATOR = "MODERATOR"

    @property
    def description(self) -> str:
        return ROLE_DESCRIPTIONS[self]


ROLE_DESCRIPTIONS = {
    RoleName.ADMIN: "Administrator",
    RoleName.CUSTOMER: "Customer",
    RoleName.MODERATOR: "Moderator",
}


class Role(AuditMixin, Base):
    """Named permission grouping; name is globally unique."""

    __tablename__ = "roles"

    name = Column(String(50), nullable=False, unique=True, index=True)
    description = Column(String(255), nullable=True)
