"""SQLAlchemy declarative Base and shared model columns."""

import uuid

from sqlalchemy import Column, DateTime, String, Uuid, func
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    pass


class AuditMixin:
    """UUID primary key plus created/updated bookkeeping shared by accounts and roles."""

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    created_by = Column(String(150), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_by = Column(String(150), nullable=True)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
