"""SQLAlchemy ORM models."""

from app.models.account import Account, AccountStatus, account_roles
from app.models.base import Base
from app.models.role import Role, RoleName

__all__ = ["Account", "AccountStatus", "Base", "Role", "RoleName", "account_roles"]
