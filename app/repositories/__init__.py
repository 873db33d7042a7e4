"""Persistence boundary: account and role stores over a SQLAlchemy session."""

from app.repositories.accounts import AccountStore
from app.repositories.roles import RoleStore

__all__ = ["AccountStore", "RoleStore"]
