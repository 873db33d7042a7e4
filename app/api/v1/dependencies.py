"""FastAPI dependency wiring for the auth services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.core.security import BcryptPasswordHasher
from app.repositories import AccountStore, RoleStore
from app.services.auth import AuthService
from app.services.credential_verifier import CredentialVerifier
from app.services.registrar import DefaultRole, Registrar
from app.services.token_engine import TokenEngine


@lru_cache
def get_password_hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher()


@lru_cache
def get_token_engine() -> TokenEngine:
    """Process-wide token engine. Raises WeakSecretError if JWT_SECRET is too short."""
    return TokenEngine.from_settings(get_settings())


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenEngine, Depends(get_token_engine)],
    hasher: Annotated[BcryptPasswordHasher, Depends(get_password_hasher)],
) -> AuthService:
    """Request-scoped auth service; stores share the request's DB session."""
    accounts = AccountStore(db)
    registrar = Registrar(
        session=db,
        accounts=accounts,
        roles=RoleStore(db),
        hasher=hasher,
        default_role=DefaultRole.from_settings(get_settings()),
    )
    return AuthService(
        verifier=CredentialVerifier(accounts, hasher),
        registrar=registrar,
        tokens=tokens,
    )
