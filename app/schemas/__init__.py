"""Pydantic request/response schemas."""

from app.schemas.auth import (
    LoginRequest,
    RegistrationRequest,
    TokenClaims,
    TokenResponse,
)
from app.schemas.health import HealthResponse

__all__ = [
    "HealthResponse",
    "LoginRequest",
    "RegistrationRequest",
    "TokenClaims",
    "TokenResponse",
]
