"""Request/response schemas for auth endpoints and decoded token claims."""

from datetime import datetime
from typing import Annotated

from email_validator import validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from app.core.security import (
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    PASSWORD_MAX_LEN,
    PHONE_MAX_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)


def _check_email(v: str) -> str:
    """Validate syntax only; keep the address exactly as given (email is case-sensitive as stored)."""
    validate_email(v, check_deliverability=False)
    return v


EmailAddress = Annotated[str, AfterValidator(_check_email)]


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=USERNAME_MAX_LEN, description="Username")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class RegistrationRequest(BaseModel):
    """New account details. The password is hashed by the registrar and never stored."""

    username: str = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, description="Username"
    )
    email: EmailAddress = Field(..., max_length=EMAIL_MAX_LEN, description="Email address")
    # Strength policy (PASSWORD_MIN_LEN) is applied by the HTTP and CLI adapters.
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")
    first_name: str | None = Field(default=None, max_length=NAME_MAX_LEN)
    last_name: str | None = Field(default=None, max_length=NAME_MAX_LEN)
    phone: str | None = Field(default=None, max_length=PHONE_MAX_LEN)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if v != v.strip():
            raise ValueError("username must not start or end with whitespace")
        return v


class TokenResponse(BaseModel):
    """JWT access token returned after login or registration."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    roles: list[str] = Field(default_factory=list)


class TokenClaims(BaseModel):
    """
    Claims decoded from a verified access token.

    Unknown extra claims are ignored so newer issuers stay compatible.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    subject: str = Field(..., alias="sub")
    issuer: str = Field(..., alias="iss")
    issued_at: datetime = Field(..., alias="iat")
    expires_at: datetime = Field(..., alias="exp")
    user_id: str = Field(..., alias="userId")
    email: str
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    status: str
    roles: frozenset[str] = Field(default_factory=frozenset)
