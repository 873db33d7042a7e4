"""Login, registration and token introspection routes. Thin adapters over AuthService."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.api.v1.dependencies import get_auth_service, get_token_engine
from app.core.exceptions import (
    DuplicateEmailError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    StoreUnavailableError,
    TokenError,
)
from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.schemas.auth import (
    LoginRequest,
    RegistrationRequest,
    TokenClaims,
    TokenResponse,
)
from app.services.auth import AuthService
from app.services.token_engine import TokenEngine

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)


def _validate_password(password: str) -> None:
    if not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Invalid password length.",
        )


def _token_response(token: str, claims: TokenClaims) -> TokenResponse:
    return TokenResponse(
        access_token=token,
        token_type="bearer",
        username=claims.subject,
        email=claims.email,
        first_name=claims.first_name,
        last_name=claims.last_name,
        roles=sorted(claims.roles),
    )


def _store_unavailable(e: StoreUnavailableError) -> HTTPException:
    logger.error("Auth store failure: %s", e.message, exc_info=e)
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Service temporarily unavailable.",
    )


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """
    Authenticate with username and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    try:
        token = auth.login(body.username, body.password)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        ) from e
    except StoreUnavailableError as e:
        raise _store_unavailable(e) from e
    return _token_response(token, auth.verify_token(token))


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegistrationRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """Create an account with the default role and return its first access token."""
    _validate_password(body.password)
    try:
        token = auth.sign_up(body)
    except (DuplicateUsernameError, DuplicateEmailError) as e:
        logger.warning("Registration failed - duplicate entry: %s", e.message)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except StoreUnavailableError as e:
        raise _store_unavailable(e) from e
    return _token_response(token, auth.verify_token(token))


def get_current_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenEngine, Depends(get_token_engine)],
) -> TokenClaims:
    """Dependency: require a valid Bearer JWT and return its claims. Raises 401 if missing or invalid."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return tokens.verify(credentials.credentials)
    except TokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


@router.get("/me", response_model=TokenClaims, response_model_by_alias=False)
def read_current_claims(
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
) -> TokenClaims:
    """Return the claims of the presented access token."""
    return claims
