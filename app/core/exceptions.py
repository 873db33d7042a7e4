"""Typed errors raised by the auth core; route handlers translate them to HTTP responses."""


class AuthError(Exception):
    """Base class for all errors raised by the auth core."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    """Raised for an unknown username or a wrong password (deliberately indistinguishable)."""

    MESSAGE = "Invalid username or password"

    def __init__(self) -> None:
        super().__init__(self.MESSAGE)


class DuplicateUsernameError(AuthError):
    """Raised when registering a username that is already taken."""

    def __init__(self, message: str = "Username already exists") -> None:
        super().__init__(message)


class DuplicateEmailError(AuthError):
    """Raised when registering an email that is already taken."""

    def __init__(self, message: str = "Email already exists") -> None:
        super().__init__(message)


class WeakSecretError(AuthError):
    """Raised at startup when the JWT signing secret is too short."""


class TokenError(AuthError):
    """Base class for token verification failures."""


class TokenMalformedError(TokenError):
    """Raised when a string is not a well-formed token or lacks required claims."""


class SignatureInvalidError(TokenError):
    """Raised when a token's signature does not match the signing key."""


class TokenExpiredError(TokenError):
    """Raised when a token's expiry is at or before the current time."""


class StoreUnavailableError(AuthError):
    """Raised when the account or role store fails for infrastructure reasons."""
