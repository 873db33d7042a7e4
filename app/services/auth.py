"""Auth facade: login and sign-up end in a freshly issued access token."""

import logging

from app.schemas.auth import RegistrationRequest, TokenClaims
from app.services.credential_verifier import CredentialVerifier
from app.services.registrar import Registrar
from app.services.token_engine import TokenEngine

logger = logging.getLogger(__name__)


class AuthService:
    """Compose credential verification, registration and token issuance."""

    def __init__(
        self,
        verifier: CredentialVerifier,
        registrar: Registrar,
        tokens: TokenEngine,
    ) -> None:
        self.verifier = verifier
        self.registrar = registrar
        self.tokens = tokens

    def login(self, username: str, password: str) -> str:
        """Return an access token for valid credentials; verifier errors propagate unchanged."""
        account = self.verifier.authenticate(username, password)
        token = self.tokens.issue(account)
        logger.info("User authenticated successfully: %s", account.username)
        return token

    def sign_up(self, request: RegistrationRequest) -> str:
        """Register the account and return its first access token."""
        account = self.registrar.register(request)
        token = self.tokens.issue(account)
        logger.info("User registered successfully: %s", account.username)
        return token

    def verify_token(self, token: str) -> TokenClaims:
        return self.tokens.verify(token)
