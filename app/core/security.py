"""Password hashing with bcrypt."""

import bcrypt

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Min/max lengths for username and password validation (BSIMM / input validation).
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 100
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128
EMAIL_MAX_LEN = 255
NAME_MAX_LEN = 100
PHONE_MAX_LEN = 20


class BcryptPasswordHasher:
    """One-way salted password hashing with constant-time verification."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS) -> None:
        self.rounds = rounds

    def hash(self, plain_password: str) -> str:
        """Hash a plain-text password for storage. Do not store plain passwords."""
        # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
        pw_bytes = plain_password.encode("utf-8")[:72]
        return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain_password: str, hashed: str) -> bool:
        """Verify a plain password against a stored hash."""
        pw_bytes = plain_password.encode("utf-8")[:72]
        try:
            return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False