"""
Register an account from the shell (e.g. a first operator). Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD [--first-name F] [--last-name L] [--phone P]
Example:
  python -m app.scripts.create_user alice alice@example.com your-secure-password --first-name Alice
"""
import argparse
import sys

from pydantic import ValidationError

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.exceptions import AuthError
from app.core.logging import configure_logging
from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, BcryptPasswordHasher
from app.repositories import AccountStore, RoleStore
from app.schemas.auth import RegistrationRequest
from app.services.registrar import DefaultRole, Registrar


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Register a Parkora account with the default role.")
    parser.add_argument("username", help="Username (3-100 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument("--first-name", default=None)
    parser.add_argument("--last-name", default=None)
    parser.add_argument("--phone", default=None)
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings)

    if len(args.password) < PASSWORD_MIN_LEN or len(args.password) > PASSWORD_MAX_LEN:
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    try:
        request = RegistrationRequest(
            username=args.username.strip(),
            email=args.email.strip(),
            password=args.password,
            first_name=args.first_name,
            last_name=args.last_name,
            phone=args.phone,
        )
    except ValidationError as e:
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            print(f"Invalid {field}: {error['msg']}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        registrar = Registrar(
            session=db,
            accounts=AccountStore(db),
            roles=RoleStore(db),
            hasher=BcryptPasswordHasher(),
            default_role=DefaultRole.from_settings(settings),
        )
        try:
            account = registrar.register(request)
        except AuthError as e:
            print(e.message, file=sys.stderr)
            return 1
        print(
            f"Created account '{account.username}' ({account.id}) "
            f"with role '{settings.DEFAULT_ROLE_NAME}'."
        )
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
