"""
Create a user from the command line. Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD
Example:
  python -m app.scripts.create_user alice1 secret1

Uses the same validation and registration path as POST /auth/register.
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from app.core.database import SessionLocal
from app.core.dependencies import get_password_hasher
from app.core.errors import ServiceError, ValidationFailed
from app.schemas.auth import RegisterRequest
from app.services.results import ResultStatus
from app.services.users import register_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def parse_registration(username: str, password: str) -> RegisterRequest:
    """Validate CLI input with the HTTP schema; raises ValidationFailed."""
    try:
        return RegisterRequest(username=username, password=password, confirm_password=password)
    except ValidationError as e:
        raise ValidationFailed.from_pydantic(e.errors()) from e


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an account-service user.")
    parser.add_argument("username", help="Username (4-32 chars, at least one letter or digit)")
    parser.add_argument("password", help="Password (4-128 chars)")
    args = parser.parse_args(argv)

    try:
        body = parse_registration(args.username.strip(), args.password)
    except ValidationFailed as e:
        for err in e.errors:
            print(f"Invalid '{err['field']}': {err['message']}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        result = register_user(db, get_password_hasher(), body.username, body.password)
    except ServiceError as e:
        logger.error("User creation failed: %s", e.message)
        return 1
    finally:
        db.close()

    if result.status is ResultStatus.CONFLICT:
        print(f"User '{body.username}' already exists.", file=sys.stderr)
        return 1
    if not result.ok:
        print("User creation failed; see logs.", file=sys.stderr)
        return 1
    print(f"Created user '{body.username}' with id {result.value.id}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
