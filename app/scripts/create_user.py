"""
Create a marketplace account (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD [role] --email EMAIL
Example:
  python -m app.scripts.create_user admin your-secure-password admin --email admin@example.com
"""
import argparse
import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.logging import configure_logging
from app.core.permissions import ROLE_VALUES
from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    hash_password,
)
from app.models.user import User

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a marketplace user (staff bootstrap).")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=list(ROLE_VALUES))
    parser.add_argument("--email", required=True, help="Unique e-mail address")
    parser.add_argument("--first-name", default="", help="Given name shown in the admin panel")
    parser.add_argument("--last-name", default="", help="Family name shown in the admin panel")
    args = parser.parse_args(argv)

    configure_logging(get_settings().LOG_LEVEL)

    username = args.username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1
    email = args.email.strip()
    if "@" not in email:
        print("Invalid e-mail address.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        existing = (
            db.query(User)
            .filter((User.username == username) | (User.email == email))
            .first()
        )
        if existing:
            print(f"User '{username}' or e-mail '{email}' already exists.", file=sys.stderr)
            return 1
        user = User(
            username=username,
            email=email,
            first_name=args.first_name.strip(),
            last_name=args.last_name.strip(),
            password_hash=hash_password(args.password),
            role=args.role,
        )
        db.add(user)
        db.commit()
        logger.info("Created user", extra={"user_id": user.id, "role": args.role})
        print(f"Created user '{username}' with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
