"""
Create a staff account (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD --name NAME --email EMAIL [--role ROLE] [--phone PHONE]
Example:
  python -m app.scripts.create_user admin 'your-secure-password' --name "Admin User" --email admin@example.com --role ADMIN
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from app.core.database import SessionLocal
from app.core.logging_config import setup_logging
from app.schemas.user import UserCreate
from app.services.users import UsernameTakenError, create_user


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a helpdesk account.")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument("--name", required=True, help="Display name")
    parser.add_argument("--email", required=True, help="Contact email")
    parser.add_argument("--role", default="COLABORADOR", choices=["COLABORADOR", "ADMIN"])
    parser.add_argument("--phone", default=None, help="Optional phone number")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        data = UserCreate(
            username=args.username.strip(),
            password=args.password,
            name=args.name,
            email=args.email,
            role=args.role,
            phone=args.phone,
        )
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"])
            print(f"Invalid {field}: {err['msg']}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        user = create_user(db, data)
    except UsernameTakenError:
        print(f"User '{data.username}' already exists.", file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.username}' with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    setup_logging(logging.INFO)
    sys.exit(main())
