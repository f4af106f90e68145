"""CLI commands for Poopal."""

import argparse
import getpass
import sys
from typing import Optional

import bcrypt
from sqlalchemy.orm import Session

from poopal.database import SessionLocal
from poopal.models.user import User


def create_admin(
    email: str, password: Optional[str] = None, username: Optional[str] = None
) -> None:
    """Create an admin user, prompting for the password when not given."""
    db: Session = SessionLocal()
    email = email.strip().lower()

    try:
        if db.query(User).filter(User.email == email).first():
            print(f"Error: User with email '{email}' already exists.")
            sys.exit(1)
        if username and db.query(User).filter(User.username == username).first():
            print(f"Error: Username '{username}' is already taken.")
            sys.exit(1)

        if not password:
            password = getpass.getpass("Password: ")
            password_confirm = getpass.getpass("Confirm password: ")
            if password != password_confirm:
                print("Error: Passwords do not match.")
                sys.exit(1)

        if len(password) < 8:
            print("Error: Password must be at least 8 characters.")
            sys.exit(1)

        password_hash = bcrypt.hashpw(
            password.encode("utf-8"), bcrypt.gensalt()
        ).decode("utf-8")
        user = User(
            email=email,
            username=username,
            password_hash=password_hash,
            is_admin=True,
            onboarding_completed=True,
        )
        db.add(user)
        db.commit()

        print(f"Admin user created successfully: {email}")

    finally:
        db.close()


def main(argv: Optional[list] = None):
    parser = argparse.ArgumentParser(description="Poopal CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    create_admin_parser = subparsers.add_parser(
        "create-admin", help="Create an admin user"
    )
    create_admin_parser.add_argument(
        "--email", required=True, help="Admin email address"
    )
    create_admin_parser.add_argument(
        "--password", help="Admin password (will prompt if not provided)"
    )
    create_admin_parser.add_argument("--username", help="Optional display username")

    args = parser.parse_args(argv)

    if args.command == "create-admin":
        create_admin(args.email, args.password, args.username)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
