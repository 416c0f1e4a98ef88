#!/usr/bin/env python3
"""Create a user account. Usage: python -m scripts.create_user <username> --email E --password P [--role admin]"""
import argparse
import sys
from pathlib import Path

# Ensure project root on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.database import SessionLocal, engine, Base
from app.models.user import Role
from app.security import PASSWORD_MIN_LEN, hash_password
from app.services.users import UserStore


def main():
    parser = argparse.ArgumentParser(description="Create a user")
    parser.add_argument("username")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--role", choices=[r.value for r in Role], default=Role.AUTHOR.value)
    args = parser.parse_args()

    if len(args.password) < PASSWORD_MIN_LEN:
        print(f"Password must be at least {PASSWORD_MIN_LEN} characters long.")
        sys.exit(1)

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    users = UserStore(db)

    email = args.email.strip().lower()
    if users.email_exists(email):
        print(f"A user with email '{email}' already exists.")
        db.close()
        return

    user = users.create(args.username, email, hash_password(args.password), role=Role(args.role))
    print(f"Created {user.role.value} user: {user.username} <{user.email}>")
    db.close()


if __name__ == "__main__":
    main()
