"""
Seed Admin User

Creates the first staff account for the admissions admin app.
Run this script once after ``alembic upgrade head``.

Usage:
    ADMIN_EMAIL=office@example.edu ADMIN_PASSWORD=... python scripts/seed_admin_user.py
    python scripts/seed_admin_user.py office@example.edu --username "Admissions Office"

The password is read from ADMIN_PASSWORD or prompted for; it is never
accepted on the command line.
"""

import argparse
import asyncio
import getpass
import os

from admissions.core.database import async_session_maker, close_db, init_db
from admissions.core.security import hash_password
from admissions.modules.users.repository import UserRepository


async def seed_admin_user(email: str, password: str, username: str | None) -> None:
    """Create the admin user if it doesn't exist."""
    await init_db()

    try:
        async with async_session_maker() as db:
            existing_user = await UserRepository.get_by_email(db, email)

            if existing_user:
                print(f"User already exists: {email}")
                print(f"  ID: {existing_user.id}")
                return

            user = await UserRepository.create(
                db,
                email=email,
                password_hash=hash_password(password),
                username=username,
            )
            await db.commit()

            print("Admin user created successfully!")
            print(f"  Email: {user.email}")
            print(f"  Username: {user.username}")
            print(f"  ID: {user.id}")
    finally:
        await close_db()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the first admissions staff account")
    parser.add_argument("email", nargs="?", default=os.getenv("ADMIN_EMAIL"))
    parser.add_argument("--username", default=os.getenv("ADMIN_USERNAME"))
    args = parser.parse_args()

    if not args.email:
        parser.error("email is required (argument or ADMIN_EMAIL)")

    password = os.getenv("ADMIN_PASSWORD") or getpass.getpass("Password: ")
    if len(password) < 6:
        parser.error("password must be at least 6 characters")

    asyncio.run(seed_admin_user(args.email, password, args.username))


if __name__ == "__main__":
    main()
