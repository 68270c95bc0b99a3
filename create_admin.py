#!/usr/bin/env python3
"""
Create an administrator, or reset an existing user's password and make
them an administrator, in the marketplace SQLite database.

This script DOES NOT read or reveal any existing passwords. It stores a
new PBKDF2-HMAC-SHA256 hash (format "salthex$hashhex") for the account.

Usage:
    python create_admin.py --db ./assistant_marketplace_api/marketplace.db --username admin --email admin@mail.com --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import asyncio
import getpass
import sys

from assistant_marketplace_api.app.core.security import hash_password
from assistant_marketplace_api.app.models import Role
from assistant_marketplace_api.app.storage import SqliteStorage


async def create_or_reset(db: str, username: str, email: str, password: str) -> str:
    storage = SqliteStorage(db, seed_categories=False)
    existing = await storage.get_user_by_username(username)
    if existing is not None:
        await storage.update_user(
            existing.id,
            {"password_hash": hash_password(password), "role": Role.ADMIN, "is_verified": True},
        )
        return f"[+] Password reset and admin role granted for user: {username}"

    if await storage.get_user_by_email(email) is not None:
        raise SystemExit(f"[!] Email already registered to another user: {email}")
    user = await storage.create_user(
        {
            "username": username,
            "email": email,
            "full_name": username,
            "role": Role.ADMIN,
            "password_hash": hash_password(password),
            "is_verified": True,
        }
    )
    return f"[+] Administrator created: {username} (id={user.id})"


def main():
    ap = argparse.ArgumentParser(description="Create or reset a marketplace administrator (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (created if missing)")
    ap.add_argument("--username", required=True, help="Administrator username")
    ap.add_argument("--email", required=True, help="Administrator email, used when creating the account")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args()

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if len(new_password) < 6:
        print("[!] Password must be at least 6 characters.", file=sys.stderr)
        sys.exit(1)

    print(asyncio.run(create_or_reset(args.db, args.username, args.email, new_password)))


if __name__ == "__main__":
    main()
