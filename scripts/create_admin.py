#!/usr/bin/env python3
"""
Create an admin account in the configured DATABASE_URL and print its credentials.

Optional environment variables:
- ADMIN_USERNAME
- ADMIN_EMAIL (must end with ADMIN_EMAIL_DOMAIN, default @admin.com)
- ADMIN_PASSWORD

This script goes through campus_api.auth so hashing and uniqueness rules match
the running backend.
"""
import asyncio
import os
import secrets
import sys

try:
    from campus_api.auth import signup_admin
    from campus_api.config import get_settings
    from campus_api.database import Database
    from campus_api.errors import ServiceError
except Exception as e:
    print("Failed to import application modules:", e, file=sys.stderr)
    sys.exit(2)


async def create_admin() -> int:
    settings = get_settings()
    suffix = secrets.token_hex(4)
    username = os.environ.get("ADMIN_USERNAME", f"admin-{suffix}")
    email = os.environ.get("ADMIN_EMAIL", f"admin-{suffix}{settings.admin_email_domain}")
    password = os.environ.get("ADMIN_PASSWORD") or secrets.token_urlsafe(12)

    database = Database(settings.database_url)
    await database.connect()
    try:
        async with database.session() as session:
            account = await signup_admin(session, username, email, password)
    except ServiceError as exc:
        print(f"ADMIN_NOT_CREATED: {exc.message}", file=sys.stderr)
        return 1
    finally:
        await database.disconnect()

    print("ADMIN_CREATED")
    print(f"id: {account.id}")
    print(f"username: {account.username}")
    print(f"email: {account.email}")
    print(f"password: {password}")
    return 0


def main():
    sys.exit(asyncio.run(create_admin()))


if __name__ == "__main__":
    main()
