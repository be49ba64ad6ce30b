"""Provision principals (users) in the database.

Usage::

    python scripts/seed_users.py admin:admin user:user
    python scripts/seed_users.py --disabled olduser:secret

Existing usernames are skipped, never overwritten. With no arguments the
accounts listed in ``BOATHUB_SEED_USERS`` are used.
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

# Add project root to path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv(ROOT / ".env")

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from boathub.core.database import create_schema
from boathub.dao.user_dao import UserDAO
from boathub.services.auth_service import hash_password, parse_seed_users


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("users", nargs="*", help="username:password pairs")
    parser.add_argument(
        "--disabled", action="store_true", help="create the accounts disabled"
    )
    parser.add_argument(
        "--database-url",
        default=os.environ.get("BOATHUB_DATABASE_URL", "postgresql+asyncpg://localhost/boathub"),
    )
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    pairs = parse_seed_users(",".join(args.users)) if args.users else parse_seed_users(
        os.environ.get("BOATHUB_SEED_USERS")
    )
    if not pairs:
        print("No users given (pass username:password or set BOATHUB_SEED_USERS).")
        return 1

    engine = create_async_engine(args.database_url)
    await create_schema(engine)
    factory = async_sessionmaker(engine, expire_on_commit=False)
    dao = UserDAO()

    created = 0
    async with factory() as session:
        for username, password in pairs:
            _, was_created = await dao.create_if_absent(
                session,
                username=username,
                password_hash=hash_password(password),
                enabled=not args.disabled,
            )
            if was_created:
                created += 1
                print(f"Created user: {username}")
            else:
                print(f"User already exists: {username}")
        await session.commit()

    await engine.dispose()
    print(f"Done: {created} of {len(pairs)} users created.")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
