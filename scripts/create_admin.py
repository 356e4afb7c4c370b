#!/usr/bin/env python3
"""
Provision an admin account.

Usage:
    python scripts/create_admin.py <email> <display name>

The password is read from the ADMIN_PASSWORD environment variable, or prompted for.
"""

import asyncio
import getpass
import os
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from src.models.db.account import AccountRoleEnum
from src.repository.crud.account import AccountCRUDRepository
from src.repository.database import async_db
from src.utilities.exceptions.database import EntityAlreadyExists


async def create_admin(email: str, display_name: str, password: str) -> int:
    async with async_db.get_session() as session:
        repo = AccountCRUDRepository(async_session=session)
        try:
            account = await repo.create_account(
                email=email, password=password, display_name=display_name, role=AccountRoleEnum.ADMIN
            )
        except EntityAlreadyExists:
            print(f"An account for {email} already exists")
            return 1
    print(f"Created admin {account.email} (id={account.id})")
    return 0


async def main() -> int:
    if len(sys.argv) < 3:
        print(__doc__)
        return 1

    email, display_name = sys.argv[1], " ".join(sys.argv[2:])
    password = os.environ.get("ADMIN_PASSWORD") or getpass.getpass("Password: ")
    if not password:
        print("A password is required")
        return 1

    try:
        return await create_admin(email=email, display_name=display_name, password=password)
    finally:
        await async_db.async_engine.dispose()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
