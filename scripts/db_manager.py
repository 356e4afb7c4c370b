#!/usr/bin/env python3
"""
Database management for the Interview Portal Admin API.

Usage:
    python scripts/db_manager.py init      # Run migrations on a fresh or existing database
    python scripts/db_manager.py migrate   # Run pending migrations
    python scripts/db_manager.py reset     # Drop and recreate every table (DESTRUCTIVE - dev only)
    python scripts/db_manager.py status    # Show connection and migration status
"""

import asyncio
import subprocess
import sys
from pathlib import Path

# Add the project root to Python path to import src modules
sys.path.append(str(Path(__file__).parent.parent))

from sqlalchemy import text

import src.models.db  # noqa: F401  (registers every table on Base.metadata)
from src.config.manager import settings
from src.repository.database import async_db
from src.repository.table import Base

PROJECT_ROOT = Path(__file__).parent.parent


def run_alembic(*args: str, timeout: int | None = None) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "alembic", *args],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        timeout=timeout,
    )


class DatabaseManager:
    """Manages database operations safely"""

    def __init__(self):
        self.engine = async_db.async_engine

    async def check_connection(self) -> bool:
        try:
            async with self.engine.connect() as connection:
                await connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            print(f"Database connection failed: {e}")
            return False

    async def check_alembic_setup(self) -> bool:
        try:
            async with self.engine.connect() as connection:
                result = await connection.execute(
                    text("SELECT EXISTS (SELECT FROM information_schema.tables WHERE table_name = 'alembic_version')")
                )
                return bool(result.scalar())
        except Exception:
            return False

    def get_migration_status(self) -> dict:
        current = run_alembic("current")
        heads = run_alembic("heads")
        current_rev = current.stdout.strip() if current.returncode == 0 else "No migrations"
        heads_rev = heads.stdout.strip() if heads.returncode == 0 else "No heads"
        return {
            "current": current_rev,
            "heads": heads_rev,
            "up_to_date": current_rev != "No migrations" and current_rev in heads_rev,
        }

    async def run_migrations(self) -> bool:
        print("Running database migrations...")
        result = run_alembic("upgrade", "head")
        if result.returncode != 0:
            print(f"Migration failed: {result.stderr}")
            return False
        print("Migrations completed successfully")
        return True

    async def initialize_database(self) -> bool:
        if not await self.check_connection():
            return False
        return await self.run_migrations()

    async def reset_database(self) -> bool:
        """Drop and recreate all tables, then stamp the migration head. Refuses to run in production."""
        if settings.ENVIRONMENT == "PROD":
            print("Database reset is not allowed in production environment")
            return False

        print("WARNING: This will DELETE ALL DATA in the database!")
        if input("Type 'yes' to confirm: ").lower() != "yes":
            print("Operation cancelled")
            return False

        async with self.engine.begin() as connection:
            await connection.run_sync(Base.metadata.drop_all)
            await connection.execute(text("DROP TABLE IF EXISTS alembic_version"))
            await connection.execute(text("DROP TYPE IF EXISTS account_role_enum"))
            await connection.execute(text("DROP TYPE IF EXISTS session_status_enum"))
            await connection.run_sync(Base.metadata.create_all)

        result = run_alembic("stamp", "head", timeout=30)
        if result.returncode != 0:
            print(f"Tables recreated but failed to stamp Alembic head: {result.stderr}")
            return False
        print("Database reset complete and marked as up-to-date")
        return True

    async def show_status(self) -> None:
        print("Database Status")
        print("=" * 50)

        if not await self.check_connection():
            print("Database connection: FAILED")
            return
        print("Database connection: OK")
        print(f"Environment: {settings.ENVIRONMENT}")
        print(f"Database: {settings.DB_POSTGRES_NAME} @ {settings.DB_POSTGRES_HOST}:{settings.DB_POSTGRES_PORT}")

        if not await self.check_alembic_setup():
            print("Alembic migrations: NOT INITIALIZED")
            print("   Run 'python scripts/db_manager.py init' to set up migrations")
            return

        status = self.get_migration_status()
        print(f"Current revision: {status['current']}")
        print(f"Latest revision: {status['heads']}")
        print("Migrations: UP TO DATE" if status["up_to_date"] else "Migrations: PENDING UPDATES AVAILABLE")


async def main():
    if len(sys.argv) < 2:
        print(__doc__)
        return

    command = sys.argv[1].lower()
    manager = DatabaseManager()

    try:
        if command == "init":
            sys.exit(0 if await manager.initialize_database() else 1)
        elif command == "migrate":
            sys.exit(0 if await manager.run_migrations() else 1)
        elif command == "reset":
            sys.exit(0 if await manager.reset_database() else 1)
        elif command == "status":
            await manager.show_status()
        else:
            print(f"Unknown command: {command}")
            print(__doc__)
            sys.exit(1)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        sys.exit(1)
    finally:
        await async_db.async_engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
