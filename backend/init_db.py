"""
Initialize database and create the first admin user.

Run this script once to set up the database:
    python init_db.py
"""
import asyncio
import os

from linkshort.core.policy import Tier
from linkshort.core.security import get_password_hash
from linkshort.database import SessionLocal, create_tables, engine
from linkshort.models import User
from linkshort.repositories import SqlUserRepository

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@linkshort.local")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "change-me-now")


async def init_database():
    """Create all database tables"""
    print("Creating database tables...")
    await create_tables(engine)
    print("Database tables created successfully!")


async def create_admin():
    """Create the first admin user"""
    async with SessionLocal() as db:
        users = SqlUserRepository(db)

        if await users.get_by_email(ADMIN_EMAIL):
            print(f"User {ADMIN_EMAIL} already exists.")
            print("Skipping admin creation.")
            return

        print("\nCreating admin user...")
        await users.add(User(
            email=ADMIN_EMAIL,
            name="Administrator",
            password_hash=get_password_hash(ADMIN_PASSWORD),
            tier=Tier.PREMIUM.value,
            is_admin=True,
        ))

        print("\n" + "=" * 50)
        print("Admin created successfully!")
        print("=" * 50)
        print(f"Email: {ADMIN_EMAIL}")
        print("=" * 50)
        print("\nIMPORTANT: Change this password after first login!")


async def main():
    await init_database()
    await create_admin()
    await engine.dispose()


if __name__ == "__main__":
    print("=" * 50)
    print("LinkShort - Database Initialization")
    print("=" * 50)

    asyncio.run(main())

    print("\nDatabase initialization complete!")
    print("\nYou can now start the server with:")
    print("    uvicorn linkshort.main:app --reload")
