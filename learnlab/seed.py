"""
Create the tables and demo accounts.

Usage:
    python -m learnlab.seed
"""

import logging

from sqlalchemy.orm import Session

from learnlab.core.database import SessionLocal, init_db
from learnlab.core.security import hash_password
from learnlab.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

DEMO_ACCOUNTS = [
    {"email": "admin@test.com", "password": "Admin123!", "role": "admin", "name": "Admin User"},
    {
        "email": "faculty@test.com",
        "password": "Faculty123!",
        "role": "faculty",
        "name": "Dr. Sarah Johnson",
    },
    {
        "email": "student@test.com",
        "password": "Student123!",
        "role": "student",
        "name": "John Smith",
    },
]


def seed_database(db: Session) -> int:
    """Insert the demo accounts that do not exist yet; return how many were added"""
    repository = UserRepository(db)
    created = 0
    for account in DEMO_ACCOUNTS:
        if repository.get_by_email(account["email"]) is not None:
            continue
        repository.create(
            {
                "email": account["email"],
                "password": hash_password(account["password"]),
                "role": account["role"],
                "name": account["name"],
            }
        )
        created += 1
    return created


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    init_db()
    db = SessionLocal()
    try:
        created = seed_database(db)
    finally:
        db.close()

    logger.info(f"Seeding finished, {created} accounts created")
    for account in DEMO_ACCOUNTS:
        logger.info(f"{account['role']:<8} {account['email']} / {account['password']}")


if __name__ == "__main__":
    main()
