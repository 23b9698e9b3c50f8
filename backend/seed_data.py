#!/usr/bin/env python3
"""Seed script to populate the database with sample cities, activities and a demo admin."""

import os
import sys

from tripplanner.core.config import Settings
from tripplanner.core.database import Base, create_db_engine, create_session_factory
from tripplanner.models import User
from tripplanner.auth.password import PasswordManager
from tripplanner.services.seed import reseed_reference_data


def create_admin_user(db, password_manager: PasswordManager, email: str, password: str) -> User:
    """Create the demo admin, or promote an existing account with that email."""
    user = db.query(User).filter(User.email == email).first()
    if user:
        user.role = "admin"
    else:
        user = User(
            name="Admin",
            email=email,
            hashed_password=password_manager.hash_password(password),
            role="admin"
        )
        db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_sample_data() -> int:
    settings = Settings()
    engine = create_db_engine(settings)
    Base.metadata.create_all(bind=engine)
    db = create_session_factory(engine)()

    try:
        counts = reseed_reference_data(db)
        admin_user = create_admin_user(
            db,
            PasswordManager(rounds=settings.bcrypt_rounds),
            os.getenv("ADMIN_EMAIL", "admin@example.com").lower(),
            os.getenv("ADMIN_PASSWORD", "admin123")
        )

        print("Sample data created successfully!")
        print(f"Admin user: {admin_user.email}")
        print(f"Created {counts['cities']} cities")
        print(f"Created {counts['activities']} activities")
        return 0
    except Exception as e:
        print(f"Error creating sample data: {e}")
        db.rollback()
        return 1
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    sys.exit(create_sample_data())
