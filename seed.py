"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations:
    python seed.py

Creates:
  - 8 sample users (email + password; password is ``password123``)
  - 6 sample barbers (spread around central Bengaluru, plus one far away)
  - queue entries at two shops with mixed service types
"""

import asyncio

from sqlalchemy import text

from src.infrastructure.database import async_session_factory, engine
from src.infrastructure.models import BarberModel, UserModel
from src.infrastructure.repositories import QueueRepository
from src.infrastructure.security import hash_password

SAMPLE_PASSWORD = "password123"

# MG Road, Bengaluru (approx)
CENTER_LAT, CENTER_LNG = 12.9756, 77.6050


USERS = [
    {"name": "Aarav Sharma", "email": "aarav@example.com"},
    {"name": "Priya Patel", "email": "priya@example.com"},
    {"name": "Rohan Mehta", "email": "rohan@example.com"},
    {"name": "Sneha Gupta", "email": "sneha@example.com"},
    {"name": "Vikram Singh", "email": "vikram@example.com"},
    {"name": "Ananya Reddy", "email": "ananya@example.com"},
    {"name": "Karan Joshi", "email": "karan@example.com"},
    {"name": "Meera Nair", "email": "meera@example.com"},
]

BARBERS = [
    {"name": "Sharp Cuts", "username": "sharpcuts", "lat": 12.9760, "lng": 77.6055},
    {"name": "Fade Factory", "username": "fadefactory", "lat": 12.9716, "lng": 77.5946},
    {"name": "The Beard Room", "username": "beardroom", "lat": 12.9784, "lng": 77.6408},
    {"name": "Clipper Club", "username": "clipperclub", "lat": 12.9352, "lng": 77.6245},
    {"name": "Urban Trim", "username": "urbantrim", "lat": 13.0358, "lng": 77.5970},
    # Mysuru -- outside any reasonable search radius from the center
    {"name": "Palace Barbers", "username": "palacebarbers", "lat": 12.2958, "lng": 76.6394},
]

# (user index, barber index, service type) in join order
QUEUE = [
    (0, 0, "haircut"),
    (1, 0, "beard"),
    (2, 0, "haircut+beard"),
    (3, 1, "haircut"),
    (4, 1, None),
]


async def seed():
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM users"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        password_hash = hash_password(SAMPLE_PASSWORD)

        # ── Users ─────────────────────────────────────────────────────
        user_models = []
        for u in USERS:
            m = UserModel(name=u["name"], email=u["email"], password_hash=password_hash)
            session.add(m)
            user_models.append(m)
        await session.flush()
        print(f"  Created {len(user_models)} users")

        # ── Barbers ───────────────────────────────────────────────────
        barber_models = []
        for b in BARBERS:
            m = BarberModel(
                name=b["name"],
                username=b["username"],
                password_hash=password_hash,
                lat=b["lat"],
                long=b["lng"],
            )
            session.add(m)
            barber_models.append(m)
        await session.flush()
        print(f"  Created {len(barber_models)} barbers")

        # ── Queues ────────────────────────────────────────────────────
        queue_repo = QueueRepository(session)
        for user_idx, barber_idx, service in QUEUE:
            await queue_repo.join_queue(
                user_models[user_idx].id, barber_models[barber_idx].id, service
            )
        print(f"  Created {len(QUEUE)} queue entries")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
