"""Seed script for the Royal Stay development database."""

import asyncio
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import select

from royalstay.database import Base, async_session_factory, engine
from royalstay.models.promo import PromoCode
from royalstay.models.room import Room
from royalstay.services.room_service import clamp_available_rooms

# ── Rooms ──────────────────────────────────────────────────────────────────────

ROOMS = [
    {
        "name": "Royal Deluxe Room",
        "description": "A quiet single room with a queen bed and city view.",
        "category_type": "Royal Deluxe",
        "price": 3000,
        "breakfast_price": 400,
        "capacity": 1,
        "beds": 1,
        "bathrooms": 1,
        "amenities": ["Queen Bed", "City View", "Wi-Fi", "Air Conditioning"],
        "available_rooms": 8,
    },
    {
        "name": "Royal Executive Room",
        "description": "Spacious room with a work desk and lounge access.",
        "category_type": "Royal Executive",
        "price": 5000,
        "breakfast_price": 500,
        "capacity": 3,
        "beds": 2,
        "bathrooms": 1,
        "amenities": ["King Bed", "Workspace", "Lounge Access", "Wi-Fi"],
        "available_rooms": 6,
    },
    {
        "name": "Royal Suite",
        "description": "Two-room suite with a living area and panoramic view.",
        "category_type": "Royal Suite",
        "price": 8000,
        "breakfast_price": 500,
        "capacity": 4,
        "beds": 2,
        "bathrooms": 2,
        "amenities": ["2 Bedrooms", "Panoramic View", "Jacuzzi", "Butler Service"],
        "available_rooms": 3,
    },
]

# ── Promo codes ────────────────────────────────────────────────────────────────

PROMO_CODES = [
    {"code": "WELCOME1000", "discount_amount": 1000, "max_uses": 100, "valid_days": 90},
]


async def create_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed():
    import royalstay.models  # noqa: F401  register all tables

    await create_tables()

    async with async_session_factory() as db:
        # Check if already seeded
        result = await db.execute(select(Room).limit(1))
        if result.scalar_one_or_none():
            print("Database already seeded. Skipping.")
            return

        # ── Rooms ──
        for r in ROOMS:
            available, cap = clamp_available_rooms(r["category_type"], r["available_rooms"])
            db.add(Room(
                **{k: v for k, v in r.items() if k not in ("price", "breakfast_price", "available_rooms")},
                available_rooms=available,
                total_rooms=cap,
                price=Decimal(str(r["price"])),
                breakfast_price=Decimal(str(r["breakfast_price"])),
                is_available=True,
            ))
        print(f"Created {len(ROOMS)} rooms")

        # ── Promo codes ──
        for p in PROMO_CODES:
            db.add(PromoCode(
                code=p["code"],
                discount_amount=Decimal(str(p["discount_amount"])),
                max_uses=p["max_uses"],
                expiry_date=date.today() + timedelta(days=p["valid_days"]),
                current_uses=0,
                status="active",
                created_by="seed",
            ))
        print(f"Created {len(PROMO_CODES)} promo codes")

        await db.commit()
        print("Seed complete.")


if __name__ == "__main__":
    asyncio.run(seed())
