"""Room service — rate lookup for pricing and room inventory administration."""

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from royalstay.models.room import Room
from royalstay.services.pricing.capacity import RoomCategory, base_occupancy, max_adults
from royalstay.services.pricing.config import PricingConfig, pricing_config

logger = logging.getLogger(__name__)


class RoomNotFoundError(ValueError):
    pass


class RoomUnavailableError(ValueError):
    pass


@dataclass(frozen=True)
class RoomRate:
    """Everything the pricing engine needs to know about a room."""
    room_id: uuid.UUID
    name: str
    category: RoomCategory
    nightly_rate: float
    breakfast_rate: float | None
    available_rooms: int
    is_available: bool

    @property
    def bookable(self) -> bool:
        return self.is_available and self.available_rooms > 0

    def to_dict(self) -> dict:
        return {
            "room_id": str(self.room_id),
            "name": self.name,
            "category": self.category.value,
            "nightly_rate": self.nightly_rate,
            "breakfast_rate": self.breakfast_rate,
            "available_rooms": self.available_rooms,
            "is_available": self.is_available,
            "max_adults": max_adults(self.category),
            "base_occupancy": base_occupancy(self.category),
        }


@dataclass
class CategoryInventory:
    """Available rooms of one category against its cap."""
    category: str
    rooms: int
    available: int
    max_rooms: int | None

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "rooms": self.rooms,
            "available": self.available,
            "max_rooms": self.max_rooms,
        }


def rate_from_room(room: Room) -> RoomRate:
    return RoomRate(
        room_id=room.id,
        name=room.name,
        category=RoomCategory.parse(room.category_type),
        nightly_rate=float(room.price),
        breakfast_rate=float(room.breakfast_price) if room.breakfast_price else None,
        available_rooms=room.available_rooms or 0,
        is_available=bool(room.is_available),
    )


def clamp_available_rooms(
    category: str | None, available: int, config: PricingConfig = pricing_config
) -> tuple[int, int | None]:
    """(available rooms clamped to 0..cap, category cap)."""
    cap = config.rules_for(RoomCategory.parse(category)).max_rooms
    available = max(0, available)
    if cap is not None:
        available = min(available, cap)
    return available, cap


_EDITABLE_FIELDS = (
    "name", "description", "category_type", "price", "breakfast_price", "capacity",
    "beds", "bathrooms", "amenities", "image_url", "available_rooms", "is_available", "status",
)

# Fields an admin may explicitly clear; a null breakfast price falls back to the house rate
_NULLABLE_FIELDS = ("description", "category_type", "breakfast_price", "amenities", "image_url")


class RoomService:
    """Read access to room rates plus admin inventory edits."""

    async def get_room(self, db: AsyncSession, room_id: uuid.UUID) -> Room:
        result = await db.execute(select(Room).where(Room.id == room_id))
        room = result.scalar_one_or_none()
        if not room:
            raise RoomNotFoundError("Room not found")
        return room

    async def get_room_rate(self, db: AsyncSession, room_id: uuid.UUID) -> RoomRate:
        """Rate lookup for pricing; refuses rooms that cannot be booked."""
        rate = rate_from_room(await self.get_room(db, room_id))
        if not rate.bookable:
            logger.info(f"Room {room_id} requested but unavailable ({rate.available_rooms} left)")
            raise RoomUnavailableError("This room is currently not available for booking.")
        return rate

    async def list_rooms(self, db: AsyncSession, available_only: bool = False) -> list[Room]:
        query = select(Room).order_by(Room.price)
        if available_only:
            query = query.where(Room.is_available.is_(True), Room.available_rooms > 0)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def create_room(self, db: AsyncSession, **fields) -> Room:
        category = fields.get("category_type")
        if category:
            fields["category_type"] = RoomCategory.parse(category).value
        for key in ("price", "breakfast_price"):
            if fields.get(key) is not None:
                fields[key] = Decimal(str(fields[key]))
        room = Room(**{k: v for k, v in fields.items() if k in _EDITABLE_FIELDS})
        room.available_rooms, room.total_rooms = clamp_available_rooms(
            room.category_type, room.available_rooms or 0
        )
        db.add(room)
        await db.commit()
        await db.refresh(room)
        logger.info(f"Room created: {room.name} ({room.category_type})")
        return room

    async def update_room(self, db: AsyncSession, room_id: uuid.UUID, **fields) -> Room:
        """Apply the given fields; a None clears nullable fields and is ignored otherwise."""
        room = await self.get_room(db, room_id)
        for key, value in fields.items():
            if key not in _EDITABLE_FIELDS:
                continue
            if value is None and key not in _NULLABLE_FIELDS:
                continue
            if key == "category_type" and value is not None:
                value = RoomCategory.parse(value).value
            elif key in ("price", "breakfast_price") and value is not None:
                value = Decimal(str(value))
            setattr(room, key, value)

        if "available_rooms" in fields or "category_type" in fields:
            requested = room.available_rooms or 0
            room.available_rooms, room.total_rooms = clamp_available_rooms(room.category_type, requested)
            if room.available_rooms != requested:
                logger.info(
                    f"Room {room.id} availability clamped to {room.available_rooms} "
                    f"(cap {room.total_rooms} for {room.category_type})"
                )

        await db.commit()
        await db.refresh(room)
        return room

    async def category_inventory(
        self, db: AsyncSession, config: PricingConfig = pricing_config
    ) -> list[CategoryInventory]:
        """Per-category availability for the Royal categories, empty ones included."""
        rooms = await self.list_rooms(db)
        inventory = []
        for name, rules in config.categories.items():
            matching = [r for r in rooms if r.category_type == name]
            inventory.append(CategoryInventory(
                category=name,
                rooms=len(matching),
                available=sum(r.available_rooms or 0 for r in matching),
                max_rooms=rules.max_rooms,
            ))
        return inventory

    async def adjust_category_availability(
        self,
        db: AsyncSession,
        category: str,
        change: int,
        config: PricingConfig = pricing_config,
    ) -> CategoryInventory:
        """Add or remove available rooms of a category, within 0..cap.

        Increases go to the first room of the category; decreases are taken
        from the rooms in order so none goes below zero.
        """
        label = RoomCategory.parse(category).value
        rooms = [r for r in await self.list_rooms(db) if r.category_type == label]
        if not rooms:
            raise RoomNotFoundError(f"No {label} rooms found")

        cap = config.rules_for(label).max_rooms
        total = sum(r.available_rooms or 0 for r in rooms)
        if total + change < 0:
            raise ValueError("Cannot reduce available rooms below zero")
        if cap is not None and total + change > cap:
            raise ValueError(f"Cannot add more rooms than maximum capacity ({cap})")

        if change >= 0:
            rooms[0].available_rooms = (rooms[0].available_rooms or 0) + change
        else:
            remaining = -change
            for room in rooms:
                taken = min(room.available_rooms or 0, remaining)
                room.available_rooms = (room.available_rooms or 0) - taken
                remaining -= taken
        for room in rooms:
            room.total_rooms = cap
        await db.commit()
        logger.info(f"{label} availability changed by {change}, now {total + change}")
        return CategoryInventory(
            category=label, rooms=len(rooms), available=total + change, max_rooms=cap
        )


room_service = RoomService()
