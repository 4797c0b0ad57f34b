"""Rooms router — room listing, rate lookup and admin inventory."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from royalstay.database import get_db
from royalstay.schemas.room import CategoryAvailabilityChange, RoomCreate, RoomResponse, RoomUpdate
from royalstay.services.room_service import RoomNotFoundError, RoomUnavailableError, room_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[RoomResponse])
async def list_rooms(
    available_only: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    """List rooms, cheapest first."""
    return await room_service.list_rooms(db, available_only=available_only)


@router.get("/inventory")
async def get_category_inventory(db: AsyncSession = Depends(get_db)):
    """Available rooms per Royal category against the category cap."""
    inventory = await room_service.category_inventory(db)
    return [entry.to_dict() for entry in inventory]


@router.post("/inventory/{category}/adjust")
async def adjust_category_availability(
    category: str, req: CategoryAvailabilityChange, db: AsyncSession = Depends(get_db)
):
    try:
        entry = await room_service.adjust_category_availability(db, category, req.change)
    except RoomNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return entry.to_dict()


@router.get("/{room_id}", response_model=RoomResponse)
async def get_room(room_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    try:
        return await room_service.get_room(db, room_id)
    except RoomNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{room_id}/rate")
async def get_room_rate(room_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    """Rate data used for pricing; 409 when the room cannot be booked."""
    try:
        rate = await room_service.get_room_rate(db, room_id)
    except RoomNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RoomUnavailableError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return rate.to_dict()


@router.post("", response_model=RoomResponse, status_code=201)
async def create_room(req: RoomCreate, db: AsyncSession = Depends(get_db)):
    return await room_service.create_room(db, **req.model_dump())


@router.patch("/{room_id}", response_model=RoomResponse)
async def update_room(room_id: uuid.UUID, req: RoomUpdate, db: AsyncSession = Depends(get_db)):
    try:
        return await room_service.update_room(db, room_id, **req.model_dump(exclude_unset=True))
    except RoomNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
