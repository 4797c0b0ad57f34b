"""Promo codes router — apply a code to a base price, admin code management."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from royalstay.database import get_db
from royalstay.schemas.promo import PromoApplyRequest, PromoCodeCreate, PromoCodeResponse
from royalstay.services.pricing.calculator import apply_taxes
from royalstay.services.pricing.config import pricing_config
from royalstay.services.pricing.promo_gate import PromoGate
from royalstay.services.promo_code_service import promo_code_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/apply")
async def apply_promo_code(req: PromoApplyRequest, db: AsyncSession = Depends(get_db)):
    """Validate a code against an undiscounted base price."""
    device_id = req.device_id or ""
    customer_id = req.customer_id or f"guest_{device_id or 'anonymous'}"
    gate = PromoGate(promo_code_service.validator_for(db), req.amount, customer_id, device_id)
    try:
        outcome = await gate.apply(req.code)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = outcome.to_dict()
    result["total"] = apply_taxes(outcome.discounted_amount, pricing_config)[2]
    result["original_total"] = apply_taxes(outcome.original_amount, pricing_config)[2]
    return result


@router.get("", response_model=list[PromoCodeResponse])
async def list_promo_codes(db: AsyncSession = Depends(get_db)):
    return await promo_code_service.list_promo_codes(db)


@router.post("", response_model=PromoCodeResponse, status_code=201)
async def create_promo_code(req: PromoCodeCreate, db: AsyncSession = Depends(get_db)):
    try:
        return await promo_code_service.create_promo_code(db, **req.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{promo_id}", status_code=204)
async def delete_promo_code(promo_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    try:
        await promo_code_service.delete_promo_code(db, promo_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
