"""Promo code service — code administration, eligibility checks and redemption."""

import logging
import secrets
import string
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from royalstay.config import settings
from royalstay.data.currency import format_inr
from royalstay.models.promo import PromoCode, PromoCodeUsage
from royalstay.services.pricing.promo_gate import PromoValidationResult, PromoValidator
from royalstay.services.promo_client import promo_validator_client

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


def evaluate_promo(
    promo: PromoCode | None,
    amount: float,
    today: date,
    already_used: bool = False,
) -> PromoValidationResult:
    """Eligibility of a promo code for one customer; flat discount, floored at zero."""
    if promo is None:
        return PromoValidationResult(valid=False, message="Invalid promo code")
    if promo.status != "active":
        return PromoValidationResult(valid=False, message="This promo code is no longer active")
    if promo.expiry_date and promo.expiry_date < today:
        return PromoValidationResult(valid=False, message="This promo code has expired")
    if promo.max_uses is not None and (promo.current_uses or 0) >= promo.max_uses:
        return PromoValidationResult(valid=False, message="This promo code has reached its usage limit")
    if already_used:
        return PromoValidationResult(valid=False, message="You have already used this promo code")

    discount = float(promo.discount_amount)
    final_amount = max(0.0, amount - discount)
    return PromoValidationResult(
        valid=True,
        final_amount=final_amount,
        message=f"Promo code applied! You saved {format_inr(amount - final_amount)}",
    )


def generate_code(length: int | None = None) -> str:
    length = length or settings.promo_code_length
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


class PromoCodeService:
    """Manages promo codes stored in the local database."""

    async def get_by_code(self, db: AsyncSession, code: str) -> PromoCode | None:
        result = await db.execute(
            select(PromoCode).where(PromoCode.code == code.strip().upper())
        )
        return result.scalar_one_or_none()

    async def list_promo_codes(self, db: AsyncSession) -> list[PromoCode]:
        result = await db.execute(select(PromoCode).order_by(PromoCode.created_at.desc()))
        return list(result.scalars().all())

    async def create_promo_code(
        self,
        db: AsyncSession,
        discount_amount: float,
        code: str | None = None,
        generate_random_code: bool = False,
        expiry_date: date | None = None,
        max_uses: int | None = None,
        created_by: str | None = None,
    ) -> PromoCode:
        if generate_random_code or not code:
            code = generate_code()
            while await self.get_by_code(db, code):
                code = generate_code()
        else:
            code = code.strip().upper()
            if await self.get_by_code(db, code):
                raise ValueError(f"Promo code {code} already exists")

        promo = PromoCode(
            code=code,
            discount_amount=Decimal(str(discount_amount)),
            expiry_date=expiry_date,
            max_uses=max_uses,
            current_uses=0,
            status="active",
            created_by=created_by,
        )
        db.add(promo)
        await db.commit()
        await db.refresh(promo)
        logger.info(f"Promo code {code} created (discount {discount_amount})")
        return promo

    async def delete_promo_code(self, db: AsyncSession, promo_id: uuid.UUID) -> None:
        result = await db.execute(select(PromoCode).where(PromoCode.id == promo_id))
        promo = result.scalar_one_or_none()
        if not promo:
            raise ValueError("Promo code not found")
        # Usage rows reference the code; remove them first
        await db.execute(delete(PromoCodeUsage).where(PromoCodeUsage.promo_code_id == promo_id))
        await db.delete(promo)
        await db.commit()
        logger.info(f"Promo code {promo.code} deleted")

    async def _already_used(
        self, db: AsyncSession, promo_id: uuid.UUID, customer_id: str, device_id: str | None
    ) -> bool:
        conditions = [PromoCodeUsage.customer_id == customer_id]
        if device_id:
            conditions.append(PromoCodeUsage.device_id == device_id)
        result = await db.execute(
            select(PromoCodeUsage.id)
            .where(PromoCodeUsage.promo_code_id == promo_id, or_(*conditions))
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def validate(
        self,
        db: AsyncSession,
        code: str,
        amount: float,
        customer_id: str,
        device_id: str | None,
        today: date | None = None,
    ) -> PromoValidationResult:
        promo = await self.get_by_code(db, code)
        used = bool(promo) and await self._already_used(db, promo.id, customer_id, device_id)
        return evaluate_promo(promo, amount, today or date.today(), already_used=used)

    async def redeem(
        self,
        db: AsyncSession,
        code: str,
        customer_id: str,
        device_id: str | None,
        booking_id: uuid.UUID,
        original_amount: float,
        final_amount: float,
    ) -> None:
        """Record one use of a code; the caller commits."""
        promo = await self.get_by_code(db, code)
        if not promo:
            # Codes validated remotely have no local row
            logger.info(f"Promo code {code} redeemed without a local record")
            return
        db.add(PromoCodeUsage(
            promo_code_id=promo.id,
            customer_id=customer_id,
            device_id=device_id,
            booking_id=booking_id,
            original_amount=Decimal(str(original_amount)),
            final_amount=Decimal(str(final_amount)),
        ))
        promo.current_uses = (promo.current_uses or 0) + 1
        if promo.max_uses is not None and promo.current_uses >= promo.max_uses:
            promo.status = "used"

    def validator_for(self, db: AsyncSession) -> PromoValidator:
        """Remote validator when configured, otherwise the local promo table."""
        if settings.promo_validator_url:
            return promo_validator_client.validate

        async def _validate(code: str, amount: float, customer_id: str, device_id: str) -> PromoValidationResult:
            return await self.validate(db, code, amount, customer_id, device_id)

        return _validate


promo_code_service = PromoCodeService()
