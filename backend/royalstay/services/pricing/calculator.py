"""Price calculator — room, extra-guest, breakfast and GST totals for a stay.

All amounts stay in floating-point currency units; rounding to whole units
happens only when formatting for display.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from royalstay.data.currency import format_inr
from royalstay.services.pricing.capacity import RoomCategory, base_occupancy
from royalstay.services.pricing.config import PricingConfig, pricing_config

_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class PriceBreakdown:
    """Derived price of a stay; snapshotted onto the booking at confirmation."""
    nights: int
    room_count: int
    nightly_rate: float
    room_subtotal: float
    extra_guests: int
    extra_guest_charge: float
    breakfast_rate: float
    breakfast_charge: float
    base_price: float
    discounted_base_price: float
    cgst: float
    sgst: float
    total: float
    original_total: float          # total without any promo, for struck-through display
    promo_applied: bool = False

    @property
    def tax(self) -> float:
        return self.cgst + self.sgst

    @property
    def discount(self) -> float:
        return self.base_price - self.discounted_base_price

    def to_dict(self) -> dict:
        return {
            "nights": self.nights,
            "room_count": self.room_count,
            "nightly_rate": self.nightly_rate,
            "room_subtotal": self.room_subtotal,
            "extra_guests": self.extra_guests,
            "extra_guest_charge": self.extra_guest_charge,
            "breakfast_rate": self.breakfast_rate,
            "breakfast_charge": self.breakfast_charge,
            "base_price": self.base_price,
            "discounted_base_price": self.discounted_base_price,
            "discount": self.discount,
            "cgst": self.cgst,
            "sgst": self.sgst,
            "tax": self.tax,
            "total": self.total,
            "original_total": self.original_total,
            "promo_applied": self.promo_applied,
        }

    def display(self) -> dict:
        """Whole-unit formatted strings for a summary panel."""
        return {
            "room_subtotal": format_inr(self.room_subtotal),
            "extra_guest_charge": format_inr(self.extra_guest_charge),
            "breakfast_charge": format_inr(self.breakfast_charge),
            "base_price": format_inr(self.discounted_base_price),
            "cgst": format_inr(self.cgst),
            "sgst": format_inr(self.sgst),
            "total": format_inr(self.total),
            "original_total": format_inr(self.original_total) if self.promo_applied else None,
        }


def count_nights(check_in: date | datetime | None, check_out: date | datetime | None) -> int:
    """Whole nights between two dates, rounded up and never less than one."""
    if check_in is None or check_out is None:
        return 1
    days = math.ceil((check_out - check_in) / _ONE_DAY)
    return max(days, 1)


def resolve_breakfast_rate(rate: float | None, config: PricingConfig = pricing_config) -> float:
    """Per guest per night; rooms without a breakfast price use the house default."""
    return rate or config.default_breakfast_rate


def extra_guest_charge(
    category: RoomCategory | str | None,
    effective_adults: int,
    nights: int,
    config: PricingConfig = pricing_config,
) -> tuple[int, float]:
    """(extra adults, charge) over the category's base occupancy."""
    rules = config.rules_for(RoomCategory.parse(category))
    if rules.single_occupancy:
        return 0, 0.0
    extra = max(0, effective_adults - base_occupancy(category, config))
    return extra, extra * config.extra_guest_rate * nights


def apply_taxes(amount: float, config: PricingConfig = pricing_config) -> tuple[float, float, float]:
    cgst = amount * config.taxes.cgst
    sgst = amount * config.taxes.sgst
    return cgst, sgst, amount + cgst + sgst


def calculate_price(
    nightly_rate: float,
    nights: int,
    room_count: int,
    adults: int,
    children: int,
    effective_adults: int,
    with_breakfast: bool,
    category: RoomCategory | str | None,
    breakfast_rate: float | None = None,
    discounted_base_price: float | None = None,
    config: PricingConfig = pricing_config,
) -> PriceBreakdown:
    """Compute the full price breakdown of a stay.

    Breakfast is charged on raw adults + children; the extra-guest charge
    uses effective adults. A discounted base price only takes effect when it
    is lower than the computed base price and then becomes the tax base.
    """
    room_subtotal = nightly_rate * nights * room_count
    extra_guests, extra_charge = extra_guest_charge(category, effective_adults, nights, config)

    rate = resolve_breakfast_rate(breakfast_rate, config)
    breakfast_charge = rate * nights * (adults + children) if with_breakfast else 0.0

    base_price = room_subtotal + extra_charge + breakfast_charge

    promo_applied = discounted_base_price is not None and discounted_base_price < base_price
    taxable = discounted_base_price if promo_applied else base_price

    cgst, sgst, total = apply_taxes(taxable, config)
    original_total = apply_taxes(base_price, config)[2] if promo_applied else total

    return PriceBreakdown(
        nights=nights,
        room_count=room_count,
        nightly_rate=nightly_rate,
        room_subtotal=room_subtotal,
        extra_guests=extra_guests,
        extra_guest_charge=extra_charge,
        breakfast_rate=rate,
        breakfast_charge=breakfast_charge,
        base_price=base_price,
        discounted_base_price=taxable,
        cgst=cgst,
        sgst=sgst,
        total=total,
        original_total=original_total,
        promo_applied=promo_applied,
    )
