from royalstay.models.room import Room
from royalstay.models.booking import Booking, Receipt
from royalstay.models.promo import PromoCode, PromoCodeUsage
from royalstay.models.refund import RefundRequest

__all__ = [
    "Booking",
    "PromoCode",
    "PromoCodeUsage",
    "Receipt",
    "RefundRequest",
    "Room",
]
