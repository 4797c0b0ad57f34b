"""Pricing engine — shared by the customer and admin booking flows.

Modules:
    config       Pricing constants and per-category capacity rules
    capacity     Resolves adult/child counts against the room category
    calculator   Nightly, extra-guest, breakfast and tax computation
    promo_gate   Applies and removes promo discounts on the base price

Pipeline:
    resolve_capacity → calculate_price → PromoGate (optional) → calculate_price
"""
