from datetime import date, datetime

import pytest

from royalstay.services.pricing.calculator import (
    apply_taxes,
    calculate_price,
    count_nights,
    resolve_breakfast_rate,
)
from royalstay.services.pricing.capacity import RoomCategory, resolve_capacity
from royalstay.services.pricing.config import CategoryRules, PricingConfig, TaxRates


def _price(category, nightly_rate, nights, adults, ages=(), room_count=1,
           with_breakfast=False, breakfast_rate=None, discounted=None, config=None):
    kwargs = {"config": config} if config else {}
    cap = resolve_capacity(category, adults, list(ages), **kwargs)
    return cap, calculate_price(
        nightly_rate=nightly_rate,
        nights=nights,
        room_count=room_count,
        adults=cap.adults,
        children=cap.children,
        effective_adults=cap.effective_adults,
        with_breakfast=with_breakfast,
        category=category,
        breakfast_rate=breakfast_rate,
        discounted_base_price=discounted,
        **kwargs,
    )


class TestCountNights:
    def test_whole_days(self):
        assert count_nights(date(2026, 11, 1), date(2026, 11, 3)) == 2

    def test_partial_day_rounds_up(self):
        assert count_nights(datetime(2026, 11, 1, 12), datetime(2026, 11, 3, 0)) == 2
        assert count_nights(datetime(2026, 11, 1, 0), datetime(2026, 11, 1, 1)) == 1

    def test_zero_or_negative_stays_floor_to_one(self):
        assert count_nights(date(2026, 11, 1), date(2026, 11, 1)) == 1
        assert count_nights(date(2026, 11, 5), date(2026, 11, 1)) == 1

    def test_missing_dates(self):
        assert count_nights(None, date(2026, 11, 1)) == 1


class TestScenarios:
    def test_royal_executive_extra_adult(self):
        cap, p = _price(RoomCategory.ROYAL_EXECUTIVE, 5000, 2, adults=3)
        assert cap.effective_adults == 3
        assert p.room_subtotal == 10000
        assert p.extra_guests == 1
        assert p.extra_guest_charge == 1200
        assert p.base_price == 11200
        assert p.cgst == pytest.approx(672)
        assert p.sgst == pytest.approx(672)
        assert p.total == pytest.approx(12544)

    def test_royal_deluxe_forced_single(self):
        cap, p = _price(RoomCategory.ROYAL_DELUXE, 3000, 1, adults=2)
        assert cap.adults == 1
        assert cap.children == 0
        assert p.extra_guest_charge == 0
        assert p.base_price == 3000
        assert p.total == pytest.approx(3360)

    def test_royal_suite_child_counts_and_breakfast(self):
        cap, p = _price(RoomCategory.ROYAL_SUITE, 8000, 3, adults=2, ages=[9],
                        with_breakfast=True, breakfast_rate=500)
        assert cap.effective_adults == 3
        assert p.extra_guest_charge == 1800
        assert p.breakfast_charge == 4500
        assert p.base_price == 30300
        assert p.total == pytest.approx(33936)

    def test_promo_discount_on_base_price(self):
        _, p = _price(RoomCategory.ROYAL_EXECUTIVE, 5000, 2, adults=2, discounted=9000)
        assert p.base_price == 10000
        assert p.promo_applied
        assert p.discounted_base_price == 9000
        assert p.cgst == pytest.approx(540)
        assert p.sgst == pytest.approx(540)
        assert p.total == pytest.approx(10080)
        assert p.original_total == pytest.approx(11200)
        assert p.discount == 1000

    def test_without_promo_restores_totals(self):
        _, p = _price(RoomCategory.ROYAL_EXECUTIVE, 5000, 2, adults=2)
        assert not p.promo_applied
        assert p.discounted_base_price == 10000
        assert p.total == pytest.approx(11200)
        assert p.original_total == p.total


class TestRules:
    def test_deluxe_never_surcharged(self):
        for adults in range(1, 6):
            _, p = _price(RoomCategory.ROYAL_DELUXE, 3000, 4, adults=adults, ages=[10, 12])
            assert p.extra_guest_charge == 0
            assert p.extra_guests == 0

    def test_breakfast_uses_raw_headcount(self):
        # a 3-year-old adds no surcharge but does eat breakfast
        cap, p = _price(RoomCategory.ROYAL_SUITE, 8000, 1, adults=2, ages=[3],
                        with_breakfast=True, breakfast_rate=500)
        assert cap.effective_adults == 2
        assert p.extra_guest_charge == 0
        assert p.breakfast_charge == 1500

    def test_breakfast_off(self):
        _, p = _price(RoomCategory.ROYAL_SUITE, 8000, 2, adults=2, breakfast_rate=700)
        assert p.breakfast_charge == 0

    def test_default_breakfast_rate(self):
        assert resolve_breakfast_rate(None) == 500
        assert resolve_breakfast_rate(0) == 500
        assert resolve_breakfast_rate(350) == 350
        _, p = _price(RoomCategory.ROYAL_EXECUTIVE, 5000, 2, adults=2, with_breakfast=True)
        assert p.breakfast_charge == 500 * 2 * 2

    def test_standard_surcharge_over_two(self):
        _, p = _price(RoomCategory.STANDARD, 2000, 1, adults=4)
        assert p.extra_guests == 2
        assert p.extra_guest_charge == 1200

    def test_discount_cannot_raise_price(self):
        _, p = _price(RoomCategory.ROYAL_EXECUTIVE, 5000, 2, adults=2, discounted=12000)
        assert not p.promo_applied
        assert p.discounted_base_price == p.base_price
        assert p.total == pytest.approx(11200)

    @pytest.mark.parametrize("discounted", [None, 0, 4321.5, 9999.99])
    def test_total_is_base_plus_taxes(self, discounted):
        _, p = _price(RoomCategory.ROYAL_SUITE, 7999.5, 3, adults=3, ages=[11],
                      with_breakfast=True, discounted=discounted)
        assert p.cgst == pytest.approx(0.06 * p.discounted_base_price)
        assert p.sgst == pytest.approx(0.06 * p.discounted_base_price)
        assert p.total == pytest.approx(p.discounted_base_price + p.cgst + p.sgst)

    def test_room_count_monotonicity(self):
        _, one = _price(RoomCategory.ROYAL_EXECUTIVE, 5000, 3, adults=3, room_count=1)
        _, two = _price(RoomCategory.ROYAL_EXECUTIVE, 5000, 3, adults=3, room_count=2)
        assert two.room_subtotal - one.room_subtotal == 5000 * 3
        assert two.total - one.total == pytest.approx(5000 * 3 * 1.12)

    def test_deterministic(self):
        first = _price(RoomCategory.ROYAL_SUITE, 8123.45, 3, adults=2, ages=[9], with_breakfast=True)[1]
        second = _price(RoomCategory.ROYAL_SUITE, 8123.45, 3, adults=2, ages=[9], with_breakfast=True)[1]
        assert first == second

    def test_no_rounding_before_display(self):
        _, p = _price(RoomCategory.ROYAL_EXECUTIVE, 1000.3, 1, adults=1)
        assert p.cgst == pytest.approx(60.018)
        assert p.display()["cgst"] == "₹60"
        assert p.display()["total"] == "₹1,120"
        assert p.display()["original_total"] is None


class TestInjectedConfig:
    def test_custom_rates(self):
        config = PricingConfig(
            extra_guest_rate=800,
            default_breakfast_rate=300,
            taxes=TaxRates(cgst=0.09, sgst=0.09),
            categories={"Royal Executive": CategoryRules(max_adults=3, base_occupancy=1)},
        )
        _, p = _price(RoomCategory.ROYAL_EXECUTIVE, 1000, 1, adults=3,
                      with_breakfast=True, config=config)
        assert p.extra_guest_charge == 2 * 800
        assert p.breakfast_charge == 900
        assert p.total == pytest.approx((1000 + 1600 + 900) * 1.18)

    def test_apply_taxes(self):
        cgst, sgst, total = apply_taxes(1000)
        assert cgst == pytest.approx(60)
        assert sgst == pytest.approx(60)
        assert total == pytest.approx(1120)
