import asyncio
import uuid
from datetime import date
from decimal import Decimal

import pytest

from royalstay.services.booking_service import (
    CustomerDetails,
    StayRequest,
    build_booking_record,
    build_quote,
    build_receipt_record,
    new_receipt_number,
    validate_room_count,
    validate_stay_window,
)
from royalstay.services.pricing.capacity import RoomCategory

TODAY = date(2026, 3, 10)


def _stay(**overrides):
    values = dict(check_in=date(2026, 3, 12), check_out=date(2026, 3, 14), adults=2)
    values.update(overrides)
    return StayRequest(**values)


class TestStayWindow:
    def test_accepts_future_stay(self):
        validate_stay_window(date(2026, 3, 10), date(2026, 3, 11), today=TODAY)

    def test_rejects_past_check_in(self):
        with pytest.raises(ValueError, match="past"):
            validate_stay_window(date(2026, 3, 9), date(2026, 3, 11), today=TODAY)

    def test_past_allowed_for_admin_edits(self):
        validate_stay_window(date(2026, 1, 1), date(2026, 1, 3), today=TODAY, allow_past=True)

    @pytest.mark.parametrize("check_out", [date(2026, 3, 12), date(2026, 3, 11)])
    def test_check_out_must_follow_check_in(self, check_out):
        with pytest.raises(ValueError, match="after check-in"):
            validate_stay_window(date(2026, 3, 12), check_out, today=TODAY)


class TestRoomCount:
    def test_within_inventory(self, make_rate):
        validate_room_count(3, make_rate(available_rooms=3))

    def test_over_inventory(self, make_rate):
        with pytest.raises(ValueError, match="Only 2 rooms"):
            validate_room_count(3, make_rate(available_rooms=2))

    def test_zero_rooms(self, make_rate):
        with pytest.raises(ValueError):
            validate_room_count(0, make_rate())


class TestBuildQuote:
    def test_without_promo(self, make_rate):
        quote = asyncio.run(build_quote(make_rate(), _stay()))
        assert quote.promo is None
        assert quote.breakdown.base_price == 10000
        assert quote.breakdown.total == pytest.approx(11200)
        assert quote.to_dict()["display"]["total"] == "₹11,200"

    def test_capacity_corrected_before_pricing(self, make_rate):
        quote = asyncio.run(build_quote(make_rate(), _stay(adults=3, children_ages=[10])))
        assert quote.capacity.adults == 2
        assert quote.capacity.effective_adults == 3
        assert quote.capacity.notice
        assert quote.breakdown.extra_guests == 1

    def test_promo_applied_to_base_price(self, make_rate, fake_validator):
        validator = fake_validator(discount=1000, message="Promo code applied! You saved ₹1,000")
        quote = asyncio.run(build_quote(
            make_rate(), _stay(), promo_code="welcome1000", validator=validator,
            customer_id="cust-9", device_id="dev-9",
        ))
        assert quote.promo.applied
        assert quote.promo.code == "WELCOME1000"
        assert validator.calls == [("WELCOME1000", 10000, "cust-9", "dev-9")]
        assert quote.breakdown.discounted_base_price == 9000
        assert quote.breakdown.total == pytest.approx(10080)
        assert quote.breakdown.original_total == pytest.approx(11200)

    def test_rejected_promo_keeps_full_price(self, make_rate, fake_validator):
        quote = asyncio.run(build_quote(
            make_rate(), _stay(), promo_code="NOPE",
            validator=fake_validator(valid=False, message="Invalid promo code"),
        ))
        assert not quote.promo.applied
        assert quote.promo.message == "Invalid promo code"
        assert quote.breakdown.total == pytest.approx(11200)
        assert not quote.breakdown.promo_applied

    def test_promo_requires_validator(self, make_rate):
        with pytest.raises(ValueError):
            asyncio.run(build_quote(make_rate(), _stay(), promo_code="X"))

    def test_blank_promo_ignored(self, make_rate):
        quote = asyncio.run(build_quote(make_rate(), _stay(), promo_code="  "))
        assert quote.promo is None


class TestRecords:
    def _quote(self, make_rate, fake_validator, **stay):
        rate = make_rate(category=RoomCategory.ROYAL_SUITE, nightly_rate=8000, breakfast_rate=500)
        s = _stay(**stay)
        quote = asyncio.run(build_quote(
            rate, s, promo_code="SAVE", validator=fake_validator(discount=2000),
        ))
        return quote, s

    def test_booking_record_snapshots_price(self, make_rate, fake_validator):
        quote, stay = self._quote(make_rate, fake_validator, adults=3, children_ages=[5, 9], with_breakfast=True)
        customer = CustomerDetails(name="Asha", email="asha@example.com", customer_id="c1")
        record = build_booking_record(quote, stay, customer)

        # 3 adults + one child over 7 -> 4 effective, 2 over base occupancy
        assert record["effective_adults"] == 4
        assert record["guests"] == 5
        assert record["children_ages"] == [5, 9]
        assert record["nights"] == 2
        assert record["room_subtotal"] == Decimal("16000.00")
        assert record["extra_guests"] == 2
        assert record["extra_guest_charges"] == Decimal("2400.00")
        assert record["breakfast_charge"] == Decimal("5000.00")
        assert record["base_price"] == Decimal("23400.00")
        assert record["discounted_base_price"] == Decimal("21400.00")
        assert record["promo_code"] == "SAVE"
        assert record["cgst"] == Decimal("1284.00")
        assert record["total_price"] == Decimal("23968.00")
        assert record["original_total"] == Decimal("26208.00")
        assert record["status"] == "pending"

    def test_receipt_record_uses_discounted_base(self, make_rate, fake_validator):
        quote, stay = self._quote(make_rate, fake_validator)
        booking_id = uuid.uuid4()
        receipt = build_receipt_record(
            booking_id, quote, stay, CustomerDetails(name="A", email="a@example.com"),
            payment_id="pay_1", payment_method="card",
        )
        assert receipt["booking_id"] == booking_id
        assert receipt["receipt_number"].startswith("RP-")
        assert receipt["receipt_data"]["receipt_number"] == receipt["receipt_number"]
        assert receipt["base_price"] == Decimal("14000.00")
        assert receipt["total"] == Decimal("15680.00")
        assert receipt["breakfast_price"] is None
        assert receipt["receipt_data"]["room_type"] == "Royal Suite"
        assert receipt["receipt_data"]["payment_method"] == "card"


def test_receipt_number_format():
    number = new_receipt_number()
    assert number.startswith("RP-")
    assert number[3:].isdigit()


def test_promo_identity_falls_back_to_device():
    assert CustomerDetails(name="a", email="b", customer_id="c1").promo_identity == "c1"
    assert CustomerDetails(name="a", email="b", device_id="d1").promo_identity == "guest_d1"
    assert CustomerDetails(name="a", email="b").promo_identity == "guest_anonymous"
