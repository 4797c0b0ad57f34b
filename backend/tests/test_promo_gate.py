import asyncio

import pytest

from royalstay.services.pricing.calculator import calculate_price
from royalstay.services.pricing.capacity import RoomCategory
from royalstay.services.pricing.promo_gate import PromoGate, PromoValidationResult


def _gate(validator, amount=10000.0):
    return PromoGate(validator, amount, customer_id="cust-1", device_id="dev-1")


def _executive_price(discounted=None):
    return calculate_price(
        nightly_rate=5000, nights=2, room_count=1, adults=2, children=0,
        effective_adults=2, with_breakfast=False, category=RoomCategory.ROYAL_EXECUTIVE,
        discounted_base_price=discounted,
    )


class TestApply:
    def test_valid_code_applies_discount(self, fake_validator):
        validator = fake_validator(final_amount=9000, message="Saved!")
        gate = _gate(validator)
        outcome = asyncio.run(gate.apply(" summer10 "))
        assert outcome.applied
        assert gate.applied
        assert gate.code == "SUMMER10"
        assert gate.discounted_amount == 9000
        assert gate.original_amount == 10000
        assert outcome.message == "Saved!"
        assert validator.calls == [("SUMMER10", 10000.0, "cust-1", "dev-1")]

    def test_invalid_code_surfaces_message(self, fake_validator):
        gate = _gate(fake_validator(valid=False, message="This promo code has expired"))
        outcome = asyncio.run(gate.apply("OLD"))
        assert not outcome.applied
        assert outcome.message == "This promo code has expired"
        assert gate.discounted_amount == gate.original_amount

    def test_valid_without_amount_is_not_applied(self, fake_validator):
        gate = _gate(fake_validator(valid=True, final_amount=None))
        outcome = asyncio.run(gate.apply("ODD"))
        assert not outcome.applied
        assert outcome.message

    def test_discount_never_increases_price(self, fake_validator):
        gate = _gate(fake_validator(final_amount=12000))
        outcome = asyncio.run(gate.apply("UP"))
        assert not outcome.applied
        assert gate.discounted_amount == 10000

    def test_failed_apply_clears_previous_discount(self, fake_validator):
        validator = fake_validator(final_amount=9000)
        gate = _gate(validator)
        asyncio.run(gate.apply("GOOD"))
        validator.valid = False
        asyncio.run(gate.apply("BAD"))
        assert not gate.applied
        assert gate.discounted_amount == 10000

    def test_empty_code_rejected(self, fake_validator):
        validator = fake_validator(final_amount=9000)
        gate = _gate(validator)
        with pytest.raises(ValueError):
            asyncio.run(gate.apply("   "))
        assert validator.calls == []

    def test_validator_error_is_recovered(self):
        async def broken(code, amount, customer_id, device_id):
            raise RuntimeError("function timed out")

        gate = _gate(broken)
        outcome = asyncio.run(gate.apply("X1"))
        assert not outcome.applied
        assert outcome.message == "function timed out"
        assert not gate.is_validating


class TestRemove:
    def test_remove_without_promo_is_noop(self, fake_validator):
        gate = _gate(fake_validator(final_amount=9000))
        before = (gate.original_amount, gate.discounted_amount, gate.applied)
        gate.remove()
        gate.remove()
        assert (gate.original_amount, gate.discounted_amount, gate.applied) == before

    def test_remove_restores_original_totals(self, fake_validator):
        gate = _gate(fake_validator(final_amount=9000))
        asyncio.run(gate.apply("SAVE"))
        discounted = _executive_price(gate.discounted_amount if gate.applied else None)
        assert discounted.total == pytest.approx(10080)
        assert discounted.original_total == pytest.approx(11200)

        outcome = gate.remove()
        assert not outcome.applied
        assert gate.discounted_amount == 10000
        restored = _executive_price(gate.discounted_amount if gate.applied else None)
        assert restored.discounted_base_price == 10000
        assert restored.total == _executive_price().total


class TestStaleResponses:
    def test_older_response_is_discarded(self):
        release_old = asyncio.Event()

        async def validator(code, amount, customer_id, device_id):
            if code == "OLD":
                await release_old.wait()
                return PromoValidationResult(valid=True, final_amount=5000)
            return PromoValidationResult(valid=True, final_amount=9500)

        async def scenario():
            gate = _gate(validator)
            old_task = asyncio.create_task(gate.apply("OLD"))
            await asyncio.sleep(0)
            assert gate.is_validating
            new_outcome = await gate.apply("NEW")
            release_old.set()
            old_outcome = await old_task
            return gate, new_outcome, old_outcome

        gate, new_outcome, old_outcome = asyncio.run(scenario())
        assert new_outcome.applied and not new_outcome.stale
        assert old_outcome.stale
        assert gate.code == "NEW"
        assert gate.discounted_amount == 9500
        assert not gate.is_validating

    def test_remove_cancels_in_flight_result(self):
        release = asyncio.Event()

        async def validator(code, amount, customer_id, device_id):
            await release.wait()
            return PromoValidationResult(valid=True, final_amount=8000)

        async def scenario():
            gate = _gate(validator)
            task = asyncio.create_task(gate.apply("LATE"))
            await asyncio.sleep(0)
            gate.remove()
            release.set()
            return gate, await task

        gate, outcome = asyncio.run(scenario())
        assert outcome.stale
        assert not gate.applied
        assert gate.discounted_amount == 10000

    def test_amount_change_during_validation_discards(self):
        release = asyncio.Event()

        async def validator(code, amount, customer_id, device_id):
            await release.wait()
            return PromoValidationResult(valid=True, final_amount=amount - 1000)

        async def scenario():
            gate = _gate(validator)
            task = asyncio.create_task(gate.apply("FLAT"))
            await asyncio.sleep(0)
            gate.rebase(12000)
            release.set()
            return gate, await task

        gate, outcome = asyncio.run(scenario())
        assert outcome.stale
        assert not gate.applied
        assert gate.discounted_amount == 12000


class TestRebase:
    def test_follows_original_when_nothing_applied(self, fake_validator):
        gate = _gate(fake_validator(final_amount=9000))
        gate.rebase(15000)
        assert gate.discounted_amount == 15000

    def test_keeps_flat_discount_when_price_rises(self, fake_validator):
        gate = _gate(fake_validator(discount=1000))
        asyncio.run(gate.apply("SAVE"))
        gate.rebase(20000)
        assert gate.applied
        assert gate.discounted_amount == 19000
        assert gate.original_amount - gate.discounted_amount == 1000

    def test_keeps_flat_discount_when_price_falls(self, fake_validator):
        gate = _gate(fake_validator(discount=1000))
        asyncio.run(gate.apply("SAVE"))
        gate.rebase(8000)
        assert gate.applied
        assert gate.discounted_amount == 7000

    def test_discount_floored_at_zero(self, fake_validator):
        gate = _gate(fake_validator(discount=1000))
        asyncio.run(gate.apply("SAVE"))
        gate.rebase(600)
        assert gate.applied
        assert gate.discounted_amount == 0

    def test_zero_price_drops_promo(self, fake_validator):
        gate = _gate(fake_validator(discount=1000))
        asyncio.run(gate.apply("SAVE"))
        outcome = gate.rebase(0)
        assert not outcome.applied
        assert gate.discounted_amount == 0
        assert gate.code is None


class TestRestored:
    def test_restored_gate_carries_stored_discount(self, fake_validator):
        validator = fake_validator(final_amount=1)
        gate = PromoGate.restored(validator, "WELCOME1000", 10000, 9000)
        assert gate.applied
        assert gate.code == "WELCOME1000"
        assert gate.discount == 1000
        assert validator.calls == []

    def test_restored_without_discount_is_not_applied(self, fake_validator):
        gate = PromoGate.restored(fake_validator(), "NONE", 10000, 10000)
        assert not gate.applied
        assert gate.discount == 0
