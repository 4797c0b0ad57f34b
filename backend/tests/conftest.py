import uuid

import pytest

from royalstay.services.pricing.capacity import RoomCategory
from royalstay.services.pricing.promo_gate import PromoValidationResult
from royalstay.services.room_service import RoomRate


@pytest.fixture
def make_rate():
    def _make(
        category=RoomCategory.ROYAL_EXECUTIVE,
        nightly_rate=5000.0,
        breakfast_rate=500.0,
        available_rooms=5,
        is_available=True,
    ) -> RoomRate:
        return RoomRate(
            room_id=uuid.uuid4(),
            name=f"{RoomCategory.parse(category).value} Room",
            category=RoomCategory.parse(category),
            nightly_rate=nightly_rate,
            breakfast_rate=breakfast_rate,
            available_rooms=available_rooms,
            is_available=is_available,
        )
    return _make


class FakeValidator:
    """Records calls and answers with a fixed result."""

    def __init__(self, valid=True, final_amount=None, message=None, discount=None):
        self.valid = valid
        self.final_amount = final_amount
        self.discount = discount
        self.message = message
        self.calls = []

    async def __call__(self, code, amount, customer_id, device_id):
        self.calls.append((code, amount, customer_id, device_id))
        final = self.final_amount
        if self.discount is not None:
            final = max(0.0, amount - self.discount)
        return PromoValidationResult(valid=self.valid, final_amount=final, message=self.message)


@pytest.fixture
def fake_validator():
    return FakeValidator


class FakeResult:
    def __init__(self, value):
        self._value = value

    def scalar_one_or_none(self):
        if isinstance(self._value, list):
            return self._value[0] if self._value else None
        return self._value

    def scalars(self):
        return self

    def all(self):
        if self._value is None:
            return []
        return self._value if isinstance(self._value, list) else [self._value]


class FakeSession:
    """Stands in for AsyncSession: records writes and answers execute() in order."""

    def __init__(self, *results):
        self.results = list(results)
        self.statements = []
        self.added = []
        self.deleted = []
        self.flushes = 0
        self.commits = 0

    def add(self, obj):
        self.added.append(obj)

    async def execute(self, statement):
        self.statements.append(statement)
        return FakeResult(self.results.pop(0) if self.results else None)

    async def flush(self):
        self.flushes += 1
        for obj in self.added:
            if getattr(obj, "id", None) is None:
                obj.id = uuid.uuid4()

    async def commit(self):
        await self.flush()
        self.commits += 1

    async def refresh(self, obj):
        pass

    async def delete(self, obj):
        self.deleted.append(obj)


@pytest.fixture
def fake_session():
    return FakeSession
