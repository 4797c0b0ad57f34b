"""Promo gate — applies or removes a validated discount on the base price."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class PromoValidationResult:
    """Answer of a promo validator: {valid, final_amount, message}."""
    valid: bool
    final_amount: float | None = None
    message: str | None = None

    @classmethod
    def from_payload(cls, data: dict) -> "PromoValidationResult":
        final_amount = data.get("final_amount")
        return cls(
            valid=bool(data.get("valid")),
            final_amount=float(final_amount) if final_amount is not None else None,
            message=data.get("message"),
        )

    def to_dict(self) -> dict:
        return {"valid": self.valid, "final_amount": self.final_amount, "message": self.message}


# (code, original_amount, customer_id, device_id) -> result
PromoValidator = Callable[[str, float, str, str], Awaitable[PromoValidationResult]]


@dataclass
class PromoOutcome:
    """Result of one apply/remove call on the gate."""
    applied: bool
    original_amount: float
    discounted_amount: float
    code: str | None = None
    message: str | None = None
    stale: bool = False    # response superseded by a newer request and ignored

    def to_dict(self) -> dict:
        return {
            "applied": self.applied,
            "original_amount": self.original_amount,
            "discounted_amount": self.discounted_amount,
            "code": self.code,
            "message": self.message,
            "stale": self.stale,
        }


class PromoGate:
    """Tracks the promo state of one booking session.

    Every apply() takes a new sequence number; a validator response that is
    not for the latest request, or that was computed against an amount that
    has since changed, leaves the state untouched.
    """

    def __init__(
        self,
        validator: PromoValidator,
        original_amount: float,
        customer_id: str,
        device_id: str,
    ):
        self._validator = validator
        self.customer_id = customer_id
        self.device_id = device_id
        self.original_amount = original_amount
        self.discounted_amount = original_amount
        self.applied = False
        self.code: str | None = None
        self.message: str | None = None
        self._sequence = 0
        self._in_flight: int | None = None

    @property
    def is_validating(self) -> bool:
        return self._in_flight is not None

    def _outcome(self, stale: bool = False) -> PromoOutcome:
        return PromoOutcome(
            applied=self.applied,
            original_amount=self.original_amount,
            discounted_amount=self.discounted_amount,
            code=self.code,
            message=self.message,
            stale=stale,
        )

    def _clear(self, message: str | None) -> None:
        self.discounted_amount = self.original_amount
        self.applied = False
        self.code = None
        self.message = message

    async def apply(self, code: str) -> PromoOutcome:
        code = (code or "").strip().upper()
        if not code:
            raise ValueError("Please enter a promo code")

        self._sequence += 1
        seq = self._sequence
        amount = self.original_amount
        self._in_flight = seq

        try:
            result = await self._validator(code, amount, self.customer_id, self.device_id)
        except Exception as e:
            logger.warning(f"Promo validation for {code} failed: {e}")
            result = PromoValidationResult(
                valid=False,
                message=str(e) or "An error occurred while applying the promo code.",
            )
        finally:
            if self._in_flight == seq:
                self._in_flight = None

        if seq != self._sequence or amount != self.original_amount:
            logger.info(f"Discarding stale promo response for {code} (request {seq}, latest {self._sequence})")
            return self._outcome(stale=True)

        if not result.valid or result.final_amount is None:
            self._clear(result.message or "This promo code cannot be applied")
            logger.info(f"Promo code {code} rejected: {self.message}")
            return self._outcome()

        if result.final_amount >= amount:
            self._clear(result.message or "This promo code does not reduce the price")
            return self._outcome()

        self.discounted_amount = result.final_amount
        self.applied = True
        self.code = code
        self.message = result.message or "Promo code applied successfully!"
        logger.info(f"Promo code {code} applied: {amount} -> {result.final_amount}")
        return self._outcome()

    def remove(self) -> PromoOutcome:
        """Drop any applied discount. Safe to call when nothing is applied."""
        self._sequence += 1
        self._in_flight = None
        if self.applied:
            self._clear("Promo code removed")
        return self._outcome()

    @classmethod
    def restored(
        cls,
        validator: PromoValidator,
        code: str,
        original_amount: float,
        discounted_amount: float,
        customer_id: str = "",
        device_id: str = "",
    ) -> "PromoGate":
        """Gate carrying a promo that was applied earlier, e.g. on a stored booking."""
        gate = cls(validator, original_amount, customer_id, device_id)
        if discounted_amount < original_amount:
            gate.discounted_amount = discounted_amount
            gate.applied = True
            gate.code = code
        return gate

    @property
    def discount(self) -> float:
        return self.original_amount - self.discounted_amount if self.applied else 0.0

    def rebase(self, original_amount: float) -> PromoOutcome:
        """Track a new undiscounted amount after the stay inputs changed.

        An applied promo keeps its flat discount, floored at zero.
        """
        discount = self.discount
        self.original_amount = original_amount
        if not self.applied:
            self.discounted_amount = original_amount
            return self._outcome()

        discounted = max(0.0, original_amount - discount)
        if discounted >= original_amount:
            self._clear("Promo code removed because the price changed")
        else:
            self.discounted_amount = discounted
        return self._outcome()
