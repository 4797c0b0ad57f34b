"""Capacity rules — corrects adult/child counts for a room category."""

import logging
from dataclasses import dataclass, field
from enum import Enum

from royalstay.services.pricing.config import PricingConfig, pricing_config

logger = logging.getLogger(__name__)


class RoomCategory(str, Enum):
    ROYAL_DELUXE = "Royal Deluxe"
    ROYAL_EXECUTIVE = "Royal Executive"
    ROYAL_SUITE = "Royal Suite"
    STANDARD = "Standard"

    @classmethod
    def parse(cls, value: "str | RoomCategory | None") -> "RoomCategory":
        """Map a stored category label to a member; unknown labels are STANDARD."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.STANDARD
        needle = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == needle:
                return member
        return cls.STANDARD


@dataclass
class CapacityResolution:
    """Corrected guest composition for one room category."""
    adults: int
    children_ages: list[int] = field(default_factory=list)
    effective_adults: int = 1     # adults + children over the adult age
    max_adults: int = 10
    requested_adults: int = 1
    notice: str | None = None     # user-facing message when a correction happened

    @property
    def children(self) -> int:
        return len(self.children_ages)

    @property
    def corrected(self) -> bool:
        return self.notice is not None

    def to_dict(self) -> dict:
        return {
            "adults": self.adults,
            "children": self.children,
            "children_ages": list(self.children_ages),
            "effective_adults": self.effective_adults,
            "max_adults": self.max_adults,
            "requested_adults": self.requested_adults,
            "corrected": self.corrected,
            "notice": self.notice,
        }


def count_adult_children(children_ages: list[int], config: PricingConfig = pricing_config) -> int:
    """Children strictly older than the adult age threshold."""
    return sum(1 for age in children_ages if age > config.guests.child_adult_age)


def base_occupancy(category: RoomCategory, config: PricingConfig = pricing_config) -> int:
    """Adults included in the nightly rate; 0 where no surcharge ever applies."""
    return config.rules_for(RoomCategory.parse(category)).base_occupancy


def max_adults(category: RoomCategory, config: PricingConfig = pricing_config) -> int:
    return config.rules_for(RoomCategory.parse(category)).max_adults


def resolve_capacity(
    category: RoomCategory | str | None,
    adults: int,
    children_ages: list[int] | None = None,
    config: PricingConfig = pricing_config,
) -> CapacityResolution:
    """Correct a requested (adults, children_ages) pair for the room category.

    Categories that do not allow children drop them; single-occupancy
    categories are forced to one adult. Otherwise, when adults plus children
    over the adult age exceed the category maximum, only the adult count is
    reduced and children are kept.
    """
    category = RoomCategory.parse(category)
    rules = config.rules_for(category)
    ages = list(children_ages or [])

    dropped_children = not rules.allows_children and bool(ages)
    if dropped_children:
        ages = []

    if rules.single_occupancy:
        notice = None
        if adults != 1 or dropped_children:
            notice = f"For {category.value} rooms, only 1 adult is allowed with no children."
            logger.info(
                f"Capacity override for {category.value}: {adults} adults, "
                f"{len(children_ages or [])} children -> 1 adult"
            )
        return CapacityResolution(
            adults=1,
            children_ages=ages,
            effective_adults=1 + count_adult_children(ages, config),
            max_adults=1,
            requested_adults=adults,
            notice=notice,
        )

    over_age = count_adult_children(ages, config)
    effective = adults + over_age
    corrected_adults = adults
    notice = None

    if effective > rules.max_adults:
        corrected_adults = max(1, rules.max_adults - over_age)
        effective = min(rules.max_adults, corrected_adults + over_age)

    if corrected_adults != adults:
        if category == RoomCategory.STANDARD:
            notice = (
                f"Maximum {rules.max_adults} adults allowed "
                f"(including children over {config.guests.child_adult_age} years)."
            )
        else:
            notice = (
                f"{category.value} rooms allow a maximum of {rules.max_adults} adults "
                f"(including children over {config.guests.child_adult_age} years)."
            )
        logger.info(f"Capacity correction for {category.value}: adults {adults} -> {corrected_adults}")
    elif dropped_children:
        notice = f"{category.value} rooms do not allow children."
        logger.info(f"Children removed for {category.value}")

    return CapacityResolution(
        adults=corrected_adults,
        children_ages=ages,
        effective_adults=effective,
        max_adults=rules.max_adults,
        requested_adults=adults,
        notice=notice,
    )


def resize_children(
    children_ages: list[int], count: int, config: PricingConfig = pricing_config
) -> list[int]:
    """Clamp the child count and trim or pad the ages list (new children are age 0)."""
    count = max(0, min(config.guests.max_children, count))
    ages = list(children_ages[:count])
    ages.extend(0 for _ in range(count - len(ages)))
    return ages
