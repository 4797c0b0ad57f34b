"""Pricing configuration — single source for rates, taxes and capacity limits."""

from dataclasses import dataclass, field
from enum import Enum

from royalstay.config import Settings, settings


@dataclass(frozen=True)
class CategoryRules:
    """Occupancy limits for one room category."""
    max_adults: int
    base_occupancy: int          # adults included in the nightly rate
    allows_children: bool = True
    single_occupancy: bool = False  # hard override to exactly one adult
    max_rooms: int | None = None    # inventory cap for the category; None is uncapped


@dataclass(frozen=True)
class TaxRates:
    """GST split, both applied to the (possibly discounted) base price."""
    cgst: float = 0.06
    sgst: float = 0.06

    @property
    def combined(self) -> float:
        return self.cgst + self.sgst


@dataclass(frozen=True)
class GuestLimits:
    """Bounds on the children list of a stay."""
    max_children: int = 6
    max_child_age: int = 17
    child_adult_age: int = 7     # older than this counts as an adult


def _default_category_rules() -> dict[str, CategoryRules]:
    return {
        "Royal Deluxe": CategoryRules(
            max_adults=1, base_occupancy=0, allows_children=False, single_occupancy=True, max_rooms=8,
        ),
        "Royal Executive": CategoryRules(max_adults=3, base_occupancy=2, max_rooms=16),
        "Royal Suite": CategoryRules(max_adults=4, base_occupancy=2, max_rooms=4),
    }


@dataclass(frozen=True)
class PricingConfig:
    """Top-level pricing config aggregating rates, taxes and category rules."""
    currency: str = "INR"
    extra_guest_rate: float = 600.0
    default_breakfast_rate: float = 500.0
    taxes: TaxRates = field(default_factory=TaxRates)
    guests: GuestLimits = field(default_factory=GuestLimits)
    categories: dict[str, CategoryRules] = field(default_factory=_default_category_rules)
    standard: CategoryRules = field(default_factory=lambda: CategoryRules(max_adults=10, base_occupancy=2))

    def rules_for(self, category) -> CategoryRules:
        if category is None:
            return self.standard
        key = category.value if isinstance(category, Enum) else str(category)
        return self.categories.get(key, self.standard)

    @classmethod
    def from_settings(cls, s: Settings) -> "PricingConfig":
        categories = _default_category_rules()
        for name, rules in list(categories.items()):
            if not rules.single_occupancy:
                categories[name] = CategoryRules(
                    max_adults=rules.max_adults,
                    base_occupancy=s.base_occupancy,
                    allows_children=rules.allows_children,
                    max_rooms=rules.max_rooms,
                )
        return cls(
            currency=s.currency,
            extra_guest_rate=s.extra_guest_rate,
            default_breakfast_rate=s.default_breakfast_rate,
            taxes=TaxRates(cgst=s.cgst_rate, sgst=s.sgst_rate),
            guests=GuestLimits(
                max_children=s.max_children,
                max_child_age=s.max_child_age,
                child_adult_age=s.child_adult_age,
            ),
            categories=categories,
            standard=CategoryRules(max_adults=10, base_occupancy=s.base_occupancy),
        )


# Singleton
pricing_config = PricingConfig.from_settings(settings)
