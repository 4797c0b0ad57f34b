"""Currency utilities — INR display formatting."""

from decimal import ROUND_HALF_UP, Decimal

CURRENCY_SYMBOLS: dict[str, str] = {
    "INR": "₹",
}


def _whole(amount: float) -> int:
    """Round half away from zero to whole units."""
    return int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _group_indian(digits: str) -> str:
    """Indian digit grouping: last three digits, then pairs (12,34,567)."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs) + "," + tail


def format_inr(amount: float) -> str:
    """Format an amount as whole rupees, e.g. 112000 -> '₹1,12,000'."""
    rounded = _whole(amount)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{CURRENCY_SYMBOLS['INR']}{_group_indian(str(abs(rounded)))}"
